"""Tree items for groups and options shown on the option-selection page."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator, Mapping
from typing import Any, Optional

logger = logging.getLogger(__name__)

ROOT_NAME = "<root>"
DEFAULT_INPUT = "Value..."


class CheckState(enum.IntEnum):
    """Selection state of an item; groups may be partially selected."""

    UNCHECKED = 0
    PARTIALLY_CHECKED = 1
    CHECKED = 2


def _get_string(data: Mapping[str, Any], key: str, default: str = "") -> str:
    if key not in data:
        return default
    value = data[key]
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _get_bool(data: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    if isinstance(value, bool):
        return value
    return default


def is_hidden_exception(description: str, global_storage: Optional[Mapping[str, Any]]) -> bool:
    """Return True if an item with *description* is hidden by the current setup.

    Items whose description mentions ``DATA=`` are hidden when the configured
    partitions already include a ``/data`` mount.
    """
    if "DATA=" not in description:
        return False
    partitions = (global_storage or {}).get("partitions")
    if partitions is None:
        return False
    return "/data" in str(partitions)


def _parent_check_state(parent: Optional["OptionTreeItem"]) -> CheckState:
    """The state a new option gets from its parent; never partial."""
    if parent is None:
        return CheckState.UNCHECKED
    if parent.distinct or parent.selected == CheckState.UNCHECKED:
        return CheckState.UNCHECKED
    return CheckState.CHECKED


class OptionTreeItem:
    """A node of the option tree: the root, a group or a single option."""

    def __init__(self, name: str, parent: Optional["OptionTreeItem"] = None) -> None:
        self._set_defaults(parent)
        self.name = name
        self.option_name = name
        self.description = name
        self.selected = _parent_check_state(parent)
        self.immutable = parent.immutable if parent is not None else False

    def _set_defaults(self, parent: Optional["OptionTreeItem"]) -> None:
        self.parent = parent
        self._children: list[OptionTreeItem] = []
        self.name = ""
        self.option_name = ""
        self.description = ""
        self.input = ""
        self.selected = CheckState.UNCHECKED
        self.pre_script = ""
        self.post_script = ""
        self.source = ""
        self.distinct = False
        self.editable = False
        self.is_group = False
        self.is_hidden = False
        self.immutable = False
        self.noncheckable = False
        self.start_expanded = False

    @classmethod
    def _blank(cls, parent: Optional["OptionTreeItem"]) -> "OptionTreeItem":
        item = cls.__new__(cls)
        item._set_defaults(parent)
        return item

    @classmethod
    def option_from_map(
        cls,
        data: Mapping[str, Any],
        parent: Optional["OptionTreeItem"] = None,
        global_storage: Optional[Mapping[str, Any]] = None,
    ) -> "OptionTreeItem":
        """Build a single option from a mapping with name, description and more."""
        item = cls._blank(parent)
        item.name = _get_string(data, "name")
        item.option_name = item.name
        item.description = _get_string(data, "description")
        item.is_hidden = is_hidden_exception(item.description, global_storage) or _get_bool(
            data, "hidden"
        )
        item.selected = (
            CheckState.CHECKED if _get_bool(data, "selected") else _parent_check_state(parent)
        )
        item.editable = _get_bool(data, "editable")
        item.input = _get_string(data, "default", DEFAULT_INPUT) if item.editable else ""
        item.immutable = parent.immutable if parent is not None else False
        return item

    @classmethod
    def group_from_map(
        cls,
        data: Mapping[str, Any],
        parent: Optional["OptionTreeItem"] = None,
        global_storage: Optional[Mapping[str, Any]] = None,
    ) -> "OptionTreeItem":
        """Build a group from a mapping; its options and subgroups are not loaded."""
        item = cls._blank(parent)
        item.name = _get_string(data, "name")
        item.option_name = item.name
        item.description = _get_string(data, "description")
        item.is_hidden = is_hidden_exception(item.description, global_storage) or _get_bool(
            data, "hidden"
        )
        item.selected = _parent_check_state(parent)
        item.pre_script = _get_string(data, "pre-install")
        item.post_script = _get_string(data, "post-install")
        item.source = _get_string(data, "source")
        item.distinct = _get_bool(data, "distinct")
        item.is_group = True
        item.immutable = _get_bool(data, "immutable")
        item.noncheckable = _get_bool(data, "noncheckable")
        item.start_expanded = _get_bool(data, "expanded")
        return item

    @classmethod
    def root(cls) -> "OptionTreeItem":
        """Build the root item, a group named ``<root>``."""
        item = cls._blank(None)
        item.name = ROOT_NAME
        item.is_group = True
        return item

    def append_child(self, child: "OptionTreeItem") -> None:
        self._children.append(child)

    def child(self, row: int) -> Optional["OptionTreeItem"]:
        """The child at *row*, or None when there is none."""
        if 0 <= row < len(self._children):
            return self._children[row]
        return None

    def child_count(self) -> int:
        return len(self._children)

    @property
    def children(self) -> tuple["OptionTreeItem", ...]:
        return tuple(self._children)

    def __iter__(self) -> Iterator["OptionTreeItem"]:
        return iter(self._children)

    def row(self) -> int:
        """Position of this item among its parent's children (0 without parent)."""
        if self.parent is None:
            return 0
        return next(
            (i for i, sibling in enumerate(self.parent._children) if sibling is self), -1
        )

    def data(self, column: int) -> Optional[str]:
        """Display text for *column*: name, description, input."""
        if column == 0:
            return self.option_name if self.is_option() else self.name
        if column == 1:
            return self.description
        if column == 2:
            return self.input
        return None

    def is_option(self) -> bool:
        return not self.is_group

    def hidden_selected(self) -> bool:
        """Whether the item counts as selected, deferring hidden items to the
        nearest visible ancestor."""
        if not self.is_hidden:
            return self.selected != CheckState.UNCHECKED
        if self.selected == CheckState.UNCHECKED:
            return False
        current = self.parent
        while current is not None:
            if not current.is_hidden:
                return current.selected != CheckState.UNCHECKED
            current = current.parent
        return self.selected != CheckState.UNCHECKED

    def set_selected(self, state: CheckState) -> None:
        """Change this item's state, propagating down to children and up to ancestors."""
        if self.parent is None:
            return
        self.selected = CheckState(state)

        current: Optional[OptionTreeItem] = self.parent
        if current.distinct and state == CheckState.CHECKED:
            current.select_children(self.option_name)
        else:
            self.set_children_selected(state)
        while current is not None and current.child_count() == 0:
            current = current.parent
        if current is None:
            return
        current.update_selected()

    def update_selected(self) -> None:
        """Derive this item's state from its direct children."""
        checked = sum(1 for c in self._children if c.selected == CheckState.CHECKED)
        partial = sum(1 for c in self._children if c.selected == CheckState.PARTIALLY_CHECKED)
        if not checked and not partial:
            self.set_selected(CheckState.UNCHECKED)
        elif self.distinct or checked == self.child_count():
            self.set_selected(CheckState.CHECKED)
        else:
            self.set_selected(CheckState.PARTIALLY_CHECKED)

    def set_children_selected(self, state: CheckState) -> None:
        """Push *state* down to all descendants; distinct groups keep one choice."""
        if state == CheckState.PARTIALLY_CHECKED:
            return
        if self.distinct and state == CheckState.CHECKED:
            if any(c.selected == CheckState.CHECKED for c in self._children):
                return
            if self._children:
                first = self._children[0]
                first.selected = CheckState.CHECKED
                first.set_children_selected(state)
            return
        for c in self._children:
            c.selected = CheckState(state)
            c.set_children_selected(state)

    def select_children(self, option_name: str) -> None:
        """In a distinct group, select only the child named *option_name*."""
        if not self.distinct:
            return
        self.selected = CheckState.CHECKED
        wanted = option_name.casefold()
        for c in self._children:
            state = (
                CheckState.CHECKED
                if c.option_name.casefold() == wanted
                else CheckState.UNCHECKED
            )
            c.selected = state
            c.set_children_selected(state)

    def remove_child(self, row: int) -> None:
        if 0 <= row < len(self._children):
            del self._children[row]
        else:
            logger.warning("Attempt to remove invalid child in remove_child() at row %d", row)

    def to_operation(self) -> str:
        """The text this item contributes to the collected options."""
        return self.description + self.input

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionTreeItem):
            return NotImplemented
        if self.is_group != other.is_group:
            return False
        if self.is_group:
            return (
                self.name == other.name
                and self.description == other.description
                and self.pre_script == other.pre_script
                and self.post_script == other.post_script
                and self.immutable == other.immutable
                and self.start_expanded == other.start_expanded
            )
        return self.option_name == other.option_name

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        kind = "group" if self.is_group else "option"
        return f"OptionTreeItem({kind}, {self.data(0)!r}, {self.selected.name})"