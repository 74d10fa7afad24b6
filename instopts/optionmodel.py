"""Tree model over option groups and options, built from parsed group lists."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Optional, Union

from instopts.optiontree import CheckState, OptionTreeItem

logger = logging.getLogger(__name__)


class Column(enum.IntEnum):
    """Columns shown for each item."""

    NAME = 0
    DESCRIPTION = 1
    INPUT = 2


class Role(enum.IntEnum):
    """Kinds of data the model can be asked for."""

    DISPLAY = 0
    EDIT = 2
    CHECK_STATE = 10
    META_EXPAND = 0x0100 + 1


class ItemFlag(enum.Flag):
    """Interaction flags of a cell."""

    NONE = 0
    SELECTABLE = enum.auto()
    EDITABLE = enum.auto()
    USER_CHECKABLE = enum.auto()
    ENABLED = enum.auto()


_BASE_FLAGS = ItemFlag.SELECTABLE | ItemFlag.ENABLED

_HEADERS = {
    Column.NAME: "Name",
    Column.DESCRIPTION: "Description",
}
_DEFAULT_HEADER = "Input (Optional)"


def _get_bool(data: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _collect_sources(group_list: Iterable[Any]) -> list[str]:
    """All non-empty ``source`` values of the groups in *group_list*."""
    sources = []
    for group in group_list:
        if isinstance(group, Mapping):
            source = group.get("source")
            if source is not None and str(source):
                sources.append(str(source))
    return sources


def _apply_selections(names: Iterable[str], item: OptionTreeItem) -> None:
    for child in item.children:
        _apply_selections(names, child)
    if item.is_group and item.name in names:
        item.set_selected(CheckState.CHECKED)


class OptionModel:
    """Holds the option tree and answers questions about its cells."""

    def __init__(self, global_storage: Optional[Mapping[str, Any]] = None) -> None:
        self.global_storage = global_storage
        self.root_item: Optional[OptionTreeItem] = None
        self.update_next_call: Optional[Callable[[bool], None]] = None

    # -- building -------------------------------------------------------

    def setup_model_data(self, group_list: Iterable[Any]) -> None:
        """Replace the whole tree with the groups in *group_list*."""
        self.root_item = OptionTreeItem.root()
        self._build(list(group_list), self.root_item)

    def append_model_data(self, group_list: Iterable[Any]) -> None:
        """Add groups to the existing tree, first pruning groups from the same sources.

        Does nothing when no tree has been set up yet.
        """
        if self.root_item is None:
            return
        groups = list(group_list)
        sources = _collect_sources(groups)
        if sources:
            doomed = [
                row
                for row, child in enumerate(self.root_item.children)
                if child.source in sources
            ]
            for row in reversed(doomed):
                self.root_item.remove_child(row)
        self._build(groups, self.root_item)

    def _build(self, group_list: list[Any], parent: OptionTreeItem) -> None:
        for group in group_list:
            if not isinstance(group, Mapping) or not group:
                continue

            item = OptionTreeItem.group_from_map(group, parent, self.global_storage)
            if "selected" in group:
                item.set_selected(
                    CheckState.CHECKED if _get_bool(group, "selected") else CheckState.UNCHECKED
                )
            if "options" in group:
                self._add_options(item, group["options"])
            if "subgroups" in group:
                self._add_subgroups(item, group["subgroups"])
            parent.append_child(item)

    def _add_options(self, item: OptionTreeItem, options: Any) -> None:
        for option in options if isinstance(options, list) else []:
            if isinstance(option, str):
                item.append_child(OptionTreeItem(option, item))
            elif isinstance(option, Mapping) and option:
                item.append_child(
                    OptionTreeItem.option_from_map(option, item, self.global_storage)
                )
        if item.child_count():
            item.update_selected()
        else:
            logger.warning("*options* under %s is empty.", item.name)

    def _add_subgroups(self, item: OptionTreeItem, value: Any) -> None:
        warned = False
        if not isinstance(value, (list, tuple)):
            logger.warning("*subgroups* under %s is not a list.", item.name)
            warned = True
            subgroups: list[Any] = []
        else:
            subgroups = list(value)
        if subgroups:
            self._build(subgroups, item)
            # Children may be checked while the parent is not yet.
            if item.child_count() > 0:
                item.update_selected()
        elif not warned:
            logger.warning("*subgroups* list under %s is empty.", item.name)

    # -- navigation -----------------------------------------------------

    def item_at(
        self, row: int, parent: Optional[OptionTreeItem] = None
    ) -> Optional[OptionTreeItem]:
        """The child at *row* of *parent* (the root when None), or None."""
        if self.root_item is None:
            return None
        parent_item = parent if parent is not None else self.root_item
        return parent_item.child(row)

    def row_count(self, parent: Optional[OptionTreeItem] = None) -> int:
        if self.root_item is None:
            return 0
        parent_item = parent if parent is not None else self.root_item
        return parent_item.child_count()

    def column_count(self) -> int:
        return len(Column)

    # -- cell data ------------------------------------------------------

    def data(
        self, item: Optional[OptionTreeItem], column: int, role: Role = Role.DISPLAY
    ) -> Any:
        """The value of one cell for *role*, or None when there is none."""
        if self.root_item is None or item is None:
            return None
        if role == Role.CHECK_STATE:
            if column == Column.NAME and not item.immutable:
                return item.selected
            return None
        if role == Role.DISPLAY:
            return item.data(column)
        if role == Role.META_EXPAND:
            return item.start_expanded
        if role == Role.EDIT:
            return item.data(column) if item.editable else None
        return None

    def set_data(
        self, item: Optional[OptionTreeItem], value: Any, role: Role = Role.DISPLAY
    ) -> bool:
        """Change an item's check state or input text; False when there is no tree."""
        if self.root_item is None:
            return False
        if item is None:
            return True
        if role == Role.CHECK_STATE:
            item.set_selected(CheckState(int(value)))
        elif role == Role.EDIT and item.editable:
            item.input = "" if value is None else str(value)
        return True

    def flags(self, item: Optional[OptionTreeItem], column: int) -> ItemFlag:
        if self.root_item is None or item is None:
            return ItemFlag.NONE
        if column == Column.NAME:
            if item.immutable or item.noncheckable:
                return _BASE_FLAGS
            return ItemFlag.USER_CHECKABLE | _BASE_FLAGS
        if column == Column.INPUT and item.editable:
            return ItemFlag.EDITABLE | _BASE_FLAGS
        return _BASE_FLAGS

    def header_data(self, section: int) -> str:
        try:
            return _HEADERS[Column(section)]
        except (ValueError, KeyError):
            return _DEFAULT_HEADER

    # -- selection ------------------------------------------------------

    def set_selections(self, names: Iterable[str]) -> None:
        """Check every group whose name is in *names*; options are never matched."""
        if self.root_item is not None:
            _apply_selections(set(names), self.root_item)

    def get_options(self) -> list[OptionTreeItem]:
        """All selected options in the tree, in tree order."""
        if self.root_item is None:
            return []
        return self.get_item_options(self.root_item)

    def get_item_options(self, item: OptionTreeItem) -> list[OptionTreeItem]:
        """The selected options below *item*, skipping unchecked branches."""
        selected: list[OptionTreeItem] = []
        for child in item.children:
            if child.selected == CheckState.UNCHECKED:
                continue
            if child.is_option():
                selected.append(child)
            else:
                selected.extend(self.get_item_options(child))
        return selected

    def get_option_names(
        self, items: Union[OptionTreeItem, Iterable[OptionTreeItem]]
    ) -> list[str]:
        """Option names of an item (or of each item), descending into selected groups."""
        if isinstance(items, OptionTreeItem):
            if items.is_option():
                return [items.option_name]
            return self.get_option_names(self.get_item_options(items))
        names: list[str] = []
        for item in items:
            names.extend(self.get_option_names(item))
        return names

    def set_update_next_call(self, callback: Optional[Callable[[bool], None]]) -> None:
        self.update_next_call = callback