"""The presets installer step: choose one preset whose target feeds later steps."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from instopts.labels import LABEL_KEYS, TranslatedString
from instopts.options_config import Signal
from instopts.section import Section

logger = logging.getLogger(__name__)

_CONTEXT = "PresetsViewStep"
_PER_ROW = 3


def grid_layout(count: int) -> list[list[int]]:
    """Arrange *count* sections in rows of at most three, spread evenly.

    Returns the section indices of each row, top to bottom.
    """
    if count < 0:
        raise ValueError(f"section count must not be negative: {count}")
    if count == 0:
        return []
    rows = math.ceil(count / _PER_ROW)
    per_row = math.ceil(count / rows)
    indices = list(range(count))
    return [indices[start : start + per_row] for start in range(0, count, per_row)]


def border_color(selected: bool) -> str:
    """The border colour of a section box."""
    return "lightblue" if selected else "gray"


def _style_sheet(selected: bool) -> str:
    return (
        "QFrame#SectionItem { border: 1px solid %s; border-radius: 12px; }"
        % border_color(selected)
    )


class PresetsConfig:
    """Holds the labels, the available sections and the current choice."""

    def __init__(self, global_storage: Optional[MutableMapping[str, Any]] = None) -> None:
        self.global_storage = global_storage
        self.sections: list[Section] = []
        self.selected = 0
        self.next_enabled = False
        self.locale: Optional[str] = None
        self._labels: dict[str, TranslatedString] = {}

        self.title_label_changed = Signal()
        self.subtitle_label_changed = Signal()
        self.sidebar_label_changed = Signal()
        self.status_ready = Signal()
        self.next_ready = Signal()

    def _label(self, key: str) -> str:
        label = self._labels.get(key)
        return label.get(self.locale) if label is not None else ""

    def title_label(self) -> str:
        return self._label("title")

    def subtitle_label(self) -> str:
        return self._label("subtitle")

    def sidebar_label(self) -> str:
        return self._label("sidebar")

    def retranslate(self) -> None:
        """Announce every label again, for instance after the locale changed."""
        self.title_label_changed.emit(self.title_label())
        self.subtitle_label_changed.emit(self.subtitle_label())
        self.sidebar_label_changed.emit(self.sidebar_label())

    def _section_at(self, index: int) -> Section:
        if not 0 <= index < len(self.sections):
            raise IndexError(f"no preset section at index {index}")
        return self.sections[index]

    def selected_section(self) -> Section:
        """The chosen section; IndexError when the choice is out of range."""
        return self._section_at(self.selected)

    def set_selected_section(self, index: int) -> None:
        self.selected = index

    def set_next_enabled(self) -> None:
        self.next_enabled = True
        self.next_ready.emit()

    def loading_done(self) -> None:
        self.status_ready.emit()

    def set_configuration_map(self, configuration: Mapping[str, Any]) -> None:
        """Read the labels and the ``entries`` list, then announce that loading is done."""
        label = configuration.get("label")
        if isinstance(label, Mapping):
            for key in LABEL_KEYS:
                if key in label:
                    self._labels[key] = TranslatedString(label, key, _CONTEXT)
        entries = configuration.get("entries")
        if isinstance(entries, list):
            self.sections.extend(
                Section.from_map(entry) for entry in entries if isinstance(entry, Mapping)
            )
        self.loading_done()

    def finalize_global_storage(self) -> None:
        """Store the chosen section's target under ``presets`` / ``selection``."""
        if self.global_storage is None:
            return
        self.global_storage["presets"] = {"selection": self.selected_section().target}


class PresetsStep:
    """Drives a :class:`PresetsConfig`: showing sections, choosing one, storing it."""

    def __init__(self, global_storage: Optional[MutableMapping[str, Any]] = None) -> None:
        self.config = PresetsConfig(global_storage)
        self.next_enabled = False
        self.next_status_changed = Signal()
        self.rows: list[list[int]] = []
        self.highlighted: list[bool] = []
        self.config.next_ready.connect(self.next_is_ready)
        self.config.status_ready.connect(self._show_selections)

    def _show_selections(self) -> None:
        count = len(self.config.sections)
        self.rows = grid_layout(count)
        self.highlighted = [False] * count

    def pretty_name(self) -> str:
        return self.config.sidebar_label()

    def is_next_enabled(self) -> bool:
        return self.next_enabled

    def is_back_enabled(self) -> bool:
        return True

    def is_at_beginning(self) -> bool:
        return True

    def is_at_end(self) -> bool:
        return True

    def jobs(self) -> list[Any]:
        return []

    def on_activate(self) -> None:
        """Nothing to do when the step is shown."""

    def select(self, index: int) -> None:
        """Choose the section at *index*, highlighting it alone and enabling next."""
        if not 0 <= index < len(self.highlighted):
            raise IndexError(f"no preset section at index {index}")
        self.highlighted = [i == index for i in range(len(self.highlighted))]
        self.config.set_selected_section(index)
        self.config.set_next_enabled()

    def style_sheets(self) -> list[str]:
        """The frame style of each shown section."""
        return [_style_sheet(selected) for selected in self.highlighted]

    def on_leave(self) -> None:
        self.config.finalize_global_storage()

    def next_is_ready(self) -> None:
        self.next_enabled = True
        self.next_status_changed.emit(True)

    def update_next_enabled(self, enabled: bool) -> None:
        self.next_enabled = enabled
        self.next_status_changed.emit(enabled)

    def set_configuration_map(self, configuration: Mapping[str, Any]) -> None:
        self.config.set_configuration_map(configuration)