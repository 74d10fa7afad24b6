"""A preset choice: label, description, icon and the target it selects."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

ICON_SIZE = (128, 128)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Section:
    """One entry of the presets page.

    *icon* is the path of the picture shown for the entry and *target* is
    what gets stored when the entry is chosen.
    """

    label: str = ""
    description: str = ""
    icon: str = ""
    target: str = ""

    @classmethod
    def from_map(cls, mapping: Mapping[str, Any]) -> "Section":
        """Build a section from a configuration entry; missing keys become empty."""
        return cls(
            label=_to_text(mapping.get("label")),
            description=_to_text(mapping.get("description")),
            icon=_to_text(mapping.get("icon")),
            target=_to_text(mapping.get("target")),
        )