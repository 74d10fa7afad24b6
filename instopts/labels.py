"""Translatable labels read from a module's configuration map."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

LABEL_KEYS = ("sidebar", "title", "subtitle")


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class TranslatedString:
    """A string with per-locale variants.

    The untranslated text lives under *key*; translations live under
    ``key[locale]``, for instance ``title[de]`` or ``title[pt_BR]``.
    """

    def __init__(self, mapping: Mapping[str, Any], key: str, context: str = "") -> None:
        self.key = key
        self.context = context
        self._strings: dict[str, str] = {}
        prefix = key + "["
        for name, value in mapping.items():
            if name == key:
                self._strings[""] = _to_text(value)
            elif name.startswith(prefix) and name.endswith("]"):
                locale = name[len(prefix) : -1]
                if locale:
                    self._strings[locale] = _to_text(value)

    def get(self, locale: Optional[str] = None) -> str:
        """The text for *locale*, falling back to its language, then the untranslated text."""
        if locale:
            if locale in self._strings:
                return self._strings[locale]
            language = locale.split("@", 1)[0].split("_", 1)[0]
            if language in self._strings:
                return self._strings[language]
        return self._strings.get("", "")

    def __str__(self) -> str:
        return self.get()

    def __repr__(self) -> str:
        return f"TranslatedString({self.key!r}, {self.get()!r})"


def labels_from_config(config: Mapping[str, Any]) -> dict[str, TranslatedString]:
    """Collect the sidebar, title and subtitle labels from the ``label`` sub-map.

    Only labels that are present are returned; a missing or malformed
    ``label`` entry gives an empty result.
    """
    label = config.get("label")
    if not isinstance(label, Mapping):
        return {}
    return {
        key: TranslatedString(label, key, "OptionsViewStep")
        for key in LABEL_KEYS
        if key in label
    }