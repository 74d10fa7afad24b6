"""The option-selection installer step: fetches group data and records choices."""

from __future__ import annotations

import logging
import urllib.request
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any, Optional, Union
from urllib.parse import urlsplit

import yaml

from instopts.optionmodel import Role
from instopts.options_config import OptionsConfig, Signal, Status

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30
_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:109.0) Gecko/20100101 Firefox/115.0"

Opener = Callable[[str], Union[bytes, str]]


def _default_opener(url: str) -> bytes:
    request = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    with urllib.request.urlopen(request, timeout=FETCH_TIMEOUT) as reply:
        return reply.read()


def _is_valid_url(url: Any) -> bool:
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        urlsplit(url)
    except ValueError:
        return False
    return True


class OptionsStep:
    """Drives an :class:`OptionsConfig`: loading, readiness and storing selections."""

    def __init__(
        self,
        global_storage: Optional[MutableMapping[str, Any]] = None,
        opener: Optional[Opener] = _default_opener,
    ) -> None:
        self.config = OptionsConfig(global_storage)
        self.global_storage = self.config.global_storage
        self.opener = opener
        self.next_enabled = False
        self.next_status_changed = Signal()
        self.config.status_ready.connect(self.next_is_ready)
        self.config.model.set_update_next_call(self.update_next_enabled)

    def pretty_name(self) -> str:
        return self.config.sidebar_label()

    def is_next_enabled(self) -> bool:
        return not self.config.required or self.next_enabled

    def is_back_enabled(self) -> bool:
        return True

    def is_at_beginning(self) -> bool:
        return True

    def is_at_end(self) -> bool:
        return True

    def jobs(self) -> list[Any]:
        return []

    def fetch(self, url: str) -> None:
        """Fetch group data from *url* and load it into the model."""
        if not _is_valid_url(url):
            logger.debug("Invalid URL %r", url)
            self.config.set_status(Status.FAILED_BAD_CONFIGURATION)
            return
        if self.opener is None:
            logger.debug("Request failed immediately.")
            self.config.set_status(Status.FAILED_BAD_CONFIGURATION)
            return
        logger.debug("Options loading groups from %s", url)
        try:
            payload = self.opener(url)
        except ValueError as error:
            logger.debug("Request for %s failed immediately: %s", url, error)
            self.config.set_status(Status.FAILED_BAD_CONFIGURATION)
            return
        except OSError as error:
            logger.warning("unable to fetch options option lists.")
            logger.debug("Request for url: %s failed with: %s", url, error)
            self.config.set_status(Status.FAILED_NETWORK_ERROR)
            return
        self.data_arrived(payload)

    def data_arrived(self, payload: Optional[Union[bytes, str]]) -> None:
        """Parse fetched YAML: a list of groups, or a map with a ``groups`` list."""
        if payload is None:
            logger.warning("Options data called too early.")
            self.config.set_status(Status.FAILED_INTERNAL_ERROR)
            return
        logger.debug("Options group data received %d bytes", len(payload))
        try:
            groups = yaml.safe_load(payload)
        except yaml.YAMLError as error:
            logger.warning("Bad YAML in options groups data: %s", error)
            self.config.set_status(Status.FAILED_BAD_DATA)
            return

        if isinstance(groups, list):
            group_list = groups
        elif isinstance(groups, Mapping):
            value = groups.get("groups")
            group_list = value if isinstance(value, list) else []
        else:
            logger.warning("Options groups data does not form a sequence.")
            return
        self.config.load_group_list(group_list)
        self.config.set_status(Status.OK)
        self.config.loading_done()

    def on_activate(self) -> None:
        """Fetch the groups named by the chosen preset, if there is one."""
        presets = self.global_storage.get("presets")
        if presets is None:
            return
        selection = presets.get("selection") if isinstance(presets, Mapping) else None
        url = "" if selection is None else str(selection)
        logger.debug("Loading options from %s", url)
        if url:
            self.fetch(url)

    def on_leave(self) -> str:
        """Store the selected options for installation and return the stored text."""
        return self.config.finalize_global_storage()

    def next_is_ready(self) -> None:
        self.next_enabled = True
        self.next_status_changed.emit(True)

    def update_next_enabled(self, enabled: bool) -> None:
        self.next_enabled = enabled
        self.next_status_changed.emit(enabled)

    def set_configuration_map(self, configuration: Mapping[str, Any]) -> None:
        self.config.set_configuration_map(configuration)

    def expanded_rows(self) -> list[int]:
        """Top-level rows to show expanded, last row first."""
        model = self.config.model
        return [
            row
            for row in reversed(range(model.row_count()))
            if model.data(model.item_at(row), 0, Role.META_EXPAND)
        ]