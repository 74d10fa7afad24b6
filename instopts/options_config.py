"""Configuration and state of the option-selection step."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable, Mapping, MutableMapping
from typing import Any, Optional

from instopts.labels import TranslatedString, labels_from_config
from instopts.optionmodel import OptionModel

logger = logging.getLogger(__name__)

DEFAULT_SIDEBAR_LABEL = "Option selection"


class Signal:
    """A list of callbacks that are all called on emit."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        self._slots.append(slot)

    def emit(self, *args: Any) -> None:
        for slot in list(self._slots):
            slot(*args)


class Status(enum.Enum):
    """Outcome of loading the option groups."""

    OK = ""
    FAILED_BAD_CONFIGURATION = "Network Installation. (Disabled: Incorrect configuration)"
    FAILED_INTERNAL_ERROR = "Network Installation. (Disabled: Internal error)"
    FAILED_NETWORK_ERROR = (
        "Network Installation. (Disabled: Unable to fetch option lists, "
        "check your network connection)"
    )
    FAILED_BAD_DATA = "Network Installation. (Disabled: Received invalid groups data)"
    FAILED_NO_DATA = "Network Installation. (Disabled: No option list)"

    @property
    def message(self) -> str:
        return self.value


def _get_bool(data: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


class OptionsConfig:
    """Holds the option model, the labels and the loading status."""

    def __init__(self, global_storage: Optional[MutableMapping[str, Any]] = None) -> None:
        self.global_storage: MutableMapping[str, Any] = (
            global_storage if global_storage is not None else {}
        )
        self.model = OptionModel(self.global_storage)
        self.status_code = Status.OK
        self.required = False
        self.locale: Optional[str] = None
        self._labels: dict[str, TranslatedString] = {}

        self.status_changed = Signal()
        self.sidebar_label_changed = Signal()
        self.title_label_changed = Signal()
        self.subtitle_label_changed = Signal()
        self.status_ready = Signal()

    def status(self) -> str:
        """Human-readable status; empty when all is well."""
        return self.status_code.message

    def set_status(self, status: Status) -> None:
        self.status_code = Status(status)
        self.status_changed.emit(self.status())

    def retranslate(self) -> None:
        """Announce every label again, for instance after the locale changed."""
        self.status_changed.emit(self.status())
        self.sidebar_label_changed.emit(self.sidebar_label())
        self.title_label_changed.emit(self.title_label())
        self.subtitle_label_changed.emit(self.subtitle_label())

    def _label(self, key: str, default: str) -> str:
        label = self._labels.get(key)
        return label.get(self.locale) if label is not None else default

    def sidebar_label(self) -> str:
        return self._label("sidebar", DEFAULT_SIDEBAR_LABEL)

    def title_label(self) -> str:
        return self._label("title", "")

    def subtitle_label(self) -> str:
        return self._label("subtitle", "")

    def load_group_list(self, group_data: Iterable[Any]) -> None:
        """Fill the model from parsed group data and set the status accordingly."""
        self.model.setup_model_data(group_data)
        if self.model.row_count() < 1:
            logger.warning("Options groups data was empty.")
            self.set_status(Status.FAILED_NO_DATA)
        else:
            self.set_status(Status.OK)

    def loading_done(self) -> None:
        self.status_ready.emit()

    def set_configuration_map(self, configuration: Mapping[str, Any]) -> None:
        """Read ``required`` and the ``label`` translations."""
        self.required = _get_bool(configuration, "required", False)
        self._labels.update(labels_from_config(configuration))

    def finalize_global_storage(self) -> str:
        """Store the selected options as one string under ``options`` and return it."""
        output = "".join(option.to_operation() + " " for option in self.model.get_options())
        self.global_storage["options"] = output
        return output