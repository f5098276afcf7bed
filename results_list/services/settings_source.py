"""In-memory settings source with change listeners, seeded from application settings."""

import copy
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from results_list.services.interfaces import CONFIG_GROUP_BY, CONFIG_HIDE_COLUMNS, CONFIG_SORT_BY

if TYPE_CHECKING:
    from results_list.core.config import Settings

logger = logging.getLogger(__name__)

SettingsListener = Callable[[str], None]


def default_view_settings(settings: "Settings") -> dict[str, Any]:
    """Persisted view settings as they look before the user changes anything."""
    return {
        CONFIG_HIDE_COLUMNS: list(settings.RESULTS_LIST_HIDE_COLUMNS),
        CONFIG_GROUP_BY: settings.RESULTS_LIST_GROUP_BY,
        CONFIG_SORT_BY: {
            "column": settings.RESULTS_LIST_SORT_COLUMN,
            "ascending": settings.RESULTS_LIST_SORT_ASCENDING,
        },
    }


class InMemorySettingsSource:
    """
    Dict-backed settings store.

    get and update copy values so callers never share mutable state with the store.
    Listeners are called with the changed key after every update that changes a value.
    """

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = copy.deepcopy(values) if values else {}
        self._listeners: list[SettingsListener] = []

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InMemorySettingsSource":
        return cls(default_view_settings(settings))

    def get(self, key: str) -> Any:
        return copy.deepcopy(self._values.get(key))

    def update(self, key: str, value: Any) -> None:
        if self._values.get(key) == value:
            return
        self._values[key] = copy.deepcopy(value)
        logger.debug("Setting %s updated", key)
        for listener in list(self._listeners):
            listener(key)

    def on_did_change(self, listener: SettingsListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe
