"""Shared UI state with explicit subscriptions.

Components that need to react to the map being opened, the info panel being
toggled, or a banner being raised subscribe to the key they care about on the
one ``AppState`` they were handed.
"""
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], None]

MAP_OPEN = "map_open"
INFO_PANEL_OPEN = "info_panel_open"
SELECTED_PROPERTY = "selected_property_id"
BANNER = "banner"


class AppState:
    def __init__(self, **initial: Any):
        self._values: dict[str, Any] = {
            MAP_OPEN: False,
            INFO_PANEL_OPEN: False,
            SELECTED_PROPERTY: None,
            BANNER: None,
            **initial,
        }
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` and notify the key's listeners, only if it changed."""
        if key in self._values and self._values[key] == value:
            return
        self._values[key] = value
        for listener in list(self._listeners[key]):
            try:
                listener(key, value)
            except Exception:
                logger.exception("Listener for %s failed", key)

    def toggle(self, key: str) -> bool:
        value = not self.get(key)
        self.set(key, value)
        return value

    def subscribe(self, key: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for ``key``. Returns the matching unsubscribe callable."""
        self._listeners[key].append(listener)
        return lambda: self.unsubscribe(key, listener)

    def unsubscribe(self, key: str, listener: Listener) -> None:
        if listener in self._listeners[key]:
            self._listeners[key].remove(listener)

    # ─── Conveniences ─────────────────────────────────────────────────────────

    def open_map(self) -> None:
        self.set(MAP_OPEN, True)

    def close_map(self) -> None:
        self.set(MAP_OPEN, False)

    def select_property(self, property_id: int | None) -> None:
        self.set(SELECTED_PROPERTY, property_id)

    def show_error(self, message: str | None) -> None:
        self.set(BANNER, message)
