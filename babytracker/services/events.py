"""In-process event bus used to ask every live view to refresh."""

import logging
from collections import defaultdict
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

REFRESH_LIVE_DATA = "refresh-live-data"

Listener = Callable[..., Any]


class EventBus:
    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def emit(self, event: str, **payload: Any) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener(**payload)
            except Exception:
                logger.exception("Listener for %r failed", event)


bus = EventBus()


def request_refresh(source: Optional[str] = None, events: EventBus = bus) -> None:
    """Tell every live-data consumer that server data changed."""
    events.emit(REFRESH_LIVE_DATA, source=source)
