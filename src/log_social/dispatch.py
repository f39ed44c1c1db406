"""
Event dispatch: fans out onClientState / onUserProfile / onMessage
notifications to registered handlers.
"""

import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, BaseModel], Any]


class EventDispatcher:
    def __init__(self) -> None:
        self._event_handlers: list[EventHandler] = []

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]:
        """Add an event handler. Returns a cleanup function."""
        self._event_handlers.append(handler)
        def remove() -> None:
            try:
                self._event_handlers.remove(handler)
            except ValueError:
                pass
        return remove

    def on_event(self, handler: Optional[EventHandler]) -> None:
        """Set a single event handler (replaces all)."""
        self._event_handlers.clear()
        if handler is not None:
            self._event_handlers.append(handler)

    def emit(self, event: str, payload: BaseModel) -> None:
        """Call every handler in registration order. A failing handler is logged and skipped."""
        for handler in list(self._event_handlers):
            try:
                handler(event, payload)
            except Exception:
                logger.exception("Handler failed for %s", event)
