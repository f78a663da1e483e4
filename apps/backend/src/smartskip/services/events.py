"""In-process event bus for UI and analytics listeners."""

import inspect
import logging
from collections.abc import Awaitable, Callable

from smartskip.models.events import SkipEvent

logger = logging.getLogger(__name__)

EventListener = Callable[[SkipEvent], None | Awaitable[None]]


class EventBus:
    """Fan events out to subscribed listeners.

    Listeners may be plain functions or coroutine functions. A listener
    that raises is logged and skipped; it never affects the emitter or
    the other listeners.
    """

    def __init__(self) -> None:
        self._listeners: list[EventListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def emit(self, event: SkipEvent) -> None:
        logger.debug("Emitting %s for %s", type(event).__name__, event.video_id)
        for listener in list(self._listeners):
            try:
                outcome = listener(event)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.exception("Event listener %r failed on %s", listener, type(event).__name__)
