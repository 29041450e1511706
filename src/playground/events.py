import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)

RECORDING_PRODUCED = "RECORDING_PRODUCED"
NOTE_CREATED = "NOTE_CREATED"


@dataclass(frozen=True)
class Event:
    """Something that happened, addressed by ``event_type``."""

    event_type: str
    payload: Any = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


EventCallback = Callable[[Event], Awaitable[None] | None]


class EventBus:
    """
    A simple event bus for decoupled communication between components.
    Callbacks run on the publisher's task, in subscription order.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventCallback]] = {}

    def subscribe(self, event_type: str, callback: EventCallback) -> None:
        """
        Subscribe a callback (sync or async) to a specific event type.

        Args:
            event_type: The type of event to subscribe to.
            callback: Called with the Event when one is published.
        """
        self._subscribers.setdefault(event_type, []).append(callback)
        logger.debug("Subscribed %s to event '%s'", _name(callback), event_type)

    def unsubscribe(self, event_type: str, callback: EventCallback) -> None:
        callbacks = self._subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)

    async def publish(self, event: Event) -> None:
        """
        Deliver an event to every subscriber.

        A failing callback is logged and does not prevent delivery to the rest.
        """
        callbacks = list(self._subscribers.get(event.event_type, []))
        if not callbacks:
            logger.debug("No subscribers for event '%s'", event.event_type)
            return

        for callback in callbacks:
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Error in callback %s for event '%s'", _name(callback), event.event_type
                )


def _name(callback: EventCallback) -> str:
    return getattr(callback, "__qualname__", repr(callback))
