"""Tag event dispatcher.

This module contains the TagEventDispatcher, the notification sink of the
tagging core. Listeners are plain callables receiving one TagEvent.
"""

import logging
from typing import Callable, List, Optional, Type

from domain.entities.events import TagEvent

logger = logging.getLogger(__name__)

TagEventListener = Callable[[TagEvent], None]


class TagEventDispatcher:
    """Delivers tagging events to registered listeners.

    Delivery is best-effort: a listener that raises is logged and skipped,
    and the remaining listeners still receive the event. Tagging mutations
    are committed before dispatch, so a failing listener never undoes them.

    Example:
        >>> dispatcher = TagEventDispatcher()
        >>> dispatcher.subscribe(lambda event: print(event.event_name))
        >>> dispatcher.dispatch(TagAdded(subject=ref, slug="work", name="Work"))
        tag_added
    """

    def __init__(self) -> None:
        self._listeners: List[tuple] = []

    def subscribe(
        self,
        listener: TagEventListener,
        event_type: Optional[Type[TagEvent]] = None,
    ) -> None:
        """Register a listener.

        Args:
            listener (TagEventListener): Callable receiving the event.
            event_type (Optional[Type[TagEvent]]): Only deliver events of this
                type. Every event is delivered when omitted.
        """
        self._listeners.append((event_type or TagEvent, listener))

    def unsubscribe(self, listener: TagEventListener) -> None:
        self._listeners = [
            (event_type, registered)
            for event_type, registered in self._listeners
            if registered is not listener
        ]

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch(self, event: TagEvent) -> int:
        """Deliver an event to every matching listener.

        Args:
            event (TagEvent): The event to deliver.

        Returns:
            int: Number of listeners that handled the event without error.
        """
        delivered = 0
        for event_type, listener in list(self._listeners):
            if not isinstance(event, event_type):
                continue
            try:
                listener(event)
                delivered += 1
            except Exception:
                logger.warning(
                    f"Listener {listener!r} failed on {event.event_name} "
                    f"for subject {event.subject}",
                    exc_info=True,
                )
        return delivered
