"""Redis pub/sub publisher for tagging events.

This module contains the RedisTagEventPublisher, a TagEventDispatcher
listener that forwards every tagging event as JSON to a Redis channel so
other services can react to tag changes.
"""

import json
import logging

import redis

from domain.entities.events import TagEvent

logger = logging.getLogger(__name__)


class RedisTagEventPublisher:
    """Publishes tagging events on a Redis channel.

    Attributes:
        channel (str): Redis channel receiving the events.

    Example:
        >>> publisher = RedisTagEventPublisher.from_url("redis://localhost:6379")
        >>> dispatcher.subscribe(publisher)
    """

    def __init__(self, redis_client: "redis.Redis", channel: str = "tagging.events") -> None:
        self._redis_client = redis_client
        self.channel = channel

    @classmethod
    def from_url(cls, redis_url: str, channel: str = "tagging.events") -> "RedisTagEventPublisher":
        """Build a publisher backed by a client created from a Redis URL."""
        return cls(redis.from_url(redis_url, decode_responses=True), channel)

    def __call__(self, event: TagEvent) -> None:
        """Publish one event.

        Raises:
            redis.RedisError: If Redis is unreachable. The dispatcher logs it.
        """
        payload = json.dumps(event.to_dict())
        receivers = self._redis_client.publish(self.channel, payload)
        logger.debug(
            f"Published {event.event_name} for {event.subject} to "
            f"'{self.channel}' ({receivers} receivers)"
        )

    def __repr__(self) -> str:
        return f"<RedisTagEventPublisher(channel='{self.channel}')>"
