import json
import logging
from typing import Optional

import redis
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from .event_bus_interface import EventBus


logger = logging.getLogger(__name__)


class RedisEventBus(EventBus):
    """Redis pub/sub implementation of event bus."""

    def __init__(self, redis_url: Optional[str] = None, client=None):
        self.redis_url = redis_url or getattr(settings, "REDIS_URL", "redis://localhost:6379/0")

        if client is not None:
            self.redis_client = client
        else:
            try:
                # from_url is lazy: no connection is opened until the first command
                self.redis_client = redis.from_url(self.redis_url)
            except (redis.RedisError, ValueError) as e:
                logger.error(f"Failed to configure Redis client for {self.redis_url}: {e}")
                self.redis_client = None

    def publish(self, event_type: str, payload: dict):
        """Publish event to Redis channel ``events.<event_type>``."""
        if not self.redis_client:
            logger.warning(f"Redis client not available. Event {event_type} dropped.")
            return False

        try:
            message = {"event_type": event_type, "occurred_at": timezone.now().isoformat(), "payload": payload}
            channel = f"events.{event_type}"
            self.redis_client.publish(channel, json.dumps(message, cls=DjangoJSONEncoder))
            logger.info(f"Published event: {event_type}")
            return True
        except Exception as e:
            logger.error(f"Failed to publish event {event_type}: {str(e)}")
            # Don't raise - event publishing should not break business logic
            return False


# Singleton instance
_event_bus_instance = None


def get_event_bus() -> EventBus:
    """Get singleton event bus instance."""
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = RedisEventBus()
    return _event_bus_instance
