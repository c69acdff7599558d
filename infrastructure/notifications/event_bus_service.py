"""
Event Bus Notification Service
===============================

Publishes notifications on the Redis event bus. Delivery channels (email,
push, websocket fan-out) subscribe to ``events.notification.<event_type>``.
"""

import logging
from typing import Any, Dict, Optional

from infrastructure.events import EventBus, get_event_bus

from .interface import NotificationServiceInterface

logger = logging.getLogger(__name__)


class EventBusNotificationService(NotificationServiceInterface):
    """Notification sender backed by the process-wide event bus."""

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus or get_event_bus()

    def notify(self, event_type: str, recipient_id: str, payload: Dict[str, Any]) -> bool:
        message = {"recipient_id": str(recipient_id), **payload}
        published = self.event_bus.publish(f"notification.{event_type}", message)
        if published is False:
            logger.warning(f"Notification {event_type} for {recipient_id} was not published")
            return False
        return True
