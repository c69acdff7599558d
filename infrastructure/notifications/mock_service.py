"""
Mock Notification Service
=========================

Mock implementation of NotificationServiceInterface for testing.
Stores notifications in memory instead of publishing them.
"""

import logging
from typing import Any, Dict, List, Optional

from .interface import Notification, NotificationException, NotificationServiceInterface

logger = logging.getLogger(__name__)


class MockNotificationService(NotificationServiceInterface):
    """
    Mock notification service for testing and development.

    Instead of publishing, this service:
        - Logs every notification
        - Stores sent notifications in memory for verification
        - Raises NotificationException when ``fail`` is set, to exercise
          callers' fire-and-forget handling
    """

    def __init__(self, fail: bool = False):
        self.sent_notifications: List[Notification] = []
        self.fail = fail

    def notify(self, event_type: str, recipient_id: str, payload: Dict[str, Any]) -> bool:
        if self.fail:
            raise NotificationException(f"Mock delivery failure for {event_type}")

        logger.info(f"[MOCK NOTIFICATION] To: {recipient_id}, Event: {event_type}")
        self.sent_notifications.append(
            Notification(event_type=event_type, recipient_id=str(recipient_id), payload=dict(payload))
        )
        return True

    def clear_sent_notifications(self):
        """Clear the list of sent notifications (useful between tests)."""
        self.sent_notifications.clear()

    def get_sent_count(self) -> int:
        return len(self.sent_notifications)

    def sent_to(self, recipient_id) -> List[Notification]:
        """Notifications addressed to one recipient, oldest first."""
        return [n for n in self.sent_notifications if n.recipient_id == str(recipient_id)]

    def get_last_notification(self) -> Optional[Notification]:
        return self.sent_notifications[-1] if self.sent_notifications else None
