"""
Notification Service Abstraction Layer
========================================

Provides a unified interface for notifying customers and sellers about order events.
"""

from .event_bus_service import EventBusNotificationService
from .factory import NotificationFactory
from .interface import Notification, NotificationException, NotificationServiceInterface
from .mock_service import MockNotificationService

__all__ = [
    "NotificationServiceInterface",
    "Notification",
    "NotificationException",
    "EventBusNotificationService",
    "MockNotificationService",
    "NotificationFactory",
]
