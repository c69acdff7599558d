"""
Notification Service Factory
=============================

Factory pattern for creating notification service instances based on configuration.
"""

import logging
from typing import Literal

from django.conf import settings

from .event_bus_service import EventBusNotificationService
from .interface import NotificationServiceInterface
from .mock_service import MockNotificationService


logger = logging.getLogger(__name__)

NotificationBackend = Literal["event_bus", "mock"]


class NotificationFactory:
    """
    Factory for creating notification service instances.

    Usage:
        # In settings.py
        INFRASTRUCTURE = {"NOTIFICATION_BACKEND": "event_bus"}  # or 'mock' for testing

        # In your code
        notifier = NotificationFactory.create()
    """

    @staticmethod
    def create(backend: NotificationBackend | None = None) -> NotificationServiceInterface:
        """
        Create a notification service instance.

        Args:
            backend: 'event_bus' or 'mock'. If None, reads
                     settings.INFRASTRUCTURE["NOTIFICATION_BACKEND"]

        Raises:
            ValueError: If backend type is invalid
        """
        is_testing = getattr(settings, "TESTING", False)
        default_backend = "mock" if is_testing else "event_bus"

        infrastructure = getattr(settings, "INFRASTRUCTURE", {})
        backend_type = backend or infrastructure.get("NOTIFICATION_BACKEND", default_backend)

        logger.info(f"Creating notification service backend: {backend_type}")

        if backend_type == "event_bus":
            return EventBusNotificationService()
        elif backend_type == "mock":
            return MockNotificationService()
        else:
            raise ValueError(f"Invalid notification backend: {backend_type}. Must be 'event_bus' or 'mock'")
