"""
Notification Service Interface
===============================

Abstract base class defining the contract for notifying marketplace parties
(customers, sellers) about order events.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class Notification:
    """
    A single notification addressed to one recipient.

    Attributes:
        event_type: Dotted event name (e.g. ``order.placed``)
        recipient_id: Id of the user being notified
        payload: Event data rendered by the delivery channel
    """

    event_type: str
    recipient_id: str
    payload: Dict[str, Any] = field(default_factory=dict)


class NotificationServiceInterface(ABC):
    """
    Abstract interface for notification delivery.

    Concrete implementations:
        - EventBusNotificationService: publishes notifications on the Redis event bus
        - MockNotificationService: records notifications in memory for tests

    Delivery is fire-and-forget from the caller's point of view: callers log
    and swallow any exception raised here.
    """

    @abstractmethod
    def notify(self, event_type: str, recipient_id: str, payload: Dict[str, Any]) -> bool:
        """
        Send a notification to one recipient.

        Args:
            event_type: Dotted event name
            recipient_id: Id of the user being notified
            payload: Event data

        Returns:
            True if the notification was handed to the transport

        Raises:
            NotificationException: If delivery fails critically
        """
        pass


class NotificationException(Exception):
    """Base exception for notification operations."""

    pass
