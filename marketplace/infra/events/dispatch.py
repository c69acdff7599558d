import logging
from typing import Iterable

from django.db import transaction

from infrastructure.notifications import NotificationServiceInterface
from marketplace.domain.events.base import DomainEvent
from marketplace.infra.observability.metrics import notification_failures_total


logger = logging.getLogger(__name__)


def dispatch_event(notifier: NotificationServiceInterface, event: DomainEvent, recipient_ids: Iterable) -> int:
    """
    Fire-and-forget delivery of ``event`` to each recipient.

    Failures are logged and counted, never raised: a notification problem must
    not fail the order operation that produced the event.

    Returns:
        Number of recipients the notifier accepted
    """
    delivered = 0
    for recipient_id in recipient_ids:
        try:
            if notifier.notify(event.event_type, str(recipient_id), event.notification_payload()):
                delivered += 1
            else:
                notification_failures_total.labels(event_type=event.event_type).inc()
        except Exception as e:
            notification_failures_total.labels(event_type=event.event_type).inc()
            logger.error(
                f"Failed to notify {recipient_id} of {event.event_type} for {event.order_number}: {e}", exc_info=True
            )
    return delivered


def dispatch_on_commit(notifier: NotificationServiceInterface, event: DomainEvent, recipient_ids: Iterable) -> None:
    """
    Queue ``dispatch_event`` to run once the enclosing transaction commits.

    Outside a transaction Django runs the callback immediately. If an outer
    transaction rolls back, nothing is sent.
    """
    recipients = list(recipient_ids)
    transaction.on_commit(lambda: dispatch_event(notifier, event, recipients))
