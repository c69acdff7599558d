from decimal import Decimal
from unittest.mock import Mock, patch

import pytest

from infrastructure.notifications import MockNotificationService, NotificationServiceInterface
from marketplace.domain.events import OrderPlacedEvent, OrderReceivedEvent, OrderStatusChangedEvent
from marketplace.infra.events.dispatch import dispatch_event, dispatch_on_commit


def placed_event():
    return OrderPlacedEvent(
        order_id="order-1",
        order_number="ORD17000000000001234",
        customer_id="customer-1",
        seller_ids=["seller-1", "seller-2"],
        final_amount=Decimal("54.00"),
    )


@pytest.mark.unit
class TestDispatchEvent:
    def test_delivers_to_every_recipient(self):
        notifier = MockNotificationService()

        delivered = dispatch_event(notifier, placed_event(), ["seller-1", "seller-2"])

        assert delivered == 2
        assert [n.recipient_id for n in notifier.sent_notifications] == ["seller-1", "seller-2"]
        assert notifier.get_last_notification().event_type == "order.placed"
        assert notifier.get_last_notification().payload["final_amount"] == "54.00"

    def test_failures_are_swallowed(self):
        notifier = MockNotificationService(fail=True)

        delivered = dispatch_event(notifier, placed_event(), ["customer-1"])

        assert delivered == 0

    def test_one_failing_recipient_does_not_stop_the_rest(self):
        notifier = Mock(spec=NotificationServiceInterface)
        notifier.notify.side_effect = [RuntimeError("down"), True]

        delivered = dispatch_event(notifier, placed_event(), ["a", "b"])

        assert delivered == 1
        assert notifier.notify.call_count == 2

    def test_rejected_notification_not_counted(self):
        notifier = Mock(spec=NotificationServiceInterface)
        notifier.notify.return_value = False

        assert dispatch_event(notifier, placed_event(), ["a"]) == 0

    def test_recipient_ids_are_stringified(self):
        notifier = MockNotificationService()
        event = OrderStatusChangedEvent("order-1", "ORD1", "pending", "cancelled", "actor", reason="out of stock")

        dispatch_event(notifier, event, [42])

        assert notifier.sent_to("42")[0].payload["reason"] == "out of stock"


@pytest.mark.unit
class TestOrderEvents:
    def test_received_event_copies_payload(self):
        placed = placed_event()
        received = OrderReceivedEvent.from_placed(placed)

        assert received.event_type == "order.received"
        assert received.payload == placed.payload
        assert received.payload is not placed.payload

    def test_to_dict(self):
        data = placed_event().to_dict()

        assert data["event_type"] == "order.placed"
        assert data["payload"]["seller_ids"] == ["seller-1", "seller-2"]
        assert "occurred_at" in data

    def test_notification_payload_carries_event_time(self):
        event = placed_event()

        payload = event.notification_payload()

        assert payload["occurred_at"] == event.occurred_at.isoformat()
        assert payload["order_number"] == event.order_number == "ORD17000000000001234"
        assert "occurred_at" not in event.payload


@pytest.mark.unit
class TestDispatchOnCommit:
    @patch("marketplace.infra.events.dispatch.transaction.on_commit")
    def test_delivery_deferred_to_commit(self, mock_on_commit):
        notifier = MockNotificationService()

        dispatch_on_commit(notifier, placed_event(), (r for r in ["seller-1", "seller-2"]))

        assert notifier.get_sent_count() == 0
        mock_on_commit.assert_called_once()

        callback = mock_on_commit.call_args[0][0]
        callback()
        assert [n.recipient_id for n in notifier.sent_notifications] == ["seller-1", "seller-2"]
