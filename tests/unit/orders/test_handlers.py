from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.events import OrderCancelled, OrderReactivated, OrderStatusChanged
from modules.orders.handlers import (
    OrderCancelledHandler,
    OrderReactivatedHandler,
    OrderStatusChangedHandler,
)
from shared.infrastructure.bus import event_bus

pytestmark = pytest.mark.unit


class TestOrderHandlers:
    @pytest.mark.parametrize(
        "handler,event",
        [
            (
                OrderStatusChangedHandler(),
                OrderStatusChanged(
                    aggregate_id=uuid4(), previous_status="pendente", new_status="aceito"
                ),
            ),
            (OrderCancelledHandler(), OrderCancelled(aggregate_id=uuid4(), reason="x")),
            (
                OrderReactivatedHandler(),
                OrderReactivated(aggregate_id=uuid4(), restored_status="aceito"),
            ),
        ],
    )
    def test_handlers_accept_their_events(self, handler, event):
        handler.handle(event)

    def test_handlers_subscribed_on_startup(self):
        handlers = event_bus._handlers
        assert OrderStatusChanged in handlers
        assert OrderCancelled in handlers
        assert OrderReactivated in handlers

    def test_event_name_is_class_name(self):
        event = OrderCancelled(aggregate_id=uuid4(), reason="x")
        assert event.event_name == "OrderCancelled"
