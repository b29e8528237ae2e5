"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderCancelled, OrderReactivated, OrderStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            f"Processando mudança de status do pedido {event.aggregate_id}",
            order_id=str(event.aggregate_id),
            previous_status=event.previous_status,
            new_status=event.new_status,
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            f"Processando cancelamento do pedido {event.aggregate_id}",
            order_id=str(event.aggregate_id),
            previous_status=event.previous_status,
        )


class OrderReactivatedHandler(IEventHandler[OrderReactivated]):
    def handle(self, event: OrderReactivated) -> None:
        logger.info(
            f"Processando reativação do pedido {event.aggregate_id}",
            order_id=str(event.aggregate_id),
            restored_status=event.restored_status,
        )


order_status_changed_handler = OrderStatusChangedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_reactivated_handler = OrderReactivatedHandler()
