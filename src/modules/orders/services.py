"""Order service layer (Use Cases).

Orchestrates the order status state machine.  All write operations are
atomic: the service defines the unit-of-work boundary, locks the order
row and lets the repository write the status and its history entry
together.

Business rules enforced:
- Actions are limited to those offered for the current status.
- Cancellations require a non-blank reason.
- Reversals and reactivations require a non-blank observation.
- Manual status changes always require an observation and never cancel.
- Reactivation restores the status the order had when last cancelled.

Input validation happens before any write reaches the repository.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.orders import transitions
from modules.orders.constants import CANCELLABLE_STATES, OrderAction, OrderStatus
from modules.orders.events import OrderCancelled, OrderReactivated, OrderStatusChanged
from modules.orders.exceptions import (
    CancellationReasonRequired,
    InvalidOrderAction,
    InvalidOrderStatus,
    ObservationRequired,
    OrderNotFound,
)
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


def _clean(text: Optional[str]) -> str:
    return (text or "").strip()


class OrderService:
    """Application service for Order use-cases.

    Receives the order repository via constructor injection (DIP).
    """

    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def execute_action(
        self,
        order_id: UUID | str,
        action: str,
        observation: Optional[str] = None,
        actor: Any = None,
    ) -> Order:
        """Apply an action button, or a manual change when *action* is a status.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderAction: *action* is unknown or not offered.
            InvalidOrderStatus: manual change not allowed.
            ObservationRequired: the transition must be justified.
            CancellationReasonRequired: cancel without a reason.
        """
        if action in OrderStatus.values:
            return self.update_status(order_id, action, observation, actor)
        if action not in OrderAction.values:
            raise InvalidOrderAction(f"Unknown action {action}.")
        if action == OrderAction.CANCEL and not _clean(observation):
            raise CancellationReasonRequired("A cancellation reason is required.")
        if action == OrderAction.REACTIVATE and not _clean(observation):
            raise ObservationRequired("Reactivating an order requires an observation.")

        with transaction.atomic():
            order = self._lock(order_id)
            log = logger.bind(
                order_id=str(order.id), current_status=order.status, action=action
            )

            history = (
                self._order_repo.get_history(str(order.id))
                if order.status == OrderStatus.CANCELLED
                else []
            )
            try:
                target = transitions.resolve_action_target(
                    order.status, order.delivery_type, action, history
                )
            except InvalidOrderAction:
                log.warning("order.action_not_available")
                raise

            if transitions.requires_observation(order.status, target) and not _clean(
                observation
            ):
                raise ObservationRequired(
                    f"Moving from {order.status} to {target} requires an observation."
                )

            if action == OrderAction.CANCEL:
                return self._cancel_locked(order, _clean(observation), actor)
            return self._transition(order, target, observation, actor, action=action)

    def cancel(self, order_id: UUID | str, reason: str, actor: Any = None) -> Order:
        """Cancel an order from any non-terminal status.

        Raises:
            CancellationReasonRequired: *reason* is blank.
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the order is already completed or cancelled.
        """
        reason = _clean(reason)
        if not reason:
            raise CancellationReasonRequired("A cancellation reason is required.")

        with transaction.atomic():
            order = self._lock(order_id)
            if order.status not in CANCELLABLE_STATES:
                logger.warning(
                    "order.cancel_not_allowed",
                    order_id=str(order.id),
                    current_status=order.status,
                )
                raise InvalidOrderStatus(
                    f"Cannot cancel order in status {order.status}."
                )
            return self._cancel_locked(order, reason, actor)

    def reactivate(
        self, order_id: UUID | str, observation: str, actor: Any = None
    ) -> Order:
        """Bring a cancelled order back to the status it was cancelled from."""
        return self.execute_action(
            order_id, OrderAction.REACTIVATE, observation=observation, actor=actor
        )

    def update_status(
        self,
        order_id: UUID | str,
        new_status: str,
        observation: Optional[str],
        actor: Any = None,
    ) -> Order:
        """Manual status change ("change status" path).

        Raises:
            ObservationRequired: *observation* is blank.
            InvalidOrderStatus: unknown status, cancellation, or a change
                not allowed from the current status.
            OrderNotFound: order does not exist.
        """
        if new_status == OrderStatus.CANCELLED:
            raise InvalidOrderStatus("Use the cancel operation to cancel orders.")
        if new_status not in OrderStatus.values:
            raise InvalidOrderStatus(f"Unknown status {new_status}.")
        if not _clean(observation):
            raise ObservationRequired("A manual status change requires an observation.")

        with transaction.atomic():
            order = self._lock(order_id)
            log = logger.bind(
                order_id=str(order.id),
                current_status=order.status,
                new_status=new_status,
            )
            if not transitions.can_change_manually(
                order.status, new_status, order.delivery_type
            ):
                log.warning("order.invalid_transition")
                raise InvalidOrderStatus(
                    f"Cannot transition from {order.status} to {new_status}."
                )
            return self._transition(order, new_status, observation, actor)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID | str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    def get_history(self, order_id: UUID | str) -> List[OrderStatusHistory]:
        """Chronological status history of an order.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self.get_order(order_id)
        return self._order_repo.get_history(str(order.id))

    def available_actions(self, order: Order) -> Dict[str, str]:
        """Action buttons offered for *order*, mapped to their target status."""
        history = (
            self._order_repo.get_history(str(order.id))
            if order.status == OrderStatus.CANCELLED
            else []
        )
        return transitions.available_actions(order.status, order.delivery_type, history)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lock(self, order_id: UUID | str) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _cancel_locked(self, order: Order, reason: str, actor: Any) -> Order:
        previous_status = order.status
        now = timezone.now()
        order = self._order_repo.record_transition(
            order,
            OrderStatus.CANCELLED,
            actor=actor,
            observation=reason,
            changes={"cancelled_at": now, "cancellation_reason": reason},
        )
        logger.info(
            "order.cancelled", order_id=str(order.id), previous_status=previous_status
        )
        self._publish(
            OrderCancelled(
                aggregate_id=order.id, previous_status=previous_status, reason=reason
            )
        )
        return order

    def _transition(
        self,
        order: Order,
        target: str,
        observation: Optional[str],
        actor: Any,
        action: Optional[str] = None,
    ) -> Order:
        previous_status = order.status
        changes: Dict[str, Any] = {}
        timestamp_field = transitions.PHASE_TIMESTAMPS.get(target)
        if timestamp_field:
            changes[timestamp_field] = timezone.now()
        reactivated = previous_status == OrderStatus.CANCELLED
        if reactivated:
            changes["cancelled_at"] = None
            changes["cancellation_reason"] = None

        order = self._order_repo.record_transition(
            order,
            target,
            actor=actor,
            observation=_clean(observation) or None,
            changes=changes,
        )
        logger.info(
            "order.status_updated",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=target,
            action=action,
        )

        event: DomainEvent
        if reactivated:
            event = OrderReactivated(aggregate_id=order.id, restored_status=target)
        else:
            event = OrderStatusChanged(
                aggregate_id=order.id,
                previous_status=previous_status,
                new_status=target,
                action=action,
            )
        self._publish(event)
        return order

    @staticmethod
    def _publish(event: DomainEvent) -> None:
        transaction.on_commit(lambda: event_bus.publish(event))
