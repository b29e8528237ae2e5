"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Status transitions are written inside ``transaction.atomic()`` so the
order row and its history entry can never disagree.

Concurrency control on status updates uses ``select_for_update()``
(no ``version`` field exists on the model).
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its establishment and history.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("establishment")
                .prefetch_related("status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Must be called inside ``transaction.atomic``.  Returns ``None`` for
        non-existent or invalid IDs.
        """
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters.

        Supported filter keys are any ``Order`` lookups, e.g.
        ``establishment_id``, ``status``, ``created_at__date__gte``.
        """
        queryset = Order.objects.select_related("establishment")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset.order_by("-created_at", "-id"))

    def get_history(self, order_id: str) -> List[OrderStatusHistory]:
        try:
            return list(
                OrderStatusHistory.objects.filter(order_id=order_id).order_by(
                    "created_at", "id"
                )
            )
        except (ValueError, ValidationError):
            return []

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        logger.info("order.saved", order_id=str(entity.id))
        return entity

    @transaction.atomic
    def record_transition(
        self,
        order: Order,
        new_status: str,
        *,
        actor: Any = None,
        observation: Optional[str] = None,
        changes: Optional[Mapping[str, Any]] = None,
    ) -> Order:
        """Update status (plus *changes*) and append the history entry."""
        previous_status = order.status
        order.status = new_status
        fields = ["status"]
        for field, value in (changes or {}).items():
            setattr(order, field, value)
            fields.append(field)
        order.save(update_fields=fields)

        OrderStatusHistory.objects.create(
            order=order,
            previous_status=previous_status,
            new_status=new_status,
            actor=actor if getattr(actor, "is_authenticated", False) else None,
            observation=observation,
        )

        logger.info(
            "order.history_added",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=new_status,
        )
        return order
