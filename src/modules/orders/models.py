"""Order and OrderStatusHistory models.

Business rules implemented:
- Status moves only through ``transitions.py`` (enforced at service layer).
- Each status change generates an append-only history record holding the
  previous/new status, the acting user and an optional observation.
- ``number`` is sequential per establishment; ``tracking_code`` is a short
  unique code shown to the customer.
- Orders are never deleted; cancelled orders can be reactivated.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.db import models
from django.db.models import Max

from modules.core.models import BaseModel
from modules.orders.constants import (
    TERMINAL_STATES,
    TRACKING_CODE_MAX_RETRIES,
    DeliveryType,
    OrderStatus,
    PaymentMethod,
)


def _money(**kwargs: Any) -> models.DecimalField:
    return models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00"), **kwargs
    )


class Order(BaseModel):
    """Order aggregate root."""

    establishment: models.ForeignKey = models.ForeignKey(
        "establishments.Establishment",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    number: models.PositiveIntegerField = models.PositiveIntegerField(editable=False)
    tracking_code: models.CharField = models.CharField(
        max_length=12, unique=True, editable=False
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    delivery_type: models.CharField = models.CharField(
        max_length=20,
        choices=DeliveryType.choices,
        default=DeliveryType.DELIVERY,
    )
    payment_method: models.CharField = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.PIX,
    )
    customer_name: models.CharField = models.CharField(max_length=255)
    customer_phone: models.CharField = models.CharField(
        max_length=30, blank=True, default=""
    )
    neighborhood: models.CharField = models.CharField(
        max_length=120, blank=True, default=""
    )
    city: models.CharField = models.CharField(max_length=120, blank=True, default="")
    subtotal: models.DecimalField = _money()
    delivery_fee: models.DecimalField = _money()
    discount: models.DecimalField = _money()
    total: models.DecimalField = _money()

    accepted_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    prepped_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    ready_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    delivering_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    completed_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    cancelled_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    cancellation_reason: models.TextField = models.TextField(  # noqa: DJ01
        null=True, blank=True
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["establishment", "number"],
                name="orders_establishment_number_uniq",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    @staticmethod
    def generate_tracking_code() -> str:
        """Short customer-facing code, e.g. ``7F3A9C1B``."""
        return secrets.token_hex(4).upper()

    def _next_number(self) -> int:
        last = Order.objects.filter(establishment_id=self.establishment_id).aggregate(
            last=Max("number")
        )["last"]
        return (last or 0) + 1

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.number:
            self.number = self._next_number()
        if not self.tracking_code:
            for _ in range(TRACKING_CODE_MAX_RETRIES):
                candidate = self.generate_tracking_code()
                if not Order.objects.filter(tracking_code=candidate).exists():
                    self.tracking_code = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique tracking_code after "
                    f"{TRACKING_CODE_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"#{self.number} {self.tracking_code} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    ``actor`` is nullable: ``None`` means the change was performed by the
    system.  ``observation`` holds the justification of reversals and
    reactivations and the reason of cancellations.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    previous_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    actor: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    observation: models.TextField = models.TextField(  # noqa: DJ01
        null=True, blank=True
    )

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.previous_status} -> {self.new_status}"
