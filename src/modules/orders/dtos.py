"""Order DTOs for the Service Layer and the admin board.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``) and built straight from model
instances (``from_attributes=True``).

- ``StatusHistoryDTO``: one entry of the order audit trail.
- ``OrderSummaryDTO``: the order as shown on the board list and detail.
- ``OrderStatsDTO``: aggregated counters of a set of orders.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class StatusHistoryDTO(BaseModel):
    """Immutable DTO for order status history records."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    previous_status: Optional[str] = None
    new_status: str
    actor_id: Optional[int] = None
    observation: Optional[str] = None
    created_at: datetime


class OrderSummaryDTO(BaseModel):
    """Immutable DTO for an order on the admin board."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    number: int
    tracking_code: str
    status: str
    delivery_type: str
    payment_method: str
    customer_name: str
    customer_phone: str = ""
    neighborhood: str = ""
    city: str = ""
    subtotal: Decimal = Decimal("0.00")
    delivery_fee: Decimal = Decimal("0.00")
    discount: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    cancellation_reason: Optional[str] = None
    created_at: datetime


class OrderStatsDTO(BaseModel):
    """Immutable DTO for the order statistics panel."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0
    average_ticket: Decimal = Decimal("0.00")
