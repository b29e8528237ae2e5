"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order moves forward or back in the flow."""

    previous_status: str = ""
    new_status: str = ""
    action: Optional[str] = None


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""

    previous_status: str = ""
    reason: str = ""


@dataclass(frozen=True)
class OrderReactivated(DomainEvent):
    """Raised when a cancelled order is brought back to the flow."""

    restored_status: str = ""
