"""Order repository interface.

Extends ``IRepository[Order]`` with what the order state machine needs:
filtered listing, the status history and an atomic transition write.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes its ``OrderStatusHistory`` records.  A status
    change and its history entry are always written together.
    """

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders, newest first, with optional ORM filters."""

    @abstractmethod
    def get_history(self, order_id: str) -> List[OrderStatusHistory]:
        """Return the order's history in chronological order (oldest first)."""

    @abstractmethod
    def record_transition(
        self,
        order: Order,
        new_status: str,
        *,
        actor: Any = None,
        observation: Optional[str] = None,
        changes: Optional[Mapping[str, Any]] = None,
    ) -> Order:
        """Move *order* to *new_status* and append the history entry.

        *changes* holds extra order fields written in the same update
        (phase timestamps, cancellation fields).
        """
