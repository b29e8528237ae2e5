"""Order statistics for the admin panel."""

from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable

from modules.orders.constants import IN_PROGRESS_STATES, OrderStatus
from modules.orders.dtos import OrderStatsDTO

CENTS = Decimal("0.01")


def count_by_status(orders: Iterable[Any]) -> Dict[str, int]:
    """Number of orders per status; every status is present."""
    counts = Counter(order.status for order in orders)
    return {status: counts.get(status, 0) for status in OrderStatus.values}


def compute_stats(orders: Iterable[Any]) -> OrderStatsDTO:
    """Aggregate counters and the average ticket of completed orders."""
    orders = list(orders)
    counts = count_by_status(orders)

    completed_totals = [
        Decimal(order.total) for order in orders if order.status == OrderStatus.COMPLETED
    ]
    average = Decimal("0.00")
    if completed_totals:
        average = (sum(completed_totals) / len(completed_totals)).quantize(
            CENTS, rounding=ROUND_HALF_UP
        )

    return OrderStatsDTO(
        total=len(orders),
        pending=counts[OrderStatus.PENDING],
        in_progress=sum(counts[status] for status in IN_PROGRESS_STATES),
        completed=counts[OrderStatus.COMPLETED],
        cancelled=counts[OrderStatus.CANCELLED],
        average_ticket=average,
    )
