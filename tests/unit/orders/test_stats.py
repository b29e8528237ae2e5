from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.stats import compute_stats, count_by_status

pytestmark = pytest.mark.unit


def order(status, total="0.00"):
    return SimpleNamespace(status=status, total=Decimal(total))


class TestCountByStatus:
    def test_every_status_present(self):
        counts = count_by_status([])
        assert set(counts) == set(OrderStatus.values)
        assert all(value == 0 for value in counts.values())

    def test_counts(self):
        counts = count_by_status(
            [order(OrderStatus.PENDING), order(OrderStatus.PENDING), order("pronto")]
        )
        assert counts["pendente"] == 2
        assert counts["pronto"] == 1


class TestComputeStats:
    def test_empty_list(self):
        stats = compute_stats([])
        assert stats.total == 0
        assert stats.average_ticket == Decimal("0.00")

    def test_aggregates(self):
        stats = compute_stats(
            [
                order(OrderStatus.PENDING, "20.00"),
                order(OrderStatus.ACCEPTED, "15.00"),
                order(OrderStatus.OUT_FOR_DELIVERY, "30.00"),
                order(OrderStatus.COMPLETED, "40.00"),
                order(OrderStatus.COMPLETED, "25.00"),
                order(OrderStatus.CANCELLED, "99.00"),
            ]
        )
        assert stats.total == 6
        assert stats.pending == 1
        assert stats.in_progress == 2
        assert stats.completed == 2
        assert stats.cancelled == 1
        assert stats.average_ticket == Decimal("32.50")

    def test_average_rounds_to_cents(self):
        stats = compute_stats(
            [
                order(OrderStatus.COMPLETED, "10.00"),
                order(OrderStatus.COMPLETED, "10.01"),
                order(OrderStatus.COMPLETED, "10.00"),
            ]
        )
        assert stats.average_ticket == Decimal("10.00")
