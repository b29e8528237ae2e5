"""Integration tests for OrderDjangoRepository and the Order model."""

from __future__ import annotations

import pytest
from freezegun import freeze_time

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories import OrderDjangoRepository

pytestmark = pytest.mark.integration


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


class TestOrderModel:
    def test_number_is_sequential_per_establishment(self, make_order):
        first = make_order()
        second = make_order()
        assert (first.number, second.number) == (1, 2)

    def test_tracking_code_generated(self, make_order):
        order = make_order()
        assert len(order.tracking_code) == 8
        assert order.tracking_code.isupper() or order.tracking_code.isdigit()


class TestRead:
    def test_get_by_id_invalid_returns_none(self, repo):
        assert repo.get_by_id("not-a-uuid") is None
        assert repo.get_for_update("not-a-uuid") is None

    def test_list_with_filters(self, repo, make_order):
        make_order(status=OrderStatus.PENDING)
        make_order(status=OrderStatus.COMPLETED)

        assert len(repo.list()) == 2
        assert [o.status for o in repo.list({"status": "concluido"})] == ["concluido"]


class TestRecordTransition:
    def test_updates_status_and_appends_history(self, repo, make_order, user):
        order = make_order()

        with freeze_time("2026-03-10 12:00:00"):
            repo.record_transition(
                order,
                OrderStatus.ACCEPTED,
                actor=user,
                changes={"accepted_at": order.created_at},
            )

        order.refresh_from_db()
        assert order.status == OrderStatus.ACCEPTED
        history = repo.get_history(str(order.id))
        assert len(history) == 1
        assert history[0].previous_status == OrderStatus.PENDING
        assert history[0].new_status == OrderStatus.ACCEPTED
        assert history[0].actor == user
        assert history[0].observation is None

    def test_anonymous_actor_stored_as_system(self, repo, make_order):
        order = make_order()
        repo.record_transition(order, OrderStatus.ACCEPTED, actor=None)
        assert OrderStatusHistory.objects.get(order=order).actor is None

    def test_history_is_chronological(self, repo, make_order):
        order = make_order()
        with freeze_time("2026-03-10 12:00:00"):
            repo.record_transition(order, OrderStatus.ACCEPTED)
        with freeze_time("2026-03-10 12:05:00"):
            repo.record_transition(order, OrderStatus.PREPARING)

        statuses = [h.new_status for h in repo.get_history(str(order.id))]
        assert statuses == [OrderStatus.ACCEPTED, OrderStatus.PREPARING]
        assert Order.objects.get(id=order.id).status == OrderStatus.PREPARING
