"""Unit tests for the order state machine tables."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from modules.orders import transitions
from modules.orders.constants import DeliveryType, OrderAction, OrderStatus
from modules.orders.exceptions import InvalidOrderAction

pytestmark = pytest.mark.unit


def entry(previous, new):
    return SimpleNamespace(previous_status=previous, new_status=new)


class TestAvailableActions:
    @pytest.mark.parametrize(
        "status,expected",
        [
            (OrderStatus.PENDING, [OrderAction.ACCEPT, OrderAction.CANCEL]),
            (OrderStatus.ACCEPTED, [OrderAction.START_PREP, OrderAction.CANCEL]),
            (OrderStatus.PREPARING, [OrderAction.MARK_READY]),
            (OrderStatus.OUT_FOR_DELIVERY, [OrderAction.COMPLETE]),
            (OrderStatus.COMPLETED, []),
            (OrderStatus.CANCELLED, [OrderAction.REACTIVATE]),
        ],
    )
    def test_action_table(self, status, expected):
        actions = transitions.available_actions(status, DeliveryType.DELIVERY)
        assert list(actions) == expected

    def test_ready_delivery_goes_out_for_delivery(self):
        actions = transitions.available_actions(OrderStatus.READY, DeliveryType.DELIVERY)
        assert actions == {OrderAction.START_DELIVERY: OrderStatus.OUT_FOR_DELIVERY}

    def test_ready_pickup_completes(self):
        actions = transitions.available_actions(OrderStatus.READY, DeliveryType.PICKUP)
        assert actions == {OrderAction.COMPLETE: OrderStatus.COMPLETED}

    def test_every_status_and_type_is_covered(self):
        for status in OrderStatus.values:
            for delivery_type in DeliveryType.values:
                first = transitions.available_actions(status, delivery_type)
                second = transitions.available_actions(status, delivery_type)
                assert first == second

    def test_reactivate_target_uses_history(self):
        history = [entry(None, "pendente"), entry("preparo", "cancelado")]
        actions = transitions.available_actions(
            OrderStatus.CANCELLED, DeliveryType.PICKUP, history
        )
        assert actions == {OrderAction.REACTIVATE: OrderStatus.PREPARING}


class TestResolveActionTarget:
    def test_resolves_target(self):
        target = transitions.resolve_action_target(
            OrderStatus.PENDING, DeliveryType.DELIVERY, OrderAction.ACCEPT
        )
        assert target == OrderStatus.ACCEPTED

    @pytest.mark.parametrize(
        "status,action",
        [
            (OrderStatus.COMPLETED, OrderAction.REACTIVATE),
            (OrderStatus.PREPARING, OrderAction.CANCEL),
            (OrderStatus.READY, OrderAction.START_DELIVERY),
            (OrderStatus.PENDING, "fly"),
        ],
    )
    def test_unavailable_action(self, status, action):
        with pytest.raises(InvalidOrderAction):
            transitions.resolve_action_target(status, DeliveryType.PICKUP, action)


class TestReactivationTarget:
    def test_defaults_to_pending(self):
        assert transitions.reactivation_target([]) == OrderStatus.PENDING

    def test_latest_cancellation_wins(self):
        history = [
            entry("aceito", "cancelado"),
            entry("cancelado", "aceito"),
            entry("aceito", "preparo"),
            entry("preparo", "cancelado"),
        ]
        assert transitions.reactivation_target(history) == OrderStatus.PREPARING

    def test_latest_cancellation_without_previous_status_restarts_pending(self):
        history = [
            entry("preparo", "cancelado"),
            entry("cancelado", "preparo"),
            entry(None, "cancelado"),
        ]
        assert transitions.reactivation_target(history) == OrderStatus.PENDING


class TestManualTransitions:
    def test_pickup_ready_can_complete_but_not_deliver(self):
        targets = transitions.manual_targets(OrderStatus.READY, DeliveryType.PICKUP)
        assert targets == {OrderStatus.PREPARING, OrderStatus.COMPLETED}

    def test_delivery_ready_can_deliver_but_not_complete(self):
        targets = transitions.manual_targets(OrderStatus.READY, DeliveryType.DELIVERY)
        assert targets == {OrderStatus.PREPARING, OrderStatus.OUT_FOR_DELIVERY}

    def test_cancelled_is_never_a_manual_target(self):
        for targets in transitions.MANUAL_TRANSITIONS.values():
            assert OrderStatus.CANCELLED not in targets

    def test_completed_is_final(self):
        assert transitions.manual_targets(OrderStatus.COMPLETED, DeliveryType.PICKUP) == set()


class TestRequiresObservation:
    @pytest.mark.parametrize(
        "from_status,to_status",
        [
            (OrderStatus.ACCEPTED, OrderStatus.PENDING),
            (OrderStatus.PREPARING, OrderStatus.ACCEPTED),
            (OrderStatus.READY, OrderStatus.PREPARING),
            (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.READY),
            (OrderStatus.CANCELLED, OrderStatus.PENDING),
            (OrderStatus.CANCELLED, OrderStatus.PREPARING),
        ],
    )
    def test_reversals_and_reactivations(self, from_status, to_status):
        assert transitions.requires_observation(from_status, to_status) is True

    @pytest.mark.parametrize(
        "from_status,to_status",
        [
            (OrderStatus.PENDING, OrderStatus.ACCEPTED),
            (OrderStatus.READY, OrderStatus.COMPLETED),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
        ],
    )
    def test_forward_moves(self, from_status, to_status):
        assert transitions.requires_observation(from_status, to_status) is False
