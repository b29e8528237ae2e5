"""Order state machine.

Two ways move an order between statuses:

- **Actions** (``ACTION_TRANSITIONS``): the buttons of the order detail.
  Each status offers a fixed, ordered set of actions; the target of every
  action is determined by the current status and the delivery type, except
  ``reactivate`` whose target comes from the order history.
- **Manual changes** (``MANUAL_TRANSITIONS``): the "change status" path used
  to correct an order.  Always justified with an observation; never used to
  cancel.

Functions here are pure and operate on plain status strings.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol, Tuple

from modules.orders.constants import DeliveryType, OrderAction, OrderStatus
from modules.orders.exceptions import InvalidOrderAction


class HistoryEntry(Protocol):
    previous_status: Optional[str]
    new_status: str


# ---------------------------------------------------------------------------
# Action table
# ---------------------------------------------------------------------------

# ``None`` target: resolved from the order history (reactivation).
ActionTable = Tuple[Tuple[str, Optional[str]], ...]

ACTION_TRANSITIONS: Dict[str, ActionTable] = {
    OrderStatus.PENDING: (
        (OrderAction.ACCEPT, OrderStatus.ACCEPTED),
        (OrderAction.CANCEL, OrderStatus.CANCELLED),
    ),
    OrderStatus.ACCEPTED: (
        (OrderAction.START_PREP, OrderStatus.PREPARING),
        (OrderAction.CANCEL, OrderStatus.CANCELLED),
    ),
    OrderStatus.PREPARING: ((OrderAction.MARK_READY, OrderStatus.READY),),
    OrderStatus.OUT_FOR_DELIVERY: ((OrderAction.COMPLETE, OrderStatus.COMPLETED),),
    OrderStatus.COMPLETED: (),
    OrderStatus.CANCELLED: ((OrderAction.REACTIVATE, None),),
}

_READY_DELIVERY: ActionTable = (
    (OrderAction.START_DELIVERY, OrderStatus.OUT_FOR_DELIVERY),
)
_READY_PICKUP: ActionTable = ((OrderAction.COMPLETE, OrderStatus.COMPLETED),)


def _actions_for(status: str, delivery_type: str) -> ActionTable:
    if status == OrderStatus.READY:
        if delivery_type == DeliveryType.DELIVERY:
            return _READY_DELIVERY
        return _READY_PICKUP
    return ACTION_TRANSITIONS.get(status, ())


def available_actions(
    status: str,
    delivery_type: str,
    history: Iterable[HistoryEntry] = (),
) -> Dict[str, str]:
    """Actions offered for *status*, in display order, mapped to targets."""
    actions: Dict[str, str] = {}
    for action, target in _actions_for(status, delivery_type):
        actions[action] = target if target is not None else reactivation_target(history)
    return actions


def resolve_action_target(
    status: str,
    delivery_type: str,
    action: str,
    history: Iterable[HistoryEntry] = (),
) -> str:
    """Return the status *action* leads to from *status*.

    Raises:
        InvalidOrderAction: *action* is not offered for *status*.
    """
    for candidate, target in _actions_for(status, delivery_type):
        if candidate == action:
            return target if target is not None else reactivation_target(history)
    raise InvalidOrderAction(f"Action {action} is not available for status {status}.")


def reactivation_target(history: Iterable[HistoryEntry]) -> str:
    """Status a cancelled order returns to when reactivated.

    *history* is in chronological order (oldest first).  The most recent
    cancellation entry wins, and restarts the order as ``pendente`` when it
    has no previous status; without any cancellation the target is also
    ``pendente``.
    """
    latest: Optional[HistoryEntry] = None
    for entry in history:
        if entry.new_status == OrderStatus.CANCELLED:
            latest = entry
    if latest is None or not latest.previous_status:
        return OrderStatus.PENDING
    return latest.previous_status


# ---------------------------------------------------------------------------
# Manual ("change status") transitions
# ---------------------------------------------------------------------------

MANUAL_TRANSITIONS: Dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.ACCEPTED},
    OrderStatus.ACCEPTED: {OrderStatus.PENDING, OrderStatus.PREPARING},
    OrderStatus.PREPARING: {OrderStatus.ACCEPTED, OrderStatus.READY},
    OrderStatus.READY: {
        OrderStatus.PREPARING,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.COMPLETED,
    },
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.READY, OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: {OrderStatus.PENDING, OrderStatus.ACCEPTED},
}

REVERSALS: set[Tuple[str, str]] = {
    (OrderStatus.ACCEPTED, OrderStatus.PENDING),
    (OrderStatus.PREPARING, OrderStatus.ACCEPTED),
    (OrderStatus.READY, OrderStatus.PREPARING),
    (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.READY),
}


def manual_targets(status: str, delivery_type: str) -> set[str]:
    """Statuses reachable from *status* through a manual change."""
    targets = set(MANUAL_TRANSITIONS.get(status, set()))
    if status == OrderStatus.READY:
        if delivery_type == DeliveryType.DELIVERY:
            targets.discard(OrderStatus.COMPLETED)
        else:
            targets.discard(OrderStatus.OUT_FOR_DELIVERY)
    return targets


def can_change_manually(from_status: str, to_status: str, delivery_type: str) -> bool:
    return to_status in manual_targets(from_status, delivery_type)


def requires_observation(from_status: str, to_status: str) -> bool:
    """Whether moving *from_status* → *to_status* must be justified.

    True for reactivations and for steps back in the flow.
    """
    if from_status == OrderStatus.CANCELLED and to_status != OrderStatus.CANCELLED:
        return True
    return (from_status, to_status) in REVERSALS


# ---------------------------------------------------------------------------
# Phase timestamps
# ---------------------------------------------------------------------------

PHASE_TIMESTAMPS: Dict[str, str] = {
    OrderStatus.ACCEPTED: "accepted_at",
    OrderStatus.PREPARING: "prepped_at",
    OrderStatus.READY: "ready_at",
    OrderStatus.OUT_FOR_DELIVERY: "delivering_at",
    OrderStatus.COMPLETED: "completed_at",
    OrderStatus.CANCELLED: "cancelled_at",
}
