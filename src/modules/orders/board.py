"""Admin order board: the list/detail session of the orders screen.

The board keeps the loaded orders, the list filters and the order whose
detail is open.  Commands go through ``OrderService``:

- input the board can check by itself (blank cancellation reason, missing
  observation, action not offered) never reaches the service and is
  reported inline through ``ActionResult.message``;
- service and database errors are logged and shown as an error
  notification, leaving the board untouched;
- on success the local order is replaced and the detail closes.  When the
  order leaves ``cancelado`` the status filter follows it, so it stays
  visible.

``OrderBoardPoller`` refreshes a board periodically on a background thread.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.db import DatabaseError, close_old_connections

from modules.orders import transitions
from modules.orders.constants import OrderAction, OrderStatus
from modules.orders.dtos import OrderSummaryDTO
from modules.orders.exceptions import (
    CancellationReasonRequired,
    InvalidOrderAction,
    InvalidOrderStatus,
    ObservationRequired,
    OrderNotFound,
)
from modules.orders.stats import count_by_status

if TYPE_CHECKING:
    from modules.orders.services import OrderService
    from shared.infrastructure.notifications import INotifier

logger = structlog.get_logger(__name__)

REMOTE_ERRORS = (
    OrderNotFound,
    InvalidOrderAction,
    InvalidOrderStatus,
    ObservationRequired,
    CancellationReasonRequired,
    DatabaseError,
)


@dataclass(frozen=True)
class OrderListFilters:
    """Client-side list filters; ``None`` / blank means "all"."""

    status: Optional[str] = None
    delivery_type: Optional[str] = None
    payment_method: Optional[str] = None
    search: str = ""

    def matches(self, order: OrderSummaryDTO) -> bool:
        if self.status and order.status != self.status:
            return False
        if self.delivery_type and order.delivery_type != self.delivery_type:
            return False
        if self.payment_method and order.payment_method != self.payment_method:
            return False
        term = self.search.strip().casefold()
        if not term:
            return True
        haystack = (
            order.customer_name,
            order.customer_phone,
            order.tracking_code,
            str(order.number),
        )
        return any(term in value.casefold() for value in haystack)


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    order: Optional[OrderSummaryDTO] = None
    message: Optional[str] = None


class OrderBoard:
    """Session state of the admin orders screen."""

    def __init__(
        self,
        service: OrderService,
        notifier: INotifier,
        establishment_id: Optional[UUID | str] = None,
    ) -> None:
        self._service = service
        self._notifier = notifier
        self._establishment_id = establishment_id
        self._orders: List[OrderSummaryDTO] = []
        # Guards the loaded orders, the filters and the open detail; the
        # poller refreshes from its own thread.
        self._lock = threading.RLock()
        self._filters = OrderListFilters()
        self._open_order_id: Optional[UUID] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def orders(self) -> List[OrderSummaryDTO]:
        with self._lock:
            return list(self._orders)

    def get(self, order_id: UUID | str) -> Optional[OrderSummaryDTO]:
        with self._lock:
            for order in self._orders:
                if str(order.id) == str(order_id):
                    return order
        return None

    @property
    def filters(self) -> OrderListFilters:
        with self._lock:
            return self._filters

    @property
    def open_order_id(self) -> Optional[UUID]:
        with self._lock:
            return self._open_order_id

    def visible_orders(self) -> List[OrderSummaryDTO]:
        with self._lock:
            filters = self._filters
            orders = list(self._orders)
        return [order for order in orders if filters.matches(order)]

    def counters(self) -> Dict[str, int]:
        return count_by_status(self.orders)

    def set_filters(self, **changes: Any) -> None:
        with self._lock:
            self._filters = replace(self._filters, **changes)

    def open(self, order_id: UUID | str) -> None:
        with self._lock:
            self._open_order_id = UUID(str(order_id))

    def close(self) -> None:
        with self._lock:
            self._open_order_id = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def refresh(self) -> bool:
        """Reload the orders; on failure the previous list is kept."""
        filters: Dict[str, Any] = {}
        if self._establishment_id:
            filters["establishment_id"] = self._establishment_id
        try:
            loaded = self._service.list_orders(filters or None)
        except DatabaseError as exc:
            logger.error("order_board.refresh_failed", error=str(exc))
            self._notifier.error("Erro ao carregar pedidos", str(exc))
            return False

        orders = [OrderSummaryDTO.model_validate(order) for order in loaded]
        with self._lock:
            self._orders = orders
        logger.debug("order_board.refreshed", count=len(orders))
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def execute_action(
        self,
        order_id: UUID | str,
        action: str,
        observation: Optional[str] = None,
    ) -> ActionResult:
        """Run an action button (or a manual status change) on an order."""
        order = self.get(order_id)
        if order is None:
            return ActionResult(ok=False, message="Pedido não encontrado.")

        message = self._check(order, action, observation)
        if message:
            return ActionResult(ok=False, message=message)

        return self._run(
            order,
            action,
            lambda: self._service.execute_action(order.id, action, observation),
        )

    def cancel(self, order_id: UUID | str, reason: str) -> ActionResult:
        order = self.get(order_id)
        if order is None:
            return ActionResult(ok=False, message="Pedido não encontrado.")
        if not (reason or "").strip():
            return ActionResult(ok=False, message="Informe o motivo do cancelamento.")
        return self._run(
            order,
            OrderAction.CANCEL,
            lambda: self._service.cancel(order.id, reason),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _check(
        order: OrderSummaryDTO, action: str, observation: Optional[str]
    ) -> Optional[str]:
        """Inline validation message, or ``None`` when the call may proceed."""
        has_observation = bool((observation or "").strip())

        if action in OrderStatus.values:
            if action == OrderStatus.CANCELLED:
                return "Use a opção de cancelamento."
            if not has_observation:
                return "Informe uma observação para alterar o status."
            return None

        offered = transitions.available_actions(order.status, order.delivery_type)
        if action not in offered:
            return "Ação não disponível para o status atual."
        if action == OrderAction.CANCEL and not has_observation:
            return "Informe o motivo do cancelamento."
        target = offered[action]
        if transitions.requires_observation(order.status, target) and not has_observation:
            return "Informe uma observação para esta alteração."
        return None

    def _run(self, order: OrderSummaryDTO, action: str, call) -> ActionResult:
        log = logger.bind(order_id=str(order.id), action=action, status=order.status)
        try:
            updated = OrderSummaryDTO.model_validate(call())
        except REMOTE_ERRORS as exc:
            log.error("order_board.action_failed", error=str(exc))
            self._notifier.error("Erro ao atualizar pedido", str(exc))
            return ActionResult(ok=False)

        with self._lock:
            self._orders = [
                updated if existing.id == updated.id else existing
                for existing in self._orders
            ]
            self._open_order_id = None
            if (
                order.status == OrderStatus.CANCELLED
                and updated.status != OrderStatus.CANCELLED
            ):
                self._filters = replace(self._filters, status=updated.status)

        log.info("order_board.action_applied", new_status=updated.status)
        self._notifier.success(
            "Pedido atualizado",
            f"Pedido #{updated.number}: {OrderStatus(updated.status).label}.",
        )
        return ActionResult(ok=True, order=updated)


class OrderBoardPoller:
    """Refreshes an ``OrderBoard`` every *interval* seconds until stopped."""

    def __init__(self, board: OrderBoard, interval: Optional[float] = None) -> None:
        self.board = board
        self.interval = float(
            interval if interval is not None else settings.ORDER_BOARD_POLL_SECONDS
        )
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="OrderBoardPoller", daemon=True
        )
        self._thread.start()
        logger.info("order_board.poller_started", interval=self.interval)

    def stop(self, join: bool = True) -> None:
        self._stop_event.set()
        if join and self._thread is not None:
            self._thread.join()
        logger.info("order_board.poller_stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.board.refresh()
            except Exception:
                logger.exception("order_board.poll_failed")
            finally:
                close_old_connections()
