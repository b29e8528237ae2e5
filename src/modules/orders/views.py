"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Callable

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.exceptions import (
    CancellationReasonRequired,
    InvalidOrderAction,
    InvalidOrderStatus,
    ObservationRequired,
    OrderNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.serializers import (
    CancelOrderSerializer,
    OrderActionSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderStatsSerializer,
    ReactivateOrderSerializer,
    UpdateOrderStatusSerializer,
)
from modules.orders.services import OrderService
from modules.orders.stats import compute_stats


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with an injected repository (DIP).
    Does **not** extend ``ModelViewSet``: every status change goes through
    the service so the state machine and the history stay consistent.
    """

    queryset = Order.objects.all()
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total", "status", "number"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(order_repository=OrderDjangoRepository())

    def get_queryset(self):
        return Order.objects.select_related("establishment")

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, delivery type, payment method, establishment,
        date range, search) is handled by ``OrderFilter``.  Results are
        paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/ with history and available actions."""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(self._detail(order))

    @action(detail=False, methods=["get"])
    def stats(self, request: Request) -> Response:
        """GET /api/v1/orders/stats/ (accepts the list filters)."""
        queryset = self.filter_queryset(self.get_queryset())
        out = OrderStatsSerializer(compute_stats(queryset).model_dump())
        return Response(out.data)

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="actions")
    def execute_action(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/actions/ ``{action, observation}``"""
        serializer = OrderActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return self._apply(
            lambda: self._service.execute_action(
                pk, data["action"], data["observation"], actor=request.user
            )
        )

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/ ``{reason}``"""
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reason = serializer.validated_data["reason"]
        return self._apply(
            lambda: self._service.cancel(pk, reason, actor=request.user)
        )

    @action(detail=True, methods=["post"])
    def reactivate(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/reactivate/ ``{observation}``"""
        serializer = ReactivateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        observation = serializer.validated_data["observation"]
        return self._apply(
            lambda: self._service.reactivate(pk, observation, actor=request.user)
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/ ``{status, observation}``

        Manual status change.  Cancellations are **not** allowed via this
        endpoint; use ``POST /orders/{id}/cancel/`` instead.
        """
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return self._apply(
            lambda: self._service.update_status(
                pk, data["status"], data["observation"], actor=request.user
            )
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply(self, command: Callable[[], Order]) -> Response:
        try:
            order = command()
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except (ObservationRequired, CancellationReasonRequired) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except (InvalidOrderAction, InvalidOrderStatus) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(self._detail(self._service.get_order(order.id)))

    def _detail(self, order: Order) -> dict:
        data = dict(OrderSerializer(order).data)
        data["available_actions"] = {
            str(name): str(target)
            for name, target in self._service.available_actions(order).items()
        }
        return data
