"""Delivery API views.

Exposes ``DeliveryConfigService`` and the quote functions via HTTP.
Domain exceptions are translated into HTTP status codes here; the view
never swallows generic exceptions.
"""

from __future__ import annotations

from uuid import UUID

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.delivery import quotes
from modules.delivery.exceptions import InvalidDeliveryConfig
from modules.delivery.serializers import (
    DeliveryConfigChangesSerializer,
    DeliveryQuoteQuerySerializer,
    DeliveryQuoteSerializer,
)
from modules.delivery.services import DeliveryConfigService
from modules.establishments.exceptions import EstablishmentNotFound
from modules.establishments.repositories import EstablishmentDjangoRepository


class DeliveryConfigViewSet(ViewSet):
    """Delivery configuration of one establishment.

    Uses ``DeliveryConfigService`` with an injected repository (DIP).
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = DeliveryConfigService(
            establishment_repository=EstablishmentDjangoRepository(),
        )

    def retrieve(self, request: Request, establishment_id: UUID) -> Response:
        """GET /api/v1/establishments/{id}/delivery-config/"""
        try:
            config = self._service.get_config(establishment_id)
        except EstablishmentNotFound:
            return Response(
                {"detail": "Establishment not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(config.to_document())

    def partial_update(self, request: Request, establishment_id: UUID) -> Response:
        """PATCH /api/v1/establishments/{id}/delivery-config/

        The body holds only the changed top-level fields.  Fields that are
        absent keep their stored value.
        """
        serializer = DeliveryConfigChangesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            config = self._service.save_changes(
                establishment_id, serializer.validated_data
            )
        except EstablishmentNotFound:
            return Response(
                {"detail": "Establishment not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InvalidDeliveryConfig as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(config.to_document())

    def quote(self, request: Request, establishment_id: UUID) -> Response:
        """GET /api/v1/establishments/{id}/delivery-quote/

        Query: ``distance_km`` or ``neighborhood`` (+ optional ``city``),
        and an optional ``subtotal`` to check the minimum order value.
        """
        query = DeliveryQuoteQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        try:
            config = self._service.get_config(establishment_id)
        except EstablishmentNotFound:
            return Response(
                {"detail": "Establishment not found."},
                status=status.HTTP_404_NOT_FOUND,
            )

        if "distance_km" in params:
            quote = quotes.quote_by_distance(config, params["distance_km"])
        else:
            quote = quotes.quote_by_neighborhood(
                config, params["neighborhood"], params.get("city") or None
            )

        meets_minimum = None
        if "subtotal" in params:
            meets_minimum = quotes.meets_minimum_order(config, params["subtotal"])

        out = DeliveryQuoteSerializer(
            {**quote.model_dump(), "meets_minimum_order": meets_minimum}
        )
        return Response(out.data)
