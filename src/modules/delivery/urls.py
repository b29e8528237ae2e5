"""Delivery URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.delivery.views import DeliveryConfigViewSet

delivery_config = DeliveryConfigViewSet.as_view(
    {"get": "retrieve", "patch": "partial_update"}
)
delivery_quote = DeliveryConfigViewSet.as_view({"get": "quote"})

urlpatterns = [
    path(
        "establishments/<uuid:establishment_id>/delivery-config/",
        delivery_config,
        name="delivery-config",
    ),
    path(
        "establishments/<uuid:establishment_id>/delivery-quote/",
        delivery_quote,
        name="delivery-quote",
    ),
]
