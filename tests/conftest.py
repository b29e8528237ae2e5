from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.establishments.models import Establishment
from modules.orders.constants import DeliveryType, OrderStatus, PaymentMethod
from modules.orders.models import Order


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def user():
    return get_user_model().objects.create_user(
        username="admin-painel", password="testpass123"
    )


@pytest.fixture()
def auth_client(user):
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def establishment():
    return Establishment.objects.create(name="Pizzaria Central", slug="pizzaria-central")


@pytest.fixture()
def make_order(establishment):
    """Factory creating persisted orders (delivery, pendente by default)."""

    def _make(**overrides):
        data = {
            "establishment": establishment,
            "status": OrderStatus.PENDING,
            "delivery_type": DeliveryType.DELIVERY,
            "payment_method": PaymentMethod.PIX,
            "customer_name": "Maria Souza",
            "customer_phone": "(11) 98765-4321",
            "neighborhood": "Centro",
            "city": "Campinas",
            "subtotal": Decimal("50.00"),
            "delivery_fee": Decimal("7.00"),
            "total": Decimal("57.00"),
        }
        data.update(overrides)
        return Order.objects.create(**data)

    return _make
