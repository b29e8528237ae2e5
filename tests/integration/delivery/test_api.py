"""Integration tests for the delivery configuration and quote endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.establishments.models import Establishment

pytestmark = pytest.mark.integration


def config_url(establishment_id):
    return f"/api/v1/establishments/{establishment_id}/delivery-config/"


def quote_url(establishment_id):
    return f"/api/v1/establishments/{establishment_id}/delivery-quote/"


@pytest.fixture()
def configured(establishment):
    establishment.delivery_config = {
        "modality": "taxa_localizacao",
        "served_cities": ["Campinas"],
        "neighborhood_tiers": [
            {
                "id": "centro",
                "name": "Centro",
                "city": "Campinas",
                "fee_amount": "5.00",
                "min_prep_minutes": 20,
                "max_prep_minutes": 40,
                "enabled": True,
            }
        ],
        "minimum_order_value": "25.00",
    }
    establishment.save()
    return establishment


class TestRetrieveConfig:
    def test_requires_authentication(self, api_client, establishment):
        assert api_client.get(config_url(establishment.id)).status_code == 401

    def test_defaults_for_new_establishment(self, auth_client, establishment):
        response = auth_client.get(config_url(establishment.id))

        assert response.status_code == 200
        assert response.data["modality"] == "taxa_unica"
        assert response.data["flat_fee_amount"] == "0.00"
        assert response.data["prep_time_min"] == 30

    def test_unknown_establishment(self, auth_client):
        assert auth_client.get(config_url(uuid4())).status_code == 404


class TestPartialUpdate:
    def test_saves_changed_fields_only(self, auth_client, configured):
        response = auth_client.patch(
            config_url(configured.id), {"default_fee_other_neighborhoods": "9.00"}, format="json"
        )

        assert response.status_code == 200
        stored = Establishment.objects.get(id=configured.id).delivery_config
        assert stored["default_fee_other_neighborhoods"] == "9.00"
        assert stored["modality"] == "taxa_localizacao"
        assert stored["neighborhood_tiers"][0]["name"] == "Centro"

    def test_rejects_unsavable_modality(self, auth_client, establishment):
        response = auth_client.patch(
            config_url(establishment.id), {"modality": "taxa_distancia"}, format="json"
        )

        assert response.status_code == 400
        assert Establishment.objects.get(id=establishment.id).delivery_config == {}

    def test_rejects_malformed_value(self, auth_client, establishment):
        response = auth_client.patch(
            config_url(establishment.id), {"flat_fee_amount": "-2"}, format="json"
        )
        assert response.status_code == 400

    def test_rejects_duplicated_cities(self, auth_client, configured):
        response = auth_client.patch(
            config_url(configured.id),
            {"served_cities": ["Campinas", "Campinas", "  Valinhos  "]},
            format="json",
        )

        assert response.status_code == 400
        stored = Establishment.objects.get(id=configured.id).delivery_config
        assert stored["served_cities"] == ["Campinas"]

    def test_trims_city_names(self, auth_client, configured):
        response = auth_client.patch(
            config_url(configured.id),
            {"served_cities": ["Campinas", "  Valinhos  "]},
            format="json",
        )

        assert response.status_code == 200
        stored = Establishment.objects.get(id=configured.id).delivery_config
        assert stored["served_cities"] == ["Campinas", "Valinhos"]

    def test_rejects_blank_tier_name(self, auth_client, configured):
        tier = {**configured.delivery_config["neighborhood_tiers"][0], "name": "   "}
        response = auth_client.patch(
            config_url(configured.id), {"neighborhood_tiers": [tier]}, format="json"
        )
        assert response.status_code == 400

    def test_rejects_non_object_body(self, auth_client, establishment):
        response = auth_client.patch(config_url(establishment.id), [1, 2], format="json")
        assert response.status_code == 400

    def test_unknown_establishment(self, auth_client):
        response = auth_client.patch(
            config_url(uuid4()), {"flat_fee_amount": "5.00"}, format="json"
        )
        assert response.status_code == 404


class TestQuote:
    def test_quote_by_neighborhood(self, auth_client, configured):
        response = auth_client.get(
            quote_url(configured.id),
            {"neighborhood": "centro", "city": "Campinas", "subtotal": "30.00"},
        )

        assert response.status_code == 200
        assert response.data["available"] is True
        assert response.data["fee"] == "5.00"
        assert response.data["min_minutes"] == 20
        assert response.data["meets_minimum_order"] is True

    def test_unserved_neighborhood(self, auth_client, configured):
        response = auth_client.get(quote_url(configured.id), {"neighborhood": "Taquaral"})

        assert response.data["available"] is False
        assert response.data["reason"]
        assert response.data["meets_minimum_order"] is None

    def test_quote_by_distance_with_flat_fee(self, auth_client, establishment):
        establishment.delivery_config = {
            "flat_fee_amount": "6.00",
            "delivery_radius_km": "5",
        }
        establishment.save()

        inside = auth_client.get(quote_url(establishment.id), {"distance_km": "3"})
        outside = auth_client.get(quote_url(establishment.id), {"distance_km": "8"})

        assert inside.data["available"] is True
        assert inside.data["fee"] == "6.00"
        assert outside.data["available"] is False

    def test_requires_exactly_one_destination(self, auth_client, establishment):
        assert auth_client.get(quote_url(establishment.id)).status_code == 400
        response = auth_client.get(
            quote_url(establishment.id), {"distance_km": "1", "neighborhood": "Centro"}
        )
        assert response.status_code == 400

    def test_unknown_establishment(self, auth_client):
        response = auth_client.get(quote_url(uuid4()), {"distance_km": "1"})
        assert response.status_code == 404
