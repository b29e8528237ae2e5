"""Delivery fee domain constants."""

from decimal import Decimal

from django.db import models


class DeliveryFeeModality(models.TextChoices):
    NO_FEE = "sem_taxa", "Sem taxa"
    FLAT_FEE = "taxa_unica", "Taxa única"
    DISTANCE_TIERED = "taxa_distancia", "Taxa por distância"
    NEIGHBORHOOD_TIERED = "taxa_localizacao", "Taxa por bairro"


# Modalities that honour ``delivery_radius_km``.
RADIUS_MODALITIES: set[str] = {
    DeliveryFeeModality.NO_FEE,
    DeliveryFeeModality.FLAT_FEE,
}

DEFAULT_PREP_TIME_MIN = 30
DEFAULT_PREP_TIME_MAX = 60
MAX_PREP_TIME_MINUTES = 180

MAX_DELIVERY_RADIUS_KM = Decimal("50")
