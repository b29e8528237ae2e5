"""Delivery quotes: price a delivery to one destination.

Given a saved ``DeliveryFeeConfig``, resolve the fee and the time window for
a destination expressed either as a distance (km) or as a neighborhood.
Unavailable destinations produce a quote with ``available=False`` and a
human-readable ``reason``; nothing here raises for a business outcome.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from modules.delivery.constants import RADIUS_MODALITIES, DeliveryFeeModality
from modules.delivery.dtos import DeliveryFeeConfig, DeliveryQuote

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0.00")


def quote_by_distance(config: DeliveryFeeConfig, distance_km: Number) -> DeliveryQuote:
    """Quote a delivery *distance_km* away from the establishment.

    Raises:
        ValueError: *distance_km* is negative or not a number.
    """
    try:
        distance = Decimal(str(distance_km))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid distance: {distance_km!r}.") from exc
    if distance.is_nan() or distance < 0:
        raise ValueError(f"Invalid distance: {distance_km!r}.")

    modality = config.modality

    if modality in RADIUS_MODALITIES:
        radius = config.delivery_radius_km
        if radius > 0 and distance > radius:
            return _unavailable(
                f"Fora da área de entrega ({distance}km > {radius}km)"
            )
        return _global(config, _base_fee(config))

    if modality == DeliveryFeeModality.DISTANCE_TIERED:
        tiers = sorted(
            (tier for tier in config.distance_tiers if tier.enabled),
            key=lambda tier: tier.max_distance_km,
        )
        for tier in tiers:
            if distance <= tier.max_distance_km:
                return DeliveryQuote(
                    available=True,
                    fee=tier.fee_amount,
                    min_minutes=tier.min_prep_minutes,
                    max_minutes=tier.max_prep_minutes,
                )
        return _unavailable(f"Nenhuma faixa de distância configurada para {distance}km")

    # Neighborhood pricing cannot be resolved from a distance alone.
    return _global(config, config.flat_fee_amount)


def quote_by_neighborhood(
    config: DeliveryFeeConfig,
    neighborhood: str,
    city: Optional[str] = None,
) -> DeliveryQuote:
    """Quote a delivery to *neighborhood* (optionally restricted to *city*).

    Neighborhood and city names match case-insensitively.  When no enabled
    tier matches, ``default_fee_other_neighborhoods`` applies if positive;
    a zero default blocks delivery outside the configured list.
    """
    modality = config.modality

    if modality == DeliveryFeeModality.DISTANCE_TIERED:
        return _unavailable("Informe a distância para calcular a taxa de entrega")
    if modality != DeliveryFeeModality.NEIGHBORHOOD_TIERED:
        return _global(config, _base_fee(config))

    wanted = (neighborhood or "").strip().casefold()
    if not wanted:
        return _unavailable("Bairro não informado")

    wanted_city = (city or "").strip().casefold()
    if wanted_city and wanted_city not in {c.casefold() for c in config.served_cities}:
        return _unavailable(f'Cidade "{city}" não atendida')

    for tier in config.neighborhood_tiers:
        if not tier.enabled or tier.name.casefold() != wanted:
            continue
        if wanted_city and tier.city.casefold() != wanted_city:
            continue
        return DeliveryQuote(
            available=True,
            fee=tier.fee_amount,
            min_minutes=tier.min_prep_minutes,
            max_minutes=tier.max_prep_minutes,
        )

    if config.default_fee_other_neighborhoods > 0:
        return _global(config, config.default_fee_other_neighborhoods)
    return _unavailable(f'Bairro "{neighborhood}" não atendido')


def meets_minimum_order(config: DeliveryFeeConfig, subtotal: Number) -> bool:
    """Whether *subtotal* reaches the minimum order value (0 = no minimum)."""
    minimum = config.minimum_order_value
    return minimum <= 0 or Decimal(str(subtotal)) >= minimum


def _base_fee(config: DeliveryFeeConfig) -> Decimal:
    if config.modality == DeliveryFeeModality.NO_FEE:
        return ZERO
    return config.flat_fee_amount


def _global(config: DeliveryFeeConfig, fee: Decimal) -> DeliveryQuote:
    return DeliveryQuote(
        available=True,
        fee=fee,
        min_minutes=config.prep_time_min,
        max_minutes=config.prep_time_max,
    )


def _unavailable(reason: str) -> DeliveryQuote:
    return DeliveryQuote(available=False, reason=reason)
