"""Delivery fee DTOs.

Framework-agnostic, immutable (``frozen=True``) Pydantic v2 models:

- ``DistanceTier`` / ``NeighborhoodTier``: one fee rule of a tiered
  modality.
- ``DeliveryFeeConfig``: the whole delivery configuration of an
  establishment.  Editors keep two instances (last-saved snapshot and
  working draft); every edit produces a new instance.
- ``DeliveryQuote``: fee and time estimate for a single destination.

Field constraints cover input shape only (non-negative amounts, bounded
minutes).  Business completeness (e.g. "flat fee must be positive") is
checked by the predicates in ``modules.delivery.rules`` so that a draft can
hold an incomplete state while the admin is still editing it.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.delivery.constants import (
    DEFAULT_PREP_TIME_MAX,
    DEFAULT_PREP_TIME_MIN,
    MAX_DELIVERY_RADIUS_KM,
    MAX_PREP_TIME_MINUTES,
    DeliveryFeeModality,
)

# ---------------------------------------------------------------------------
# Tiers
# ---------------------------------------------------------------------------


class _Tier(BaseModel):
    """Settings shared by both tier kinds."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @model_validator(mode="after")
    def prep_range_must_be_ordered(self) -> _Tier:
        if self.max_prep_minutes < self.min_prep_minutes:
            raise ValueError("max_prep_minutes must be >= min_prep_minutes.")
        return self


class DistanceTier(_Tier):
    """Fee charged up to ``max_distance_km`` from the establishment."""

    id: str
    max_distance_km: Decimal = Field(ge=0)
    fee_amount: Decimal = Field(ge=0)
    min_prep_minutes: int = Field(ge=0, le=MAX_PREP_TIME_MINUTES)
    max_prep_minutes: int = Field(ge=0, le=MAX_PREP_TIME_MINUTES)
    enabled: bool = True


class NeighborhoodTier(_Tier):
    """Fee charged for one neighborhood of a served city."""

    id: str
    name: str = Field(min_length=1)
    city: str = Field(min_length=1)
    fee_amount: Decimal = Field(ge=0)
    min_prep_minutes: int = Field(ge=0, le=MAX_PREP_TIME_MINUTES)
    max_prep_minutes: int = Field(ge=0, le=MAX_PREP_TIME_MINUTES)
    enabled: bool = True


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class DeliveryFeeConfig(BaseModel):
    """Delivery configuration of one establishment.

    Exactly one ``modality`` is active.  Data belonging to the other
    modalities is kept untouched so the admin can switch back to it.
    ``served_cities`` is an ordered set: insertion order is preserved and
    names are trimmed and duplicates are rejected.
    """

    model_config = ConfigDict(frozen=True)

    modality: DeliveryFeeModality = DeliveryFeeModality.FLAT_FEE
    flat_fee_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    minimum_order_value: Decimal = Field(default=Decimal("0.00"), ge=0)
    served_cities: Tuple[str, ...] = ()
    distance_tiers: Tuple[DistanceTier, ...] = ()
    neighborhood_tiers: Tuple[NeighborhoodTier, ...] = ()
    default_fee_other_neighborhoods: Decimal = Field(default=Decimal("0.00"), ge=0)
    delivery_radius_km: Decimal = Field(
        default=Decimal("0"), ge=0, le=MAX_DELIVERY_RADIUS_KM
    )
    prep_time_min: int = Field(
        default=DEFAULT_PREP_TIME_MIN, ge=0, le=MAX_PREP_TIME_MINUTES
    )
    prep_time_max: int = Field(
        default=DEFAULT_PREP_TIME_MAX, ge=0, le=MAX_PREP_TIME_MINUTES
    )

    @field_validator("served_cities")
    @classmethod
    def cities_must_be_an_ordered_set(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        cities = tuple(city.strip() for city in v)
        if any(not city for city in cities):
            raise ValueError("City names must not be blank.")
        if len(set(cities)) != len(cities):
            raise ValueError("City names must be unique.")
        return cities

    @classmethod
    def from_document(cls, document: Optional[Mapping[str, Any]]) -> DeliveryFeeConfig:
        """Build a config from the JSON document stored on the establishment."""
        return cls.model_validate(dict(document or {}))

    def to_document(self) -> Dict[str, Any]:
        """JSON-compatible representation (decimals as strings)."""
        return self.model_dump(mode="json")


class DeliveryQuote(BaseModel):
    """Result of pricing a delivery to one destination."""

    model_config = ConfigDict(frozen=True)

    available: bool
    fee: Decimal = Decimal("0.00")
    min_minutes: int = 0
    max_minutes: int = 0
    reason: Optional[str] = None
