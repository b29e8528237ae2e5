"""Delivery fee rules: save-gating predicates and draft edit operations.

Everything here is pure: functions take immutable ``DeliveryFeeConfig`` /
tier tuples and return new values.  Predicates never raise for a business
failure; they return ``False`` and the caller keeps the "Save" action
disabled.  Edit operations that receive unusable input (blank city, blank
tier name, duplicate city) return their input unchanged.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence, Tuple, TypeVar, Union
from uuid import uuid4

from modules.delivery.constants import DeliveryFeeModality
from modules.delivery.dtos import DeliveryFeeConfig, DistanceTier, NeighborhoodTier

TierT = TypeVar("TierT", DistanceTier, NeighborhoodTier)

Amount = Union[Decimal, int, str]


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def count_enabled(tiers: Sequence[Union[DistanceTier, NeighborhoodTier]]) -> int:
    return sum(1 for tier in tiers if tier.enabled)


def can_save_modality(modality: Any, draft: DeliveryFeeConfig) -> bool:
    """Return whether *draft* holds everything *modality* needs to be saved.

    - ``sem_taxa``: always savable.
    - ``taxa_unica``: flat fee must be positive.
    - ``taxa_distancia``: at least one enabled distance tier.
    - ``taxa_localizacao``: at least one enabled neighborhood tier and at
      least one served city.
    - anything else: not savable.
    """
    try:
        modality = DeliveryFeeModality(modality)
    except ValueError:
        return False

    if modality == DeliveryFeeModality.NO_FEE:
        return True
    if modality == DeliveryFeeModality.FLAT_FEE:
        return draft.flat_fee_amount > 0
    if modality == DeliveryFeeModality.DISTANCE_TIERED:
        return count_enabled(draft.distance_tiers) > 0
    if modality == DeliveryFeeModality.NEIGHBORHOOD_TIERED:
        return (
            count_enabled(draft.neighborhood_tiers) > 0
            and len(draft.served_cities) > 0
        )
    return False


def is_prep_time_range_valid(draft: DeliveryFeeConfig) -> bool:
    return (
        draft.prep_time_min > 0
        and draft.prep_time_max > 0
        and draft.prep_time_max >= draft.prep_time_min
    )


def can_save(draft: DeliveryFeeConfig) -> bool:
    """Full save gate: active modality complete and prep range consistent."""
    return can_save_modality(draft.modality, draft) and is_prep_time_range_valid(
        draft
    )


# ---------------------------------------------------------------------------
# Draft / snapshot diff
# ---------------------------------------------------------------------------


def diff(snapshot: DeliveryFeeConfig, draft: DeliveryFeeConfig) -> Dict[str, Any]:
    """Top-level fields of *draft* that differ from *snapshot*.

    Tuples of tiers compare structurally, so re-creating an identical tier
    list does not count as a change.  An empty dict means nothing to save.
    """
    changes: Dict[str, Any] = {}
    for name in DeliveryFeeConfig.model_fields:
        value = getattr(draft, name)
        if value != getattr(snapshot, name):
            changes[name] = value
    return changes


# ---------------------------------------------------------------------------
# Draft edits
# ---------------------------------------------------------------------------


def select_modality(draft: DeliveryFeeConfig, modality: Any) -> DeliveryFeeConfig:
    """Switch the active modality; other modalities' data is preserved."""
    return draft.model_copy(update={"modality": DeliveryFeeModality(modality)})


def add_city(cities: Sequence[str], name: str) -> Tuple[str, ...]:
    """Append a trimmed city name unless it is blank or already present."""
    city = (name or "").strip()
    if not city or city in cities:
        return tuple(cities)
    return (*cities, city)


def remove_city(cities: Sequence[str], name: str) -> Tuple[str, ...]:
    return tuple(city for city in cities if city != name)


def add_neighborhood_tier(
    draft: DeliveryFeeConfig,
    name: str,
    city: str,
    fee_amount: Amount = Decimal("0.00"),
    min_prep_minutes: Optional[int] = None,
    max_prep_minutes: Optional[int] = None,
) -> DeliveryFeeConfig:
    """Append an enabled neighborhood tier.

    No-op when *name* or *city* is blank.  The prep range defaults to the
    draft's global range.

    Raises:
        pydantic.ValidationError: negative amounts or an inverted prep range.
    """
    name = (name or "").strip()
    city = (city or "").strip()
    if not name or not city:
        return draft

    tier = NeighborhoodTier(
        id=_new_tier_id(),
        name=name,
        city=city,
        fee_amount=fee_amount,
        min_prep_minutes=_default(min_prep_minutes, draft.prep_time_min),
        max_prep_minutes=_default(max_prep_minutes, draft.prep_time_max),
        enabled=True,
    )
    return draft.model_copy(
        update={"neighborhood_tiers": (*draft.neighborhood_tiers, tier)}
    )


def add_distance_tier(
    draft: DeliveryFeeConfig,
    max_distance_km: Amount,
    fee_amount: Amount = Decimal("0.00"),
    min_prep_minutes: Optional[int] = None,
    max_prep_minutes: Optional[int] = None,
) -> DeliveryFeeConfig:
    """Append an enabled distance tier with the global prep range as default."""
    tier = DistanceTier(
        id=_new_tier_id(),
        max_distance_km=max_distance_km,
        fee_amount=fee_amount,
        min_prep_minutes=_default(min_prep_minutes, draft.prep_time_min),
        max_prep_minutes=_default(max_prep_minutes, draft.prep_time_max),
        enabled=True,
    )
    return draft.model_copy(update={"distance_tiers": (*draft.distance_tiers, tier)})


def toggle_tier_status(tiers: Sequence[TierT], tier_id: str) -> Tuple[TierT, ...]:
    """Flip ``enabled`` on the tier with *tier_id*; nothing else changes."""
    return tuple(
        tier.model_copy(update={"enabled": not tier.enabled})
        if tier.id == tier_id
        else tier
        for tier in tiers
    )


def remove_tier(tiers: Sequence[TierT], tier_id: str) -> Tuple[TierT, ...]:
    return tuple(tier for tier in tiers if tier.id != tier_id)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _new_tier_id() -> str:
    # Presentation-layer identifier only; never used as a persistence key.
    return uuid4().hex


def _default(value: Optional[int], fallback: int) -> int:
    return fallback if value is None else value
