"""Unit tests for the delivery fee save-gating predicates and draft edits."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.delivery import rules
from modules.delivery.constants import DeliveryFeeModality
from modules.delivery.dtos import DeliveryFeeConfig

pytestmark = pytest.mark.unit


@pytest.fixture()
def draft():
    return DeliveryFeeConfig()


# ---------------------------------------------------------------------------
# can_save_modality
# ---------------------------------------------------------------------------


class TestCanSaveModality:
    def test_no_fee_always_savable(self, draft):
        assert rules.can_save_modality(DeliveryFeeModality.NO_FEE, draft) is True

    def test_flat_fee_requires_positive_amount(self, draft):
        assert rules.can_save_modality(DeliveryFeeModality.FLAT_FEE, draft) is False
        draft = draft.model_copy(update={"flat_fee_amount": Decimal("5.00")})
        assert rules.can_save_modality(DeliveryFeeModality.FLAT_FEE, draft) is True

    def test_distance_requires_enabled_tier(self, draft):
        modality = DeliveryFeeModality.DISTANCE_TIERED
        assert rules.can_save_modality(modality, draft) is False

        draft = rules.add_distance_tier(draft, "3", "5.00")
        assert rules.can_save_modality(modality, draft) is True

        tier_id = draft.distance_tiers[0].id
        disabled = draft.model_copy(
            update={"distance_tiers": rules.toggle_tier_status(draft.distance_tiers, tier_id)}
        )
        assert rules.can_save_modality(modality, disabled) is False

    def test_neighborhood_scenario(self, draft):
        modality = DeliveryFeeModality.NEIGHBORHOOD_TIERED
        draft = rules.select_modality(draft, modality)
        assert rules.can_save_modality(modality, draft) is False

        draft = draft.model_copy(
            update={"served_cities": rules.add_city(draft.served_cities, "Centro")}
        )
        assert rules.can_save_modality(modality, draft) is False

        draft = rules.add_neighborhood_tier(draft, "Centro", "Centro", "5.00")
        assert rules.can_save_modality(modality, draft) is True

    def test_neighborhood_requires_served_city(self, draft):
        draft = rules.add_neighborhood_tier(draft, "Centro", "Campinas", "5.00")
        assert (
            rules.can_save_modality(DeliveryFeeModality.NEIGHBORHOOD_TIERED, draft)
            is False
        )

    def test_unknown_modality_not_savable(self, draft):
        assert rules.can_save_modality("taxa_misteriosa", draft) is False


class TestCanSave:
    def test_combines_modality_and_prep_range(self):
        draft = DeliveryFeeConfig(flat_fee_amount=Decimal("4.00"))
        assert rules.can_save(draft) is True

        inverted = draft.model_copy(update={"prep_time_min": 50, "prep_time_max": 40})
        assert rules.can_save(inverted) is False

    def test_zero_prep_time_invalid(self):
        draft = DeliveryFeeConfig(modality=DeliveryFeeModality.NO_FEE, prep_time_min=0)
        assert rules.is_prep_time_range_valid(draft) is False


# ---------------------------------------------------------------------------
# diff
# ---------------------------------------------------------------------------


class TestDiff:
    def test_identical_configs_have_no_changes(self, draft):
        assert rules.diff(draft, draft) == {}
        assert rules.diff(draft, DeliveryFeeConfig()) == {}

    def test_single_field_change(self, draft):
        changed = draft.model_copy(update={"flat_fee_amount": Decimal("8.50")})
        assert rules.diff(draft, changed) == {"flat_fee_amount": Decimal("8.50")}

    def test_tier_lists_compare_structurally(self, draft):
        with_tier = rules.add_distance_tier(draft, "2", "3.00")
        copy = DeliveryFeeConfig.model_validate(with_tier.model_dump())
        assert rules.diff(with_tier, copy) == {}

    def test_toggling_tier_changes_only_tier_field(self, draft):
        snapshot = rules.add_neighborhood_tier(draft, "Centro", "Campinas")
        tier_id = snapshot.neighborhood_tiers[0].id
        edited = snapshot.model_copy(
            update={
                "neighborhood_tiers": rules.toggle_tier_status(
                    snapshot.neighborhood_tiers, tier_id
                )
            }
        )
        assert list(rules.diff(snapshot, edited)) == ["neighborhood_tiers"]


# ---------------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------------


class TestCities:
    def test_add_city_trims(self):
        assert rules.add_city((), "  Campinas ") == ("Campinas",)

    def test_add_city_rejects_blank(self):
        assert rules.add_city(("Campinas",), "   ") == ("Campinas",)

    def test_add_city_is_idempotent(self):
        once = rules.add_city((), "Campinas")
        twice = rules.add_city(once, "Campinas")
        assert once == twice == ("Campinas",)

    def test_add_city_preserves_order(self):
        cities = rules.add_city(rules.add_city((), "Sumaré"), "Campinas")
        assert cities == ("Sumaré", "Campinas")

    def test_remove_city(self):
        assert rules.remove_city(("Sumaré", "Campinas"), "Sumaré") == ("Campinas",)


class TestTiers:
    def test_add_neighborhood_tier_defaults(self):
        draft = DeliveryFeeConfig(prep_time_min=20, prep_time_max=45)
        result = rules.add_neighborhood_tier(draft, "Cambuí", "Campinas", "6.00")

        tier = result.neighborhood_tiers[0]
        assert tier.enabled is True
        assert tier.fee_amount == Decimal("6.00")
        assert (tier.min_prep_minutes, tier.max_prep_minutes) == (20, 45)
        assert tier.id

    @pytest.mark.parametrize("name,city", [("", "Campinas"), ("Cambuí", "  ")])
    def test_add_neighborhood_tier_blank_is_noop(self, draft, name, city):
        assert rules.add_neighborhood_tier(draft, name, city) == draft

    def test_tier_ids_are_unique(self, draft):
        draft = rules.add_neighborhood_tier(draft, "A", "Campinas")
        draft = rules.add_neighborhood_tier(draft, "B", "Campinas")
        ids = {tier.id for tier in draft.neighborhood_tiers}
        assert len(ids) == 2

    def test_toggle_flips_only_target(self, draft):
        draft = rules.add_neighborhood_tier(draft, "A", "Campinas")
        draft = rules.add_neighborhood_tier(draft, "B", "Campinas")
        first, second = draft.neighborhood_tiers

        toggled = rules.toggle_tier_status(draft.neighborhood_tiers, first.id)
        assert toggled[0].enabled is False
        assert toggled[1] == second

    def test_remove_tier(self, draft):
        draft = rules.add_distance_tier(draft, "2", "3.00")
        tier_id = draft.distance_tiers[0].id
        assert rules.remove_tier(draft.distance_tiers, tier_id) == ()

    def test_select_modality_keeps_other_data(self, draft):
        draft = rules.add_distance_tier(draft, "2", "3.00")
        switched = rules.select_modality(draft, "sem_taxa")
        assert switched.modality == DeliveryFeeModality.NO_FEE
        assert switched.distance_tiers == draft.distance_tiers
        assert list(rules.diff(draft, switched)) == ["modality"]
