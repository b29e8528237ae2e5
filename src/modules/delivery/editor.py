"""Delivery fee editor: the admin's working session on the configuration.

The editor keeps two immutable configurations side by side:

- ``snapshot``: what was last confirmed as saved;
- ``draft``: what the admin is editing.

Edits only ever replace ``draft``.  ``save()`` is the single explicit way
to persist (there is no autosave): it is silently blocked while the draft
is incomplete, sends only the fields that differ from the snapshot, and
promotes the draft to snapshot once the service confirms the write.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

import structlog
from django.db import DatabaseError, models

from modules.delivery import rules
from modules.delivery.dtos import DeliveryFeeConfig, DistanceTier, NeighborhoodTier
from modules.delivery.exceptions import InvalidDeliveryConfig
from modules.establishments.exceptions import EstablishmentNotFound

if TYPE_CHECKING:
    from modules.delivery.services import DeliveryConfigService
    from shared.infrastructure.notifications import INotifier

logger = structlog.get_logger(__name__)


class SaveOutcome(models.TextChoices):
    SAVED = "saved", "Salvo"
    NOTHING_TO_SAVE = "nothing_to_save", "Nada para salvar"
    BLOCKED = "blocked", "Bloqueado"
    FAILED = "failed", "Falhou"


class DeliveryFeeEditor:
    """Draft/snapshot session over one establishment's delivery config."""

    def __init__(
        self,
        establishment_id: UUID | str,
        service: DeliveryConfigService,
        notifier: INotifier,
        config: DeliveryFeeConfig,
    ) -> None:
        self._establishment_id = establishment_id
        self._service = service
        self._notifier = notifier
        self._snapshot = config
        self._draft = config

    @classmethod
    def open(
        cls,
        establishment_id: UUID | str,
        service: DeliveryConfigService,
        notifier: INotifier,
    ) -> DeliveryFeeEditor:
        """Load the stored configuration once and start editing it.

        Raises:
            EstablishmentNotFound: the establishment does not exist.
        """
        config = service.get_config(establishment_id)
        logger.info("delivery_editor.opened", establishment_id=str(establishment_id))
        return cls(establishment_id, service, notifier, config)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> DeliveryFeeConfig:
        return self._snapshot

    @property
    def draft(self) -> DeliveryFeeConfig:
        return self._draft

    @property
    def can_save(self) -> bool:
        return rules.can_save(self._draft)

    def changes(self) -> Dict[str, Any]:
        return rules.diff(self._snapshot, self._draft)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes())

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def update(self, **fields: Any) -> None:
        """Set scalar fields (fees, minimum order, radius, prep range).

        Raises:
            pydantic.ValidationError: a value has the wrong shape (e.g. a
                negative amount).  The draft is left unchanged.
        """
        self._draft = DeliveryFeeConfig.model_validate(
            {**self._draft.model_dump(), **fields}
        )

    def select_modality(self, modality: Any) -> None:
        self._draft = rules.select_modality(self._draft, modality)

    def add_city(self, name: str) -> bool:
        """Add a served city; returns ``False`` when blank or duplicated."""
        cities = rules.add_city(self._draft.served_cities, name)
        if cities == self._draft.served_cities:
            return False
        self._draft = self._draft.model_copy(update={"served_cities": cities})
        return True

    def remove_city(self, name: str) -> None:
        cities = rules.remove_city(self._draft.served_cities, name)
        self._draft = self._draft.model_copy(update={"served_cities": cities})

    def add_neighborhood_tier(
        self,
        name: str,
        city: str,
        fee_amount: Decimal | int | str = Decimal("0.00"),
        min_prep_minutes: Optional[int] = None,
        max_prep_minutes: Optional[int] = None,
    ) -> Optional[NeighborhoodTier]:
        """Add a neighborhood tier; returns it, or ``None`` when rejected."""
        before = len(self._draft.neighborhood_tiers)
        self._draft = rules.add_neighborhood_tier(
            self._draft, name, city, fee_amount, min_prep_minutes, max_prep_minutes
        )
        if len(self._draft.neighborhood_tiers) == before:
            return None
        return self._draft.neighborhood_tiers[-1]

    def add_distance_tier(
        self,
        max_distance_km: Decimal | int | str,
        fee_amount: Decimal | int | str = Decimal("0.00"),
        min_prep_minutes: Optional[int] = None,
        max_prep_minutes: Optional[int] = None,
    ) -> DistanceTier:
        self._draft = rules.add_distance_tier(
            self._draft, max_distance_km, fee_amount, min_prep_minutes, max_prep_minutes
        )
        return self._draft.distance_tiers[-1]

    def toggle_neighborhood_tier(self, tier_id: str) -> None:
        tiers = rules.toggle_tier_status(self._draft.neighborhood_tiers, tier_id)
        self._draft = self._draft.model_copy(update={"neighborhood_tiers": tiers})

    def remove_neighborhood_tier(self, tier_id: str) -> None:
        tiers = rules.remove_tier(self._draft.neighborhood_tiers, tier_id)
        self._draft = self._draft.model_copy(update={"neighborhood_tiers": tiers})

    def toggle_distance_tier(self, tier_id: str) -> None:
        tiers = rules.toggle_tier_status(self._draft.distance_tiers, tier_id)
        self._draft = self._draft.model_copy(update={"distance_tiers": tiers})

    def remove_distance_tier(self, tier_id: str) -> None:
        tiers = rules.remove_tier(self._draft.distance_tiers, tier_id)
        self._draft = self._draft.model_copy(update={"distance_tiers": tiers})

    def discard(self) -> None:
        """Drop every unsaved edit."""
        self._draft = self._snapshot

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self) -> SaveOutcome:
        """Persist the changed fields of the draft.

        - Incomplete draft: ``BLOCKED``, nothing is shown or sent.
        - No changes: ``NOTHING_TO_SAVE``, informational notification only.
        - Service error: ``FAILED``, logged and notified; state unchanged.
        - Success: ``SAVED``; the draft becomes the new snapshot.
        """
        log = logger.bind(
            establishment_id=str(self._establishment_id),
            modality=self._draft.modality,
        )

        if not self.can_save:
            log.info("delivery_editor.save_blocked")
            return SaveOutcome.BLOCKED

        changes = self.changes()
        if not changes:
            self._notifier.info(
                "Nada para salvar",
                "Nenhuma alteração nas configurações de frete e entrega.",
            )
            return SaveOutcome.NOTHING_TO_SAVE

        payload = self._draft.model_dump(mode="json", include=set(changes))
        try:
            self._service.save_changes(self._establishment_id, payload)
        except (EstablishmentNotFound, InvalidDeliveryConfig, DatabaseError) as exc:
            log.error("delivery_editor.save_failed", error=str(exc))
            self._notifier.error("Erro ao salvar", str(exc))
            return SaveOutcome.FAILED

        self._snapshot = self._draft
        log.info("delivery_editor.saved", fields=sorted(changes))
        self._notifier.success(
            "Configurações atualizadas",
            "As configurações de frete e entrega foram salvas com sucesso.",
        )
        return SaveOutcome.SAVED
