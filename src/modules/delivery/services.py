"""Delivery configuration service layer (Use Cases).

Reads and persists the delivery fee configuration stored on an
establishment.  Saves are partial: callers send only the fields that
changed, and the service merges them into the stored document under a row
lock, so concurrent admins overwrite each other field by field
(last write wins) instead of document by document.

Business rules enforced on every save:
- The active modality must be complete (``rules.can_save_modality``).
- The global prep-time range must be consistent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping
from uuid import UUID

import structlog
from django.db import transaction
from pydantic import ValidationError

from modules.delivery import rules
from modules.delivery.dtos import DeliveryFeeConfig
from modules.delivery.events import DeliveryConfigUpdated
from modules.delivery.exceptions import InvalidDeliveryConfig
from modules.establishments.exceptions import EstablishmentNotFound
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.establishments.repositories.interfaces import (
        IEstablishmentRepository,
    )

logger = structlog.get_logger(__name__)


class DeliveryConfigService:
    """Application service for delivery configuration use-cases.

    Receives the establishment repository via constructor injection (DIP).
    """

    def __init__(self, establishment_repository: IEstablishmentRepository) -> None:
        self._establishment_repo = establishment_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_config(self, establishment_id: UUID | str) -> DeliveryFeeConfig:
        """Return the stored configuration (defaults when none was saved).

        Raises:
            EstablishmentNotFound: the establishment does not exist.
        """
        establishment = self._establishment_repo.get_by_id(str(establishment_id))
        if not establishment:
            raise EstablishmentNotFound(f"Establishment {establishment_id} not found.")
        return DeliveryFeeConfig.from_document(establishment.delivery_config)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def save_changes(
        self, establishment_id: UUID | str, changes: Mapping[str, Any]
    ) -> DeliveryFeeConfig:
        """Merge *changes* into the stored configuration and persist it.

        *changes* maps top-level ``DeliveryFeeConfig`` field names to
        JSON-compatible values.  An empty mapping performs no write.

        Raises:
            EstablishmentNotFound: the establishment does not exist.
            InvalidDeliveryConfig: unknown fields, malformed values, or a
                merged configuration that cannot be saved.
        """
        log = logger.bind(
            establishment_id=str(establishment_id), fields=sorted(changes)
        )

        unknown = set(changes) - set(DeliveryFeeConfig.model_fields)
        if unknown:
            raise InvalidDeliveryConfig(f"Unknown fields: {', '.join(sorted(unknown))}.")

        establishment = self._establishment_repo.get_for_update(str(establishment_id))
        if not establishment:
            raise EstablishmentNotFound(f"Establishment {establishment_id} not found.")

        current = DeliveryFeeConfig.from_document(establishment.delivery_config)
        if not changes:
            log.info("delivery_config.nothing_to_save")
            return current

        try:
            merged = DeliveryFeeConfig.model_validate(
                {**current.to_document(), **changes}
            )
        except ValidationError as exc:
            log.warning("delivery_config.invalid_payload", errors=exc.error_count())
            raise InvalidDeliveryConfig(str(exc)) from exc

        if not rules.can_save_modality(merged.modality, merged):
            log.warning("delivery_config.incomplete_modality", modality=merged.modality)
            raise InvalidDeliveryConfig(
                f"Modality {merged.modality} is missing required settings."
            )
        if not rules.is_prep_time_range_valid(merged):
            log.warning("delivery_config.invalid_prep_range")
            raise InvalidDeliveryConfig(
                "Preparation time range must be positive with max >= min."
            )

        self._establishment_repo.update_delivery_config(
            establishment, merged.to_document()
        )
        log.info("delivery_config.saved", modality=merged.modality)

        event = DeliveryConfigUpdated(
            aggregate_id=establishment.id, changed_fields=tuple(sorted(changes))
        )
        transaction.on_commit(lambda: event_bus.publish(event))
        return merged
