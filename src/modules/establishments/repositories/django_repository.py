"""Django ORM implementation of the Establishment repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.establishments.models import Establishment
from modules.establishments.repositories.interfaces import IEstablishmentRepository

logger = structlog.get_logger(__name__)


class EstablishmentDjangoRepository(IEstablishmentRepository):
    """Concrete Establishment repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Establishment]:
        """Return the establishment or ``None`` for unknown / malformed IDs."""
        try:
            return Establishment.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Establishment]:
        """Lock the establishment row (``SELECT FOR UPDATE``).

        Must be called inside ``transaction.atomic``.
        """
        try:
            return Establishment.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def save(self, entity: Establishment) -> Establishment:
        entity.save()
        logger.info("establishment.saved", establishment_id=str(entity.id))
        return entity

    def update_delivery_config(
        self, entity: Establishment, document: Dict[str, Any]
    ) -> Establishment:
        entity.delivery_config = document
        entity.save(update_fields=["delivery_config"])
        logger.info(
            "establishment.delivery_config_updated",
            establishment_id=str(entity.id),
        )
        return entity
