"""Establishment repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.establishments.models import Establishment


class IEstablishmentRepository(IRepository["Establishment"]):
    """Repository contract for establishments."""

    @abstractmethod
    def update_delivery_config(
        self, entity: Establishment, document: Dict[str, Any]
    ) -> Establishment:
        """Replace the stored delivery configuration document."""
