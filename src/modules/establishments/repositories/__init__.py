"""Establishment repositories package."""

from modules.establishments.repositories.django_repository import (
    EstablishmentDjangoRepository,
)
from modules.establishments.repositories.interfaces import IEstablishmentRepository

__all__ = ["EstablishmentDjangoRepository", "IEstablishmentRepository"]
