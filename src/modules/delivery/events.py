"""Domain events for the delivery configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class DeliveryConfigUpdated(DomainEvent):
    """Raised after an establishment's delivery configuration is saved."""

    changed_fields: Tuple[str, ...] = ()
