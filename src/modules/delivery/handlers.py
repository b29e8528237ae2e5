"""Event handlers for delivery configuration events."""

from __future__ import annotations

import structlog

from modules.delivery.events import DeliveryConfigUpdated
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class DeliveryConfigUpdatedHandler(IEventHandler[DeliveryConfigUpdated]):
    def handle(self, event: DeliveryConfigUpdated) -> None:
        logger.info(
            f"Configuração de entrega atualizada do estabelecimento {event.aggregate_id}",
            establishment_id=str(event.aggregate_id),
            changed_fields=list(event.changed_fields),
        )


delivery_config_updated_handler = DeliveryConfigUpdatedHandler()
