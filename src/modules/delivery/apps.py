from django.apps import AppConfig


class DeliveryAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.delivery"
    label = "delivery"

    def ready(self) -> None:
        from modules.delivery.events import DeliveryConfigUpdated
        from modules.delivery.handlers import delivery_config_updated_handler
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(DeliveryConfigUpdated, delivery_config_updated_handler)
