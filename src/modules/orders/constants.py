"""Order domain constants.

Status, delivery type, payment method and action choices used by the
order state machine (``transitions.py``).
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pendente", "Pendente"
    ACCEPTED = "aceito", "Aceito"
    PREPARING = "preparo", "Em preparo"
    READY = "pronto", "Pronto"
    OUT_FOR_DELIVERY = "entrega", "Saiu para entrega"
    COMPLETED = "concluido", "Concluído"
    CANCELLED = "cancelado", "Cancelado"


class DeliveryType(models.TextChoices):
    DELIVERY = "delivery", "Delivery"
    PICKUP = "retirada", "Retirada"


class PaymentMethod(models.TextChoices):
    CASH = "dinheiro", "Dinheiro"
    PIX = "pix", "Pix"
    CREDIT = "credito", "Crédito"
    DEBIT = "debito", "Débito"


class OrderAction(models.TextChoices):
    ACCEPT = "accept", "Aceitar pedido"
    START_PREP = "start_prep", "Iniciar preparo"
    MARK_READY = "mark_ready", "Marcar como pronto"
    START_DELIVERY = "start_delivery", "Saiu para entrega"
    COMPLETE = "complete", "Concluir pedido"
    CANCEL = "cancel", "Cancelar"
    REACTIVATE = "reactivate", "Reativar pedido"


TERMINAL_STATES: set[str] = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

CANCELLABLE_STATES: set[str] = {
    status for status in OrderStatus.values if status not in TERMINAL_STATES
}

IN_PROGRESS_STATES: set[str] = {
    OrderStatus.ACCEPTED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.OUT_FOR_DELIVERY,
}

TRACKING_CODE_MAX_RETRIES = 5
