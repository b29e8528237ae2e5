"""Establishment model.

An establishment is the tenant of the admin panel: its orders and its
delivery fee configuration belong to it.  The delivery configuration is
stored as a JSON document (``delivery_config``) whose shape is owned by
``modules.delivery.dtos.DeliveryFeeConfig``; this module never interprets
it.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Establishment(BaseModel):
    name: models.CharField = models.CharField(max_length=255)
    slug: models.SlugField = models.SlugField(max_length=120, unique=True)
    delivery_config: models.JSONField = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "establishments"
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"
