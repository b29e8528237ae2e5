"""Delivery configuration exceptions.

Raised by ``DeliveryConfigService`` when a partial update would leave the
stored configuration unsavable.  Editor sessions catch them and turn them
into notifications; views translate them into HTTP 400.
"""

from __future__ import annotations


class InvalidDeliveryConfig(Exception):
    """The merged configuration violates a delivery fee invariant."""
