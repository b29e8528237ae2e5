"""Delivery DRF serializers for API input/output.

Shape validation of the configuration itself is owned by the Pydantic DTOs
in ``dtos.py``; the serializers here only check the request envelope.
"""

from __future__ import annotations

from rest_framework import serializers

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class DeliveryConfigChangesSerializer(serializers.Serializer):
    """Validates a partial configuration update (changed fields only)."""

    def to_internal_value(self, data):
        if not isinstance(data, dict):
            raise serializers.ValidationError(
                {"detail": "Expected an object with the changed fields."}
            )
        return dict(data)


class DeliveryQuoteQuerySerializer(serializers.Serializer):
    """Validates the quote query string: a distance *or* a neighborhood."""

    distance_km = serializers.DecimalField(
        max_digits=6, decimal_places=2, min_value=0, required=False
    )
    neighborhood = serializers.CharField(required=False, allow_blank=False)
    city = serializers.CharField(required=False, allow_blank=True, default="")
    subtotal = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )

    def validate(self, attrs):
        has_distance = "distance_km" in attrs
        has_neighborhood = "neighborhood" in attrs
        if has_distance == has_neighborhood:
            raise serializers.ValidationError(
                "Provide either 'distance_km' or 'neighborhood'."
            )
        return attrs


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class DeliveryQuoteSerializer(serializers.Serializer):
    available = serializers.BooleanField()
    fee = serializers.DecimalField(max_digits=10, decimal_places=2)
    min_minutes = serializers.IntegerField()
    max_minutes = serializers.IntegerField()
    reason = serializers.CharField(allow_null=True)
    meets_minimum_order = serializers.BooleanField(allow_null=True)
