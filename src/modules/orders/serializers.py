"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business rules (required reasons and observations, allowed transitions)
live in the Service Layer, so blank texts are accepted here and rejected
there with a domain error.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderAction, OrderStatus
from modules.orders.models import Order, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=OrderAction.choices)
    observation = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class ReactivateOrderSerializer(serializers.Serializer):
    observation = serializers.CharField(required=False, allow_blank=True, default="")


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    observation = serializers.CharField(required=False, allow_blank=True, default="")


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "previous_status",
            "new_status",
            "actor",
            "observation",
            "created_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for the order list (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "tracking_code",
            "establishment_id",
            "status",
            "delivery_type",
            "payment_method",
            "customer_name",
            "neighborhood",
            "total",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for an order with its history."""

    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "tracking_code",
            "establishment_id",
            "status",
            "delivery_type",
            "payment_method",
            "customer_name",
            "customer_phone",
            "neighborhood",
            "city",
            "subtotal",
            "delivery_fee",
            "discount",
            "total",
            "accepted_at",
            "prepped_at",
            "ready_at",
            "delivering_at",
            "completed_at",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
            "status_history",
        ]
        read_only_fields = fields


class OrderStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    pending = serializers.IntegerField()
    in_progress = serializers.IntegerField()
    completed = serializers.IntegerField()
    cancelled = serializers.IntegerField()
    average_ticket = serializers.DecimalField(max_digits=12, decimal_places=2)
