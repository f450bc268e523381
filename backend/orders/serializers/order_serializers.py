from rest_framework import serializers

from core_backend.base import BaseModelSerializer, TimestampedSerializer
from orders.models import Order, OrderItem, OrderItemAddon


class OrderItemAddonSerializer(BaseModelSerializer):
    class Meta:
        model = OrderItemAddon
        fields = ["addon", "name", "unit_price", "quantity", "total_price"]


class OrderItemSerializer(BaseModelSerializer):
    addons = OrderItemAddonSerializer(many=True, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "menu_item",
            "item_name",
            "quantity",
            "variant_snapshot",
            "addons",
            "special_instructions",
            "unit_price",
            "total_price",
            "is_price_overridden",
        ]


class RefundInfoSerializer(serializers.Serializer):
    payment_method = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    loyalty_points_to_refund = serializers.IntegerField()
    message = serializers.CharField()


class OrderSerializer(TimestampedSerializer):
    """
    Full order representation used by every read endpoint.
    """

    items = OrderItemSerializer(many=True, read_only=True)
    refund_info = serializers.SerializerMethodField()
    created_by_name = serializers.SerializerMethodField()
    location_name = serializers.CharField(source="location.name", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "customer",
            "customer_name",
            "customer_phone",
            "items",
            "subtotal",
            "tax",
            "total",
            "payment_method",
            "payment_status",
            "notes",
            "location",
            "location_name",
            "created_by",
            "created_by_name",
            "loyalty_points_earned",
            "loyalty_points_redeemed",
            "cancellation_status",
            "cancellation_reason",
            "cancellation_requested_by",
            "cancellation_requested_at",
            "cancellation_decided_by",
            "cancellation_decided_at",
            "cancellation_admin_notes",
            "refund_info",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
        select_related_fields = ["customer", "location", "created_by"]
        prefetch_related_fields = ["items__addons"]

    def get_refund_info(self, obj):
        refund = obj.refund_info
        if refund is None:
            return None
        return RefundInfoSerializer(
            {
                "payment_method": refund.payment_method,
                "amount": refund.amount,
                "loyalty_points_to_refund": refund.loyalty_points_to_refund,
                "message": refund.message,
            }
        ).data

    def get_created_by_name(self, obj):
        return obj.created_by.display_name if obj.created_by else None
