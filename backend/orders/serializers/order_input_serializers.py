"""
Request serializers for order creation and payment updates.

They only check the wire shape. Business rules (payment method, empty
orders, price overrides, menu eligibility) are enforced by OrderService so
the API and any other caller get the same error codes.
"""
from rest_framework import serializers

from orders.calculators import AddonSelection
from orders.services import OrderLineInput
from settings.models import StoreLocation


class AddonSelectionSerializer(serializers.Serializer):
    addon_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class OrderLineSerializer(serializers.Serializer):
    menu_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    variant_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    addons = AddonSelectionSerializer(many=True, required=False, default=list)
    special_instructions = serializers.CharField(required=False, allow_blank=True, default="")
    # Validated by OrderService so a bad value reports INVALID_PRICE
    unit_price_override = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, default=None
    )


class OrderCreateSerializer(serializers.Serializer):
    customer_phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    customer_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=200)
    customer_email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    items = OrderLineSerializer(many=True)
    payment_method = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    location = serializers.PrimaryKeyRelatedField(
        queryset=StoreLocation.objects.filter(is_active=True),
        required=False,
        allow_null=True,
        default=None,
        help_text="Store location where this order is placed",
    )

    def validate_payment_method(self, value):
        return value.strip().upper()

    def to_order_lines(self):
        """Convert the validated items into the service's line inputs."""
        return [
            OrderLineInput(
                menu_item_id=str(line["menu_item_id"]),
                quantity=line["quantity"],
                variant_ids=tuple(str(variant_id) for variant_id in line.get("variant_ids", [])),
                addons=tuple(
                    AddonSelection(addon_id=str(addon["addon_id"]), quantity=addon["quantity"])
                    for addon in line.get("addons", [])
                ),
                special_instructions=line.get("special_instructions") or "",
                unit_price_override=line.get("unit_price_override"),
            )
            for line in self.validated_data["items"]
        ]

    def to_service_kwargs(self):
        data = self.validated_data
        return {
            "lines": self.to_order_lines(),
            "payment_method": data["payment_method"],
            "customer_phone": data.get("customer_phone") or None,
            "customer_name": data.get("customer_name") or None,
            "customer_email": data.get("customer_email") or None,
            "notes": data.get("notes") or "",
            "location": data.get("location"),
        }


class PaymentStatusUpdateSerializer(serializers.Serializer):
    payment_status = serializers.CharField()

    def validate_payment_status(self, value):
        return value.strip().upper()
