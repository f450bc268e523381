from django.contrib import admin

from core_backend.utils.money import default_currency, format_money
from core_backend.utils.pii import PIIProtection
from .models import (
    DailyOrderSequence,
    Order,
    OrderItem,
    OrderItemAddon,
    OrderStatusHistory,
)


class OrderItemAddonInline(admin.TabularInline):
    model = OrderItemAddon
    extra = 0
    readonly_fields = ("name", "unit_price", "quantity", "total_price")
    fields = readonly_fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("item_name", "quantity", "unit_price", "get_line_item_total", "is_price_overridden")
    fields = readonly_fields
    can_delete = False
    show_change_link = True

    def get_line_item_total(self, obj):
        return format_money(default_currency(), obj.total_price)

    get_line_item_total.short_description = "Line Item Total"

    def has_add_permission(self, request, obj=None):
        return False


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    readonly_fields = ("previous_status", "new_status", "reason", "changed_by", "created_at")
    fields = readonly_fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are created and cancelled through the API; the admin is read-mostly.
    """

    list_display = (
        "order_number",
        "masked_customer_phone",
        "status",
        "payment_method",
        "payment_status",
        "cancellation_status",
        "get_total_formatted",
        "location",
        "created_at",
    )
    list_display_links = ("order_number",)
    list_filter = ("status", "payment_method", "payment_status", "cancellation_status", "location", "created_at")
    search_fields = ("order_number", "customer_phone")
    ordering = ("-created_at",)
    date_hierarchy = "created_at"
    list_select_related = ("location",)
    inlines = [OrderItemInline, OrderStatusHistoryInline]

    readonly_fields = (
        "id",
        "order_number",
        "customer",
        "customer_name",
        "customer_phone",
        "subtotal",
        "tax",
        "total",
        "payment_method",
        "location",
        "created_by",
        "loyalty_points_earned",
        "loyalty_points_redeemed",
        "status",
        "cancellation_status",
        "cancellation_reason",
        "cancellation_requested_by",
        "cancellation_requested_at",
        "cancellation_decided_by",
        "cancellation_decided_at",
        "cancellation_admin_notes",
        "refund_payment_method",
        "refund_amount",
        "refund_loyalty_points",
        "created_at",
        "updated_at",
    )

    fieldsets = (
        ("Order", {"fields": ("id", "order_number", "status", "location", "created_by", "created_at", "updated_at")}),
        ("Customer", {"fields": ("customer", "customer_name", "customer_phone")}),
        ("Payment", {"fields": ("subtotal", "tax", "total", "payment_method", "payment_status", "notes")}),
        ("Loyalty", {"fields": ("loyalty_points_earned", "loyalty_points_redeemed")}),
        (
            "Cancellation",
            {
                "classes": ("collapse",),
                "fields": (
                    "cancellation_status",
                    "cancellation_reason",
                    "cancellation_requested_by",
                    "cancellation_requested_at",
                    "cancellation_decided_by",
                    "cancellation_decided_at",
                    "cancellation_admin_notes",
                    "refund_payment_method",
                    "refund_amount",
                    "refund_loyalty_points",
                ),
            },
        ),
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description="Total", ordering="total")
    def get_total_formatted(self, obj):
        return format_money(default_currency(), obj.total)

    @admin.display(description="Phone")
    def masked_customer_phone(self, obj):
        return PIIProtection.mask_phone(obj.customer_phone)


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("item_name", "order", "quantity", "unit_price", "total_price", "is_price_overridden")
    search_fields = ("item_name", "order__order_number")
    list_select_related = ("order",)
    readonly_fields = (
        "order",
        "menu_item",
        "item_name",
        "quantity",
        "variant_snapshot",
        "special_instructions",
        "unit_price",
        "total_price",
        "is_price_overridden",
    )
    inlines = [OrderItemAddonInline]

    def has_add_permission(self, request):
        return False


@admin.register(DailyOrderSequence)
class DailyOrderSequenceAdmin(admin.ModelAdmin):
    list_display = ("business_date", "last_value")
    ordering = ("-business_date",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
