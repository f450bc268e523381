"""
Customer admin interface with PII protection.
"""
from django.contrib import admin
from django.contrib import messages
from core_backend.utils.pii import PIIProtection

from .models import Customer, CustomerOrder
from .services import CustomerLedgerService


@admin.action(description="Activate selected customers")
def activate_customers(modeladmin, request, queryset):
    """Activate customer accounts"""
    updated = queryset.filter(is_active=False).update(is_active=True)
    modeladmin.message_user(
        request,
        f"Activated {updated} customer(s).",
        level=messages.SUCCESS,
    )


@admin.action(description="Deactivate selected customers")
def deactivate_customers(modeladmin, request, queryset):
    """Deactivate customer accounts"""
    updated = queryset.filter(is_active=True).update(is_active=False)
    modeladmin.message_user(
        request,
        f"Deactivated {updated} customer(s).",
        level=messages.WARNING,
    )


@admin.action(description="Reconcile stats from order history")
def reconcile_customers(modeladmin, request, queryset):
    changed = 0
    replayed = 0
    for customer in queryset:
        result = CustomerLedgerService.reconcile_customer(customer)
        changed += int(result.changed)
        replayed += result.replayed_orders
    modeladmin.message_user(
        request,
        f"Reconciled {queryset.count()} customer(s): {changed} corrected, {replayed} order(s) replayed.",
        level=messages.SUCCESS,
    )


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = (
        "masked_name",
        "masked_phone",
        "total_orders",
        "total_spent",
        "loyalty_points",
        "is_active",
        "created_at",
    )
    list_filter = ("is_active",)
    search_fields = ("phone", "email", "first_name", "last_name")
    readonly_fields = ("total_orders", "total_spent", "loyalty_points", "created_at", "updated_at")
    actions = [activate_customers, deactivate_customers, reconcile_customers]

    @admin.display(description="Name")
    def masked_name(self, obj):
        return f"{PIIProtection.mask_name(obj.first_name)} {PIIProtection.mask_name(obj.last_name)}".strip()

    @admin.display(description="Phone")
    def masked_phone(self, obj):
        return PIIProtection.mask_phone(obj.phone)


@admin.register(CustomerOrder)
class CustomerOrderAdmin(admin.ModelAdmin):
    list_display = ("customer", "order", "created_at")
    raw_id_fields = ("customer", "order")
