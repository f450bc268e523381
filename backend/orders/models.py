import uuid
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core_backend.utils.money import default_currency, format_money


@dataclass(frozen=True)
class RefundInfo:
    """
    Refund promised when a cancellation is requested.

    Only loyalty refunds touch a balance; cash, card and UPI refunds are
    handled at the counter and recorded here for accounting.
    """

    payment_method: str
    amount: Decimal
    loyalty_points_to_refund: int = 0

    @property
    def message(self) -> str:
        if self.payment_method == Order.PaymentMethod.LOYALTY:
            return f"{self.loyalty_points_to_refund} points will be refunded"
        return f"{format_money(default_currency(), self.amount)} will be refunded"


class Order(models.Model):
    class PaymentMethod(models.TextChoices):
        CASH = "CASH", _("Cash")
        CARD = "CARD", _("Card")
        UPI = "UPI", _("UPI")
        LOYALTY = "LOYALTY", _("Loyalty Points")

    class PaymentStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        PAID = "PAID", _("Paid")
        FAILED = "FAILED", _("Failed")

    class OrderStatus(models.TextChoices):
        CONFIRMED = "CONFIRMED", _("Confirmed")
        CANCELLED = "CANCELLED", _("Cancelled")  # Set when a cancellation is approved

    class CancellationStatus(models.TextChoices):
        NONE = "NONE", _("None")
        REQUESTED = "REQUESTED", _("Requested")
        APPROVED = "APPROVED", _("Approved")
        REJECTED = "REJECTED", _("Rejected")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(
        max_length=20,
        unique=True,
        editable=False,
        help_text=_("Receipt number, ORD-YYYYMMDD-#### sequential per business day"),
    )
    status = models.CharField(
        max_length=10, choices=OrderStatus.choices, default=OrderStatus.CONFIRMED
    )
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    # --- Relationships ---
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    location = models.ForeignKey(
        "settings.StoreLocation",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
        help_text=_("Store location where this order was placed"),
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_created",
    )

    # --- Receipt snapshot of the customer ---
    customer_name = models.CharField(max_length=200, blank=True)
    customer_phone = models.CharField(max_length=20, blank=True, db_index=True)

    # --- Financial Fields ---
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    tax = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Always zero; menu prices are tax inclusive"),
    )
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    notes = models.TextField(blank=True)

    # --- Loyalty ledger ---
    loyalty_points_earned = models.PositiveIntegerField(
        default=0, help_text=_("Points credited to the customer for this order")
    )
    loyalty_points_redeemed = models.PositiveIntegerField(
        default=0, help_text=_("Points debited to pay for this order")
    )

    # --- Cancellation record ---
    cancellation_status = models.CharField(
        max_length=10,
        choices=CancellationStatus.choices,
        default=CancellationStatus.NONE,
        db_index=True,
    )
    cancellation_reason = models.TextField(blank=True)
    cancellation_requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancellation_requested_at = models.DateTimeField(null=True, blank=True)
    cancellation_decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancellation_decided_at = models.DateTimeField(null=True, blank=True)
    cancellation_admin_notes = models.TextField(blank=True)

    # Refund snapshot, written once when the cancellation is requested
    refund_payment_method = models.CharField(
        max_length=10, choices=PaymentMethod.choices, blank=True
    )
    refund_amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    refund_loyalty_points = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "order_number"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["cancellation_status", "cancellation_requested_at"], name="order_cancel_queue_idx"),
            models.Index(fields=["customer", "created_at"], name="order_customer_created_idx"),
            models.Index(fields=["location", "-created_at"], name="order_loc_created_idx"),
        ]

    def __str__(self):
        return f"Order {self.order_number} - {self.total}"

    @property
    def refund_info(self):
        """The refund snapshot, or None while no cancellation has been requested."""
        if self.cancellation_status == self.CancellationStatus.NONE:
            return None
        return RefundInfo(
            payment_method=self.refund_payment_method,
            amount=self.refund_amount if self.refund_amount is not None else Decimal("0.00"),
            loyalty_points_to_refund=self.refund_loyalty_points,
        )

    @property
    def is_loyalty_payment(self):
        return self.payment_method == self.PaymentMethod.LOYALTY


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        "menu.MenuItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    item_name = models.CharField(
        max_length=200, help_text=_("Menu item name at the time of sale")
    )
    quantity = models.PositiveIntegerField(default=1)
    variant_snapshot = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Selected variants as [{id, name, price}] at the time of sale"),
    )
    special_instructions = models.TextField(
        blank=True, help_text=_("Customer notes, e.g., 'no onions'")
    )

    # Price snapshot
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Price of one unit including variants and addons."),
    )
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    is_price_overridden = models.BooleanField(
        default=False, help_text=_("Unit price was entered by staff at checkout")
    )

    class Meta:
        ordering = ["id"]
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")

    def __str__(self):
        return f"{self.quantity} of {self.item_name} in Order {self.order.order_number}"


class OrderItemAddon(models.Model):
    order_item = models.ForeignKey(OrderItem, on_delete=models.CASCADE, related_name="addons")
    addon = models.ForeignKey(
        "menu.Addon",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_item_addons",
    )
    name = models.CharField(max_length=100)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1)
    total_price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} x{self.quantity} ({self.total_price})"


class OrderStatusHistory(models.Model):
    """
    Append-only audit trail of cancellation transitions.
    """

    order = models.ForeignKey(Order, on_delete=models.PROTECT, related_name="status_history")
    previous_status = models.CharField(max_length=10, choices=Order.CancellationStatus.choices)
    new_status = models.CharField(max_length=10, choices=Order.CancellationStatus.choices)
    reason = models.TextField(blank=True)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_status_changes",
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = _("Order Status History")
        verbose_name_plural = _("Order Status History")

    def __str__(self):
        return f"{self.order_id}: {self.previous_status} -> {self.new_status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Status history entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Status history entries cannot be deleted.")


class DailyOrderSequence(models.Model):
    """
    Transactional counter behind ORD-YYYYMMDD-#### order numbers.

    One row per business day. Incrementing it takes a row lock that is held
    until the creating transaction ends, so concurrent creators are
    serialized per day.
    """

    business_date = models.DateField(primary_key=True)
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = _("Daily Order Sequence")

    def __str__(self):
        return f"{self.business_date}: {self.last_value}"
