"""
Walk-in customer directory and loyalty ledger cache.

Customers are identified at the till by phone (or email). The running stats
on Customer are a cache over the order history; CustomerOrder records which
orders have already been applied to that cache.
"""
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from core_backend.utils.pii import PIIProtection


class Customer(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    phone = models.CharField(
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        help_text=_("Customer's phone number, the primary lookup key at the till"),
    )
    email = models.EmailField(
        unique=True,
        null=True,
        blank=True,
        help_text=_("Customer's email address (stored lower-case)"),
    )
    first_name = models.CharField(max_length=150, default="Customer")
    last_name = models.CharField(max_length=150, blank=True)

    # Ledger cache, re-derivable from orders
    total_orders = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    loyalty_points = models.IntegerField(
        default=0,
        help_text=_("Current loyalty balance in whole points"),
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Customer"
        verbose_name_plural = "Customers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self):
        """PII-safe string representation"""
        return PIIProtection.safe_str_representation(self, phone_field="phone")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


class CustomerOrder(models.Model):
    """
    Marks an order as applied to the customer's ledger cache.
    """

    customer = models.ForeignKey(
        Customer, on_delete=models.CASCADE, related_name="order_links"
    )
    order = models.OneToOneField(
        "orders.Order", on_delete=models.CASCADE, related_name="customer_link"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["customer", "order"], name="unique_customer_order"),
        ]

    def __str__(self):
        return f"{self.customer_id} -> {self.order_id}"
