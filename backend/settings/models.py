from django.conf import settings as django_settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.text import slugify
import logging

logger = logging.getLogger(__name__)


class StoreLocation(models.Model):
    """
    A physical outlet. Orders record the location they were rung up at.
    """

    name = models.CharField(
        max_length=100,
        help_text="Location name (e.g., 'Indiranagar', 'Airport Kiosk')"
    )
    slug = models.SlugField(
        max_length=120,
        unique=True,
        blank=True,
        help_text="URL-friendly identifier, generated from the name when blank"
    )
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    timezone = models.CharField(
        max_length=50,
        blank=True,
        help_text="IANA timezone name; blank means the project TIME_ZONE"
    )
    receipt_footer = models.TextField(
        blank=True,
        help_text="Location-specific receipt footer. Falls back to the brand footer when blank."
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active", "name"]),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class GlobalSettings(models.Model):
    """
    Restaurant-wide settings that apply across ALL locations.

    A singleton row (pk=1). Besides brand identity it holds the loyalty
    earning ratio: `loyalty_points_earned` points for every
    `loyalty_spend_amount` of order total.
    """

    SINGLETON_PK = 1

    brand_name = models.CharField(
        max_length=100,
        default="Robusters",
        help_text="The brand name printed on receipts."
    )
    currency = models.CharField(
        max_length=3,
        default="INR",
        help_text="Three-letter currency code (ISO 4217)."
    )
    loyalty_spend_amount = models.PositiveIntegerField(
        default=10,
        help_text="Order total (in whole currency units) that earns one block of loyalty points."
    )
    loyalty_points_earned = models.PositiveIntegerField(
        default=1,
        help_text="Loyalty points credited for every full spend amount."
    )
    brand_receipt_footer = models.TextField(
        default="Thank you for your order!",
        help_text="Default receipt footer for all locations. Locations can override.",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Global Settings"
        verbose_name_plural = "Global Settings"

    def clean(self):
        if self.loyalty_spend_amount < 1:
            raise ValidationError({"loyalty_spend_amount": "Spend amount must be at least 1."})

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        self.clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Global settings cannot be deleted.")

    def __str__(self):
        return f"Global Settings ({self.brand_name})"

    @classmethod
    def load(cls) -> "GlobalSettings":
        """
        Return the singleton, creating it from the project defaults on first use.
        """
        obj, created = cls.objects.get_or_create(
            pk=cls.SINGLETON_PK,
            defaults={
                "currency": getattr(django_settings, "CURRENCY", "INR"),
                "loyalty_spend_amount": getattr(django_settings, "LOYALTY_SPEND_AMOUNT", 10),
                "loyalty_points_earned": getattr(django_settings, "LOYALTY_POINTS_EARNED", 1),
            },
        )
        if created:
            logger.info("Created default GlobalSettings instance")
        return obj
