import uuid

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.text import slugify
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, help_text=_("Category name, e.g. 'High Protein Meals'."))
    slug = models.SlugField(max_length=100, unique=True, blank=True)
    description = models.TextField(blank=True)
    display_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Category")
        verbose_name_plural = _("Categories")
        ordering = ["display_order", "name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class MenuItem(models.Model):
    class VariantType(models.TextChoices):
        SIZE = "SIZE", _("Size")
        PORTION = "PORTION", _("Portion")
        CARB_TYPE = "CARB_TYPE", _("Carb Type")
        CUSTOM = "CUSTOM", _("Custom")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name="items",
        help_text=_("The category this item is listed under."),
    )
    name = models.CharField(max_length=150, help_text=_("Name of the menu item."))
    slug = models.SlugField(max_length=150, blank=True)
    description = models.TextField(blank=True)
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text=_("Selling price for items without variants. Must be empty when the item has variants."),
    )
    has_variants = models.BooleanField(
        default=False,
        help_text=_("Whether the price comes from size/portion variants."),
    )
    variant_type = models.CharField(
        max_length=20, choices=VariantType.choices, blank=True
    )
    display_order = models.PositiveIntegerField(default=0)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Menu Item")
        verbose_name_plural = _("Menu Items")
        ordering = ["display_order", "name"]
        constraints = [
            models.UniqueConstraint(fields=["category", "slug"], name="unique_menu_item_slug_per_category"),
        ]
        indexes = [
            models.Index(fields=["category", "is_available"]),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.has_variants and self.base_price is not None:
            raise ValidationError({"base_price": _("Items with variants take their price from the variants.")})

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class ItemVariant(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.CASCADE, related_name="variants"
    )
    name = models.CharField(max_length=50, help_text=_("Short name, e.g. '6oz' or 'Half'."))
    label = models.CharField(max_length=100, blank=True, help_text=_("Display label, e.g. '6 Ounces'."))
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    display_order = models.PositiveIntegerField(default=0)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_order", "name"]
        unique_together = ("menu_item", "name")

    def __str__(self):
        return f"{self.menu_item.name} - {self.name}"


class Addon(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True, blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text=_("Default price; categories and items may override it."),
    )
    unit = models.CharField(max_length=50, default="piece", help_text=_("e.g. '100g', 'piece', 'serving'"))
    addon_group = models.CharField(
        max_length=50, blank=True, help_text=_("UI grouping, e.g. 'proteins', 'dressings'.")
    )
    display_order = models.PositiveIntegerField(default=0)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["addon_group", "display_order", "name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class CategoryAddon(models.Model):
    """
    Offers an addon on every item of a category, optionally at a preset price.
    """

    category = models.ForeignKey(
        Category, on_delete=models.CASCADE, related_name="category_addons"
    )
    addon = models.ForeignKey(
        Addon, on_delete=models.CASCADE, related_name="category_links"
    )
    price_override = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text=_("Price for this category. Leave blank to use the addon price."),
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        unique_together = ("category", "addon")

    def __str__(self):
        return f"{self.category.name} + {self.addon.name}"


class ItemAddon(models.Model):
    """
    Item-level addon rule.

    `is_allowed=False` hides an addon the category offers; `is_allowed=True`
    permits it even without a category link. `price_override` beats the
    category override, and `max_quantity` caps how many can be added.
    """

    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.CASCADE, related_name="addon_rules"
    )
    addon = models.ForeignKey(
        Addon, on_delete=models.CASCADE, related_name="item_rules"
    )
    price_override = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    is_allowed = models.BooleanField(default=True)
    max_quantity = models.PositiveIntegerField(
        null=True, blank=True, help_text=_("Maximum quantity per line. Leave blank for no limit.")
    )

    class Meta:
        unique_together = ("menu_item", "addon")

    def __str__(self):
        return f"{self.menu_item.name} + {self.addon.name}"
