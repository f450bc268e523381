import django.core.validators
import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Addon",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=100)),
                ("slug", models.SlugField(blank=True, max_length=100, unique=True)),
                ("price", models.DecimalField(decimal_places=2, help_text="Default price; categories and items may override it.", max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("unit", models.CharField(default="piece", help_text="e.g. '100g', 'piece', 'serving'", max_length=50)),
                ("addon_group", models.CharField(blank=True, help_text="UI grouping, e.g. 'proteins', 'dressings'.", max_length=50)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("is_available", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["addon_group", "display_order", "name"],
            },
        ),
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(help_text="Category name, e.g. 'High Protein Meals'.", max_length=100)),
                ("slug", models.SlugField(blank=True, max_length=100, unique=True)),
                ("description", models.TextField(blank=True)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Category",
                "verbose_name_plural": "Categories",
                "ordering": ["display_order", "name"],
            },
        ),
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(help_text="Name of the menu item.", max_length=150)),
                ("slug", models.SlugField(blank=True, max_length=150)),
                ("description", models.TextField(blank=True)),
                ("base_price", models.DecimalField(blank=True, decimal_places=2, help_text="Selling price for items without variants. Must be empty when the item has variants.", max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ("has_variants", models.BooleanField(default=False, help_text="Whether the price comes from size/portion variants.")),
                ("variant_type", models.CharField(blank=True, choices=[("SIZE", "Size"), ("PORTION", "Portion"), ("CARB_TYPE", "Carb Type"), ("CUSTOM", "Custom")], max_length=20)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("is_available", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("category", models.ForeignKey(help_text="The category this item is listed under.", on_delete=django.db.models.deletion.CASCADE, related_name="items", to="menu.category")),
            ],
            options={
                "verbose_name": "Menu Item",
                "verbose_name_plural": "Menu Items",
                "ordering": ["display_order", "name"],
                "indexes": [models.Index(fields=["category", "is_available"], name="menu_menuit_categor_3b8f1a_idx")],
                "constraints": [models.UniqueConstraint(fields=("category", "slug"), name="unique_menu_item_slug_per_category")],
            },
        ),
        migrations.CreateModel(
            name="ItemVariant",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(help_text="Short name, e.g. '6oz' or 'Half'.", max_length=50)),
                ("label", models.CharField(blank=True, help_text="Display label, e.g. '6 Ounces'.", max_length=100)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("is_available", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("menu_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="variants", to="menu.menuitem")),
            ],
            options={
                "ordering": ["display_order", "name"],
                "unique_together": {("menu_item", "name")},
            },
        ),
        migrations.CreateModel(
            name="CategoryAddon",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("price_override", models.DecimalField(blank=True, decimal_places=2, help_text="Price for this category. Leave blank to use the addon price.", max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ("is_active", models.BooleanField(default=True)),
                ("addon", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="category_links", to="menu.addon")),
                ("category", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="category_addons", to="menu.category")),
            ],
            options={
                "unique_together": {("category", "addon")},
            },
        ),
        migrations.CreateModel(
            name="ItemAddon",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("price_override", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ("is_allowed", models.BooleanField(default=True)),
                ("max_quantity", models.PositiveIntegerField(blank=True, help_text="Maximum quantity per line. Leave blank for no limit.", null=True)),
                ("addon", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="item_rules", to="menu.addon")),
                ("menu_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="addon_rules", to="menu.menuitem")),
            ],
            options={
                "unique_together": {("menu_item", "addon")},
            },
        ),
    ]
