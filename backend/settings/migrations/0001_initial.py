from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="GlobalSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("brand_name", models.CharField(default="Robusters", help_text="The brand name printed on receipts.", max_length=100)),
                ("currency", models.CharField(default="INR", help_text="Three-letter currency code (ISO 4217).", max_length=3)),
                ("loyalty_spend_amount", models.PositiveIntegerField(default=10, help_text="Order total (in whole currency units) that earns one block of loyalty points.")),
                ("loyalty_points_earned", models.PositiveIntegerField(default=1, help_text="Loyalty points credited for every full spend amount.")),
                ("brand_receipt_footer", models.TextField(default="Thank you for your order!", help_text="Default receipt footer for all locations. Locations can override.")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Global Settings",
                "verbose_name_plural": "Global Settings",
            },
        ),
        migrations.CreateModel(
            name="StoreLocation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Location name (e.g., 'Indiranagar', 'Airport Kiosk')", max_length=100)),
                ("slug", models.SlugField(blank=True, help_text="URL-friendly identifier, generated from the name when blank", max_length=120, unique=True)),
                ("address", models.TextField(blank=True)),
                ("phone", models.CharField(blank=True, max_length=20)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("timezone", models.CharField(blank=True, help_text="IANA timezone name; blank means the project TIME_ZONE", max_length=50)),
                ("receipt_footer", models.TextField(blank=True, help_text="Location-specific receipt footer. Falls back to the brand footer when blank.")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [models.Index(fields=["is_active", "name"], name="settings_st_is_acti_8c1f0e_idx")],
            },
        ),
    ]
