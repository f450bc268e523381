import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("phone", models.CharField(blank=True, help_text="Customer's phone number, the primary lookup key at the till", max_length=20, null=True, unique=True)),
                ("email", models.EmailField(blank=True, help_text="Customer's email address (stored lower-case)", max_length=254, null=True, unique=True)),
                ("first_name", models.CharField(default="Customer", max_length=150)),
                ("last_name", models.CharField(blank=True, max_length=150)),
                ("total_orders", models.PositiveIntegerField(default=0)),
                ("total_spent", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("loyalty_points", models.IntegerField(default=0, help_text="Current loyalty balance in whole points")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Customer",
                "verbose_name_plural": "Customers",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["is_active"], name="customers_c_is_acti_4b1e2f_idx"),
                    models.Index(fields=["created_at"], name="customers_c_created_9a7c3d_idx"),
                ],
            },
        ),
    ]
