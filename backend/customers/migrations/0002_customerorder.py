import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("customers", "0001_initial"),
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CustomerOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="order_links", to="customers.customer")),
                ("order", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="customer_link", to="orders.order")),
            ],
            options={
                "constraints": [models.UniqueConstraint(fields=("customer", "order"), name="unique_customer_order")],
            },
        ),
    ]
