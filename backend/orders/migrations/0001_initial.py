import django.db.models.deletion
import django.utils.timezone
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        ("menu", "0001_initial"),
        ("settings", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DailyOrderSequence",
            fields=[
                ("business_date", models.DateField(primary_key=True, serialize=False)),
                ("last_value", models.PositiveIntegerField(default=0)),
            ],
            options={
                "verbose_name": "Daily Order Sequence",
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_number", models.CharField(editable=False, help_text="Receipt number, ORD-YYYYMMDD-#### sequential per business day", max_length=20, unique=True)),
                ("status", models.CharField(choices=[("CONFIRMED", "Confirmed"), ("CANCELLED", "Cancelled")], default="CONFIRMED", max_length=10)),
                ("payment_method", models.CharField(choices=[("CASH", "Cash"), ("CARD", "Card"), ("UPI", "UPI"), ("LOYALTY", "Loyalty Points")], max_length=10)),
                ("payment_status", models.CharField(choices=[("PENDING", "Pending"), ("PAID", "Paid"), ("FAILED", "Failed")], default="PENDING", max_length=10)),
                ("customer_name", models.CharField(blank=True, max_length=200)),
                ("customer_phone", models.CharField(blank=True, db_index=True, max_length=20)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), help_text="Always zero; menu prices are tax inclusive", max_digits=10)),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("notes", models.TextField(blank=True)),
                ("loyalty_points_earned", models.PositiveIntegerField(default=0, help_text="Points credited to the customer for this order")),
                ("loyalty_points_redeemed", models.PositiveIntegerField(default=0, help_text="Points debited to pay for this order")),
                ("cancellation_status", models.CharField(choices=[("NONE", "None"), ("REQUESTED", "Requested"), ("APPROVED", "Approved"), ("REJECTED", "Rejected")], db_index=True, default="NONE", max_length=10)),
                ("cancellation_reason", models.TextField(blank=True)),
                ("cancellation_requested_at", models.DateTimeField(blank=True, null=True)),
                ("cancellation_decided_at", models.DateTimeField(blank=True, null=True)),
                ("cancellation_admin_notes", models.TextField(blank=True)),
                ("refund_payment_method", models.CharField(blank=True, choices=[("CASH", "Cash"), ("CARD", "Card"), ("UPI", "UPI"), ("LOYALTY", "Loyalty Points")], max_length=10)),
                ("refund_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("refund_loyalty_points", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("cancellation_decided_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("cancellation_requested_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders_created", to=settings.AUTH_USER_MODEL)),
                ("customer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to="customers.customer")),
                ("location", models.ForeignKey(blank=True, help_text="Store location where this order was placed", null=True, on_delete=django.db.models.deletion.PROTECT, related_name="orders", to="settings.storelocation")),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-created_at", "order_number"],
                "indexes": [
                    models.Index(fields=["cancellation_status", "cancellation_requested_at"], name="order_cancel_queue_idx"),
                    models.Index(fields=["customer", "created_at"], name="order_customer_created_idx"),
                    models.Index(fields=["location", "-created_at"], name="order_loc_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_name", models.CharField(help_text="Menu item name at the time of sale", max_length=200)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("variant_snapshot", models.JSONField(blank=True, default=list, help_text="Selected variants as [{id, name, price}] at the time of sale")),
                ("special_instructions", models.TextField(blank=True, help_text="Customer notes, e.g., 'no onions'")),
                ("unit_price", models.DecimalField(decimal_places=2, help_text="Price of one unit including variants and addons.", max_digits=10)),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("is_price_overridden", models.BooleanField(default=False, help_text="Unit price was entered by staff at checkout")),
                ("menu_item", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="order_items", to="menu.menuitem")),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
            ],
            options={
                "verbose_name": "Order Item",
                "verbose_name_plural": "Order Items",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="OrderItemAddon",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("addon", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="order_item_addons", to="menu.addon")),
                ("order_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="addons", to="orders.orderitem")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="OrderStatusHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("previous_status", models.CharField(choices=[("NONE", "None"), ("REQUESTED", "Requested"), ("APPROVED", "Approved"), ("REJECTED", "Rejected")], max_length=10)),
                ("new_status", models.CharField(choices=[("NONE", "None"), ("REQUESTED", "Requested"), ("APPROVED", "Approved"), ("REJECTED", "Rejected")], max_length=10)),
                ("reason", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("changed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="order_status_changes", to=settings.AUTH_USER_MODEL)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="status_history", to="orders.order")),
            ],
            options={
                "verbose_name": "Order Status History",
                "verbose_name_plural": "Order Status History",
                "ordering": ["created_at", "id"],
            },
        ),
    ]
