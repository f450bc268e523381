"""
Order Numbering and Concurrency Tests

Order numbers are a public contract (receipts, search): ORD-YYYYMMDD-####,
unique and increasing within a business day. Customer stat increments must
not lose updates when orders for the same customer are created concurrently,
and loyalty points must never pay for two orders.

Interleavings are reproduced on every backend by handing the order service
customer instances loaded before the competing orders ran. The threaded
tests need a database with real row locking and run only against
PostgreSQL (DATABASE_ENGINE=postgresql).
"""
import datetime
import threading
from decimal import Decimal
from unittest import mock

import pytest
from django.db import connection, connections

from customers.models import Customer
from customers.services import CustomerLedgerService
from orders.exceptions import InsufficientLoyaltyPointsError, InvalidPriceError
from orders.models import DailyOrderSequence, Order
from orders.services import OrderLineInput, OrderService


requires_postgres = pytest.mark.skipif(
    connection.vendor != "postgresql",
    reason="Row-level locking tests need PostgreSQL",
)


@pytest.mark.django_db
class TestOrderNumbering:

    def test_sequence_per_business_day(self):
        """
        CRITICAL: Numbers restart at 0001 each business day and never repeat within it

        Business Impact: Duplicate receipt numbers break refunds and reconciliation
        """
        day_one = datetime.date(2026, 1, 15)
        day_two = datetime.date(2026, 1, 16)

        numbers = [OrderService.next_order_number(day_one) for _ in range(3)]
        assert numbers == ["ORD-20260115-0001", "ORD-20260115-0002", "ORD-20260115-0003"]

        assert OrderService.next_order_number(day_two) == "ORD-20260116-0001"
        assert OrderService.next_order_number(day_one) == "ORD-20260115-0004"
        assert DailyOrderSequence.objects.get(business_date=day_one).last_value == 4

    def test_numbers_increase_in_creation_order(self, cashier_user, cold_coffee, global_settings):
        orders = [
            OrderService.create_order(
                created_by=cashier_user,
                lines=[OrderLineInput(menu_item_id=str(cold_coffee.id))],
                payment_method="CASH",
            ).order
            for _ in range(5)
        ]

        numbers = [order.order_number for order in orders]
        assert numbers == sorted(numbers)
        assert len(set(numbers)) == 5

    def test_failed_order_does_not_consume_a_number(self, cashier_user, cold_coffee, global_settings):
        OrderService.create_order(
            created_by=cashier_user,
            lines=[OrderLineInput(menu_item_id=str(cold_coffee.id))],
            payment_method="CASH",
        )
        with pytest.raises(InvalidPriceError):
            OrderService.create_order(
                created_by=cashier_user,
                lines=[OrderLineInput(menu_item_id=str(cold_coffee.id), unit_price_override="-1")],
                payment_method="CASH",
            )
        second = OrderService.create_order(
            created_by=cashier_user,
            lines=[OrderLineInput(menu_item_id=str(cold_coffee.id))],
            payment_method="CASH",
        ).order

        assert second.order_number.endswith("-0002")


@pytest.mark.django_db
class TestInterleavedCustomerUpdates:
    """Orders for one customer priced against customer rows read before the others committed"""

    @staticmethod
    def stale_copies(customer, count):
        return [(Customer.objects.get(pk=customer.pk), False) for _ in range(count)]

    def test_stale_customer_instances_lose_no_increments(self, cashier_user, cold_coffee, customer, global_settings):
        """
        CRITICAL: N orders for one customer add exactly N to total_orders

        Business Impact: Lost increments under-count spend and loyalty points
        """
        with mock.patch.object(
            CustomerLedgerService, "find_or_create", side_effect=self.stale_copies(customer, 3)
        ):
            for _ in range(3):
                OrderService.create_order(
                    created_by=cashier_user,
                    lines=[OrderLineInput(menu_item_id=str(cold_coffee.id))],
                    payment_method="CASH",
                    customer_phone=customer.phone,
                )

        customer.refresh_from_db()
        assert customer.total_orders == 3
        assert customer.total_spent == Decimal("360.00")
        assert customer.loyalty_points == 36

    def test_loyalty_points_cannot_pay_twice(self, cashier_user, cold_coffee, loyal_customer, global_settings):
        """
        CRITICAL: Two loyalty orders racing for one balance cannot both spend it

        Business Impact: A balance that covers one order must not pay for two
        """
        loyal_customer.loyalty_points = 300
        loyal_customer.save(update_fields=["loyalty_points"])
        line = [OrderLineInput(menu_item_id=str(cold_coffee.id), quantity=2)]  # 240.00

        with mock.patch.object(
            CustomerLedgerService, "find_or_create", side_effect=self.stale_copies(loyal_customer, 2)
        ):
            OrderService.create_order(
                created_by=cashier_user,
                lines=line,
                payment_method=Order.PaymentMethod.LOYALTY,
                customer_phone=loyal_customer.phone,
            )
            with pytest.raises(InsufficientLoyaltyPointsError):
                OrderService.create_order(
                    created_by=cashier_user,
                    lines=line,
                    payment_method=Order.PaymentMethod.LOYALTY,
                    customer_phone=loyal_customer.phone,
                )

        assert Order.objects.count() == 1
        loyal_customer.refresh_from_db()
        assert loyal_customer.loyalty_points == 300 - 240 + 24
        assert loyal_customer.total_orders == 41


@requires_postgres
@pytest.mark.django_db(transaction=True)
class TestConcurrentOrders:
    """Many cashiers ringing up orders at the same time"""

    THREADS = 8

    def _run_concurrently(self, target):
        errors = []
        barrier = threading.Barrier(self.THREADS)

        def worker():
            try:
                barrier.wait()
                target()
            except Exception as exc:  # collected and asserted below
                errors.append(exc)
            finally:
                connections.close_all()

        threads = [threading.Thread(target=worker) for _ in range(self.THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return errors

    def test_concurrent_orders_get_unique_numbers(self, cashier_user, cold_coffee, global_settings):
        """
        CRITICAL: Concurrent same-day orders never share an order number

        Business Impact: Two receipts with one number is a correctness failure
        """
        def create():
            OrderService.create_order(
                created_by=cashier_user,
                lines=[OrderLineInput(menu_item_id=str(cold_coffee.id))],
                payment_method="CASH",
            )

        errors = self._run_concurrently(create)

        assert errors == []
        numbers = list(Order.objects.values_list("order_number", flat=True))
        assert len(numbers) == self.THREADS
        assert len(set(numbers)) == self.THREADS

    def test_concurrent_orders_for_same_customer_lose_no_updates(
        self, cashier_user, cold_coffee, customer, global_settings
    ):
        """
        CRITICAL: N concurrent orders for one customer add exactly N to total_orders

        Business Impact: Lost increments under-count spend and loyalty points
        """
        def create():
            OrderService.create_order(
                created_by=cashier_user,
                lines=[OrderLineInput(menu_item_id=str(cold_coffee.id))],
                payment_method="CASH",
                customer_phone=customer.phone,
            )

        errors = self._run_concurrently(create)

        assert errors == []
        refreshed = Customer.objects.get(pk=customer.pk)
        assert refreshed.total_orders == self.THREADS
        assert refreshed.total_spent == Decimal("120.00") * self.THREADS
        assert refreshed.loyalty_points == 12 * self.THREADS

    def test_concurrent_loyalty_orders_never_overspend(self, cashier_user, cold_coffee, customer, global_settings):
        """
        CRITICAL: Concurrent loyalty orders spend a balance at most once

        Business Impact: Loyalty double-spend gives away free orders
        """
        Customer.objects.filter(pk=customer.pk).update(loyalty_points=300)

        def create():
            OrderService.create_order(
                created_by=cashier_user,
                lines=[OrderLineInput(menu_item_id=str(cold_coffee.id))],  # 120.00
                payment_method=Order.PaymentMethod.LOYALTY,
                customer_phone=customer.phone,
            )

        errors = self._run_concurrently(create)

        assert len(errors) == self.THREADS - 2
        assert all(isinstance(error, InsufficientLoyaltyPointsError) for error in errors)
        refreshed = Customer.objects.get(pk=customer.pk)
        assert refreshed.total_orders == 2
        assert refreshed.loyalty_points == 300 - 2 * 120 + 2 * 12
