"""
Customer ledger service.

Owns every mutation of a customer's running stats and loyalty balance. All
balance changes are single UPDATE statements with F() expressions so
concurrent orders for the same customer never lose an update.
"""
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, DecimalField, F, IntegerField, Sum
from django.db.models.functions import Coalesce

from core_backend.utils.money import ZERO, to_decimal
from core_backend.utils.pii import get_pii_safe_logger
from settings.services import SettingsService
from .exceptions import CustomerNotFoundError, CustomerValidationError, InsufficientLoyaltyBalanceError
from .models import Customer, CustomerOrder

logger = get_pii_safe_logger(__name__)

DEFAULT_FIRST_NAME = "Customer"


@dataclass(frozen=True)
class CustomerSummary:
    id: str
    first_name: str
    last_name: str
    phone: Optional[str]
    email: Optional[str]
    total_orders: int
    total_spent: Decimal
    loyalty_points: int
    is_new: bool = False

    @classmethod
    def from_customer(cls, customer: Customer, is_new: bool = False) -> "CustomerSummary":
        return cls(
            id=str(customer.id),
            first_name=customer.first_name,
            last_name=customer.last_name,
            phone=customer.phone,
            email=customer.email,
            total_orders=customer.total_orders,
            total_spent=customer.total_spent,
            loyalty_points=customer.loyalty_points,
            is_new=is_new,
        )


@dataclass(frozen=True)
class LedgerEntry:
    """Loyalty movement applied for one order."""

    points_earned: int
    points_redeemed: int


@dataclass
class ReconciliationResult:
    customer_id: str
    replayed_orders: int = 0
    changed: bool = False


def loyalty_points_for_payment(total) -> int:
    """
    Points needed to pay an order total in full with loyalty points.
    Fractional totals round up so a customer never pays less than the bill.
    """
    total = to_decimal(total)
    if total <= 0:
        return 0
    return int(math.ceil(total))


def loyalty_points_earned_for(total, spend_amount: int, points_earned: int) -> int:
    """floor(total / spend_amount) * points_earned"""
    total = to_decimal(total)
    if total <= 0 or spend_amount <= 0:
        return 0
    return int(total // Decimal(spend_amount)) * points_earned


class CustomerLedgerService:
    """
    Customer directory lookups plus the atomic ledger operations driven by
    order creation and cancellation.
    """

    # ------------------------------------------------------------------
    # Directory
    # ------------------------------------------------------------------

    @staticmethod
    def normalize_phone(phone: Optional[str]) -> Optional[str]:
        if phone is None:
            return None
        phone = "".join(str(phone).split())
        return phone or None

    @staticmethod
    def normalize_email(email: Optional[str]) -> Optional[str]:
        if email is None:
            return None
        email = str(email).strip().lower()
        return email or None

    @staticmethod
    def split_name(name: Optional[str]) -> Tuple[str, str]:
        """
        "Asha Rao K" -> ("Asha", "Rao K"); blank -> ("Customer", "")
        """
        parts = (name or "").split()
        if not parts:
            return DEFAULT_FIRST_NAME, ""
        return parts[0], " ".join(parts[1:])

    @staticmethod
    def find_by_phone(phone: Optional[str]) -> Optional[Customer]:
        phone = CustomerLedgerService.normalize_phone(phone)
        if not phone:
            return None
        return Customer.objects.filter(phone=phone, is_active=True).first()

    @staticmethod
    def find_by_email(email: Optional[str]) -> Optional[Customer]:
        email = CustomerLedgerService.normalize_email(email)
        if not email:
            return None
        return Customer.objects.filter(email=email, is_active=True).first()

    @staticmethod
    def get_customer(customer_id) -> Customer:
        try:
            return Customer.objects.get(pk=customer_id)
        except (Customer.DoesNotExist, DjangoValidationError, ValueError):
            raise CustomerNotFoundError("Customer not found", {"customer_id": str(customer_id)})

    @staticmethod
    def find_or_create(phone=None, email=None, name=None) -> Tuple[Optional[Customer], bool]:
        """
        Resolve the customer for an order: phone first, then email, else create.

        Returns (customer, is_new). Returns (None, False) when neither phone
        nor email is given. Callers that need the creation rolled back with a
        failed order must call this inside their own transaction.
        """
        phone = CustomerLedgerService.normalize_phone(phone)
        email = CustomerLedgerService.normalize_email(email)
        if not phone and not email:
            return None, False

        customer = CustomerLedgerService.find_by_phone(phone) or CustomerLedgerService.find_by_email(email)
        if customer is not None:
            return customer, False

        first_name, last_name = CustomerLedgerService.split_name(name)
        try:
            # Savepoint so a lost race does not poison the caller's transaction
            with transaction.atomic():
                customer = Customer.objects.create(
                    phone=phone,
                    email=email,
                    first_name=first_name,
                    last_name=last_name,
                )
        except IntegrityError:
            # Concurrent create, or the phone/email belongs to a deactivated record
            lookup = Customer.objects.filter(phone=phone).first() if phone else None
            if lookup is None and email:
                lookup = Customer.objects.filter(email=email).first()
            if lookup is None:
                raise CustomerValidationError(
                    "Could not create customer record",
                    {"phone": phone, "email": email},
                )
            if not lookup.is_active:
                raise CustomerValidationError(
                    "Customer record is deactivated",
                    {"customer_id": str(lookup.id)},
                )
            return lookup, False

        logger.info("Created customer", extra={"customer_id": str(customer.id)})
        return customer, True

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    @staticmethod
    def credit_loyalty_points(customer_id, points: int) -> None:
        if points <= 0:
            return
        Customer.objects.filter(pk=customer_id).update(loyalty_points=F("loyalty_points") + points)

    @staticmethod
    def debit_loyalty_points(customer_id, points: int) -> None:
        """
        Guarded debit: only succeeds while the balance covers `points`.
        """
        if points <= 0:
            return
        updated = Customer.objects.filter(
            pk=customer_id, loyalty_points__gte=points
        ).update(loyalty_points=F("loyalty_points") - points)
        if not updated:
            raise InsufficientLoyaltyBalanceError(
                "Insufficient loyalty points",
                {"customer_id": str(customer_id), "required": points},
            )

    @staticmethod
    @transaction.atomic
    def record_order(customer: Customer, order) -> Optional[LedgerEntry]:
        """
        Apply one order to the customer's ledger cache.

        Links the order, increments total_orders and total_spent and credits
        earned points, storing them on the order. Points spent on a
        loyalty-paid order were debited in the order's own transaction, so
        this step never touches them. Returns None when the order was
        already applied.
        """
        from orders.models import Order

        _, linked = CustomerOrder.objects.get_or_create(customer=customer, order=order)
        if not linked:
            return None

        ratio = SettingsService.get_loyalty_ratio()
        earned = loyalty_points_earned_for(order.total, ratio.spend_amount, ratio.points_earned)
        redeemed = order.loyalty_points_redeemed

        Customer.objects.filter(pk=customer.pk).update(
            total_orders=F("total_orders") + 1,
            total_spent=F("total_spent") + order.total,
            loyalty_points=F("loyalty_points") + earned,
        )

        Order.objects.filter(pk=order.pk).update(loyalty_points_earned=earned)
        order.loyalty_points_earned = earned

        logger.info(
            f"Recorded order {order.order_number} on customer ledger",
            extra={"customer_id": str(customer.pk), "earned": earned, "redeemed": redeemed},
        )
        return LedgerEntry(points_earned=earned, points_redeemed=redeemed)

    @staticmethod
    def reconcile_customer(customer: Customer) -> ReconciliationResult:
        """
        Re-derive a customer's cached stats from the order history.

        Orders whose ledger step never ran are replayed through record_order
        first. The cache is then rebuilt from the recorded orders:
        total_orders and total_spent from the linked orders, loyalty_points
        as earned - redeemed + points refunded by approved cancellations.
        """
        from orders.models import Order

        result = ReconciliationResult(customer_id=str(customer.pk))

        unrecorded = Order.objects.filter(customer=customer, customer_link__isnull=True).order_by("created_at")
        for order in unrecorded:
            CustomerLedgerService.record_order(customer, order)
            result.replayed_orders += 1

        with transaction.atomic():
            locked = Customer.objects.select_for_update().get(pk=customer.pk)
            recorded = Order.objects.filter(customer_link__customer=locked)
            totals = recorded.aggregate(
                order_count=Count("pk"),
                spent=Coalesce(Sum("total"), ZERO, output_field=DecimalField(max_digits=12, decimal_places=2)),
                earned=Coalesce(Sum("loyalty_points_earned"), 0, output_field=IntegerField()),
                redeemed=Coalesce(Sum("loyalty_points_redeemed"), 0, output_field=IntegerField()),
            )
            refunded = recorded.filter(
                cancellation_status=Order.CancellationStatus.APPROVED,
            ).aggregate(points=Coalesce(Sum("refund_loyalty_points"), 0, output_field=IntegerField()))["points"]

            expected = {
                "total_orders": totals["order_count"],
                "total_spent": totals["spent"],
                "loyalty_points": totals["earned"] - totals["redeemed"] + refunded,
            }
            current = {
                "total_orders": locked.total_orders,
                "total_spent": locked.total_spent,
                "loyalty_points": locked.loyalty_points,
            }
            if expected != current:
                Customer.objects.filter(pk=locked.pk).update(**expected)
                result.changed = True
                logger.warning(
                    "Reconciled customer stats",
                    extra={"customer_id": str(locked.pk), "before": current, "after": expected},
                )

        customer.refresh_from_db()
        return result
