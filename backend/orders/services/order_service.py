from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core_backend.utils.money import to_decimal
from customers.exceptions import InsufficientLoyaltyBalanceError
from customers.models import Customer
from customers.services import CustomerLedgerService, CustomerSummary, loyalty_points_for_payment
from menu.services import MenuItemRef, MenuLookupService
from orders.calculators import (
    AddonSelection,
    PriceBreakdown,
    calculate_item_price,
    calculate_order_totals,
    validate_price_override,
)
from orders.exceptions import (
    EmptyOrderError,
    InsufficientLoyaltyPointsError,
    InvalidPaymentMethodError,
    InvalidPaymentStatusError,
    InvalidSelectionError,
    ItemNotFoundError,
    ItemUnavailableError,
    OrderNotFoundError,
)
from orders.models import DailyOrderSequence, Order, OrderItem, OrderItemAddon

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "ORD"


@dataclass(frozen=True)
class OrderLineInput:
    """One requested order line, as parsed from the API payload."""

    menu_item_id: str
    quantity: int = 1
    variant_ids: Tuple[str, ...] = ()
    addons: Tuple[AddonSelection, ...] = ()
    special_instructions: str = ""
    unit_price_override: Optional[Decimal] = None


@dataclass(frozen=True)
class PricedLine:
    line: OrderLineInput
    item_ref: MenuItemRef
    unit_price: Decimal
    total_price: Decimal
    breakdown: Optional[PriceBreakdown] = None

    @property
    def is_price_overridden(self) -> bool:
        return self.breakdown is None


@dataclass(frozen=True)
class OrderCreationResult:
    order: Order
    customer: Optional[CustomerSummary] = None


@dataclass
class _Snapshot:
    variants: List[dict] = field(default_factory=list)
    addons: List[dict] = field(default_factory=list)


class OrderService:
    """Order creation and the few post-creation updates an order allows."""

    @staticmethod
    def create_order(
        *,
        created_by,
        lines: Sequence[OrderLineInput],
        payment_method: str,
        customer_phone: Optional[str] = None,
        customer_name: Optional[str] = None,
        customer_email: Optional[str] = None,
        notes: str = "",
        location=None,
    ) -> OrderCreationResult:
        """
        Validate, price and persist an order, then apply it to the customer ledger.

        The order, its items, a newly created customer and, for loyalty
        payments, the points debit are written in one transaction. Customer
        stats and earned points are updated after that transaction commits;
        a failure there is logged and left to reconcile_customer_stats, the
        order stands.

        Raises:
            EmptyOrderError, InvalidPaymentMethodError, InvalidSelectionError,
            ItemNotFoundError, ItemUnavailableError, InvalidPriceError,
            InsufficientLoyaltyPointsError
        """
        if not lines:
            raise EmptyOrderError()
        if payment_method not in Order.PaymentMethod.values:
            raise InvalidPaymentMethodError(
                f"Unknown payment method: {payment_method}",
                {"payment_method": payment_method, "allowed": list(Order.PaymentMethod.values)},
            )
        for index, line in enumerate(lines):
            if line.quantity is None or line.quantity < 1:
                raise InvalidSelectionError(
                    "Quantity must be at least 1",
                    {"line": index, "quantity": line.quantity},
                )

        with transaction.atomic():
            customer, is_new = CustomerLedgerService.find_or_create(
                phone=customer_phone, email=customer_email, name=customer_name
            )

            priced_lines = [OrderService.price_line(line) for line in lines]
            totals = calculate_order_totals(priced.total_price for priced in priced_lines)

            points_redeemed = 0
            if payment_method == Order.PaymentMethod.LOYALTY:
                points_redeemed = OrderService._check_loyalty_balance(customer, totals.total)

            order = Order.objects.create(
                order_number=OrderService.next_order_number(),
                customer=customer,
                customer_name=OrderService._receipt_name(customer, customer_name),
                customer_phone=(customer.phone if customer and customer.phone else customer_phone) or "",
                subtotal=totals.subtotal,
                tax=totals.tax,
                total=totals.total,
                payment_method=payment_method,
                loyalty_points_redeemed=points_redeemed,
                notes=notes or "",
                location=location,
                created_by=created_by,
            )
            for priced in priced_lines:
                OrderService._create_order_item(order, priced)

            if points_redeemed:
                OrderService._debit_loyalty_payment(customer, order)

        logger.info(
            f"Order {order.order_number} created: {len(priced_lines)} line(s), "
            f"total {order.total}, {order.payment_method}"
        )

        summary = None
        if customer is not None:
            OrderService._apply_customer_effects(customer, order)
            customer.refresh_from_db()
            summary = CustomerSummary.from_customer(customer, is_new=is_new)

        return OrderCreationResult(order=order, customer=summary)

    @staticmethod
    def price_line(line: OrderLineInput) -> PricedLine:
        """
        Price one line against the live menu.

        A staff override replaces the calculated unit price; the item must
        still exist and be available.
        """
        item_ref = MenuLookupService.get_item_ref(line.menu_item_id)
        if item_ref is None:
            raise ItemNotFoundError(
                f"Menu item {line.menu_item_id} not found",
                {"menu_item_id": str(line.menu_item_id)},
            )
        if not item_ref.is_available:
            raise ItemUnavailableError(
                f"Menu item {item_ref.name} is not available",
                {"menu_item_id": item_ref.id},
            )

        override = validate_price_override(line.unit_price_override)
        if override is not None:
            return PricedLine(
                line=line,
                item_ref=item_ref,
                unit_price=override,
                total_price=override * line.quantity,
            )

        breakdown = calculate_item_price(item_ref, line.variant_ids, line.addons)
        return PricedLine(
            line=line,
            item_ref=item_ref,
            unit_price=breakdown.total_price,
            total_price=breakdown.total_price * line.quantity,
            breakdown=breakdown,
        )

    @staticmethod
    def next_order_number(business_date=None) -> str:
        """
        Allocate the next ORD-YYYYMMDD-#### number for the business day.

        Must run inside the transaction that inserts the order: the UPDATE
        keeps today's counter row locked until that transaction ends.
        """
        business_date = business_date or timezone.localdate()
        DailyOrderSequence.objects.get_or_create(business_date=business_date)
        DailyOrderSequence.objects.filter(business_date=business_date).update(
            last_value=F("last_value") + 1
        )
        value = DailyOrderSequence.objects.values_list("last_value", flat=True).get(
            business_date=business_date
        )
        return f"{ORDER_NUMBER_PREFIX}-{business_date:%Y%m%d}-{value:04d}"

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return (
                Order.objects.select_related("customer", "location", "created_by")
                .prefetch_related("items__addons")
                .get(pk=order_id)
            )
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise OrderNotFoundError(details={"order_id": str(order_id)})

    @staticmethod
    @transaction.atomic
    def update_payment_status(order_id, payment_status: str) -> Order:
        """
        Record the outcome of an out-of-band payment.
        """
        if payment_status not in Order.PaymentStatus.values:
            raise InvalidPaymentStatusError(
                f"Unknown payment status: {payment_status}",
                {"payment_status": payment_status, "allowed": list(Order.PaymentStatus.values)},
            )
        try:
            order = Order.objects.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise OrderNotFoundError(details={"order_id": str(order_id)})

        previous = order.payment_status
        order.payment_status = payment_status
        order.save(update_fields=["payment_status", "updated_at"])
        logger.info(f"Order {order.order_number} payment status {previous} -> {payment_status}")
        return order

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _check_loyalty_balance(customer: Optional[Customer], total: Decimal) -> int:
        """
        Lock the customer row and return the points the order will spend.

        The lock is held until the order transaction ends, so no other
        loyalty order for this customer can spend the same points.
        """
        required = loyalty_points_for_payment(total)
        if customer is None:
            raise InsufficientLoyaltyPointsError(
                "Loyalty payment requires a customer",
                {"required": required},
            )
        available = (
            Customer.objects.select_for_update()
            .values_list("loyalty_points", flat=True)
            .get(pk=customer.pk)
        )
        if available < required:
            raise InsufficientLoyaltyPointsError(
                f"Insufficient loyalty points. Customer has {available} "
                f"points but the order needs {required}",
                {"available": available, "required": required},
            )
        return required

    @staticmethod
    def _debit_loyalty_payment(customer: Customer, order: Order) -> None:
        # Guarded debit; a failure rolls back the order with it
        try:
            CustomerLedgerService.debit_loyalty_points(customer.pk, order.loyalty_points_redeemed)
        except InsufficientLoyaltyBalanceError:
            raise InsufficientLoyaltyPointsError(
                "Insufficient loyalty points. The balance changed while the order was being placed",
                {"required": order.loyalty_points_redeemed},
            )

    @staticmethod
    def _receipt_name(customer: Optional[Customer], customer_name: Optional[str]) -> str:
        if customer_name and customer_name.strip():
            return " ".join(customer_name.split())
        if customer is not None:
            return customer.full_name
        return ""

    @staticmethod
    def _override_snapshot(priced: PricedLine) -> _Snapshot:
        """Selections on an overridden line, kept for the receipt at list price."""
        snapshot = _Snapshot()
        for variant_id in priced.line.variant_ids:
            variant = priced.item_ref.get_variant(variant_id)
            if variant is not None:
                snapshot.variants.append({"id": variant.id, "name": variant.name, "price": str(variant.price)})
        for selection in priced.line.addons:
            addon = priced.item_ref.get_addon(selection.addon_id)
            if addon is not None and selection.quantity and selection.quantity >= 1:
                snapshot.addons.append(
                    {
                        "addon_id": addon.addon_id,
                        "name": addon.name,
                        "unit_price": addon.effective_price,
                        "quantity": selection.quantity,
                        "total_price": addon.effective_price * selection.quantity,
                    }
                )
        return snapshot

    @staticmethod
    def _breakdown_snapshot(breakdown: PriceBreakdown) -> _Snapshot:
        return _Snapshot(
            variants=[
                {"id": v.variant_id, "name": v.name, "price": str(v.price)}
                for v in breakdown.variant_contributions
            ],
            addons=[
                {
                    "addon_id": a.addon_id,
                    "name": a.name,
                    "unit_price": a.unit_price,
                    "quantity": a.quantity,
                    "total_price": a.total_price,
                }
                for a in breakdown.addon_contributions
            ],
        )

    @staticmethod
    def _create_order_item(order: Order, priced: PricedLine) -> OrderItem:
        if priced.breakdown is not None:
            snapshot = OrderService._breakdown_snapshot(priced.breakdown)
        else:
            snapshot = OrderService._override_snapshot(priced)

        item = OrderItem.objects.create(
            order=order,
            menu_item_id=priced.item_ref.id,
            item_name=priced.item_ref.name,
            quantity=priced.line.quantity,
            variant_snapshot=snapshot.variants,
            special_instructions=priced.line.special_instructions or "",
            unit_price=priced.unit_price,
            total_price=priced.total_price,
            is_price_overridden=priced.is_price_overridden,
        )
        if snapshot.addons:
            OrderItemAddon.objects.bulk_create(
                [
                    OrderItemAddon(
                        order_item=item,
                        addon_id=addon["addon_id"],
                        name=addon["name"],
                        unit_price=addon["unit_price"],
                        quantity=addon["quantity"],
                        total_price=to_decimal(addon["total_price"]),
                    )
                    for addon in snapshot.addons
                ]
            )
        return item

    @staticmethod
    def _apply_customer_effects(customer: Customer, order: Order) -> None:
        try:
            CustomerLedgerService.record_order(customer, order)
        except Exception:
            logger.exception(
                f"Customer ledger update failed for order {order.order_number}; "
                f"run reconcile_customer_stats --customer {customer.pk}"
            )
