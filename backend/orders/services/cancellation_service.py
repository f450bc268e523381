from dataclasses import dataclass
from typing import List, Optional
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from customers.services import CustomerLedgerService
from orders.exceptions import (
    CancellationAlreadyRequestedError,
    EmptyReasonError,
    NotInRequestedStateError,
    OrderNotFoundError,
)
from orders.models import Order, OrderStatusHistory, RefundInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CancellationResult:
    order: Order
    refund_info: Optional[RefundInfo] = None

    @property
    def message(self) -> str:
        return self.refund_info.message if self.refund_info else ""


class OrderCancellationService:
    """
    Cancellation request / decision workflow.

    The cancellation record lives on the Order row. Every transition is a
    conditional UPDATE on the current cancellation_status, so when two staff
    members act on the same order exactly one of them wins.
    """

    # Valid transitions for the cancellation state machine
    VALID_CANCELLATION_TRANSITIONS = {
        Order.CancellationStatus.NONE: [
            Order.CancellationStatus.REQUESTED,
        ],
        Order.CancellationStatus.REQUESTED: [
            Order.CancellationStatus.APPROVED,
            Order.CancellationStatus.REJECTED,
        ],
        Order.CancellationStatus.APPROVED: [],
        Order.CancellationStatus.REJECTED: [],
    }

    @staticmethod
    def can_transition(current_status: str, new_status: str) -> bool:
        return new_status in OrderCancellationService.VALID_CANCELLATION_TRANSITIONS.get(current_status, [])

    @staticmethod
    def _get_order(order_id, lock=False) -> Order:
        queryset = Order.objects.select_for_update() if lock else Order.objects.all()
        try:
            return queryset.get(pk=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise OrderNotFoundError(details={"order_id": str(order_id)})

    @staticmethod
    def build_refund_info(order: Order) -> RefundInfo:
        """
        Refund owed if the order were cancelled now: the full total by the
        original payment method, plus the loyalty points it actually spent.
        """
        points = order.loyalty_points_redeemed if order.is_loyalty_payment else 0
        return RefundInfo(
            payment_method=order.payment_method,
            amount=order.total,
            loyalty_points_to_refund=points,
        )

    @staticmethod
    @transaction.atomic
    def request_cancellation(order_id, actor, reason: str) -> CancellationResult:
        """
        Move an order from NONE to REQUESTED and snapshot the refund.

        Raises:
            EmptyReasonError: blank reason
            OrderNotFoundError: no such order
            CancellationAlreadyRequestedError: a request already exists or was decided
        """
        reason = (reason or "").strip()
        if not reason:
            raise EmptyReasonError()

        order = OrderCancellationService._get_order(order_id)
        current = order.cancellation_status
        if not OrderCancellationService.can_transition(current, Order.CancellationStatus.REQUESTED):
            raise CancellationAlreadyRequestedError(
                details={"order_number": order.order_number, "cancellation_status": current}
            )

        refund = OrderCancellationService.build_refund_info(order)
        now = timezone.now()
        updated = Order.objects.filter(
            pk=order.pk, cancellation_status=Order.CancellationStatus.NONE
        ).update(
            cancellation_status=Order.CancellationStatus.REQUESTED,
            cancellation_reason=reason,
            cancellation_requested_by=actor,
            cancellation_requested_at=now,
            refund_payment_method=refund.payment_method,
            refund_amount=refund.amount,
            refund_loyalty_points=refund.loyalty_points_to_refund,
            updated_at=now,
        )
        if not updated:
            # Lost the race to another request
            raise CancellationAlreadyRequestedError(details={"order_number": order.order_number})

        OrderStatusHistory.objects.create(
            order=order,
            previous_status=Order.CancellationStatus.NONE,
            new_status=Order.CancellationStatus.REQUESTED,
            reason=reason,
            changed_by=actor,
        )

        order.refresh_from_db()
        logger.info(f"Cancellation requested for order {order.order_number} by user {getattr(actor, 'pk', None)}")
        return CancellationResult(order=order, refund_info=order.refund_info)

    @staticmethod
    def approve_cancellation(order_id, actor, approved: bool, admin_notes: str = "") -> CancellationResult:
        """
        Decide a pending cancellation request.

        Approval cancels the order and, for loyalty-paid orders, credits back
        exactly the points snapshotted at request time. Rejection changes no
        balances. Both decisions are final.

        Raises:
            OrderNotFoundError: no such order
            NotInRequestedStateError: nothing pending, or another decision won
        """
        admin_notes = (admin_notes or "").strip()
        new_status = Order.CancellationStatus.APPROVED if approved else Order.CancellationStatus.REJECTED

        with transaction.atomic():
            order = OrderCancellationService._get_order(order_id, lock=True)
            if not OrderCancellationService.can_transition(order.cancellation_status, new_status):
                raise NotInRequestedStateError(
                    details={"order_number": order.order_number, "cancellation_status": order.cancellation_status}
                )

            now = timezone.now()
            changes = {
                "cancellation_status": new_status,
                "cancellation_decided_by": actor,
                "cancellation_decided_at": now,
                "cancellation_admin_notes": admin_notes,
                "updated_at": now,
            }
            if approved:
                changes["status"] = Order.OrderStatus.CANCELLED

            updated = Order.objects.filter(
                pk=order.pk, cancellation_status=Order.CancellationStatus.REQUESTED
            ).update(**changes)
            if not updated:
                raise NotInRequestedStateError(details={"order_number": order.order_number})

            if approved and order.refund_loyalty_points:
                if order.customer_id is None:
                    logger.warning(
                        f"Order {order.order_number} owes {order.refund_loyalty_points} loyalty points "
                        f"but has no customer; nothing credited"
                    )
                else:
                    CustomerLedgerService.credit_loyalty_points(order.customer_id, order.refund_loyalty_points)

            OrderStatusHistory.objects.create(
                order=order,
                previous_status=Order.CancellationStatus.REQUESTED,
                new_status=new_status,
                reason=admin_notes,
                changed_by=actor,
            )

        order.refresh_from_db()
        logger.info(
            f"Cancellation {new_status.lower()} for order {order.order_number} by user {getattr(actor, 'pk', None)}"
        )
        return CancellationResult(order=order, refund_info=order.refund_info if approved else None)

    @staticmethod
    def get_cancellation_requests():
        """Orders waiting for a decision, oldest request first."""
        return (
            Order.objects.filter(cancellation_status=Order.CancellationStatus.REQUESTED)
            .select_related("customer", "cancellation_requested_by")
            .order_by("cancellation_requested_at", "created_at")
        )

    @staticmethod
    def get_order_status_history(order_id) -> List[OrderStatusHistory]:
        order = OrderCancellationService._get_order(order_id)
        return list(order.status_history.select_related("changed_by").order_by("created_at", "id"))
