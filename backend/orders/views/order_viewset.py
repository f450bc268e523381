from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.base import ReadOnlyBaseViewSet
from customers.serializers import CustomerSummarySerializer
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    PaymentStatusUpdateSerializer,
)
from orders.services import OrderService

# Import action mixins
from .cancellation_actions import CancellationActionsMixin


class OrderViewSet(CancellationActionsMixin, ReadOnlyBaseViewSet):
    """
    ViewSet for orders.

    Reads go through the standard list/retrieve endpoints. Writes go through
    the service layer:
    - create: OrderService.create_order
    - payment-status: OrderService.update_payment_status
    - cancellation workflow (CancellationActionsMixin)
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "order_number", "total"]

    def get_serializer_class(self):
        """
        Return the appropriate serializer class based on the request action.
        """
        if self.action == "create":
            return OrderCreateSerializer
        if self.action == "payment_status":
            return PaymentStatusUpdateSerializer
        return OrderSerializer

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = OrderService.create_order(
            created_by=request.user,
            **serializer.to_service_kwargs(),
        )
        order = OrderService.get_order(result.order.pk)

        return Response(
            {
                "order": OrderSerializer(order, context=self.get_serializer_context()).data,
                "customer": CustomerSummarySerializer(result.customer).data if result.customer else None,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["patch"], url_path="payment-status")
    def payment_status(self, request: Request, pk=None) -> Response:
        """
        Record the outcome of an out-of-band payment (PENDING / PAID / FAILED).
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        OrderService.update_payment_status(pk, serializer.validated_data["payment_status"])
        order = OrderService.get_order(pk)
        return Response(OrderSerializer(order, context=self.get_serializer_context()).data)
