from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import (
    CancellationDecisionSerializer,
    CancellationRequestSerializer,
    OrderSerializer,
    OrderStatusHistorySerializer,
    RefundInfoSerializer,
)
from orders.services import OrderCancellationService
from users.permissions import IsManagerOrHigher


class CancellationActionsMixin:
    """
    Mixin for the cancellation workflow actions

    This mixin provides action methods for OrderViewSet.
    """

    def _cancellation_response(self, result, response_status=status.HTTP_200_OK):
        refund = result.refund_info
        return Response(
            {
                "order": OrderSerializer(result.order, context=self.get_serializer_context()).data,
                "refund_info": RefundInfoSerializer(
                    {
                        "payment_method": refund.payment_method,
                        "amount": refund.amount,
                        "loyalty_points_to_refund": refund.loyalty_points_to_refund,
                        "message": refund.message,
                    }
                ).data if refund else None,
                "message": result.message,
            },
            status=response_status,
        )

    @action(detail=True, methods=["post"], url_path="request-cancellation")
    def request_cancellation(self, request: Request, pk=None) -> Response:
        """
        Ask for an order to be cancelled. Any staff member may request.
        """
        serializer = CancellationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = OrderCancellationService.request_cancellation(
            order_id=pk,
            actor=request.user,
            reason=serializer.validated_data["reason"],
        )
        return self._cancellation_response(result)

    @action(
        detail=True,
        methods=["post"],
        url_path="approve-cancellation",
        permission_classes=[IsManagerOrHigher],
    )
    def approve_cancellation(self, request: Request, pk=None) -> Response:
        """
        Approve or reject a pending cancellation request (managers and above).
        """
        serializer = CancellationDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = OrderCancellationService.approve_cancellation(
            order_id=pk,
            actor=request.user,
            approved=serializer.validated_data["approved"],
            admin_notes=serializer.validated_data.get("admin_notes", ""),
        )
        return self._cancellation_response(result)

    @action(
        detail=False,
        methods=["get"],
        url_path="cancellation-requests",
        permission_classes=[IsManagerOrHigher],
    )
    def cancellation_requests(self, request: Request) -> Response:
        """
        Pending cancellation requests, oldest first.
        """
        queryset = OrderCancellationService.get_cancellation_requests().prefetch_related("items__addons")
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = OrderSerializer(page, many=True, context=self.get_serializer_context())
            return self.get_paginated_response(serializer.data)
        serializer = OrderSerializer(queryset, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    @action(detail=True, methods=["get"], url_path="status-history")
    def status_history(self, request: Request, pk=None) -> Response:
        """
        Cancellation audit trail for one order, in the order it happened.
        """
        history = OrderCancellationService.get_order_status_history(pk)
        serializer = OrderStatusHistorySerializer(history, many=True)
        return Response(serializer.data)
