"""
Orders serializers package - modular serializer layer.
"""

# Request serializers
from .order_input_serializers import (
    AddonSelectionSerializer,
    OrderLineSerializer,
    OrderCreateSerializer,
    PaymentStatusUpdateSerializer,
)

# Order serializers
from .order_serializers import (
    OrderItemAddonSerializer,
    OrderItemSerializer,
    RefundInfoSerializer,
    OrderSerializer,
)

# Cancellation serializers
from .cancellation_serializers import (
    CancellationRequestSerializer,
    CancellationDecisionSerializer,
    OrderStatusHistorySerializer,
)

__all__ = [
    # Requests
    'AddonSelectionSerializer',
    'OrderLineSerializer',
    'OrderCreateSerializer',
    'PaymentStatusUpdateSerializer',
    # Orders
    'OrderItemAddonSerializer',
    'OrderItemSerializer',
    'RefundInfoSerializer',
    'OrderSerializer',
    # Cancellation
    'CancellationRequestSerializer',
    'CancellationDecisionSerializer',
    'OrderStatusHistorySerializer',
]
