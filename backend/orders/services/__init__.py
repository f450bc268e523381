"""
Orders services package - service layer for the order transaction core.

- OrderService: Order creation (pricing, numbering, persistence, customer ledger) and payment status
- OrderCancellationService: Cancellation request/decision workflow and its audit trail
"""

# Core order operations
from .order_service import OrderService, OrderLineInput, OrderCreationResult, PricedLine

# Cancellation workflow
from .cancellation_service import OrderCancellationService, CancellationResult

__all__ = [
    # Core
    'OrderService',
    'OrderLineInput',
    'OrderCreationResult',
    'PricedLine',
    # Cancellation
    'OrderCancellationService',
    'CancellationResult',
]
