"""
Order service exceptions.

Each error carries the machine readable `code` and HTTP `status_code` that
core_backend.exceptions.api_exception_handler puts on the response.
"""
from rest_framework import status

from core_backend.exceptions import ServiceError


class OrderServiceError(ServiceError):
    """Base exception for order and cancellation errors"""
    code = "ORDER_ERROR"


# --- Validation (400) ---

class EmptyOrderError(OrderServiceError):
    code = "EMPTY_ORDER"
    default_message = "An order needs at least one item."


class InvalidPaymentMethodError(OrderServiceError):
    code = "INVALID_PAYMENT_METHOD"
    default_message = "Unknown payment method."


class InvalidPaymentStatusError(OrderServiceError):
    code = "INVALID_PAYMENT_STATUS"
    default_message = "Unknown payment status."


class InvalidSelectionError(OrderServiceError):
    """Variant/addon selection or quantity not valid for the menu item"""
    code = "INVALID_SELECTION"


class InvalidPriceError(OrderServiceError):
    code = "INVALID_PRICE"
    default_message = "Price override must be a non-negative amount."


class EmptyReasonError(OrderServiceError):
    code = "EMPTY_REASON"
    default_message = "A cancellation reason is required."


class ItemUnavailableError(OrderServiceError):
    code = "ITEM_UNAVAILABLE"


# --- Not found (404) ---

class ItemNotFoundError(OrderServiceError):
    code = "ITEM_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class OrderNotFoundError(OrderServiceError):
    code = "ORDER_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Order not found."


# --- State conflicts (409) ---

class CancellationAlreadyRequestedError(OrderServiceError):
    code = "ALREADY_REQUESTED_OR_DECIDED"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Cancellation has already been requested or decided for this order."


class NotInRequestedStateError(OrderServiceError):
    code = "NOT_IN_REQUESTED_STATE"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Order has no pending cancellation request."


# --- Funds (422) ---

class InsufficientLoyaltyPointsError(OrderServiceError):
    code = "INSUFFICIENT_LOYALTY_POINTS"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Customer does not have enough loyalty points."
