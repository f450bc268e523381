"""
Customer-specific exceptions with PII protection.
"""
from rest_framework import status

from core_backend.exceptions import ServiceError


class CustomerServiceError(ServiceError):
    """
    Base exception for customer service errors.
    Automatically scrubs PII from error messages.
    """
    code = "CUSTOMER_ERROR"


class CustomerValidationError(CustomerServiceError):
    """Raised when customer data validation fails"""
    code = "CUSTOMER_VALIDATION_ERROR"


class CustomerNotFoundError(CustomerServiceError):
    """Raised when customer is not found"""
    code = "CUSTOMER_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class InsufficientLoyaltyBalanceError(CustomerServiceError):
    """Raised when a guarded loyalty debit would take the balance below zero"""
    code = "INSUFFICIENT_LOYALTY_POINTS"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
