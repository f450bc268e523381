"""
Project-wide service exceptions and the DRF exception handler.

Every service-layer error carries a machine readable `code` and an HTTP
`status_code`. The handler turns them (and DRF's own errors) into the single
error envelope used by the API:

    {"success": false, "error": {"code": ..., "message": ..., "details": ...}}
"""
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core_backend.utils import get_client_ip
from core_backend.utils.pii import PIIProtection, scrub_pii_from_string, get_pii_safe_logger

logger = get_pii_safe_logger(__name__)


class ServiceError(Exception):
    """
    Base exception for service-layer errors.
    Automatically scrubs PII from error messages and details.
    """

    code = "SERVICE_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The request could not be completed."

    def __init__(self, message=None, details=None):
        message = message or self.default_message
        if isinstance(message, str):
            message = scrub_pii_from_string(message)

        if details:
            details = PIIProtection.scrub_pii_from_dict(details)

        super().__init__(message)
        self.message = message
        self.details = details or {}


def _error_response(code, message, details, status_code):
    return Response(
        {
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details,
            },
        },
        status=status_code,
    )


def _scrub(data):
    if isinstance(data, dict):
        return PIIProtection.scrub_pii_from_dict(data)
    if isinstance(data, list):
        return [_scrub(item) for item in data]
    if isinstance(data, str):
        return scrub_pii_from_string(data)
    return data


def api_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER that wraps every error in the standard envelope.
    """
    request = context.get("request")

    if isinstance(exc, ServiceError):
        if exc.status_code >= 500:
            logger.error(f"Service error {exc.code}: {exc.message}")
        elif request is not None:
            logger.info(
                f"Rejected {request.method} {request.path}: {exc.code}",
                extra={"ip": get_client_ip(request)},
            )
        return _error_response(exc.code, exc.message, _scrub(exc.details), exc.status_code)

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(detail=exc.message_dict if hasattr(exc, "error_dict") else exc.messages)

    response = exception_handler(exc, context)
    if response is None:
        # Unhandled; let Django's 500 handling log it
        return None

    if isinstance(exc, ValidationError):
        code = "VALIDATION_ERROR"
        message = "Invalid request data."
        details = _scrub(response.data)
    elif isinstance(exc, Http404):
        code = "NOT_FOUND"
        message = "Not found."
        details = {}
    elif isinstance(exc, APIException):
        codes = exc.get_codes()
        code = codes.upper() if isinstance(codes, str) else "API_ERROR"
        message = str(exc.detail) if isinstance(exc.detail, str) else "Request failed."
        details = {}
    else:
        code = "API_ERROR"
        message = "Request failed."
        details = _scrub(response.data)

    error_response = _error_response(code, message, details, response.status_code)
    for header in ("WWW-Authenticate", "Retry-After"):
        if header in response:
            error_response[header] = response[header]
    return error_response
