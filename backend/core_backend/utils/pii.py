"""
Global PII protection utilities for the entire backend.

Customer phone numbers and emails are captured at the till for every order,
so anything that logs customer context goes through get_pii_safe_logger().
"""
import logging
import re
from typing import Dict, Any, Optional


class PIIProtection:
    """Utilities for protecting personally identifiable information."""

    # Define PII fields that should be protected across all apps
    PII_FIELDS = {
        'email', 'phone', 'phone_number', 'first_name', 'last_name',
        'customer_name', 'customer_phone', 'customer_email', 'full_name',
    }

    @staticmethod
    def mask_email(email: Optional[str]) -> str:
        """
        Mask email address for safe display.
        Example: john.doe@example.com -> jo******@example.com
        """
        if not email or '@' not in email:
            return email or ''

        local, domain = email.split('@', 1)
        if len(local) <= 2:
            masked_local = local[:1] + '*'
        else:
            masked_local = local[:2] + '*' * (len(local) - 2)
        return f"{masked_local}@{domain}"

    @staticmethod
    def mask_phone(phone: Optional[str]) -> str:
        """
        Mask phone number for safe display, keeping the last 4 digits.
        Example: +91-98765-43210 -> +**-*****-*3210
        """
        if not phone:
            return phone or ''

        total_digits = len(re.sub(r'\D', '', phone))
        if total_digits < 4:
            return '*' * len(phone)

        masked = []
        seen = 0
        for char in phone:
            if char.isdigit():
                seen += 1
                masked.append('*' if seen <= total_digits - 4 else char)
            else:
                masked.append(char)
        return ''.join(masked)

    @staticmethod
    def mask_name(name: Optional[str]) -> str:
        """
        Mask name for safe display.
        Example: John -> J***
        """
        if not name:
            return name or ''
        if len(name) <= 1:
            return '*'
        return name[0] + '*' * (len(name) - 1)

    @staticmethod
    def mask_field_by_type(field_name: str, value: Optional[str]) -> str:
        """
        Automatically mask a field based on its name.
        """
        if not value:
            return value or ''

        field_lower = field_name.lower()
        if 'email' in field_lower:
            return PIIProtection.mask_email(value)
        if 'phone' in field_lower:
            return PIIProtection.mask_phone(value)
        if 'name' in field_lower:
            return PIIProtection.mask_name(value)
        if len(value) <= 2:
            return '*' * len(value)
        return value[:2] + '*' * (len(value) - 2)

    @staticmethod
    def scrub_pii_from_dict(data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Remove PII fields from dictionary recursively.
        Used for safe logging and error responses.
        """
        if not isinstance(data, dict):
            return data

        scrubbed = {}
        for key, value in data.items():
            if str(key).lower() in PIIProtection.PII_FIELDS:
                scrubbed[key] = '[REDACTED]'
            elif isinstance(value, dict):
                scrubbed[key] = PIIProtection.scrub_pii_from_dict(value)
            elif isinstance(value, list):
                scrubbed[key] = [
                    PIIProtection.scrub_pii_from_dict(item) if isinstance(item, dict) else item
                    for item in value
                ]
            else:
                scrubbed[key] = value
        return scrubbed

    @staticmethod
    def safe_str_representation(obj, phone_field: str = 'phone', name_fields: list = None) -> str:
        """
        Create a safe string representation of an object with PII.
        """
        if name_fields is None:
            name_fields = ['first_name', 'last_name']

        parts = []
        for field in name_fields:
            value = getattr(obj, field, None)
            if value:
                parts.append(PIIProtection.mask_name(value))

        phone = getattr(obj, phone_field, None)
        if phone:
            parts.append(f"({PIIProtection.mask_phone(phone)})")

        if not parts:
            return f"{obj.__class__.__name__} #{getattr(obj, 'id', 'unknown')}"
        return ' '.join(parts)


def scrub_pii_from_string(text: str) -> str:
    """
    Scrub emails and phone-like digit runs from free text (error messages).
    """
    email_pattern = r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'
    text = re.sub(email_pattern, lambda m: PIIProtection.mask_email(m.group()), text)

    # Not inside order numbers such as ORD-20260115-0007
    phone_pattern = r'(?<![\w-])\+?\d[\d\s-]{8,}\d(?![\w-])'
    text = re.sub(phone_pattern, lambda m: PIIProtection.mask_phone(m.group()), text)
    return text


class PIISafeLogger:
    """
    Logger wrapper that automatically scrubs PII from log messages.
    Use this instead of regular Python logging for any logs that might contain PII.
    """

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def _safe_log(self, level: int, message: str, *args, **kwargs):
        extra = kwargs.get('extra')
        if extra:
            kwargs['extra'] = PIIProtection.scrub_pii_from_dict(extra)
        if isinstance(message, str):
            message = scrub_pii_from_string(message)
        self.logger.log(level, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._safe_log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._safe_log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._safe_log(logging.ERROR, message, *args, **kwargs)

    def exception(self, message: str, *args, **kwargs):
        kwargs.setdefault('exc_info', True)
        self._safe_log(logging.ERROR, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._safe_log(logging.DEBUG, message, *args, **kwargs)


def get_pii_safe_logger(name: str) -> PIISafeLogger:
    """
    Get a PII-safe logger instance.

    Usage:
        from core_backend.utils.pii import get_pii_safe_logger
        logger = get_pii_safe_logger(__name__)
        logger.info("Customer created", extra={"phone": "+919876543210"})  # Phone will be redacted
    """
    return PIISafeLogger(name)
