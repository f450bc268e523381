import django_filters
from django.utils import timezone
from django.utils.dateparse import parse_datetime, parse_date
from datetime import datetime, date, time
import logging

logger = logging.getLogger(__name__)


def normalize_datetime_value(value, *, is_end=False):
    """
    Normalize a date or datetime value to a timezone-aware datetime.

    Args:
        value: A string (date or datetime), date object, or datetime object
        is_end: If True and value is date-only, returns end of day (23:59:59.999999)
                If False, returns start of day (00:00:00)

    Examples:
        normalize_datetime_value("2025-11-11", is_end=False)  # 2025-11-11 00:00:00
        normalize_datetime_value("2025-11-11", is_end=True)   # 2025-11-11 23:59:59.999999
        normalize_datetime_value("2025-11-11T10:30:00Z")      # 2025-11-11 10:30:00 (unchanged)
    """
    if not value:
        return value

    if isinstance(value, datetime):
        if timezone.is_naive(value):
            return timezone.make_aware(value)
        return value

    if isinstance(value, str):
        dt = parse_datetime(value)
        if dt:
            if timezone.is_naive(dt):
                return timezone.make_aware(dt)
            return dt
        value = parse_date(value)
        if value is None:
            return None

    if isinstance(value, date):
        return timezone.make_aware(datetime.combine(value, time.max if is_end else time.min))

    return value


class BaseFilterSet(django_filters.FilterSet):
    """
    Base filter set with inclusive, date-aware `start_date` / `end_date` filters
    on `created_at`.

    A date-only `end_date` such as "2025-11-11" covers the whole day.
    """

    start_date = django_filters.CharFilter(method='filter_start_date')
    end_date = django_filters.CharFilter(method='filter_end_date')

    def filter_start_date(self, queryset, name, value):
        start = normalize_datetime_value(value, is_end=False)
        if start is None:
            logger.warning(f"Ignoring unparseable start_date filter: {value!r}")
            return queryset
        return queryset.filter(created_at__gte=start)

    def filter_end_date(self, queryset, name, value):
        end = normalize_datetime_value(value, is_end=True)
        if end is None:
            logger.warning(f"Ignoring unparseable end_date filter: {value!r}")
            return queryset
        return queryset.filter(created_at__lte=end)
