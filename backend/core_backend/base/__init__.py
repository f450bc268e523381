"""
Core backend base components.

This package provides foundational classes that the API apps build on so that
pagination, filtering and query optimisation behave the same everywhere.
"""

from .viewsets import ReadOnlyBaseViewSet
from .serializers import BaseModelSerializer, TimestampedSerializer
from .mixins import OptimizedQuerysetMixin
from .filters import BaseFilterSet, normalize_datetime_value

__all__ = [
    # ViewSets
    'ReadOnlyBaseViewSet',

    # Serializers
    'BaseModelSerializer',
    'TimestampedSerializer',

    # Mixins
    'OptimizedQuerysetMixin',

    # Filters
    'BaseFilterSet',
    'normalize_datetime_value',
]
