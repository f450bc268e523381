from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from .mixins import OptimizedQuerysetMixin
from ..pagination import StandardPagination


class ReadOnlyBaseViewSet(OptimizedQuerysetMixin, viewsets.ReadOnlyModelViewSet):
    """
    Base ViewSet for read endpoints.

    Features:
    - Automatic query optimization from serializer Meta
    - Standard pagination, filtering and ordering

    Write operations that go through a service layer are added by subclasses
    as explicit `create()` methods or `@action`s rather than ModelViewSet's
    generic save path.
    """

    pagination_class = StandardPagination
    filter_backends = [
        DjangoFilterBackend,
        filters.OrderingFilter,
    ]
    ordering = ['-created_at']
