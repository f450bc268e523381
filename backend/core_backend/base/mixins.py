from rest_framework.viewsets import ViewSetMixin
from django.db.models import Prefetch


class OptimizedQuerysetMixin(ViewSetMixin):
    """
    A ViewSet mixin that optimizes the queryset by inspecting the serializer
    for the current action and applying the `select_related_fields` and
    `prefetch_related_fields` declared on its Meta.
    """

    def _get_optimizations(self, serializer_class):
        select_related = set()
        prefetch_related = []

        meta = getattr(serializer_class, "Meta", None)
        if meta is None:
            return select_related, prefetch_related

        for field in getattr(meta, "select_related_fields", []):
            select_related.add(field)

        for field in getattr(meta, "prefetch_related_fields", []):
            # Prefetch objects are passed through untouched
            if isinstance(field, Prefetch) or field not in prefetch_related:
                prefetch_related.append(field)

        return select_related, prefetch_related

    def get_queryset(self):
        """
        Apply optimizations based on the current action's serializer.
        """
        queryset = super().get_queryset()

        try:
            serializer_class = self.get_serializer_class()
        except (AttributeError, AssertionError):
            return queryset

        select_related, prefetch_related = self._get_optimizations(serializer_class)

        if select_related:
            queryset = queryset.select_related(*select_related)

        if prefetch_related:
            queryset = queryset.prefetch_related(*prefetch_related)

        return queryset
