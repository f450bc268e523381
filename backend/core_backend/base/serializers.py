from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer that provides common functionality.

    Subclasses may declare `select_related_fields` / `prefetch_related_fields`
    on their Meta; OptimizedQuerysetMixin applies them to the view queryset.
    """

    class Meta:
        # Default optimization fields (can be overridden)
        select_related_fields = []
        prefetch_related_fields = []


class TimestampedSerializer(BaseModelSerializer):
    """
    Base serializer for models with created_at/updated_at fields.
    Provides consistent timestamp handling.
    """

    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    class Meta:
        abstract = True
