from rest_framework import serializers

from core_backend.base import BaseModelSerializer
from orders.models import OrderStatusHistory


class CancellationRequestSerializer(serializers.Serializer):
    # Blank reasons are rejected by the service as EMPTY_REASON
    reason = serializers.CharField(allow_blank=True, trim_whitespace=True)


class CancellationDecisionSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
    admin_notes = serializers.CharField(required=False, allow_blank=True, default="")


class OrderStatusHistorySerializer(BaseModelSerializer):
    changed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "previous_status",
            "new_status",
            "reason",
            "changed_by",
            "changed_by_name",
            "created_at",
        ]
        read_only_fields = fields
        select_related_fields = ["changed_by"]

    def get_changed_by_name(self, obj):
        return obj.changed_by.display_name if obj.changed_by else None
