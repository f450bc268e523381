"""
Customer serializers.
"""
from rest_framework import serializers
from core_backend.base import BaseModelSerializer

from .models import Customer


class CustomerSerializer(BaseModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Customer
        fields = [
            "id",
            "phone",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "total_orders",
            "total_spent",
            "loyalty_points",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields
        select_related_fields = []
        prefetch_related_fields = []


class CustomerSummarySerializer(serializers.Serializer):
    """
    Renders a services.CustomerSummary returned with a newly created order.
    """

    id = serializers.CharField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    phone = serializers.CharField(allow_null=True)
    email = serializers.CharField(allow_null=True)
    total_orders = serializers.IntegerField()
    total_spent = serializers.DecimalField(max_digits=12, decimal_places=2)
    loyalty_points = serializers.IntegerField()
    is_new = serializers.BooleanField()
