import django_filters
from core_backend.base.filters import BaseFilterSet
from .models import Order


class OrderFilter(BaseFilterSet):
    """
    Order list filters.

    start_date / end_date come from BaseFilterSet (inclusive, date-aware).
    customer_phone matches any part of the receipt phone number.
    """

    customer_phone = django_filters.CharFilter(field_name="customer_phone", lookup_expr="icontains")
    cancellation_status = django_filters.ChoiceFilter(choices=Order.CancellationStatus.choices)
    payment_method = django_filters.ChoiceFilter(choices=Order.PaymentMethod.choices)
    payment_status = django_filters.ChoiceFilter(choices=Order.PaymentStatus.choices)

    class Meta:
        model = Order
        fields = ["customer_phone", "cancellation_status", "payment_method", "payment_status", "location"]
