import django_filters
from django.db.models import Q

from modules.orders.constants import DeliveryType, OrderStatus, PaymentMethod
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    delivery_type = django_filters.ChoiceFilter(choices=DeliveryType.choices)
    payment_method = django_filters.ChoiceFilter(choices=PaymentMethod.choices)
    establishment = django_filters.UUIDFilter(field_name="establishment_id")
    start_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Order
        fields = [
            "status",
            "delivery_type",
            "payment_method",
            "establishment",
            "start_date",
            "end_date",
            "search",
        ]

    def filter_search(self, queryset, name, value):
        term = value.strip()
        if not term:
            return queryset
        query = (
            Q(customer_name__icontains=term)
            | Q(customer_phone__icontains=term)
            | Q(tracking_code__iexact=term)
        )
        if term.lstrip("#").isdigit():
            query |= Q(number=int(term.lstrip("#")))
        return queryset.filter(query)
