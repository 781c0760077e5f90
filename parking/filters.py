# ============================= PARKING/FILTERS.PY =============================
import django_filters
from .models import ParkingRequest


class ParkingRequestFilter(django_filters.FilterSet):
    """Admin filtering for parking requests"""

    created_after = django_filters.IsoDateTimeFilter(
        field_name='created_at',
        lookup_expr='gte',
        label='Created After'
    )
    created_before = django_filters.IsoDateTimeFilter(
        field_name='created_at',
        lookup_expr='lte',
        label='Created Before'
    )
    has_slot = django_filters.BooleanFilter(
        field_name='slot_number',
        method='filter_has_slot',
        label='Has Slot Allocated'
    )

    class Meta:
        model = ParkingRequest
        fields = {
            'status': ['exact'],
            'carpool_offer': ['exact'],
            'slot_number': ['exact'],
        }

    def filter_has_slot(self, queryset, name, value):
        if value:
            return queryset.exclude(slot_number='')
        return queryset.filter(slot_number='')
