# ==================== CARPOOL/ADMIN.PY ====================
from django.contrib import admin
from .models import RideRequest

@admin.register(RideRequest)
class RideRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'seeker', 'provider', 'status', 'created_at', 'decided_at']
    list_filter = ['status', 'created_at']
    search_fields = ['seeker__name', 'seeker__email', 'provider__user__name', 'pickup_address']
    readonly_fields = ['created_at', 'decided_at', 'provider_depart_time_from_home',
                       'provider_departure_time_from_office']
