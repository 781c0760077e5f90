# ==================== PARKING/ADMIN.PY ====================
from django.contrib import admin
from .models import ParkingRequest, ControlItem

@admin.register(ParkingRequest)
class ParkingRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'status', 'slot_number', 'carpool_offer', 'seats_available', 'created_at']
    list_filter = ['status', 'carpool_offer', 'created_at']
    search_fields = ['user__name', 'user__email', 'slot_number']
    readonly_fields = ['created_at', 'updated_at']
    fieldsets = (
        ('Request', {'fields': ('user', 'depart_time_from_home', 'departure_time_from_office')}),
        ('Allocation', {'fields': ('status', 'slot_number')}),
        ('Carpool', {'fields': ('carpool_offer', 'seats_available')}),
        ('Route', {'fields': ('start_latitude', 'start_longitude', 'start_address',
                              'end_latitude', 'end_longitude', 'end_address', 'route')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(ControlItem)
class ControlItemAdmin(admin.ModelAdmin):
    list_display = ['key', 'value', 'type', 'updated_at']
    list_filter = ['type']
    search_fields = ['key', 'value']
    readonly_fields = ['created_at', 'updated_at']
