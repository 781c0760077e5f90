# parking/models.py

from django.db import models
from users.models import CustomUser
from utils.distance_calculator import Location


class ParkingRequest(models.Model):
    """A user's request for a parking slot, optionally offering carpool seats.

    An approved request with ``carpool_offer`` set is a carpool provider:
    seekers send ride requests against it and each accepted ride takes one
    of its ``seats_available``.
    """
    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    )

    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='parking_requests')

    # Commute
    depart_time_from_home = models.TimeField()
    departure_time_from_office = models.TimeField()

    # Carpool offer
    carpool_offer = models.BooleanField(default=False)
    seats_available = models.PositiveIntegerField(default=0)

    # Allocation
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    slot_number = models.CharField(max_length=50, blank=True)

    # Route
    start_latitude = models.FloatField(null=True, blank=True)
    start_longitude = models.FloatField(null=True, blank=True)
    start_address = models.CharField(max_length=500, blank=True)
    end_latitude = models.FloatField(null=True, blank=True)
    end_longitude = models.FloatField(null=True, blank=True)
    end_address = models.CharField(max_length=500, blank=True)
    route = models.JSONField(default=list, blank=True)  # [{"lat", "lng", "address"}]

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'carpool_offer'], name='parking_status_offer_idx'),
        ]
        constraints = [
            models.UniqueConstraint(fields=['user'], name='one_parking_request_per_user'),
        ]

    def __str__(self):
        return f"Parking request {self.id} - {self.user.email} ({self.status})"

    @property
    def start_location(self):
        if self.start_latitude is None or self.start_longitude is None:
            return None
        return Location(self.start_latitude, self.start_longitude, self.start_address or None)

    @property
    def end_location(self):
        if self.end_latitude is None or self.end_longitude is None:
            return None
        return Location(self.end_latitude, self.end_longitude, self.end_address or None)

    def set_route(self, start, end, waypoints=()):
        self.start_latitude, self.start_longitude = start.lat, start.lng
        self.start_address = start.address or ''
        self.end_latitude, self.end_longitude = end.lat, end.lng
        self.end_address = end.address or ''
        self.route = [point.to_dict() for point in waypoints]


class ControlItem(models.Model):
    """Admin-managed setting or parking slot"""
    TYPE_CHOICES = (
        ('general', 'General Setting'),
        ('parking-slot', 'Parking Slot'),
    )

    key = models.CharField(max_length=100)
    value = models.CharField(max_length=500)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['type', 'key']
        constraints = [
            models.UniqueConstraint(fields=['key', 'type'], name='unique_control_item_key_per_type'),
        ]

    def __str__(self):
        return f"{self.get_type_display()}: {self.key}"
