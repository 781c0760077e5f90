from django.db import models
from users.models import CustomUser
from parking.models import ParkingRequest
from utils.distance_calculator import Location


class RideRequest(models.Model):
    """A seeker's request to join a provider's carpool.

    Status moves once from ``pending`` to ``accepted`` or ``rejected``.
    """
    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
    )

    # Relations
    provider = models.ForeignKey(ParkingRequest, on_delete=models.CASCADE, related_name='ride_requests')
    seeker = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='ride_requests')

    # Pickup point
    pickup_latitude = models.FloatField()
    pickup_longitude = models.FloatField()
    pickup_address = models.CharField(max_length=500, blank=True)

    message = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)

    # Provider's schedule when the request was made
    provider_depart_time_from_home = models.TimeField()
    provider_departure_time_from_office = models.TimeField()

    created_at = models.DateTimeField(auto_now_add=True)
    decided_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['seeker', 'status'], name='carpool_seeker_status_idx'),
            models.Index(fields=['provider', 'status'], name='carpool_provider_status_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['seeker'],
                condition=models.Q(status='accepted'),
                name='one_accepted_ride_per_seeker',
            ),
        ]

    def __str__(self):
        return f"Ride request {self.id} - {self.seeker.email} -> provider {self.provider_id} ({self.status})"

    @property
    def location(self):
        return Location(self.pickup_latitude, self.pickup_longitude, self.pickup_address or None)
