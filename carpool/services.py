# ==================== CARPOOL/SERVICES.PY ====================
import logging

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotAuthenticated, ValidationError

from parking.models import ParkingRequest
from users.models import CustomUser
from utils.exceptions import (
    NotCarpoolProvider, ProviderUnavailable, DuplicateRideRequest, SeekerAlreadyMatched,
    RideRequestNotFound, InvalidRideTransition, SeatsExhausted, RouteNotConfigured,
)
from .matching import rank_by_proximity
from .models import RideRequest
from .routing import GeocodingService, plan_route
from .tasks import notify_provider_of_request, notify_seeker_of_decision

logger = logging.getLogger(__name__)


def _require_actor(user):
    if user is None or not user.is_authenticated:
        raise NotAuthenticated('Unauthorized')


def _lock_seeker(seeker):
    """Serialize ride changes for one seeker; call inside transaction.atomic()"""
    CustomUser.objects.select_for_update().filter(pk=seeker.pk).first()


class CarpoolService:
    """Provider discovery and route management"""

    @staticmethod
    def available_providers(reference=None, exclude_user=None):
        """Approved carpool offers with free seats, nearest first when a reference is given"""
        providers = ParkingRequest.objects.select_related('user').filter(
            status='approved',
            carpool_offer=True,
            seats_available__gt=0,
        )
        if exclude_user is not None:
            providers = providers.exclude(user=exclude_user)
        return rank_by_proximity(providers, reference)

    @staticmethod
    def carpool_status(user):
        _require_actor(user)
        parking_request = ParkingRequest.objects.filter(user=user).order_by('-created_at').first()
        if not parking_request:
            return {'status': 'not_found'}, None
        return {'status': parking_request.status}, parking_request

    @staticmethod
    def get_provider(user):
        """The user's approved parking request, which carries their carpool route"""
        _require_actor(user)
        provider = ParkingRequest.objects.filter(user=user, status='approved').first()
        if not provider:
            raise NotCarpoolProvider()
        return provider

    @staticmethod
    def set_route(user, start, end, waypoints=(), geocoding=None):
        provider = CarpoolService.get_provider(user)
        geocoding = geocoding or GeocodingService()

        provider.set_route(
            geocoding.with_address(start),
            geocoding.with_address(end),
            [geocoding.with_address(point) for point in waypoints],
        )
        provider.save(update_fields=[
            'start_latitude', 'start_longitude', 'start_address',
            'end_latitude', 'end_longitude', 'end_address', 'route', 'updated_at',
        ])
        logger.info(f"Route updated for provider {provider.id}")
        return provider

    @staticmethod
    def plan_provider_route(user, routing=None):
        """Route from start to end through the pickups of accepted riders"""
        provider = CarpoolService.get_provider(user)
        start, end = provider.start_location, provider.end_location
        if start is None or end is None:
            raise RouteNotConfigured()

        pickups = [
            ride.location
            for ride in provider.ride_requests.filter(status='accepted').order_by('created_at')
        ]
        return provider, plan_route(start, end, pickups, routing=routing)


class RideRequestService:
    """Ride request lifecycle: pending -> accepted | rejected"""

    @staticmethod
    def create_request(seeker, provider_id, location, message='', geocoding=None):
        _require_actor(seeker)

        provider = ParkingRequest.objects.filter(
            pk=provider_id,
            status='approved',
            carpool_offer=True,
            seats_available__gt=0,
        ).first()
        if not provider:
            raise ProviderUnavailable()

        if provider.user_id == seeker.pk:
            raise ProviderUnavailable('You cannot request a ride from your own carpool.')

        location = (geocoding or GeocodingService()).with_address(location)

        with transaction.atomic():
            _lock_seeker(seeker)

            if RideRequestService._seeker_has_ride(seeker):
                raise SeekerAlreadyMatched()

            if RideRequest.objects.filter(provider=provider, seeker=seeker, status='pending').exists():
                raise DuplicateRideRequest()

            ride = RideRequest.objects.create(
                provider=provider,
                seeker=seeker,
                pickup_latitude=location.lat,
                pickup_longitude=location.lng,
                pickup_address=location.address or '',
                message=message or '',
                provider_depart_time_from_home=provider.depart_time_from_home,
                provider_departure_time_from_office=provider.departure_time_from_office,
            )
        logger.info(f"Ride request {ride.id} created by {seeker.email} for provider {provider.id}")
        transaction.on_commit(lambda: notify_provider_of_request.delay(ride.id))
        return ride

    @staticmethod
    def _seeker_has_ride(seeker):
        return RideRequest.objects.filter(seeker=seeker, status='accepted').exists()

    @staticmethod
    def _get_provider_ride(user, request_id):
        provider = CarpoolService.get_provider(user)
        ride = RideRequest.objects.select_related('seeker').filter(pk=request_id, provider=provider).first()
        if not ride:
            raise RideRequestNotFound()
        if ride.status != 'pending':
            raise InvalidRideTransition(f'Ride request has already been {ride.status}.')
        return provider, ride

    @staticmethod
    def accept(user, request_id):
        """Accept a pending request, take one seat and drop the seeker's other pending requests.

        The seat decrement is a conditional UPDATE, so concurrent accepts for
        the last seat resolve first-writer-wins. The seeker row is locked and
        the database allows one accepted ride per seeker, so two providers
        accepting the same seeker at once cannot both succeed.
        """
        provider, ride = RideRequestService._get_provider_ride(user, request_id)
        already_matched = SeekerAlreadyMatched('This rider has already accepted another ride.')

        try:
            with transaction.atomic():
                _lock_seeker(ride.seeker)

                if RideRequestService._seeker_has_ride(ride.seeker):
                    raise already_matched

                moved = RideRequest.objects.filter(pk=ride.pk, status='pending').update(
                    status='accepted', decided_at=timezone.now()
                )
                if not moved:
                    raise InvalidRideTransition()

                seated = ParkingRequest.objects.filter(pk=provider.pk, seats_available__gt=0).update(
                    seats_available=F('seats_available') - 1
                )
                if not seated:
                    raise SeatsExhausted()

                removed, _ = RideRequest.objects.filter(
                    seeker=ride.seeker, status='pending'
                ).exclude(pk=ride.pk).delete()
        except IntegrityError as e:
            raise already_matched from e

        logger.info(
            f"Ride request {ride.id} accepted by provider {provider.id}; "
            f"removed {removed} other pending requests from {ride.seeker.email}"
        )
        transaction.on_commit(lambda: notify_seeker_of_decision.delay(ride.id))
        ride.refresh_from_db()
        return ride

    @staticmethod
    def reject(user, request_id):
        provider, ride = RideRequestService._get_provider_ride(user, request_id)

        moved = RideRequest.objects.filter(pk=ride.pk, status='pending').update(
            status='rejected', decided_at=timezone.now()
        )
        if not moved:
            raise InvalidRideTransition()

        logger.info(f"Ride request {ride.id} rejected by provider {provider.id}")
        transaction.on_commit(lambda: notify_seeker_of_decision.delay(ride.id))
        ride.refresh_from_db()
        return ride

    @staticmethod
    def update_status(user, request_id, new_status):
        if new_status == 'accepted':
            return RideRequestService.accept(user, request_id)
        if new_status == 'rejected':
            return RideRequestService.reject(user, request_id)
        raise ValidationError({'status': 'Status must be "accepted" or "rejected".'})

    @staticmethod
    def seeker_requests(user):
        _require_actor(user)
        return RideRequest.objects.select_related('provider__user').filter(seeker=user).order_by('-created_at')

    @staticmethod
    def provider_requests(user):
        provider = CarpoolService.get_provider(user)
        requests = provider.ride_requests.select_related('seeker').order_by('-created_at')
        return provider, requests
