# ==================== CARPOOL/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
import logging

logger = logging.getLogger(__name__)


@shared_task
def notify_provider_of_request(ride_request_id):
    """Let the provider know someone asked to join their carpool"""
    from .models import RideRequest

    try:
        ride = RideRequest.objects.select_related('seeker', 'provider__user').get(id=ride_request_id)
    except RideRequest.DoesNotExist:
        logger.error(f"Ride request {ride_request_id} not found for provider notification")
        return

    send_mail(
        'New Carpool Ride Request',
        f'''
        {ride.seeker.name} would like to join your carpool.
        Pickup: {ride.pickup_address or f"{ride.pickup_latitude:.5f}, {ride.pickup_longitude:.5f}"}
        Message: {ride.message or '-'}
        ''',
        settings.DEFAULT_FROM_EMAIL,
        [ride.provider.user.email],
        fail_silently=True,
    )


@shared_task
def notify_seeker_of_decision(ride_request_id):
    """Tell the seeker whether their ride request was accepted"""
    from .models import RideRequest

    try:
        ride = RideRequest.objects.select_related('seeker', 'provider__user').get(id=ride_request_id)
    except RideRequest.DoesNotExist:
        logger.error(f"Ride request {ride_request_id} not found for seeker notification")
        return

    provider = ride.provider
    if ride.status == 'accepted':
        subject = 'Carpool Ride Accepted'
        body = (
            f"{provider.user.name} accepted your ride request. "
            f"Departure from home: {provider.depart_time_from_home:%H:%M}, "
            f"from office: {provider.departure_time_from_office:%H:%M}."
        )
    else:
        subject = 'Carpool Ride Request Update'
        body = f"{provider.user.name} could not accept your ride request."

    send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [ride.seeker.email], fail_silently=True)
