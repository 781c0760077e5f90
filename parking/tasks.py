# ==================== PARKING/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
import logging

logger = logging.getLogger(__name__)


@shared_task
def notify_allocation_decision(parking_request_id):
    """Tell the user whether a parking slot was allocated"""
    from .models import ParkingRequest

    try:
        parking_request = ParkingRequest.objects.select_related('user').get(id=parking_request_id)
    except ParkingRequest.DoesNotExist:
        logger.error(f"Parking request {parking_request_id} vanished before notification")
        return

    if parking_request.status == 'approved':
        subject = 'Parking Allocated'
        body = (
            f"Congratulations {parking_request.user.name}! "
            f"You've been allocated parking slot {parking_request.slot_number}."
        )
    else:
        subject = 'Parking Request Update'
        body = f"Sorry {parking_request.user.name}, your parking request could not be approved."

    send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [parking_request.user.email], fail_silently=True)
