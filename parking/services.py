import logging

from django.db import IntegrityError, transaction

from utils.exceptions import ParkingRequestExists, AllocationConflict
from .models import ParkingRequest, ControlItem
from .tasks import notify_allocation_decision

logger = logging.getLogger(__name__)


class AllocationService:
    """Parking request submission and admin allocation"""

    @staticmethod
    def submit(user, serializer):
        if AllocationService._has_request(user):
            raise ParkingRequestExists()
        try:
            with transaction.atomic():
                parking_request = serializer.save(user=user, status='pending')
        except IntegrityError as e:
            raise ParkingRequestExists() from e
        logger.info(f"Parking request {parking_request.id} submitted by {user.email}")
        return parking_request

    @staticmethod
    def _has_request(user):
        return ParkingRequest.objects.filter(user=user).exists()

    @staticmethod
    def user_status(user):
        """Latest allocation status for a user"""
        parking_request = ParkingRequest.objects.filter(user=user).order_by('-created_at').first()
        if not parking_request:
            return {'status': 'not_found'}
        return {
            'status': parking_request.status,
            'slot_number': parking_request.slot_number or None,
        }

    @staticmethod
    def decide(parking_request, new_status, slot_number=''):
        """Approve (with a slot) or reject a pending parking request"""
        if parking_request.status != 'pending':
            raise AllocationConflict(f'Parking request is already {parking_request.status}.')

        with transaction.atomic():
            if new_status == 'approved':
                slots = ControlItem.objects.filter(type='parking-slot')
                if slots.exists() and not slots.filter(key=slot_number).exists():
                    raise AllocationConflict(f'Unknown parking slot {slot_number}.')

                taken = ParkingRequest.objects.select_for_update().filter(
                    status='approved', slot_number=slot_number
                ).exclude(pk=parking_request.pk)
                if taken.exists():
                    raise AllocationConflict(f'Parking slot {slot_number} is already allocated.')
                parking_request.slot_number = slot_number
            else:
                parking_request.slot_number = ''

            parking_request.status = new_status
            parking_request.save(update_fields=['status', 'slot_number', 'updated_at'])

        logger.info(f"Parking request {parking_request.id} {new_status} (slot: {parking_request.slot_number or '-'})")
        transaction.on_commit(lambda: notify_allocation_decision.delay(parking_request.id))
        return parking_request
