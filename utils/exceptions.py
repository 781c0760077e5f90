# ==================== UTILS/EXCEPTIONS.PY ====================
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler
from rest_framework import status


class NotCarpoolProvider(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You are not an approved carpool provider.'
    default_code = 'not_carpool_provider'


class ProviderUnavailable(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Ride provider not found or has no available seats.'
    default_code = 'provider_unavailable'


class DuplicateRideRequest(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'You already have a pending request with this provider.'
    default_code = 'duplicate_ride_request'


class SeekerAlreadyMatched(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'You already have an accepted ride.'
    default_code = 'seeker_already_matched'


class RideRequestNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Ride request not found.'
    default_code = 'ride_request_not_found'


class InvalidRideTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Ride request has already been decided.'
    default_code = 'invalid_ride_transition'


class SeatsExhausted(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'No seats available for this ride.'
    default_code = 'seats_exhausted'


class RouteNotConfigured(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Set a start and end location for your route first.'
    default_code = 'route_not_configured'


class ParkingRequestExists(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'You have already requested a parking slot.'
    default_code = 'parking_request_exists'


class AllocationConflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Parking slot is already allocated.'
    default_code = 'allocation_conflict'


class OTPVerificationFailed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Verification failed. Please request a new code.'
    default_code = 'otp_verification_failed'


def api_exception_handler(exc, context):
    """Render API errors as {"error": ..., "code": ...}"""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {'error': 'Invalid request data', 'code': 'invalid', 'errors': response.data}
        return response

    detail = response.data.get('detail', '') if isinstance(response.data, dict) else response.data
    response.data = {'error': str(detail), 'code': getattr(detail, 'code', 'error')}
    return response
