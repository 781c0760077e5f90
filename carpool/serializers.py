# ==================== CARPOOL/SERIALIZERS.PY ====================
from rest_framework import serializers

from parking.models import ParkingRequest
from parking.serializers import LocationSerializer
from utils.distance_calculator import DistanceCalculator, Location
from .models import RideRequest


def _location_dict(location):
    return location.to_dict() if location else None


class ProviderSerializer(serializers.ModelSerializer):
    """An approved parking request offering carpool seats"""
    user_id = serializers.IntegerField(source='user.id', read_only=True)
    user_name = serializers.CharField(source='user.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)
    start_location = serializers.SerializerMethodField()
    end_location = serializers.SerializerMethodField()
    distance_km = serializers.SerializerMethodField()

    class Meta:
        model = ParkingRequest
        fields = ['id', 'user_id', 'user_name', 'user_email', 'depart_time_from_home',
                  'departure_time_from_office', 'seats_available', 'start_location', 'end_location',
                  'route', 'distance_km']
        read_only_fields = fields

    def get_start_location(self, obj):
        return _location_dict(obj.start_location)

    def get_end_location(self, obj):
        return _location_dict(obj.end_location)

    def get_distance_km(self, obj):
        """Distance from the seeker's location if one was provided"""
        reference = self.context.get('reference')
        if reference is None or obj.start_location is None:
            return None
        return round(DistanceCalculator.between(reference, obj.start_location), 2)


class RideRequestCreateSerializer(serializers.Serializer):
    provider_id = serializers.IntegerField()
    location = LocationSerializer()
    message = serializers.CharField(required=False, allow_blank=True, max_length=1000)

    def validate_location(self, value):
        return Location.from_dict(value)


class RideRequestSerializer(serializers.ModelSerializer):
    seeker_name = serializers.CharField(source='seeker.name', read_only=True)
    seeker_email = serializers.EmailField(source='seeker.email', read_only=True)
    location = serializers.SerializerMethodField()
    provider_request = serializers.SerializerMethodField()

    class Meta:
        model = RideRequest
        fields = ['id', 'provider', 'seeker', 'seeker_name', 'seeker_email', 'location', 'message',
                  'status', 'provider_request', 'created_at', 'decided_at']
        read_only_fields = fields

    def get_location(self, obj):
        return obj.location.to_dict()

    def get_provider_request(self, obj):
        return {
            'depart_time_from_home': obj.provider_depart_time_from_home.strftime('%H:%M'),
            'departure_time_from_office': obj.provider_departure_time_from_office.strftime('%H:%M'),
        }


class RideDecisionSerializer(serializers.Serializer):
    status = serializers.CharField()


class RouteSerializer(serializers.Serializer):
    start_location = LocationSerializer()
    end_location = LocationSerializer()
    route = LocationSerializer(many=True, required=False)

    def validate(self, data):
        return {
            'start': Location.from_dict(data['start_location']),
            'end': Location.from_dict(data['end_location']),
            'waypoints': [Location.from_dict(point) for point in data.get('route', [])],
        }


class RoutePlanSerializer(serializers.Serializer):
    stops = serializers.SerializerMethodField()
    polyline = serializers.SerializerMethodField()
    distance_km = serializers.FloatField()
    eta_minutes = serializers.IntegerField()
    fallback = serializers.BooleanField()

    def get_stops(self, obj):
        return [stop.to_dict() for stop in obj.stops]

    def get_polyline(self, obj):
        return [[lat, lng] for lat, lng in obj.polyline]
