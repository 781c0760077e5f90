# ==================== PARKING/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import ParkingRequest, ControlItem


class LocationSerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)


class ParkingRequestCreateSerializer(serializers.ModelSerializer):
    seats_available = serializers.IntegerField(required=False, allow_null=True, min_value=0)

    class Meta:
        model = ParkingRequest
        fields = ['id', 'depart_time_from_home', 'departure_time_from_office', 'carpool_offer',
                  'seats_available', 'status', 'created_at']
        read_only_fields = ['id', 'status', 'created_at']

    def validate(self, data):
        if data['departure_time_from_office'] <= data['depart_time_from_home']:
            raise serializers.ValidationError(
                {'departure_time_from_office': 'Departure time must be after arrival time.'}
            )

        if data.get('carpool_offer'):
            if not data.get('seats_available'):
                raise serializers.ValidationError(
                    {'seats_available': 'Please enter a valid number of seats greater than 0.'}
                )
        else:
            data['seats_available'] = 0
        return data


class ParkingRequestSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(source='user.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)
    start_location = serializers.SerializerMethodField()
    end_location = serializers.SerializerMethodField()

    class Meta:
        model = ParkingRequest
        fields = ['id', 'user', 'user_name', 'user_email', 'depart_time_from_home',
                  'departure_time_from_office', 'carpool_offer', 'seats_available', 'status',
                  'slot_number', 'start_location', 'end_location', 'route', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_start_location(self, obj):
        location = obj.start_location
        return location.to_dict() if location else None

    def get_end_location(self, obj):
        location = obj.end_location
        return location.to_dict() if location else None


class ParkingDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['approved', 'rejected'])
    slot_number = serializers.CharField(required=False, allow_blank=True, max_length=50)

    def validate(self, data):
        if data['status'] == 'approved' and not data.get('slot_number'):
            raise serializers.ValidationError({'slot_number': 'A slot number is required to approve a request.'})
        return data


class ControlItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = ControlItem
        fields = ['id', 'key', 'value', 'type', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        # Duplicate keys are reported as "Key already exists" by the view
        validators = []


class ControlItemValueSerializer(serializers.ModelSerializer):
    class Meta:
        model = ControlItem
        fields = ['id', 'key', 'value', 'type', 'created_at', 'updated_at']
        read_only_fields = ['id', 'key', 'type', 'created_at', 'updated_at']
