# ==================== USERS/SERIALIZERS.PY ====================
from rest_framework import serializers
from django.contrib.auth import authenticate
from .models import CustomUser, ContactMessage
from .services import OTPService


class EmailSerializer(serializers.Serializer):
    email = serializers.EmailField()


class OTPVerifySerializer(serializers.Serializer):
    email = serializers.EmailField()
    otp = serializers.RegexField(r'^\d{6}$', error_messages={'invalid': 'OTP must be 6 digits'})


class UserRegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=6)
    confirm_password = serializers.CharField(write_only=True, min_length=6)
    phone_number = serializers.RegexField(
        r'^\d{10}$', error_messages={'invalid': 'Phone number must be exactly 10 digits'}
    )
    email = serializers.EmailField()

    class Meta:
        model = CustomUser
        fields = ['email', 'name', 'password', 'confirm_password', 'birth_date', 'company_code',
                  'phone_number', 'location', 'gender']
        extra_kwargs = {
            'birth_date': {'required': True, 'allow_null': False},
            'location': {'required': True, 'allow_blank': False},
            'gender': {'required': True, 'allow_blank': False},
        }

    def validate_email(self, value):
        value = value.lower()
        if CustomUser.objects.filter(email=value).exists():
            raise serializers.ValidationError("User with this email already exists")
        if not OTPService.is_email_verified(value):
            raise serializers.ValidationError("Email address has not been verified")
        return value

    def validate_phone_number(self, value):
        if CustomUser.objects.filter(phone_number=value).exists():
            raise serializers.ValidationError("This phone number is already registered")
        return value

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return ' '.join(word[:1].upper() + word[1:] for word in value.split())

    def validate(self, data):
        if data['password'] != data['confirm_password']:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match"})
        return data

    def create(self, validated_data):
        validated_data.pop('confirm_password')
        password = validated_data.pop('password')
        user = CustomUser.objects.create_user(password=password, **validated_data)
        OTPService.cleanup(user.email)
        return user


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(
            request=self.context.get('request'), email=data['email'].lower(), password=data['password']
        )
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        data['user'] = user
        return data


class PasswordResetSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    confirm_password = serializers.CharField(write_only=True, min_length=6)

    def validate(self, data):
        if data['password'] != data['confirm_password']:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match"})
        return data


class UserProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'name', 'phone_number', 'birth_date', 'company_code', 'location',
                  'gender', 'role', 'past_parking_visits', 'created_at']
        read_only_fields = ['email', 'phone_number', 'role', 'past_parking_visits', 'created_at']


class ContactMessageSerializer(serializers.ModelSerializer):
    name = serializers.CharField(min_length=2, error_messages={'min_length': 'Name must be at least 2 characters'})
    subject = serializers.CharField(
        min_length=5, error_messages={'min_length': 'Subject must be at least 5 characters'}
    )
    message = serializers.CharField(
        min_length=10, error_messages={'min_length': 'Message must be at least 10 characters'}
    )

    class Meta:
        model = ContactMessage
        fields = ['id', 'name', 'email', 'subject', 'message', 'created_at']
        read_only_fields = ['created_at']
