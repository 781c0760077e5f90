# ==================== USERS/VIEWS.PY ====================
import logging

from rest_framework import viewsets, mixins, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from utils.exceptions import OTPVerificationFailed
from .models import CustomUser, ContactMessage
from .serializers import (UserRegistrationSerializer, UserLoginSerializer, UserProfileSerializer,
                          EmailSerializer, OTPVerifySerializer, PasswordResetSerializer,
                          ContactMessageSerializer)
from .services import OTPService, EmailService

logger = logging.getLogger(__name__)


def _token_response(user, message, status_code):
    refresh = RefreshToken.for_user(user)
    return Response({
        'user': UserProfileSerializer(user).data,
        'refresh': str(refresh),
        'access': str(refresh.access_token),
        'message': message
    }, status=status_code)


class UserViewSet(viewsets.ViewSet):
    """Email verification, registration, login, password reset and profile"""
    permission_classes = [permissions.AllowAny]

    def get_permissions(self):
        if self.action == 'profile':
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    @action(detail=False, methods=['post'])
    def send_verification_otp(self, request):
        """Email a verification code to an address that is not registered yet"""
        serializer = EmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email'].lower()

        if CustomUser.objects.filter(email=email).exists():
            return Response({'error': 'Email is already verified'}, status=status.HTTP_400_BAD_REQUEST)

        EmailService.send_verification_email(email)
        return Response({'email': email, 'success': True})

    @action(detail=False, methods=['post'])
    def verify_otp(self, request):
        """Check a code sent by send_verification_otp or send_reset_otp"""
        serializer = OTPVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email'].lower()

        OTPService.verify_otp(email, serializer.validated_data['otp'])
        return Response({'email': email, 'success': True})

    @action(detail=False, methods=['post'])
    def register(self, request):
        """Register new user"""
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"User registered: {user.email}")
        return _token_response(user, 'User registered successfully', status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def login(self, request):
        """User login"""
        serializer = UserLoginSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        return _token_response(serializer.validated_data['user'], 'Login successful', status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def send_reset_otp(self, request):
        serializer = EmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email'].lower()

        if not CustomUser.objects.filter(email=email).exists():
            return Response(
                {'error': 'No account found with this email address'},
                status=status.HTTP_404_NOT_FOUND
            )

        EmailService.send_password_reset_email(email)
        return Response({'email': email, 'success': True})

    @action(detail=False, methods=['post'])
    def reset_password(self, request):
        """Set a new password once the reset code has been verified"""
        serializer = PasswordResetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email'].lower()

        user = CustomUser.objects.filter(email=email).first()
        if not user:
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)
        if not OTPService.is_email_verified(email):
            raise OTPVerificationFailed('Verify the reset code before choosing a new password.')

        user.set_password(serializer.validated_data['password'])
        user.save(update_fields=['password'])
        OTPService.cleanup(email)
        logger.info(f"Password reset for {email}")
        return Response({'email': email, 'success': True})

    @action(detail=False, methods=['get', 'put'], permission_classes=[permissions.IsAuthenticated])
    def profile(self, request):
        """Get or update user profile"""
        if request.method == 'GET':
            serializer = UserProfileSerializer(request.user)
            return Response(serializer.data)

        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class ContactMessageViewSet(mixins.CreateModelMixin, viewsets.GenericViewSet):
    """Public contact form"""
    queryset = ContactMessage.objects.all()
    serializer_class = ContactMessageSerializer
    permission_classes = [permissions.AllowAny]

    def perform_create(self, serializer):
        message = serializer.save()
        EmailService.forward_contact_message(message)
