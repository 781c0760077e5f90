# ==================== PARKPOOL_BACKEND/URLS.PY ====================
from django.contrib import admin
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView, TokenObtainPairView

from users.views import UserViewSet, ContactMessageViewSet
from parking.views import ParkingRequestViewSet, ControlItemViewSet
from carpool.views import CarpoolViewSet, RideRequestViewSet

# Create router and register viewsets
router = DefaultRouter()
router.register(r'parking-requests', ParkingRequestViewSet, basename='parking-request')
router.register(r'control-items', ControlItemViewSet, basename='control-item')
router.register(r'carpool', CarpoolViewSet, basename='carpool')
router.register(r'ride-requests', RideRequestViewSet, basename='ride-request')
router.register(r'contact', ContactMessageViewSet, basename='contact')

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API versioning
    path('api/v1/', include([
        # Authentication endpoints
        path('auth/', include([
            path('email/send-otp/', UserViewSet.as_view({'post': 'send_verification_otp'}), name='send_verification_otp'),
            path('email/verify-otp/', UserViewSet.as_view({'post': 'verify_otp'}), name='verify_email_otp'),
            path('register/', UserViewSet.as_view({'post': 'register'}), name='register'),
            path('login/', UserViewSet.as_view({'post': 'login'}), name='login'),
            path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
            path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
            path('profile/', UserViewSet.as_view({'get': 'profile', 'put': 'profile'}), name='profile'),
            path('password/send-otp/', UserViewSet.as_view({'post': 'send_reset_otp'}), name='send_reset_otp'),
            path('password/verify-otp/', UserViewSet.as_view({'post': 'verify_otp'}), name='verify_reset_otp'),
            path('password/reset/', UserViewSet.as_view({'post': 'reset_password'}), name='reset_password'),
        ])),

        # API routes
        path('', include(router.urls)),
    ])),
]
