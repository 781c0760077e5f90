# ==================== UTILS/PERMISSIONS.PY ====================
from rest_framework import permissions


class IsAdminRole(permissions.BasePermission):
    """Administrators manage allocations and the control panel"""

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)


class IsSeekerOrProvider(permissions.BasePermission):
    """Ride request - either the seeker or the provider who owns the offer"""

    def has_object_permission(self, request, view, obj):
        return obj.seeker == request.user or obj.provider.user == request.user
