"""Custom DRF permissions for catalog and order management."""

from rest_framework import permissions


class IsStaffOrReadOnly(permissions.BasePermission):
    """Allow public reads; allow writes only for staff users."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_authenticated and request.user.is_staff)
