from rest_framework.permissions import BasePermission


class IsDonor(BasePermission):
    """Only users with a donor profile"""
    message = "A donor profile is required for this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and hasattr(user, 'donor_profile'))
