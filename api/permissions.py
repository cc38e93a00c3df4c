"""
Back-office permissions - the API is for the rental business staff only
"""
from rest_framework import permissions


class IsBackOfficeUser(permissions.BasePermission):
    """
    Permission to only allow staff users (the rental admins).
    """
    message = "Only back-office staff can manage rentals."

    def has_permission(self, request, view):
        """Check if user is authenticated staff"""
        return bool(request.user and request.user.is_authenticated and request.user.is_staff)
