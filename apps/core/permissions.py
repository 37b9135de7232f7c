"""
Custom permissions for Barberzon
"""
from rest_framework import permissions

from apps.core.utils.constants import USER_ROLE_BARBER, USER_ROLE_CUSTOMER


class IsCustomer(permissions.BasePermission):
    """Permission check for customers"""
    message = "Only customers can perform this action"

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == USER_ROLE_CUSTOMER
        )


class IsBarber(permissions.BasePermission):
    """Permission check for barbers"""
    message = "Only barbers can perform this action"

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == USER_ROLE_BARBER
        )
