"""
Custom authentication classes for JWT bearer tokens
"""
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import authentication, exceptions

from .models import User
from .services.token_service import token_service


class JWTAuthentication(authentication.BaseAuthentication):
    """
    Authentication class for platform JWT tokens (Bearer token)
    """

    def authenticate(self, request):
        token = token_service.extract_bearer_token(request.META.get('HTTP_AUTHORIZATION', ''))
        if not token:
            return None

        payload = token_service.decode_token(token)
        if payload is None:
            raise exceptions.AuthenticationFailed('Invalid or expired token.')

        try:
            user = User.objects.get(id=payload.get('sub'))
        except (User.DoesNotExist, ValueError, DjangoValidationError):
            raise exceptions.AuthenticationFailed('User not found.')

        if not user.is_active:
            raise exceptions.AuthenticationFailed('User account is disabled.')

        return (user, token)

    def authenticate_header(self, request):
        return 'Bearer realm="api"'
