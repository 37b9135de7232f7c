"""
Authentication serializers
"""
from django.contrib.auth.password_validation import validate_password
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from apps.core.serializers import StrictSerializer
from apps.core.utils.constants import USER_ROLES, USER_ROLE_BARBER
from apps.core.validators import validate_phone_number
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """
    User serializer for API responses, including the role profile
    """
    profile = serializers.SerializerMethodField()

    @extend_schema_field(serializers.DictField)
    def get_profile(self, obj):
        profile = obj.profile
        if profile is None:
            return None

        if obj.role == USER_ROLE_BARBER:
            from apps.barbers.serializers import BarberProfileSerializer
            return BarberProfileSerializer(profile).data

        from apps.customers.serializers import CustomerProfileSerializer
        return CustomerProfileSerializer(profile).data

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'full_name',
            'phone_number',
            'role',
            'is_active',
            'email_verified',
            'profile',
            'created_at',
        ]
        read_only_fields = fields


class RegisterSerializer(StrictSerializer):
    """
    Serializer for account registration
    """
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    full_name = serializers.CharField(max_length=255)
    role = serializers.ChoiceField(choices=USER_ROLES)
    phone_number = serializers.CharField(
        max_length=20,
        required=False,
        allow_blank=True,
        validators=[validate_phone_number]
    )

    def validate_password(self, value):
        validate_password(value)
        return value


class LoginSerializer(StrictSerializer):
    """
    Serializer for email and password login
    """
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class AuthTokenSerializer(serializers.Serializer):
    """Response for register and login"""
    token = serializers.CharField()
    user = UserSerializer()


class HealthCheckSerializer(serializers.Serializer):
    """Serializer for health check response"""
    status = serializers.CharField()
    timestamp = serializers.DateTimeField()
    database = serializers.CharField()
    cache = serializers.CharField()
