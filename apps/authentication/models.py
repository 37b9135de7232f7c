"""
User model with email and password authentication
"""
import uuid

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from apps.core.utils.constants import USER_ROLES, USER_ROLE_CUSTOMER, USER_ROLE_BARBER
from apps.core.validators import validate_phone_number
from .managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Platform user. A user is either a customer or a barber; the matching
    profile row carries the role specific data.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Basic fields
    email = models.EmailField(unique=True, db_index=True)
    full_name = models.CharField(max_length=255)
    phone_number = models.CharField(
        max_length=20,
        validators=[validate_phone_number],
        blank=True
    )

    # User role
    role = models.CharField(
        max_length=20,
        choices=USER_ROLES,
        default=USER_ROLE_CUSTOMER
    )

    # Status
    is_active = models.BooleanField(default=True)
    email_verified = models.BooleanField(default=False)

    # Admin fields
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['full_name']

    objects = UserManager()

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['-created_at']

    def __str__(self):
        return self.email

    def is_customer(self):
        """Check if user is a customer"""
        return self.role == USER_ROLE_CUSTOMER

    def is_barber(self):
        """Check if user is a barber"""
        return self.role == USER_ROLE_BARBER

    @property
    def profile(self):
        """
        Role specific profile: CustomerProfile for customers,
        BarberProfile for barbers. None if it has not been created yet.
        """
        if self.is_barber():
            return getattr(self, 'barber_profile', None)
        return getattr(self, 'customer_profile', None)
