"""
Customer profile model
"""
from django.db import models
from apps.core.models import BaseModel


class CustomerProfile(BaseModel):
    """
    Customer side of a user account
    """
    user = models.OneToOneField(
        'authentication.User',
        on_delete=models.CASCADE,
        related_name='customer_profile'
    )

    address = models.TextField(blank=True)

    # Preferences
    favorite_shops = models.ManyToManyField(
        'shops.Shop',
        related_name='favorited_by',
        blank=True
    )

    class Meta:
        db_table = 'customer_profiles'
        verbose_name = 'Customer Profile'
        verbose_name_plural = 'Customer Profiles'

    def __str__(self):
        return f"{self.user.full_name} - {self.user.email}"
