"""
Barber profile model
"""
from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Q

from apps.core.models import BaseModel, money_field
from apps.core.utils.constants import BARBER_STATUSES, BARBER_STATUS_AVAILABLE


class BarberProfile(BaseModel):
    """
    Barber side of a user account. A barber either works solo
    (no shop) or occupies exactly one seat in one shop.
    """
    user = models.OneToOneField(
        'authentication.User',
        on_delete=models.CASCADE,
        related_name='barber_profile'
    )

    # Shop affiliation
    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='barbers'
    )
    seat_number = models.PositiveIntegerField(null=True, blank=True)

    # Availability
    is_available = models.BooleanField(default=True)
    status = models.CharField(
        max_length=20,
        choices=BARBER_STATUSES,
        default=BARBER_STATUS_AVAILABLE
    )

    # Profile
    specialties = models.JSONField(default=list, blank=True)
    hourly_rate = money_field()
    bio = models.TextField(blank=True)

    # Aggregated from reviews
    rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(0), MaxValueValidator(5)]
    )
    total_reviews = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'barber_profiles'
        verbose_name = 'Barber Profile'
        verbose_name_plural = 'Barber Profiles'
        ordering = ['-rating', '-created_at']
        indexes = [
            models.Index(fields=['shop', 'is_available']),
            models.Index(fields=['status']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['shop', 'seat_number'],
                condition=Q(shop__isnull=False, seat_number__isnull=False),
                name='unique_barber_seat_per_shop',
            ),
        ]

    def __str__(self):
        return f"{self.user.full_name} ({self.user.email})"

    @property
    def is_solo(self):
        """A barber without a shop works solo"""
        return self.shop_id is None
