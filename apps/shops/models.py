"""
Shop and seat models
"""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from apps.core.models import BaseModel
from apps.core.utils.constants import DEFAULT_OPENING_HOURS, DEFAULT_TOTAL_SEATS
from apps.core.validators import validate_phone_number


def default_opening_hours():
    return {day: dict(hours) for day, hours in DEFAULT_OPENING_HOURS.items()}


class Shop(BaseModel):
    """
    Barbershop. Owned by a barber profile and split into a fixed
    number of seats, each held by at most one barber.
    """
    owner = models.OneToOneField(
        'barbers.BarberProfile',
        on_delete=models.PROTECT,
        related_name='owned_shop'
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    # Location
    address = models.CharField(max_length=500)
    location_lat = models.FloatField(null=True, blank=True)
    location_lng = models.FloatField(null=True, blank=True)

    # Contact
    phone_number = models.CharField(max_length=20, validators=[validate_phone_number], blank=True)
    email = models.EmailField(blank=True)

    # Capacity
    total_seats = models.PositiveIntegerField(
        default=DEFAULT_TOTAL_SEATS,
        validators=[MinValueValidator(1)]
    )

    # Weekly hours: {"monday": {"open": "09:00", "close": "18:00", "closed": false}, ...}
    opening_hours = models.JSONField(default=default_opening_hours)

    # Timezone
    timezone = models.CharField(
        max_length=63,
        default='Africa/Lagos',
        help_text='Shop timezone (IANA timezone, e.g., Africa/Lagos, Europe/London)'
    )

    # Status
    is_verified = models.BooleanField(default=False)

    # Ratings
    rating = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal('0.00'))
    total_reviews = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'shops'
        verbose_name = 'Shop'
        verbose_name_plural = 'Shops'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_verified']),
            models.Index(fields=['name']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_seats__gte=1),
                name='shop_total_seats_positive',
            ),
        ]

    def __str__(self):
        return self.name


class ShopSeat(BaseModel):
    """
    One numbered seat in a shop. `barber` is null while the seat is free.
    """
    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name='seats'
    )
    seat_number = models.PositiveIntegerField()
    barber = models.ForeignKey(
        'barbers.BarberProfile',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='seats'
    )

    class Meta:
        db_table = 'shop_seats'
        verbose_name = 'Shop Seat'
        verbose_name_plural = 'Shop Seats'
        ordering = ['shop', 'seat_number']
        constraints = [
            models.UniqueConstraint(
                fields=['shop', 'seat_number'],
                name='unique_seat_number_per_shop',
            ),
            models.UniqueConstraint(
                fields=['shop', 'barber'],
                condition=Q(barber__isnull=False),
                name='unique_barber_per_shop',
            ),
        ]

    def __str__(self):
        return f"{self.shop.name} seat {self.seat_number}"

    @property
    def is_occupied(self):
        return self.barber_id is not None
