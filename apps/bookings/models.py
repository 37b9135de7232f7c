"""
Booking and review models
"""
from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Q

from apps.core.models import BaseModel, money_field
from apps.core.utils.constants import (
    ACTIVE_BOOKING_STATUSES,
    BOOKING_PAYMENT_STATUSES,
    BOOKING_PAYMENT_PENDING,
    BOOKING_STATUSES,
    BOOKING_STATUS_PENDING,
    USER_ROLES,
)


class Booking(BaseModel):
    """
    Booking model for appointments.

    `services` is an ordered list of {"name", "price", "duration_minutes"}.
    A barber has at most one pending or confirmed booking per start time.
    """
    customer = models.ForeignKey(
        'customers.CustomerProfile',
        on_delete=models.CASCADE,
        related_name='bookings'
    )

    barber = models.ForeignKey(
        'barbers.BarberProfile',
        on_delete=models.CASCADE,
        related_name='bookings'
    )

    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.CASCADE,
        related_name='bookings'
    )

    services = models.JSONField(default=list)

    # Booking details
    booking_date = models.DateTimeField(db_index=True)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    status = models.CharField(
        max_length=20,
        choices=BOOKING_STATUSES,
        default=BOOKING_STATUS_PENDING,
        db_index=True
    )
    payment_status = models.CharField(
        max_length=20,
        choices=BOOKING_PAYMENT_STATUSES,
        default=BOOKING_PAYMENT_PENDING
    )

    # Pricing
    total_amount = money_field()

    # Additional info
    notes = models.TextField(blank=True)
    cancellation_reason = models.TextField(blank=True)
    cancellation_fee = money_field()
    cancelled_by = models.CharField(max_length=20, choices=USER_ROLES, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'bookings'
        verbose_name = 'Booking'
        verbose_name_plural = 'Bookings'
        ordering = ['-booking_date']
        indexes = [
            models.Index(fields=['customer', 'status']),
            models.Index(fields=['barber', 'start_time']),
            models.Index(fields=['shop', 'booking_date']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['barber', 'booking_date'],
                condition=Q(status__in=ACTIVE_BOOKING_STATUSES),
                name='unique_active_booking_per_barber_slot',
            ),
            models.CheckConstraint(
                condition=Q(end_time__gt=models.F('start_time')),
                name='booking_end_after_start',
            ),
        ]

    def __str__(self):
        return f"{self.customer.user.full_name} with {self.barber.user.full_name} - {self.booking_date}"


class Review(BaseModel):
    """
    A customer's rating of a completed booking. One per booking.
    """
    booking = models.OneToOneField(
        Booking,
        on_delete=models.CASCADE,
        related_name='review'
    )
    customer = models.ForeignKey(
        'customers.CustomerProfile',
        on_delete=models.CASCADE,
        related_name='reviews'
    )
    barber = models.ForeignKey(
        'barbers.BarberProfile',
        on_delete=models.CASCADE,
        related_name='reviews'
    )

    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True)

    class Meta:
        db_table = 'reviews'
        verbose_name = 'Review'
        verbose_name_plural = 'Reviews'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(rating__gte=1) & Q(rating__lte=5),
                name='review_rating_range',
            ),
        ]

    def __str__(self):
        return f"{self.rating}/5 for {self.barber} ({self.booking_id})"


def services_total(services) -> Decimal:
    """Sum of service prices"""
    return sum((Decimal(str(item['price'])) for item in services), Decimal('0.00'))
