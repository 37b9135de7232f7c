"""
Barber join request model
"""
from django.db import models

from apps.core.models import BaseModel
from apps.core.utils.constants import JOIN_REQUEST_STATUSES, JOIN_REQUEST_PENDING


class JoinRequest(BaseModel):
    """
    A barber's request to take a seat in a shop. Pending until the shop
    owner approves or rejects it; kept afterwards as history.
    """
    barber = models.ForeignKey(
        'barbers.BarberProfile',
        on_delete=models.CASCADE,
        related_name='join_requests'
    )
    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.CASCADE,
        related_name='join_requests'
    )

    status = models.CharField(
        max_length=20,
        choices=JOIN_REQUEST_STATUSES,
        default=JOIN_REQUEST_PENDING
    )

    # Seat asked for by the barber, and the one actually given on approval
    seat_number = models.PositiveIntegerField(null=True, blank=True)
    assigned_seat = models.PositiveIntegerField(null=True, blank=True)

    message = models.TextField(blank=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'barber_join_requests'
        verbose_name = 'Join Request'
        verbose_name_plural = 'Join Requests'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['shop', 'status']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['barber', 'shop'],
                name='unique_join_request_per_barber_shop',
            ),
        ]

    def __str__(self):
        return f"{self.barber} -> {self.shop.name} ({self.status})"
