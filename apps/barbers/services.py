"""
Barber self-service: working status and earnings
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db.models import Sum
from django.utils import timezone

from apps.core.exceptions import BarberNotFound, InvalidInput
from apps.core.utils.constants import (
    BARBER_STATUSES,
    BARBER_STATUS_AVAILABLE,
    BOOKING_STATUS_COMPLETED,
    BOOKING_PAYMENT_PAID,
    DEFAULT_PLATFORM_FEE_RATE,
    EARNINGS_PERIODS,
    EARNINGS_PERIOD_TODAY,
    EARNINGS_PERIOD_WEEK,
)
from apps.core.utils.helpers import quantize_money
from .models import BarberProfile

logger = logging.getLogger(__name__)


def get_barber_profile(user) -> BarberProfile:
    """
    Get the BarberProfile of a user or raise BarberNotFound.
    """
    try:
        return BarberProfile.objects.select_related('user', 'shop').get(user=user)
    except BarberProfile.DoesNotExist:
        raise BarberNotFound()


def update_status(barber: BarberProfile, status: str) -> BarberProfile:
    """
    Set the barber's working status. Only 'available' accepts bookings.
    """
    valid_statuses = [choice[0] for choice in BARBER_STATUSES]
    if status not in valid_statuses:
        raise InvalidInput(f"Status must be one of: {', '.join(valid_statuses)}")

    barber.status = status
    barber.is_available = status == BARBER_STATUS_AVAILABLE
    barber.save(update_fields=['status', 'is_available', 'updated_at'])

    logger.info(f"Barber {barber.id} status changed to {status}")
    return barber


def period_start(period: str, now=None):
    """
    Start of an earnings window: midnight today, seven days back,
    or the first day of the current month.
    """
    now = timezone.localtime(now or timezone.now())
    if period == EARNINGS_PERIOD_TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == EARNINGS_PERIOD_WEEK:
        return now - timedelta(days=7)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def earnings(barber: BarberProfile, period: str = 'month') -> dict:
    """
    Earnings summary over a period from completed, paid bookings.
    """
    from apps.bookings.models import Booking

    if period not in EARNINGS_PERIODS:
        raise InvalidInput(f"Period must be one of: {', '.join(EARNINGS_PERIODS)}")

    now = timezone.now()
    start = period_start(period, now)

    in_window = Booking.objects.filter(
        barber=barber,
        booking_date__gte=start,
        booking_date__lte=now,
    )
    completed = in_window.filter(
        status=BOOKING_STATUS_COMPLETED,
        payment_status=BOOKING_PAYMENT_PAID,
    )

    fee_rate = Decimal(str(getattr(settings, 'PLATFORM_FEE_RATE', DEFAULT_PLATFORM_FEE_RATE)))
    gross = completed.aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00')
    platform_fees = quantize_money(gross * fee_rate)

    total_bookings = completed.count()
    all_bookings = in_window.count()
    completion_rate = round(total_bookings / all_bookings * 100) if all_bookings else 100

    return {
        'period': period,
        'start_date': start,
        'end_date': now,
        'gross_earnings': quantize_money(gross),
        'platform_fees': platform_fees,
        'net_earnings': quantize_money(gross - platform_fees),
        'total_bookings': total_bookings,
        'unique_customers': completed.values('customer').distinct().count(),
        'completion_rate': completion_rate,
    }
