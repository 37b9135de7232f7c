"""
Booking engine.

This module handles:
- Creating bookings with slot conflict detection
- The pending -> confirmed -> completed state machine and cancellation
- Reviews and the barber's rolling rating
"""
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional
import logging

import pytz
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count
from django.utils import timezone

from apps.barbers.models import BarberProfile
from apps.bookings.models import Booking, Review, services_total
from apps.core.exceptions import (
    BarberNotFound,
    BarberShopMismatch,
    BarberUnavailable,
    BookingNotFound,
    InvalidInput,
    InvalidRating,
    InvalidTransition,
    NotAuthorized,
    PastDateTime,
    SlotConflict,
)
from apps.core.utils.constants import (
    ACTIVE_BOOKING_STATUSES,
    BOOKING_PAYMENT_PAID,
    BOOKING_STATUSES,
    BOOKING_STATUS_CANCELLED,
    BOOKING_STATUS_COMPLETED,
    BOOKING_STATUS_CONFIRMED,
    BOOKING_STATUS_PENDING,
    DEFAULT_BOOKING_SLOT_MINUTES,
    DEFAULT_CANCELLATION_FEE_RATE,
    DEFAULT_CANCELLATION_FEE_WINDOW_HOURS,
    USER_ROLE_BARBER,
    USER_ROLE_CUSTOMER,
)
from apps.core.utils.helpers import quantize_money
from apps.customers.models import CustomerProfile
from apps.notifications.services import dispatcher
from apps.shops import services as shop_services
from apps.shops.models import Shop

logger = logging.getLogger(__name__)


def _slot_minutes() -> int:
    return getattr(settings, 'BOOKING_SLOT_MINUTES', DEFAULT_BOOKING_SLOT_MINUTES)


def _shop_timezone(shop: Shop):
    try:
        return pytz.timezone(shop.timezone)
    except pytz.exceptions.UnknownTimeZoneError:
        return pytz.UTC


def _get_booking(booking_id, lock: bool = False) -> Booking:
    queryset = Booking.objects.select_related('customer__user', 'barber__user', 'shop')
    if lock:
        queryset = Booking.objects.select_for_update()
    try:
        return queryset.get(id=booking_id)
    except (Booking.DoesNotExist, DjangoValidationError, ValueError):
        raise BookingNotFound()


def _normalize_services(services) -> List[dict]:
    if not services:
        raise InvalidInput('At least one service is required.')

    normalized = []
    for item in services:
        name = (item.get('name') or '').strip()
        if not name:
            raise InvalidInput('Every service needs a name.')
        try:
            price = quantize_money(item.get('price'))
        except (TypeError, ValueError, ArithmeticError):
            raise InvalidInput(f"Invalid price for service '{name}'.")
        if price < 0:
            raise InvalidInput(f"Price for service '{name}' cannot be negative.")
        entry = {'name': name, 'price': str(price)}
        if item.get('duration_minutes') is not None:
            entry['duration_minutes'] = int(item['duration_minutes'])
        normalized.append(entry)
    return normalized


class BookingService:
    """
    Service for the booking lifecycle.
    """

    @staticmethod
    def start_datetime(shop: Shop, booking_date, booking_time) -> datetime:
        """
        Combine a calendar date and wall-clock time into an aware
        datetime in the shop's timezone.
        """
        naive = datetime.combine(booking_date, booking_time)
        return _shop_timezone(shop).localize(naive)

    @staticmethod
    def has_overlap(barber: BarberProfile, start_time: datetime, end_time: datetime,
                    exclude_id=None) -> bool:
        """
        True if an active booking of this barber intersects [start_time, end_time).
        """
        queryset = Booking.objects.filter(
            barber=barber,
            status__in=ACTIVE_BOOKING_STATUSES,
            start_time__lt=end_time,
            end_time__gt=start_time,
        )
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    @staticmethod
    def create(customer: CustomerProfile, barber_id, shop_id, services, booking_date,
               booking_time, notes: str = '') -> Booking:
        """
        Book a barber for one or more services.

        Args:
            customer: The booking customer
            barber_id: Barber to book, must be seated in the shop
            shop_id: Shop the appointment takes place in
            services: List of {"name", "price", "duration_minutes"?}
            booking_date: Calendar date in the shop's timezone
            booking_time: Wall-clock start time in the shop's timezone
            notes: Free text for the barber

        Returns:
            The pending Booking
        """
        services = _normalize_services(services)
        shop = shop_services.get_shop(shop_id)

        with transaction.atomic():
            try:
                barber = BarberProfile.objects.select_for_update().get(id=barber_id)
            except (BarberProfile.DoesNotExist, DjangoValidationError, ValueError):
                raise BarberNotFound()

            if barber.shop_id != shop.id:
                raise BarberShopMismatch()
            if not barber.is_available:
                raise BarberUnavailable()

            start_time = BookingService.start_datetime(shop, booking_date, booking_time)
            if start_time < timezone.now():
                raise PastDateTime()
            end_time = start_time + timedelta(minutes=_slot_minutes() * len(services))

            if BookingService.has_overlap(barber, start_time, end_time):
                raise SlotConflict()

            try:
                with transaction.atomic():
                    booking = Booking.objects.create(
                        customer=customer,
                        barber=barber,
                        shop=shop,
                        services=services,
                        booking_date=start_time,
                        start_time=start_time,
                        end_time=end_time,
                        total_amount=services_total(services),
                        notes=notes or '',
                    )
            except IntegrityError:
                raise SlotConflict()

        logger.info(
            f"Booking {booking.id} created: customer {customer.id}, barber {barber.id}, "
            f"start {start_time.isoformat()}, total {booking.total_amount}"
        )

        booking = _get_booking(booking.id)
        dispatcher.notify_booking(booking, booking.barber.user, 'created')
        return booking

    @staticmethod
    def _ensure_barber(booking: Booking, barber: BarberProfile):
        if booking.barber_id != barber.id:
            raise NotAuthorized('Only the assigned barber can update this booking.')

    @staticmethod
    def confirm(booking_id, barber: BarberProfile) -> Booking:
        with transaction.atomic():
            booking = _get_booking(booking_id, lock=True)
            BookingService._ensure_barber(booking, barber)
            if booking.status != BOOKING_STATUS_PENDING:
                raise InvalidTransition(f"Cannot confirm a {booking.status} booking.")

            booking.status = BOOKING_STATUS_CONFIRMED
            booking.save(update_fields=['status', 'updated_at'])

        logger.info(f"Booking {booking.id} confirmed by barber {barber.id}")

        booking = _get_booking(booking.id)
        dispatcher.notify_booking(booking, booking.customer.user, 'confirmed')
        return booking

    @staticmethod
    def complete(booking_id, barber: BarberProfile, notes: Optional[str] = None) -> Booking:
        """
        Finish a confirmed booking. Payment is considered collected.
        """
        with transaction.atomic():
            booking = _get_booking(booking_id, lock=True)
            BookingService._ensure_barber(booking, barber)
            if booking.status != BOOKING_STATUS_CONFIRMED:
                raise InvalidTransition(f"Cannot complete a {booking.status} booking.")

            booking.status = BOOKING_STATUS_COMPLETED
            booking.payment_status = BOOKING_PAYMENT_PAID
            booking.completed_at = timezone.now()
            if notes:
                booking.notes = f"{booking.notes}\n{notes}" if booking.notes else notes
            booking.save(update_fields=['status', 'payment_status', 'completed_at', 'notes', 'updated_at'])

        logger.info(f"Booking {booking.id} completed by barber {barber.id}")

        booking = _get_booking(booking.id)
        dispatcher.notify_booking(booking, booking.customer.user, 'completed')
        return booking

    @staticmethod
    def cancellation_fee(booking: Booking, actor_role: str, now=None) -> Decimal:
        """
        Fee owed when a customer cancels inside the late-cancellation window.
        Recorded on the booking only, nothing is charged.
        """
        if actor_role != USER_ROLE_CUSTOMER:
            return Decimal('0.00')

        now = now or timezone.now()
        window = timedelta(hours=getattr(
            settings, 'CANCELLATION_FEE_WINDOW_HOURS', DEFAULT_CANCELLATION_FEE_WINDOW_HOURS
        ))
        if booking.start_time - now >= window:
            return Decimal('0.00')

        rate = Decimal(str(getattr(settings, 'CANCELLATION_FEE_RATE', DEFAULT_CANCELLATION_FEE_RATE)))
        return quantize_money(booking.total_amount * rate)

    @staticmethod
    def cancel(booking_id, actor_user, actor_role: Optional[str] = None,
               reason: Optional[str] = None) -> Booking:
        """
        Cancel a pending or confirmed booking on behalf of its customer or barber.

        Returns:
            The cancelled Booking, with `cancellation_fee` set
        """
        actor_role = actor_role or actor_user.role

        with transaction.atomic():
            booking = _get_booking(booking_id, lock=True)

            if actor_role == USER_ROLE_CUSTOMER:
                allowed = booking.customer.user_id == actor_user.id
            elif actor_role == USER_ROLE_BARBER:
                allowed = booking.barber.user_id == actor_user.id
            else:
                allowed = False
            if not allowed:
                raise NotAuthorized('You can only cancel your own bookings.')

            if booking.status not in ACTIVE_BOOKING_STATUSES:
                raise InvalidTransition(f"Cannot cancel a {booking.status} booking.")

            booking.status = BOOKING_STATUS_CANCELLED
            booking.cancellation_reason = reason or ''
            booking.cancellation_fee = BookingService.cancellation_fee(booking, actor_role)
            booking.cancelled_by = actor_role
            booking.cancelled_at = timezone.now()
            booking.save(update_fields=[
                'status', 'cancellation_reason', 'cancellation_fee',
                'cancelled_by', 'cancelled_at', 'updated_at',
            ])

        logger.info(
            f"Booking {booking.id} cancelled by {actor_role} {actor_user.id}, "
            f"fee {booking.cancellation_fee}"
        )

        booking = _get_booking(booking.id)
        for recipient in (booking.customer.user, booking.barber.user):
            if recipient.id != actor_user.id:
                dispatcher.notify_booking(booking, recipient, 'cancelled')
        return booking

    @staticmethod
    def rate(booking_id, customer: CustomerProfile, rating: int, comment: str = '') -> Review:
        """
        Leave or replace the review of a completed booking and refresh
        the barber's and the shop's aggregate rating.
        """
        with transaction.atomic():
            booking = _get_booking(booking_id, lock=True)
            if booking.customer_id != customer.id:
                raise NotAuthorized('You can only rate your own bookings.')
            if booking.status != BOOKING_STATUS_COMPLETED:
                raise InvalidTransition('Only completed bookings can be rated.')
            # bool is an int subclass
            if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
                raise InvalidRating()

            review, created = Review.objects.update_or_create(
                booking=booking,
                defaults={
                    'customer': customer,
                    'barber_id': booking.barber_id,
                    'rating': rating,
                    'comment': comment or '',
                },
            )

            barber = BarberProfile.objects.select_for_update().get(id=booking.barber_id)
            stats = Review.objects.filter(barber=barber).aggregate(avg=Avg('rating'), count=Count('id'))
            barber.rating = quantize_money(stats['avg'] or 0)
            barber.total_reviews = stats['count']
            barber.save(update_fields=['rating', 'total_reviews', 'updated_at'])

            shop = Shop.objects.select_for_update().get(id=booking.shop_id)
            shop_stats = Review.objects.filter(booking__shop=shop).aggregate(avg=Avg('rating'), count=Count('id'))
            shop.rating = quantize_money(shop_stats['avg'] or 0)
            shop.total_reviews = shop_stats['count']
            shop.save(update_fields=['rating', 'total_reviews', 'updated_at'])

        logger.info(
            f"Booking {booking.id} {'rated' if created else 're-rated'} {rating}/5; "
            f"barber {barber.id} now {barber.rating} over {barber.total_reviews} reviews"
        )
        return review

    @staticmethod
    def get_for_actor(booking_id, user) -> Booking:
        booking = _get_booking(booking_id)
        if user.id not in (booking.customer.user_id, booking.barber.user_id):
            raise NotAuthorized('You can only view your own bookings.')
        return booking

    @staticmethod
    def list_for_user(user, status: Optional[str] = None):
        """
        Bookings where the user is the customer or the barber, newest first.
        """
        valid = [choice[0] for choice in BOOKING_STATUSES]
        if status is not None and status not in valid:
            raise InvalidInput(f"Status must be one of: {', '.join(valid)}")

        queryset = Booking.objects.select_related('customer__user', 'barber__user', 'shop')
        if user.role == USER_ROLE_BARBER:
            queryset = queryset.filter(barber__user=user)
        else:
            queryset = queryset.filter(customer__user=user)
        if status:
            queryset = queryset.filter(status=status)
        return queryset.order_by('-booking_date')


booking_service = BookingService()
