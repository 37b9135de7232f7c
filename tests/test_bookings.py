"""
Tests for the booking engine.
"""
from datetime import datetime, time, timedelta
from decimal import Decimal
from unittest import mock

import pytest
import pytz
from django.utils import timezone

from apps.bookings.models import Booking, Review
from apps.bookings.services.booking_service import BookingService, booking_service
from apps.core.exceptions import (
    BarberNotFound,
    BarberShopMismatch,
    BarberUnavailable,
    InvalidInput,
    InvalidRating,
    InvalidTransition,
    NotAuthorized,
    PastDateTime,
    ShopNotFound,
    SlotConflict,
)
from apps.core.utils.constants import (
    BOOKING_PAYMENT_PAID,
    BOOKING_STATUS_CANCELLED,
    BOOKING_STATUS_COMPLETED,
    BOOKING_STATUS_CONFIRMED,
    BOOKING_STATUS_PENDING,
    USER_ROLE_BARBER,
    USER_ROLE_CUSTOMER,
)
from apps.notifications.models import Notification

from .conftest import SHOP_TIMEZONE

pytestmark = pytest.mark.django_db

LAGOS = pytz.timezone(SHOP_TIMEZONE)


@pytest.fixture
def book(customer, seated_barber, shop, services_list, tomorrow):
    """Create a booking through the engine, tomorrow at `at` shop time"""

    def _book(at=time(10, 0), services=None, **kwargs):
        return booking_service.create(
            kwargs.pop('customer', customer),
            kwargs.pop('barber_id', seated_barber.id),
            kwargs.pop('shop_id', shop.id),
            services if services is not None else services_list,
            kwargs.pop('booking_date', tomorrow),
            at,
            **kwargs
        )

    return _book


def _complete(booking, barber):
    booking_service.confirm(booking.id, barber)
    return booking_service.complete(booking.id, barber)


# ============================================================================
# CREATE
# ============================================================================

class TestCreateBooking:

    def test_scenario_b_totals_and_end_time(self, book, tomorrow):
        booking = book(at=time(10, 0))

        expected_start = LAGOS.localize(datetime.combine(tomorrow, time(10, 0)))
        assert booking.status == BOOKING_STATUS_PENDING
        assert booking.payment_status == 'pending'
        assert booking.total_amount == Decimal('4500.00')
        assert booking.start_time == expected_start
        assert booking.booking_date == expected_start
        assert booking.end_time == expected_start + timedelta(minutes=60)

    def test_scenario_b_same_timestamp_conflicts(self, book):
        book(at=time(10, 0))

        with pytest.raises(SlotConflict):
            book(at=time(10, 0))
        assert Booking.objects.count() == 1

    def test_overlapping_interval_conflicts(self, book):
        book(at=time(10, 0))  # 10:00-11:00

        with pytest.raises(SlotConflict):
            book(at=time(10, 30))

    def test_back_to_back_is_allowed(self, book):
        book(at=time(10, 0))  # 10:00-11:00

        booking = book(at=time(11, 0))
        assert booking.status == BOOKING_STATUS_PENDING

    def test_cancelled_booking_frees_the_slot(self, book, customer_user):
        first = book(at=time(10, 0))
        booking_service.cancel(first.id, customer_user, USER_ROLE_CUSTOMER)

        second = book(at=time(10, 0))
        assert second.id != first.id

    def test_notifies_barber(self, book, barber_user):
        booking = book()

        notification = Notification.objects.get(user=barber_user)
        assert notification.title == 'New Booking'
        assert notification.data == {'booking_id': str(booking.id), 'action': 'created'}
        assert 'Ada Obi' in notification.message

    def test_past_time(self, book):
        yesterday = timezone.now().astimezone(LAGOS).date() - timedelta(days=1)

        with pytest.raises(PastDateTime):
            book(booking_date=yesterday)

    def test_barber_not_in_shop(self, book, barber, make_user, make_shop):
        other_shop = make_shop(make_user(USER_ROLE_BARBER).barber_profile, name='Other')

        with pytest.raises(BarberShopMismatch):
            book(shop_id=other_shop.id)

    def test_unavailable_barber(self, book, seated_barber):
        seated_barber.is_available = False
        seated_barber.save()

        with pytest.raises(BarberUnavailable):
            book()

    def test_unknown_barber_and_shop(self, book):
        with pytest.raises(BarberNotFound):
            book(barber_id='00000000-0000-0000-0000-000000000000')
        with pytest.raises(ShopNotFound):
            book(shop_id='00000000-0000-0000-0000-000000000000')

    def test_services_required(self, book):
        with pytest.raises(InvalidInput):
            book(services=[])

    def test_storage_constraint_reports_slot_conflict(self, book, make_booking, tomorrow):
        make_booking(start=LAGOS.localize(datetime.combine(tomorrow, time(10, 0))))

        with mock.patch.object(BookingService, 'has_overlap', return_value=False):
            with pytest.raises(SlotConflict):
                book(at=time(10, 0))
        assert Booking.objects.count() == 1

    def test_notification_failure_keeps_the_booking(self, book, barber_user):
        with mock.patch.object(Notification.objects, 'create', side_effect=RuntimeError('mail down')):
            booking = book()

        assert Booking.objects.get(id=booking.id).status == BOOKING_STATUS_PENDING
        assert not Notification.objects.filter(user=barber_user).exists()


# ============================================================================
# STATE MACHINE
# ============================================================================

class TestStateMachine:

    def test_confirm_then_complete(self, book, seated_barber):
        booking = book()

        confirmed = booking_service.confirm(booking.id, seated_barber)
        assert confirmed.status == BOOKING_STATUS_CONFIRMED

        completed = booking_service.complete(booking.id, seated_barber, notes='Used the #2 guard')
        assert completed.status == BOOKING_STATUS_COMPLETED
        assert completed.payment_status == BOOKING_PAYMENT_PAID
        assert completed.completed_at is not None
        assert completed.notes.endswith('Used the #2 guard')

    def test_complete_requires_confirmed(self, book, seated_barber):
        booking = book()

        with pytest.raises(InvalidTransition):
            booking_service.complete(booking.id, seated_barber)

    def test_confirm_stands_when_notification_fails(self, book, seated_barber, customer_user):
        booking = book()

        with mock.patch.object(Notification.objects, 'create', side_effect=RuntimeError('mail down')):
            confirmed = booking_service.confirm(booking.id, seated_barber)

        assert confirmed.status == BOOKING_STATUS_CONFIRMED
        booking.refresh_from_db()
        assert booking.status == BOOKING_STATUS_CONFIRMED
        assert not Notification.objects.filter(user=customer_user).exists()

    def test_only_assigned_barber_confirms(self, book, owner):
        booking = book()

        with pytest.raises(NotAuthorized):
            booking_service.confirm(booking.id, owner)

    @pytest.mark.parametrize('terminal', [BOOKING_STATUS_COMPLETED, BOOKING_STATUS_CANCELLED])
    def test_terminal_states_are_final(self, make_booking, seated_barber, customer_user, terminal):
        booking = make_booking(status=terminal)

        with pytest.raises(InvalidTransition):
            booking_service.confirm(booking.id, seated_barber)
        with pytest.raises(InvalidTransition):
            booking_service.complete(booking.id, seated_barber)
        with pytest.raises(InvalidTransition):
            booking_service.cancel(booking.id, customer_user, USER_ROLE_CUSTOMER)

        booking.refresh_from_db()
        assert booking.status == terminal


# ============================================================================
# CANCELLATION
# ============================================================================

class TestCancel:

    def test_customer_cancels_early_without_fee(self, book, customer_user):
        booking = book()

        cancelled = booking_service.cancel(booking.id, customer_user, USER_ROLE_CUSTOMER, reason='Travelling')

        assert cancelled.status == BOOKING_STATUS_CANCELLED
        assert cancelled.cancellation_fee == Decimal('0.00')
        assert cancelled.cancelled_by == USER_ROLE_CUSTOMER
        assert cancelled.cancellation_reason == 'Travelling'

    def test_customer_late_cancellation_fee(self, make_booking, customer_user):
        booking = make_booking(start=timezone.now() + timedelta(hours=1))

        cancelled = booking_service.cancel(booking.id, customer_user, USER_ROLE_CUSTOMER)

        assert cancelled.cancellation_fee == Decimal('900.00')

    def test_scenario_e_barber_cancels_late_without_fee(self, make_booking, barber_user):
        booking = make_booking(start=timezone.now() + timedelta(hours=1), status=BOOKING_STATUS_CONFIRMED)

        cancelled = booking_service.cancel(booking.id, barber_user, USER_ROLE_BARBER)

        assert cancelled.status == BOOKING_STATUS_CANCELLED
        assert cancelled.cancellation_fee == Decimal('0.00')
        assert cancelled.cancelled_by == USER_ROLE_BARBER

    def test_stranger_cannot_cancel(self, book, make_user):
        booking = book()
        stranger = make_user(USER_ROLE_CUSTOMER)

        with pytest.raises(NotAuthorized):
            booking_service.cancel(booking.id, stranger, USER_ROLE_CUSTOMER)

    def test_notifies_the_other_party_only(self, book, customer_user, barber_user):
        booking = book()
        Notification.objects.all().delete()

        booking_service.cancel(booking.id, customer_user, USER_ROLE_CUSTOMER)

        assert list(Notification.objects.values_list('user_id', flat=True)) == [barber_user.id]


# ============================================================================
# RATING
# ============================================================================

class TestRate:

    def test_rating_aggregates_as_mean(self, book, customer, seated_barber, shop):
        ratings = [5, 4, 3]
        for hour, rating in zip([9, 11, 13], ratings):
            booking = _complete(book(at=time(hour, 0)), seated_barber)
            booking_service.rate(booking.id, customer, rating, comment='Sharp')

        seated_barber.refresh_from_db()
        shop.refresh_from_db()
        assert seated_barber.total_reviews == 3
        assert seated_barber.rating == Decimal('4.00')
        assert shop.total_reviews == 3

    def test_rating_again_replaces_review(self, book, customer, seated_barber):
        booking = _complete(book(), seated_barber)

        booking_service.rate(booking.id, customer, 2)
        booking_service.rate(booking.id, customer, 5, comment='Changed my mind')

        seated_barber.refresh_from_db()
        assert Review.objects.filter(booking=booking).count() == 1
        assert seated_barber.rating == Decimal('5.00')
        assert seated_barber.total_reviews == 1

    def test_only_completed_bookings(self, book, customer):
        booking = book()

        with pytest.raises(InvalidTransition):
            booking_service.rate(booking.id, customer, 4)

    @pytest.mark.parametrize('rating', [0, 6])
    def test_out_of_range(self, book, customer, seated_barber, rating):
        booking = _complete(book(), seated_barber)

        with pytest.raises(InvalidRating):
            booking_service.rate(booking.id, customer, rating)

    @pytest.mark.parametrize('rating', [3.7, '4', 'abc', None, True])
    def test_rating_must_be_an_integer(self, book, customer, seated_barber, rating):
        booking = _complete(book(), seated_barber)

        with pytest.raises(InvalidRating):
            booking_service.rate(booking.id, customer, rating)
        assert not Review.objects.exists()

    def test_only_booking_customer(self, book, seated_barber, make_user):
        booking = _complete(book(), seated_barber)
        other = make_user(USER_ROLE_CUSTOMER).customer_profile

        with pytest.raises(NotAuthorized):
            booking_service.rate(booking.id, other, 5)


# ============================================================================
# LOOKUPS
# ============================================================================

class TestLookups:

    def test_get_for_participants_only(self, book, customer_user, barber_user, make_user):
        booking = book()

        assert booking_service.get_for_actor(booking.id, customer_user).id == booking.id
        assert booking_service.get_for_actor(booking.id, barber_user).id == booking.id
        with pytest.raises(NotAuthorized):
            booking_service.get_for_actor(booking.id, make_user(USER_ROLE_CUSTOMER))

    def test_list_for_user_by_role(self, book, customer_user, barber_user, owner_user):
        booking = book()

        assert [b.id for b in booking_service.list_for_user(customer_user)] == [booking.id]
        assert [b.id for b in booking_service.list_for_user(barber_user)] == [booking.id]
        assert list(booking_service.list_for_user(owner_user)) == []
        assert list(booking_service.list_for_user(customer_user, status=BOOKING_STATUS_CONFIRMED)) == []
