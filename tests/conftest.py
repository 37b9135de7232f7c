"""
Pytest configuration and fixtures.

Users are created through the ORM so the profile and wallet signals run
exactly as they do on registration.
"""
from datetime import datetime, time, timedelta
from decimal import Decimal

import pytest
import pytz
from django.utils import timezone
from rest_framework.test import APIClient

from apps.authentication.models import User
from apps.authentication.services.token_service import token_service
from apps.bookings.models import Booking
from apps.core.utils.constants import USER_ROLE_BARBER, USER_ROLE_CUSTOMER
from apps.shops import services as shop_services

TEST_PASSWORD = 'Clipp3rs-and-Fades'
SHOP_TIMEZONE = 'Africa/Lagos'


@pytest.fixture
def make_user(db):
    """Factory for users of either role"""
    counter = {'n': 0}

    def _make_user(role=USER_ROLE_CUSTOMER, email=None, full_name=None, **extra):
        counter['n'] += 1
        return User.objects.create_user(
            email=email or f"{role}{counter['n']}@example.com",
            password=TEST_PASSWORD,
            full_name=full_name or f"{role.title()} {counter['n']}",
            role=role,
            **extra
        )

    return _make_user


@pytest.fixture
def customer_user(make_user):
    return make_user(USER_ROLE_CUSTOMER, email='ada@example.com', full_name='Ada Obi')


@pytest.fixture
def customer(customer_user):
    return customer_user.customer_profile


@pytest.fixture
def owner_user(make_user):
    return make_user(USER_ROLE_BARBER, email='tunde@example.com', full_name='Tunde Bakare')


@pytest.fixture
def owner(owner_user):
    return owner_user.barber_profile


@pytest.fixture
def barber_user(make_user):
    return make_user(USER_ROLE_BARBER, email='emeka@example.com', full_name='Emeka Eze')


@pytest.fixture
def barber(barber_user):
    return barber_user.barber_profile


@pytest.fixture
def make_shop():
    """Factory for shops; the owner is seated in seat 1"""

    def _make_shop(owner_barber, total_seats=2, **details):
        details.setdefault('name', 'Fade Factory')
        details.setdefault('address', '12 Allen Avenue, Ikeja')
        details.setdefault('timezone', SHOP_TIMEZONE)
        return shop_services.create_shop(owner_barber, total_seats=total_seats, **details)

    return _make_shop


@pytest.fixture
def shop(owner, make_shop):
    return make_shop(owner)


@pytest.fixture
def seated_barber(shop, barber):
    """A barber who works in `shop` and takes bookings"""
    shop_services.assign_seat(shop, barber)
    barber.refresh_from_db()
    return barber


@pytest.fixture
def tomorrow():
    """Tomorrow's date in the shop's timezone"""
    return (timezone.now().astimezone(pytz.timezone(SHOP_TIMEZONE)) + timedelta(days=1)).date()


@pytest.fixture
def services_list():
    return [
        {'name': 'Haircut', 'price': Decimal('3000.00')},
        {'name': 'Beard Trim', 'price': Decimal('1500.00')},
    ]


@pytest.fixture
def make_booking(customer, seated_barber, shop):
    """
    Insert a booking directly, bypassing the engine's checks.
    `start` is an aware datetime; defaults to tomorrow 10:00 shop time.
    """

    def _make_booking(start=None, status='pending', total_amount=Decimal('4500.00'), **extra):
        if start is None:
            start = pytz.timezone(SHOP_TIMEZONE).localize(
                datetime.combine(timezone.now().date() + timedelta(days=1), time(10, 0))
            )
        extra.setdefault('customer', customer)
        extra.setdefault('barber', seated_barber)
        extra.setdefault('shop', shop)
        return Booking.objects.create(
            services=[{'name': 'Haircut', 'price': str(total_amount)}],
            booking_date=start,
            start_time=start,
            end_time=start + timedelta(minutes=30),
            status=status,
            total_amount=total_amount,
            **extra
        )

    return _make_booking


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client():
    """Factory for an APIClient carrying a user's bearer token"""

    def _auth_client(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token_service.issue_token(user)}")
        return client

    return _auth_client
