"""
Shop and seat registry.

Every operation that changes seat occupancy runs inside a transaction that
holds a row lock on the shop, so concurrent approvals and leaves against the
same shop are serialized.
"""
import logging
from typing import List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from apps.barbers.models import BarberProfile
from apps.core.exceptions import (
    AlreadyAffiliated,
    AlreadyOwnsShop,
    BarberShopMismatch,
    CapacityBelowOccupancy,
    InvalidInput,
    NotOwner,
    SeatTaken,
    ShopFull,
    ShopNotFound,
)
from apps.core.utils.constants import DEFAULT_TOTAL_SEATS
from apps.core.utils.helpers import haversine_km
from apps.core.validators import validate_opening_hours, validate_phone_number
from .models import Shop, ShopSeat, default_opening_hours

logger = logging.getLogger(__name__)

SHOP_DETAIL_FIELDS = ['name', 'description', 'address', 'phone_number', 'email',
                      'location_lat', 'location_lng', 'opening_hours', 'timezone']
CONTACT_FIELDS = ['phone_number', 'email', 'address', 'description', 'name']

DEFAULT_SEARCH_RADIUS_KM = 10


def get_shop(shop_id) -> Shop:
    try:
        return Shop.objects.select_related('owner__user').get(id=shop_id)
    except (Shop.DoesNotExist, DjangoValidationError, ValueError):
        raise ShopNotFound()


def lock_shop(shop_id) -> Shop:
    """
    Re-read a shop with a row lock. Must be called inside transaction.atomic.
    """
    try:
        return Shop.objects.select_for_update().get(id=shop_id)
    except (Shop.DoesNotExist, DjangoValidationError, ValueError):
        raise ShopNotFound()


def lock_barber(barber_id) -> BarberProfile:
    return BarberProfile.objects.select_for_update().get(id=barber_id)


def occupied_seat_numbers(shop: Shop) -> List[int]:
    return list(
        ShopSeat.objects
        .filter(shop=shop, barber__isnull=False)
        .order_by('seat_number')
        .values_list('seat_number', flat=True)
    )


def available_seats(shop: Shop) -> int:
    return max(shop.total_seats - len(occupied_seat_numbers(shop)), 0)


def _ensure_owner(shop: Shop, actor_barber: BarberProfile):
    if shop.owner_id != actor_barber.id:
        raise NotOwner()


@transaction.atomic
def create_shop(owner_barber: BarberProfile, total_seats: int = DEFAULT_TOTAL_SEATS, **details) -> Shop:
    """
    Create a shop with `total_seats` empty seats and seat the owner in seat 1.
    """
    owner = lock_barber(owner_barber.id)

    if Shop.objects.filter(owner=owner).exists():
        raise AlreadyOwnsShop()
    if owner.shop_id is not None:
        raise AlreadyAffiliated()
    if total_seats is None or total_seats < 1:
        raise InvalidInput('Total seats must be at least 1.')

    unknown = set(details) - set(SHOP_DETAIL_FIELDS)
    if unknown:
        raise InvalidInput(f"Unknown shop fields: {', '.join(sorted(unknown))}")
    if details.get('opening_hours'):
        details['opening_hours'] = {**default_opening_hours(), **details['opening_hours']}

    try:
        with transaction.atomic():
            shop = Shop.objects.create(owner=owner, total_seats=total_seats, **details)
    except IntegrityError:
        raise AlreadyOwnsShop()

    ShopSeat.objects.bulk_create([
        ShopSeat(shop=shop, seat_number=number)
        for number in range(1, total_seats + 1)
    ])

    assign_seat(shop, owner, seat_number=1)
    owner_barber.refresh_from_db()

    logger.info(f"Shop {shop.id} created by barber {owner.id} with {total_seats} seats")
    return shop


@transaction.atomic
def assign_seat(shop: Shop, barber: BarberProfile, seat_number: Optional[int] = None) -> ShopSeat:
    """
    Seat a barber in a shop.

    Takes the requested seat, or the lowest free seat when none is given.
    Locks the shop row for the duration of the enclosing transaction.
    """
    shop = lock_shop(shop.id)
    barber = lock_barber(barber.id)

    if barber.shop_id is not None:
        raise AlreadyAffiliated()

    occupied = occupied_seat_numbers(shop)
    if len(occupied) >= shop.total_seats:
        raise ShopFull()

    seats = ShopSeat.objects.select_for_update().filter(shop=shop)
    if seat_number is None:
        seat = (
            seats.filter(barber__isnull=True, seat_number__lte=shop.total_seats)
            .order_by('seat_number')
            .first()
        )
        if seat is None:
            raise ShopFull()
    else:
        if not 1 <= seat_number <= shop.total_seats:
            raise InvalidInput(f"Seat number must be between 1 and {shop.total_seats}.")
        seat = seats.get(seat_number=seat_number)
        if seat.barber_id is not None:
            raise SeatTaken()

    seat.barber = barber
    barber.shop = shop
    barber.seat_number = seat.seat_number

    try:
        with transaction.atomic():
            seat.save(update_fields=['barber', 'updated_at'])
            barber.save(update_fields=['shop', 'seat_number', 'updated_at'])
    except IntegrityError:
        raise SeatTaken()

    logger.info(f"Barber {barber.id} assigned to seat {seat.seat_number} in shop {shop.id}")
    return seat


@transaction.atomic
def release_seat(shop: Shop, barber: BarberProfile) -> BarberProfile:
    """
    Vacate a barber's seat. The barber goes back to working solo.
    """
    shop = lock_shop(shop.id)
    barber = lock_barber(barber.id)

    if barber.shop_id != shop.id:
        raise BarberShopMismatch()
    if shop.owner_id == barber.id:
        raise InvalidInput('The shop owner cannot leave their own shop.')

    ShopSeat.objects.filter(shop=shop, barber=barber).update(barber=None)

    barber.shop = None
    barber.seat_number = None
    barber.save(update_fields=['shop', 'seat_number', 'updated_at'])

    logger.info(f"Barber {barber.id} left shop {shop.id}")
    return barber


@transaction.atomic
def update_capacity(shop: Shop, actor_barber: BarberProfile, total_seats: int) -> Shop:
    """
    Grow or shrink a shop. Shrinking drops trailing seats, all of which must be free.
    """
    shop = lock_shop(shop.id)
    _ensure_owner(shop, actor_barber)

    if total_seats is None or total_seats < 1:
        raise InvalidInput('Total seats must be at least 1.')

    current = shop.total_seats
    if total_seats > current:
        ShopSeat.objects.bulk_create([
            ShopSeat(shop=shop, seat_number=number)
            for number in range(current + 1, total_seats + 1)
        ])
    elif total_seats < current:
        removed = ShopSeat.objects.select_for_update().filter(shop=shop, seat_number__gt=total_seats)
        if removed.filter(barber__isnull=False).exists():
            raise CapacityBelowOccupancy()
        removed.delete()

    shop.total_seats = total_seats
    shop.save(update_fields=['total_seats', 'updated_at'])

    logger.info(f"Shop {shop.id} capacity changed from {current} to {total_seats}")
    return shop


def update_hours(shop: Shop, actor_barber: BarberProfile, opening_hours: dict) -> Shop:
    """
    Replace the hours of the given weekdays. Days not mentioned keep their hours.
    """
    _ensure_owner(shop, actor_barber)

    try:
        validate_opening_hours(opening_hours)
    except DjangoValidationError as e:
        raise InvalidInput(' '.join(e.messages))

    hours = dict(shop.opening_hours or {})
    hours.update(opening_hours)
    shop.opening_hours = hours
    shop.save(update_fields=['opening_hours', 'updated_at'])

    logger.info(f"Shop {shop.id} opening hours updated for {', '.join(opening_hours)}")
    return shop


def update_contact_info(shop: Shop, actor_barber: BarberProfile, **fields) -> Shop:
    _ensure_owner(shop, actor_barber)

    unknown = set(fields) - set(CONTACT_FIELDS)
    if unknown:
        raise InvalidInput(f"Unknown contact fields: {', '.join(sorted(unknown))}")
    if not fields:
        raise InvalidInput('No contact fields provided.')

    try:
        if fields.get('phone_number'):
            validate_phone_number(fields['phone_number'])
        if fields.get('email'):
            validate_email(fields['email'])
    except DjangoValidationError as e:
        raise InvalidInput(' '.join(e.messages))

    if 'name' in fields and not fields['name']:
        raise InvalidInput('Shop name cannot be empty.')

    for field, value in fields.items():
        setattr(shop, field, value)
    shop.save(update_fields=list(fields) + ['updated_at'])

    logger.info(f"Shop {shop.id} contact info updated: {', '.join(fields)}")
    return shop


def search_shops(query: Optional[str] = None,
                 latitude: Optional[float] = None,
                 longitude: Optional[float] = None,
                 radius_km: Optional[float] = None,
                 verified_only: bool = False) -> List[Shop]:
    """
    Find shops by name or address, optionally near a point.

    Every returned shop carries `occupied_seats`, `available_seats` and,
    when a location was given, `distance_km`. Results with a location are
    limited to `radius_km` (default 10) and sorted nearest first.
    """
    queryset = (
        Shop.objects
        .select_related('owner__user')
        .annotate(occupied_count=Count('seats', filter=Q(seats__barber__isnull=False)))
    )
    if query:
        queryset = queryset.filter(Q(name__icontains=query) | Q(address__icontains=query))
    if verified_only:
        queryset = queryset.filter(is_verified=True)

    shops = list(queryset)
    for shop in shops:
        shop.occupied_seats = shop.occupied_count
        shop.available_seats = max(shop.total_seats - shop.occupied_count, 0)
        shop.distance_km = None

    if latitude is None or longitude is None:
        return shops

    radius = radius_km if radius_km is not None else DEFAULT_SEARCH_RADIUS_KM
    nearby = []
    for shop in shops:
        if shop.location_lat is None or shop.location_lng is None:
            continue
        shop.distance_km = round(haversine_km(latitude, longitude, shop.location_lat, shop.location_lng), 2)
        if shop.distance_km <= radius:
            nearby.append(shop)

    nearby.sort(key=lambda s: s.distance_km)
    return nearby
