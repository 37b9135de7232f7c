"""
Tests for the shop and seat registry.
"""
import pytest

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
)
from apps.core.utils.constants import USER_ROLE_BARBER
from apps.shops import services
from apps.shops.models import ShopSeat

pytestmark = pytest.mark.django_db


# ============================================================================
# CREATE SHOP
# ============================================================================

class TestCreateShop:

    def test_owner_takes_seat_one(self, owner, make_shop):
        shop = make_shop(owner, total_seats=3)

        owner.refresh_from_db()
        assert owner.shop_id == shop.id
        assert owner.seat_number == 1
        assert owner.is_solo is False
        assert services.occupied_seat_numbers(shop) == [1]
        assert services.available_seats(shop) == 2

    def test_seats_are_created_for_capacity(self, owner, make_shop):
        shop = make_shop(owner, total_seats=4)

        numbers = list(ShopSeat.objects.filter(shop=shop).order_by('seat_number')
                       .values_list('seat_number', flat=True))
        assert numbers == [1, 2, 3, 4]

    def test_default_opening_hours(self, shop):
        assert shop.opening_hours['monday'] == {'open': '09:00', 'close': '18:00', 'closed': False}
        assert shop.opening_hours['sunday'] == {'open': '10:00', 'close': '16:00', 'closed': False}

    def test_second_shop_for_same_owner_rejected(self, owner, shop, make_shop):
        with pytest.raises(AlreadyOwnsShop):
            make_shop(owner, name='Second Chair')

    def test_seated_barber_cannot_open_shop(self, seated_barber, make_shop):
        with pytest.raises(AlreadyAffiliated):
            make_shop(seated_barber, name='Breakaway Cuts')

    def test_zero_seats_rejected(self, owner, make_shop):
        with pytest.raises(InvalidInput):
            make_shop(owner, total_seats=0)
        owner.refresh_from_db()
        assert owner.shop_id is None


# ============================================================================
# SEAT ASSIGNMENT
# ============================================================================

class TestAssignSeat:

    def test_lowest_free_seat_is_picked(self, shop, make_user):
        barber = make_user(USER_ROLE_BARBER).barber_profile

        seat = services.assign_seat(shop, barber)

        barber.refresh_from_db()
        assert seat.seat_number == 2
        assert barber.shop_id == shop.id
        assert barber.seat_number == 2

    def test_explicit_seat_taken(self, owner, make_shop, make_user):
        shop = make_shop(owner, total_seats=3)
        barber = make_user(USER_ROLE_BARBER).barber_profile

        with pytest.raises(SeatTaken):
            services.assign_seat(shop, barber, seat_number=1)

    def test_seat_out_of_range(self, shop, make_user):
        barber = make_user(USER_ROLE_BARBER).barber_profile

        with pytest.raises(InvalidInput):
            services.assign_seat(shop, barber, seat_number=5)

    def test_full_shop(self, shop, seated_barber, make_user):
        late_comer = make_user(USER_ROLE_BARBER).barber_profile

        with pytest.raises(ShopFull):
            services.assign_seat(shop, late_comer)

        late_comer.refresh_from_db()
        assert late_comer.shop_id is None

    def test_storage_constraint_reports_seat_taken(self, owner, make_shop, make_user):
        shop = make_shop(owner, total_seats=3)
        barber = make_user(USER_ROLE_BARBER).barber_profile
        # seat row says the barber is here while the profile says solo
        ShopSeat.objects.filter(shop=shop, seat_number=2).update(barber=barber)

        with pytest.raises(SeatTaken):
            services.assign_seat(shop, barber)

        assert ShopSeat.objects.get(shop=shop, seat_number=3).barber_id is None
        barber.refresh_from_db()
        assert barber.shop_id is None

    def test_no_double_occupancy(self, owner, make_shop, make_user):
        shop = make_shop(owner, total_seats=4)
        barbers = [make_user(USER_ROLE_BARBER).barber_profile for _ in range(3)]

        for barber in barbers:
            services.assign_seat(shop, barber)

        seated = BarberProfile.objects.filter(shop=shop).values_list('seat_number', flat=True)
        assert sorted(seated) == [1, 2, 3, 4]
        assert ShopSeat.objects.filter(shop=shop, barber__isnull=False).count() == 4


# ============================================================================
# LEAVING AND CAPACITY
# ============================================================================

class TestReleaseSeat:

    def test_barber_leaves_and_becomes_solo(self, shop, seated_barber):
        services.release_seat(shop, seated_barber)

        seated_barber.refresh_from_db()
        assert seated_barber.is_solo is True
        assert seated_barber.seat_number is None
        assert services.available_seats(shop) == 1

    def test_owner_cannot_leave(self, shop, owner):
        with pytest.raises(InvalidInput):
            services.release_seat(shop, owner)

    def test_stranger_cannot_leave(self, shop, barber):
        with pytest.raises(BarberShopMismatch):
            services.release_seat(shop, barber)


class TestUpdateCapacity:

    def test_grow(self, shop, owner):
        services.update_capacity(shop, owner, 5)

        shop.refresh_from_db()
        assert shop.total_seats == 5
        assert services.available_seats(shop) == 4

    def test_shrink_over_free_seats(self, owner, make_shop):
        shop = make_shop(owner, total_seats=4)

        services.update_capacity(shop, owner, 2)

        assert ShopSeat.objects.filter(shop=shop).count() == 2

    def test_shrink_below_occupancy(self, shop, owner, seated_barber):
        with pytest.raises(CapacityBelowOccupancy):
            services.update_capacity(shop, owner, 1)

        shop.refresh_from_db()
        assert shop.total_seats == 2

    def test_only_owner(self, shop, barber):
        with pytest.raises(NotOwner):
            services.update_capacity(shop, barber, 6)


class TestHoursAndContact:

    def test_update_hours_merges_days(self, shop, owner):
        services.update_hours(shop, owner, {'sunday': {'closed': True}})

        shop.refresh_from_db()
        assert shop.opening_hours['sunday'] == {'closed': True}
        assert shop.opening_hours['monday']['open'] == '09:00'

    def test_invalid_hours(self, shop, owner):
        with pytest.raises(InvalidInput):
            services.update_hours(shop, owner, {'funday': {'open': '09:00', 'close': '17:00'}})
        with pytest.raises(InvalidInput):
            services.update_hours(shop, owner, {'monday': {'open': '9am', 'close': '17:00'}})

    def test_update_contact(self, shop, owner):
        services.update_contact_info(shop, owner, phone_number='+2348012345678', email='hi@fade.ng')

        shop.refresh_from_db()
        assert shop.phone_number == '+2348012345678'
        assert shop.email == 'hi@fade.ng'

    def test_contact_rejects_other_fields(self, shop, owner):
        with pytest.raises(InvalidInput):
            services.update_contact_info(shop, owner, total_seats=10)

    def test_contact_only_owner(self, shop, barber):
        with pytest.raises(NotOwner):
            services.update_contact_info(shop, barber, name='Hijacked')


# ============================================================================
# SEARCH
# ============================================================================

class TestSearchShops:

    def test_text_search(self, owner, make_shop, make_user):
        make_shop(owner, name='Fade Factory', address='Ikeja')
        make_shop(make_user(USER_ROLE_BARBER).barber_profile, name='Kings Cut', address='Lekki')

        results = services.search_shops(query='lekki')

        assert [s.name for s in results] == ['Kings Cut']
        assert results[0].available_seats == 1
        assert results[0].occupied_seats == 1

    def test_radius_and_distance_order(self, owner, make_shop, make_user):
        # Ikeja, Yaba and Ibadan relative to a customer in Ikeja
        make_shop(owner, name='Near', location_lat=6.6018, location_lng=3.3515)
        make_shop(make_user(USER_ROLE_BARBER).barber_profile, name='Mid',
                  location_lat=6.5095, location_lng=3.3711)
        make_shop(make_user(USER_ROLE_BARBER).barber_profile, name='Far',
                  location_lat=7.3775, location_lng=3.9470)

        results = services.search_shops(latitude=6.6000, longitude=3.3500, radius_km=20)

        assert [s.name for s in results] == ['Near', 'Mid']
        assert results[0].distance_km < results[1].distance_km <= 20

    def test_verified_only(self, owner, make_shop):
        shop = make_shop(owner)
        assert services.search_shops(verified_only=True) == []

        shop.is_verified = True
        shop.save()
        assert [s.id for s in services.search_shops(verified_only=True)] == [shop.id]
