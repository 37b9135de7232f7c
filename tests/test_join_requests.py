"""
Tests for the join request workflow.
"""
from unittest import mock

import pytest

from apps.core.exceptions import (
    AlreadyAffiliated,
    AlreadyProcessed,
    DuplicateRequest,
    InvalidInput,
    JoinRequestNotFound,
    NotAuthorized,
    ShopFull,
)
from apps.core.utils.constants import (
    JOIN_REQUEST_APPROVED,
    JOIN_REQUEST_PENDING,
    JOIN_REQUEST_REJECTED,
    USER_ROLE_BARBER,
)
from apps.join_requests import services
from apps.join_requests.models import JoinRequest
from apps.notifications.models import Notification, NotificationType
from apps.shops import services as shop_services

pytestmark = pytest.mark.django_db


class TestSubmit:

    def test_creates_pending_request_and_notifies_owner(self, shop, barber, owner_user):
        join_request = services.submit(barber, shop.id, message='I do great fades')

        assert join_request.status == JOIN_REQUEST_PENDING
        assert join_request.message == 'I do great fades'
        notification = Notification.objects.get(user=owner_user)
        assert notification.notification_type == NotificationType.JOIN_REQUEST
        assert notification.data['join_request_id'] == str(join_request.id)

    def test_affiliated_barber_cannot_submit(self, seated_barber, owner, make_user, make_shop):
        other_shop = make_shop(make_user(USER_ROLE_BARBER).barber_profile, name='Other')

        with pytest.raises(AlreadyAffiliated):
            services.submit(seated_barber, other_shop.id)

    def test_duplicate_request(self, shop, barber):
        services.submit(barber, shop.id)

        with pytest.raises(DuplicateRequest):
            services.submit(barber, shop.id)

    def test_re_request_after_rejection_is_duplicate(self, shop, barber, owner):
        join_request = services.submit(barber, shop.id)
        services.respond(join_request.id, owner, 'reject')

        with pytest.raises(DuplicateRequest):
            services.submit(barber, shop.id)

    def test_full_shop_with_other_barbers(self, shop, seated_barber, make_user):
        newcomer = make_user(USER_ROLE_BARBER).barber_profile

        with pytest.raises(ShopFull):
            services.submit(newcomer, shop.id)

    def test_requested_seat_out_of_range(self, shop, barber):
        with pytest.raises(InvalidInput):
            services.submit(barber, shop.id, seat_number=9)


class TestRespond:

    def test_approve_assigns_lowest_seat(self, shop, barber, owner):
        join_request = services.submit(barber, shop.id)

        result = services.respond(join_request.id, owner, 'approve')

        barber.refresh_from_db()
        assert result.status == JOIN_REQUEST_APPROVED
        assert result.assigned_seat == 2
        assert result.responded_at is not None
        assert barber.shop_id == shop.id
        assert barber.seat_number == 2
        assert barber.is_solo is False

    def test_approve_honours_requested_seat(self, owner, make_shop, barber):
        shop = make_shop(owner, total_seats=4)
        join_request = services.submit(barber, shop.id, seat_number=3)

        result = services.respond(join_request.id, owner, 'approve')

        assert result.assigned_seat == 3

    def test_explicit_seat_overrides_request(self, owner, make_shop, barber):
        shop = make_shop(owner, total_seats=4)
        join_request = services.submit(barber, shop.id, seat_number=3)

        result = services.respond(join_request.id, owner, 'approve', seat_number=4)

        assert result.assigned_seat == 4

    def test_reject(self, shop, barber, owner):
        join_request = services.submit(barber, shop.id)

        result = services.respond(join_request.id, owner, 'reject')

        barber.refresh_from_db()
        assert result.status == JOIN_REQUEST_REJECTED
        assert barber.shop_id is None

    def test_exactly_one_notification_per_response(self, shop, barber, barber_user, owner):
        join_request = services.submit(barber, shop.id)

        services.respond(join_request.id, owner, 'approve')

        notifications = Notification.objects.filter(user=barber_user)
        assert notifications.count() == 1
        assert notifications.get().notification_type == NotificationType.JOIN_REQUEST_APPROVED

    def test_approval_stands_when_notification_fails(self, shop, barber, barber_user, owner):
        join_request = services.submit(barber, shop.id)

        with mock.patch.object(Notification.objects, 'create', side_effect=RuntimeError('mail down')):
            result = services.respond(join_request.id, owner, 'approve')

        assert result.status == JOIN_REQUEST_APPROVED
        assert JoinRequest.objects.get(id=join_request.id).status == JOIN_REQUEST_APPROVED
        barber.refresh_from_db()
        assert barber.shop_id == shop.id
        assert not Notification.objects.filter(user=barber_user).exists()

    def test_only_owner_can_respond(self, shop, barber, make_user):
        join_request = services.submit(barber, shop.id)
        stranger = make_user(USER_ROLE_BARBER).barber_profile

        with pytest.raises(NotAuthorized):
            services.respond(join_request.id, stranger, 'approve')

    def test_already_processed(self, shop, barber, owner):
        join_request = services.submit(barber, shop.id)
        services.respond(join_request.id, owner, 'reject')

        with pytest.raises(AlreadyProcessed):
            services.respond(join_request.id, owner, 'approve')

    def test_unknown_request(self, owner):
        with pytest.raises(JoinRequestNotFound):
            services.respond('00000000-0000-0000-0000-000000000000', owner, 'approve')

    def test_requester_joined_elsewhere(self, shop, barber, owner, make_user, make_shop):
        join_request = services.submit(barber, shop.id)
        other_shop = make_shop(make_user(USER_ROLE_BARBER).barber_profile, name='Other')
        shop_services.assign_seat(other_shop, barber)

        with pytest.raises(AlreadyAffiliated):
            services.respond(join_request.id, owner, 'approve')


class TestScenarioA:
    """One-seat shop occupied by its owner"""

    def test_submit_succeeds_but_approval_fails(self, owner, make_shop, barber):
        shop = make_shop(owner, total_seats=1)

        join_request = services.submit(barber, shop.id)
        assert join_request.status == JOIN_REQUEST_PENDING

        with pytest.raises(ShopFull):
            services.respond(join_request.id, owner, 'approve')

        join_request.refresh_from_db()
        barber.refresh_from_db()
        assert join_request.status == JOIN_REQUEST_PENDING
        assert barber.shop_id is None
        assert shop_services.occupied_seat_numbers(shop) == [1]


class TestListing:

    def test_owner_inbox_filters_by_status(self, shop, owner, make_user):
        first = services.submit(make_user(USER_ROLE_BARBER).barber_profile, shop.id)
        second = services.submit(make_user(USER_ROLE_BARBER).barber_profile, shop.id)
        services.respond(first.id, owner, 'reject')

        pending = list(services.list_for_owner(owner, status=JOIN_REQUEST_PENDING))

        assert [r.id for r in pending] == [second.id]
        assert services.list_for_owner(owner).count() == 2

    def test_invalid_status_filter(self, owner):
        with pytest.raises(InvalidInput):
            services.list_for_owner(owner, status='maybe')

    def test_barber_sees_own_requests(self, shop, barber):
        services.submit(barber, shop.id)

        assert JoinRequest.objects.count() == 1
        assert [r.shop_id for r in services.list_for_barber(barber)] == [shop.id]
