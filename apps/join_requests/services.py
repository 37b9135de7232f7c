"""
Join request workflow: pending -> approved | rejected.
"""
import logging
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.barbers.models import BarberProfile
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
    JOIN_REQUEST_ACTION_APPROVE,
    JOIN_REQUEST_ACTION_REJECT,
    JOIN_REQUEST_APPROVED,
    JOIN_REQUEST_PENDING,
    JOIN_REQUEST_REJECTED,
    JOIN_REQUEST_STATUSES,
)
from apps.core.utils.helpers import full_name_or_email
from apps.notifications.models import NotificationType
from apps.notifications.services import dispatcher
from apps.shops import services as shop_services
from .models import JoinRequest

logger = logging.getLogger(__name__)


def submit(barber: BarberProfile, shop_id, message: str = '', seat_number: Optional[int] = None) -> JoinRequest:
    """
    Ask to join a shop. A barber gets one request per shop, ever.
    """
    barber = BarberProfile.objects.select_related('user').get(id=barber.id)
    if barber.shop_id is not None:
        raise AlreadyAffiliated()

    shop = shop_services.get_shop(shop_id)
    # A shop seating only its owner still accepts requests
    if shop_services.available_seats(shop) <= 0 and \
            BarberProfile.objects.filter(shop=shop).exclude(id=shop.owner_id).exists():
        raise ShopFull()

    if seat_number is not None and not 1 <= seat_number <= shop.total_seats:
        raise InvalidInput(f"Seat number must be between 1 and {shop.total_seats}.")

    if JoinRequest.objects.filter(barber=barber, shop=shop).exists():
        raise DuplicateRequest()

    try:
        with transaction.atomic():
            join_request = JoinRequest.objects.create(
                barber=barber,
                shop=shop,
                message=message or '',
                seat_number=seat_number,
            )
    except IntegrityError:
        raise DuplicateRequest()

    logger.info(f"Barber {barber.id} requested to join shop {shop.id}")

    dispatcher.notify(
        shop.owner.user,
        NotificationType.JOIN_REQUEST,
        'New Join Request',
        f"{full_name_or_email(barber.user)} has requested to join {shop.name}.",
        {'join_request_id': str(join_request.id), 'shop_id': str(shop.id), 'barber_id': str(barber.id)},
    )
    return join_request


def respond(request_id, owner_barber: BarberProfile, action: str, seat_number: Optional[int] = None) -> JoinRequest:
    """
    Approve or reject a pending request. Approval seats the barber in the
    given seat, else the requested seat if still free, else the lowest free seat.
    """
    with transaction.atomic():
        try:
            join_request = JoinRequest.objects.select_for_update().get(id=request_id)
        except (JoinRequest.DoesNotExist, DjangoValidationError, ValueError):
            raise JoinRequestNotFound()

        shop = shop_services.lock_shop(join_request.shop_id)
        if shop.owner_id != owner_barber.id:
            raise NotAuthorized('You can only respond to requests for your own barbershops.')
        if join_request.status != JOIN_REQUEST_PENDING:
            raise AlreadyProcessed()
        if action not in (JOIN_REQUEST_ACTION_APPROVE, JOIN_REQUEST_ACTION_REJECT):
            raise InvalidInput("Action must be 'approve' or 'reject'.")

        if action == JOIN_REQUEST_ACTION_APPROVE:
            if shop_services.available_seats(shop) <= 0:
                raise ShopFull()

            barber = shop_services.lock_barber(join_request.barber_id)
            if barber.shop_id is not None:
                raise AlreadyAffiliated('This barber has already joined a barbershop.')

            if seat_number is None and join_request.seat_number is not None:
                if join_request.seat_number not in shop_services.occupied_seat_numbers(shop) \
                        and join_request.seat_number <= shop.total_seats:
                    seat_number = join_request.seat_number

            seat = shop_services.assign_seat(shop, barber, seat_number)
            join_request.status = JOIN_REQUEST_APPROVED
            join_request.assigned_seat = seat.seat_number
        else:
            join_request.status = JOIN_REQUEST_REJECTED

        join_request.responded_at = timezone.now()
        join_request.save(update_fields=['status', 'assigned_seat', 'responded_at', 'updated_at'])

    logger.info(f"Join request {join_request.id} {join_request.status} by barber {owner_barber.id}")

    if join_request.status == JOIN_REQUEST_APPROVED:
        dispatcher.notify(
            join_request.barber.user,
            NotificationType.JOIN_REQUEST_APPROVED,
            'Join Request Approved',
            f"Your request to join {shop.name} has been approved. You have been assigned seat {join_request.assigned_seat}.",
            {'join_request_id': str(join_request.id), 'shop_id': str(shop.id), 'seat_number': join_request.assigned_seat},
        )
    else:
        dispatcher.notify(
            join_request.barber.user,
            NotificationType.JOIN_REQUEST_REJECTED,
            'Join Request Rejected',
            f"Your request to join {shop.name} has been rejected.",
            {'join_request_id': str(join_request.id), 'shop_id': str(shop.id)},
        )
    return join_request


def _validate_status_filter(status: Optional[str]):
    valid = [choice[0] for choice in JOIN_REQUEST_STATUSES]
    if status is not None and status not in valid:
        raise InvalidInput(f"Status must be one of: {', '.join(valid)}")


def list_for_owner(owner_barber: BarberProfile, status: Optional[str] = None):
    """
    Requests sent to the shop owned by this barber, newest first.
    """
    _validate_status_filter(status)
    queryset = (
        JoinRequest.objects
        .filter(shop__owner=owner_barber)
        .select_related('barber__user', 'shop')
    )
    if status:
        queryset = queryset.filter(status=status)
    return queryset.order_by('-created_at')


def list_for_barber(barber: BarberProfile):
    return (
        JoinRequest.objects
        .filter(barber=barber)
        .select_related('shop')
        .order_by('-created_at')
    )
