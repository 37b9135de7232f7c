"""
Domain error taxonomy and the DRF exception handler that renders it.

Services raise these exceptions; views let them propagate so the handler
below can map each kind to a status code and a structured payload.
"""
import logging

from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(APIException):
    """
    Base class for every typed error raised by the services.
    `kind` is the machine-readable family, `default_code` the specific error.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    kind = 'domain_error'
    default_detail = 'The request could not be completed.'
    default_code = 'domain_error'


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------

class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = 'not_found'
    default_detail = 'Resource not found.'
    default_code = 'not_found'


class NotAuthorized(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = 'not_authorized'
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'not_authorized'


class InvalidTransition(DomainError):
    status_code = status.HTTP_409_CONFLICT
    kind = 'invalid_transition'
    default_detail = 'This action is not allowed in the current state.'
    default_code = 'invalid_transition'


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    kind = 'conflict'
    default_detail = 'Resource conflict.'
    default_code = 'conflict'


class InvalidInput(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = 'invalid_input'
    default_detail = 'Invalid input.'
    default_code = 'invalid_input'


class InsufficientBalance(DomainError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    kind = 'insufficient_balance'
    default_detail = 'Insufficient wallet balance.'
    default_code = 'insufficient_balance'


class ExternalServiceError(DomainError):
    status_code = status.HTTP_502_BAD_GATEWAY
    kind = 'external_service_error'
    default_detail = 'An external service failed, try again later.'
    default_code = 'external_service_error'


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

class InvalidCredentials(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = 'not_authenticated'
    default_detail = 'Invalid email or password.'
    default_code = 'invalid_credentials'


class EmailAlreadyRegistered(Conflict):
    default_detail = 'An account with this email already exists.'
    default_code = 'email_already_registered'


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------

class ShopNotFound(NotFound):
    default_detail = 'Barbershop not found.'
    default_code = 'shop_not_found'


class BarberNotFound(NotFound):
    default_detail = 'Barber not found.'
    default_code = 'barber_not_found'


class CustomerNotFound(NotFound):
    default_detail = 'Customer profile not found.'
    default_code = 'customer_not_found'


class BookingNotFound(NotFound):
    default_detail = 'Booking not found.'
    default_code = 'booking_not_found'


class JoinRequestNotFound(NotFound):
    default_detail = 'Join request not found.'
    default_code = 'join_request_not_found'


class TransactionNotFound(NotFound):
    default_detail = 'Transaction not found.'
    default_code = 'transaction_not_found'


class NotificationNotFound(NotFound):
    default_detail = 'Notification not found.'
    default_code = 'notification_not_found'


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------

class NotOwner(NotAuthorized):
    default_detail = 'Only the shop owner can perform this action.'
    default_code = 'not_owner'


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class AlreadyProcessed(InvalidTransition):
    default_detail = 'This request has already been processed.'
    default_code = 'already_processed'


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------

class ShopFull(Conflict):
    default_detail = 'This barbershop is currently full.'
    default_code = 'shop_full'


class SeatTaken(Conflict):
    default_detail = 'This seat is already occupied.'
    default_code = 'seat_taken'


class SlotConflict(Conflict):
    default_detail = 'Barber is already booked at this time.'
    default_code = 'slot_conflict'


class DuplicateRequest(Conflict):
    default_detail = 'You have already submitted a request to this barbershop.'
    default_code = 'duplicate_request'


class AlreadyAffiliated(Conflict):
    default_detail = 'You are already associated with a barbershop.'
    default_code = 'already_affiliated'


class AlreadyOwnsShop(Conflict):
    default_detail = 'You already own a barbershop.'
    default_code = 'already_owns_shop'


class AlreadyPaid(Conflict):
    default_detail = 'Booking is already paid.'
    default_code = 'already_paid'


class CapacityBelowOccupancy(Conflict):
    default_detail = 'Seats being removed are still occupied.'
    default_code = 'capacity_below_occupancy'


class BarberShopMismatch(Conflict):
    default_detail = 'Barber does not belong to this shop.'
    default_code = 'barber_shop_mismatch'


class BarberUnavailable(Conflict):
    default_detail = 'Barber is not available for bookings.'
    default_code = 'barber_unavailable'


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class PastDateTime(InvalidInput):
    default_detail = 'Booking date and time must be in the future.'
    default_code = 'past_date_time'


class InvalidRating(InvalidInput):
    default_detail = 'Rating must be between 1 and 5.'
    default_code = 'invalid_rating'


# ---------------------------------------------------------------------------
# External services
# ---------------------------------------------------------------------------

class PaymentGatewayError(ExternalServiceError):
    default_detail = 'The payment gateway could not be reached.'
    default_code = 'payment_gateway_error'


class InvalidWebhookSignature(ExternalServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid signature.'
    default_code = 'invalid_webhook_signature'


# Kinds for DRF's own exceptions (validation, authentication, 404s)
STATUS_KINDS = {
    status.HTTP_400_BAD_REQUEST: 'invalid_input',
    status.HTTP_401_UNAUTHORIZED: 'not_authenticated',
    status.HTTP_403_FORBIDDEN: 'not_authorized',
    status.HTTP_404_NOT_FOUND: 'not_found',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'invalid_input',
}


def custom_exception_handler(exc, context):
    """
    Custom exception handler that adds the error kind and code.

    Unique-constraint violations that escape a service are reported as a
    conflict without exposing the database message.
    """
    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error reached the API boundary: {exc}")
        exc = Conflict()

    response = exception_handler(exc, context)

    if response is not None:
        data = response.data
        errors = None
        if isinstance(data, dict) and 'detail' in data:
            message = str(data['detail'])
        else:
            message = 'Invalid input.'
            errors = data

        codes = exc.get_codes() if isinstance(exc, APIException) else None
        code = codes if isinstance(codes, str) else getattr(exc, 'default_code', 'error')

        custom_response_data = {
            'error': True,
            'kind': getattr(exc, 'kind', STATUS_KINDS.get(response.status_code, 'error')),
            'code': code,
            'message': message,
            'status_code': response.status_code,
        }

        # Add field errors if present
        if errors is not None:
            custom_response_data['errors'] = errors

        response.data = custom_response_data

    return response
