"""
Wallet and transaction ledger.

This module handles:
- Funding a wallet through the payment gateway
- Paying for bookings from the wallet balance
- Reconciling gateway outcomes into the ledger (idempotent)
- Balance and history lookups

Amounts are Naira with two decimal places everywhere except at the
gateway boundary, which speaks kobo.
"""
from decimal import Decimal
from typing import Any, Dict, Optional
import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.bookings.models import Booking
from apps.core.exceptions import (
    AlreadyPaid,
    BookingNotFound,
    CustomerNotFound,
    InsufficientBalance,
    InvalidInput,
    InvalidTransition,
    NotAuthorized,
    PaymentGatewayError,
    TransactionNotFound,
)
from apps.core.utils.constants import (
    BOOKING_PAYMENT_PAID,
    BOOKING_STATUS_CANCELLED,
    BOOKING_STATUS_COMPLETED,
    GATEWAY_SUCCESS_STATUSES,
    MINOR_UNITS_PER_UNIT,
    TRANSACTION_DEPOSIT,
    TRANSACTION_FAILED,
    TRANSACTION_PAYMENT,
    TRANSACTION_PENDING,
    TRANSACTION_STATUSES,
    TRANSACTION_SUCCESSFUL,
    TRANSACTION_TYPES,
    USER_ROLE_BARBER,
)
from apps.core.utils.helpers import generate_reference, quantize_money
from apps.customers.models import CustomerProfile
from apps.notifications.services import dispatcher
from infrastructure.integrations.paystack.client import paystack_client
from .models import Transaction, Wallet

logger = logging.getLogger(__name__)


def to_minor_units(amount) -> int:
    """Naira to kobo"""
    return int((quantize_money(amount) * MINOR_UNITS_PER_UNIT).to_integral_value())


def from_minor_units(amount_kobo) -> Decimal:
    """Kobo to Naira"""
    return quantize_money(Decimal(int(amount_kobo)) / MINOR_UNITS_PER_UNIT)


def _currency() -> str:
    return getattr(settings, 'PLATFORM_CURRENCY', 'NGN')


class WalletService:
    """
    Service for wallet funding, wallet payments and reconciliation.
    """

    @staticmethod
    def get_wallet(customer: CustomerProfile, lock: bool = False) -> Wallet:
        """
        The customer's wallet, created on first use if the signal never ran.
        """
        wallet, created = Wallet.objects.get_or_create(
            customer=customer,
            defaults={'currency': _currency()}
        )
        if created:
            logger.warning(f"Wallet for customer {customer.id} was missing and has been created")
        if lock:
            wallet = Wallet.objects.select_for_update().get(id=wallet.id)
        return wallet

    @staticmethod
    def fund_wallet(customer: CustomerProfile, amount, payment_method: str = 'card') -> Dict[str, Any]:
        """
        Start a wallet top-up. The balance changes only when the gateway
        reports success through reconcile().

        Returns:
            Dict with authorization_url, access_code, reference and transaction
        """
        try:
            amount = quantize_money(amount)
        except (TypeError, ValueError, ArithmeticError):
            raise InvalidInput('Amount must be a number.')
        if amount <= 0:
            raise InvalidInput('Amount must be greater than zero.')

        email = customer.user.email
        if not email:
            raise InvalidInput('An email address is required to fund a wallet.')

        txn = Transaction.objects.create(
            user=customer.user,
            type=TRANSACTION_DEPOSIT,
            amount=amount,
            reference=generate_reference('FUND'),
            status=TRANSACTION_PENDING,
            payment_method=payment_method or 'card',
            description='Wallet funding',
        )

        try:
            data = paystack_client.initialize_transaction(
                to_minor_units(amount),
                email,
                txn.reference,
                metadata={'transaction_id': str(txn.id), 'type': TRANSACTION_DEPOSIT},
                callback_url=f"{settings.FRONTEND_URL}/payment/callback",
            )
        except PaymentGatewayError:
            txn.status = TRANSACTION_FAILED
            txn.processed_at = timezone.now()
            txn.save(update_fields=['status', 'processed_at', 'updated_at'])
            logger.error(f"Wallet funding {txn.reference} failed to initialize")
            raise

        logger.info(f"Wallet funding {txn.reference} of {amount} initialized for customer {customer.id}")
        return {
            'authorization_url': data.get('authorization_url'),
            'access_code': data.get('access_code'),
            'reference': txn.reference,
            'transaction': txn,
        }

    @staticmethod
    def pay_for_booking(customer: CustomerProfile, booking_id) -> Dict[str, Any]:
        """
        Pay a booking's total from the wallet.

        The debit, the ledger entry and the booking update commit together.
        """
        with transaction.atomic():
            try:
                booking = Booking.objects.select_for_update().get(id=booking_id)
            except (Booking.DoesNotExist, DjangoValidationError, ValueError):
                raise BookingNotFound()

            if booking.customer_id != customer.id:
                raise NotAuthorized('You can only pay for your own bookings.')
            if booking.status == BOOKING_STATUS_CANCELLED:
                raise InvalidTransition('Cannot pay for a cancelled booking.')
            if booking.payment_status == BOOKING_PAYMENT_PAID:
                raise AlreadyPaid()

            wallet = WalletService.get_wallet(customer, lock=True)
            if wallet.balance < booking.total_amount:
                raise InsufficientBalance()

            txn = Transaction.objects.create(
                user=customer.user,
                type=TRANSACTION_PAYMENT,
                amount=booking.total_amount,
                reference=generate_reference('PAY'),
                status=TRANSACTION_SUCCESSFUL,
                payment_method='wallet',
                description=f"Payment for booking {booking.id}",
                metadata={'booking_id': str(booking.id)},
                processed_at=timezone.now(),
            )

            wallet.balance -= booking.total_amount
            wallet.save(update_fields=['balance', 'updated_at'])

            booking.payment_status = BOOKING_PAYMENT_PAID
            booking.save(update_fields=['payment_status', 'updated_at'])

        logger.info(
            f"Booking {booking.id} paid from wallet {wallet.id}: {txn.amount}, "
            f"balance now {wallet.balance}"
        )

        booking = Booking.objects.select_related('customer__user', 'barber__user', 'shop').get(id=booking.id)
        dispatcher.notify_payment(txn, customer.user)
        dispatcher.notify_booking(booking, booking.barber.user, 'paid')
        return {'transaction': txn, 'wallet': wallet, 'booking': booking}

    @staticmethod
    def reconcile(reference: str, external_status: Optional[str],
                  amount_kobo: Optional[int] = None) -> Transaction:
        """
        Apply a gateway outcome to a pending transaction.

        Safe to call any number of times: a transaction that is already
        successful or failed is returned unchanged. When the gateway reports
        an amount (in kobo) it must match the ledger amount, otherwise the
        transaction fails and nothing is credited.
        """
        with transaction.atomic():
            try:
                txn = Transaction.objects.select_for_update().get(reference=reference)
            except Transaction.DoesNotExist:
                logger.warning(f"Reconcile for unknown reference {reference}")
                raise TransactionNotFound()

            if txn.status != TRANSACTION_PENDING:
                logger.info(f"Transaction {reference} already {txn.status}, ignoring {external_status}")
                return txn

            succeeded = (external_status or '').lower() in GATEWAY_SUCCESS_STATUSES
            update_fields = ['status', 'processed_at', 'updated_at']

            if succeeded and amount_kobo is not None:
                reported = from_minor_units(amount_kobo)
                if reported != txn.amount:
                    logger.warning(
                        f"Transaction {reference} amount mismatch: ledger {txn.amount}, gateway {reported}"
                    )
                    succeeded = False
                    txn.metadata = {**(txn.metadata or {}), 'gateway_amount': str(reported)}
                    update_fields.append('metadata')

            txn.status = TRANSACTION_SUCCESSFUL if succeeded else TRANSACTION_FAILED
            txn.processed_at = timezone.now()
            txn.save(update_fields=update_fields)

            if succeeded and txn.type == TRANSACTION_DEPOSIT:
                try:
                    customer = CustomerProfile.objects.get(user_id=txn.user_id)
                except CustomerProfile.DoesNotExist:
                    raise CustomerNotFound()
                wallet = WalletService.get_wallet(customer, lock=True)
                wallet.balance += txn.amount
                wallet.save(update_fields=['balance', 'updated_at'])
                logger.info(f"Wallet {wallet.id} credited {txn.amount}, balance now {wallet.balance}")

            if succeeded and txn.type == TRANSACTION_PAYMENT and txn.metadata.get('booking_id'):
                Booking.objects.filter(id=txn.metadata['booking_id']).update(
                    payment_status=BOOKING_PAYMENT_PAID,
                    updated_at=timezone.now(),
                )

        logger.info(f"Transaction {reference} reconciled to {txn.status}")

        dispatcher.notify_payment(txn, txn.user)
        return txn

    @staticmethod
    def verify_payment(reference: str, user=None) -> Transaction:
        """
        Ask the gateway for a transaction's outcome and reconcile it.
        """
        try:
            txn = Transaction.objects.get(reference=reference)
        except Transaction.DoesNotExist:
            raise TransactionNotFound()

        if user is not None and txn.user_id != user.id:
            raise NotAuthorized('You can only verify your own transactions.')
        if txn.status != TRANSACTION_PENDING:
            return txn

        data = paystack_client.verify_transaction(reference)
        return WalletService.reconcile(reference, data.get('status'), data.get('amount'))

    @staticmethod
    def get_balance(user) -> Dict[str, Any]:
        """
        Customers get their wallet balance, barbers their total earnings
        from completed, paid bookings.
        """
        if user.role == USER_ROLE_BARBER:
            total = Booking.objects.filter(
                barber__user=user,
                status=BOOKING_STATUS_COMPLETED,
                payment_status=BOOKING_PAYMENT_PAID,
            ).aggregate(total=Sum('total_amount'))['total']
            return {'balance': quantize_money(total or 0), 'currency': _currency()}

        try:
            customer = CustomerProfile.objects.get(user=user)
        except CustomerProfile.DoesNotExist:
            raise CustomerNotFound()
        wallet = WalletService.get_wallet(customer)
        return {'balance': wallet.balance, 'currency': wallet.currency}

    @staticmethod
    def list_transactions(user, type: Optional[str] = None, status: Optional[str] = None):
        if type is not None and type not in [choice[0] for choice in TRANSACTION_TYPES]:
            raise InvalidInput(f"Unknown transaction type: {type}")
        if status is not None and status not in [choice[0] for choice in TRANSACTION_STATUSES]:
            raise InvalidInput(f"Unknown transaction status: {status}")

        queryset = Transaction.objects.filter(user=user)
        if type:
            queryset = queryset.filter(type=type)
        if status:
            queryset = queryset.filter(status=status)
        return queryset.order_by('-created_at')


wallet_service = WalletService()
