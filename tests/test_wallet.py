"""
Tests for the wallet ledger, the Paystack client and the Paystack webhook.
"""
import hashlib
import hmac
import json
from decimal import Decimal
from unittest import mock

import pytest
import requests
from django.conf import settings

from apps.bookings.models import Booking
from apps.core.exceptions import (
    AlreadyPaid,
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
    TRANSACTION_DEPOSIT,
    TRANSACTION_FAILED,
    TRANSACTION_PAYMENT,
    TRANSACTION_PENDING,
    TRANSACTION_SUCCESSFUL,
    TRANSACTION_WITHDRAWAL,
    USER_ROLE_CUSTOMER,
)
from apps.notifications.models import Notification
from apps.payments.models import Transaction, Wallet, WebhookLog
from apps.payments.wallet_service import from_minor_units, to_minor_units, wallet_service
from infrastructure.integrations.paystack.client import PaystackClient

pytestmark = pytest.mark.django_db

WEBHOOK_URL = '/api/payments/webhooks/paystack/'


def _set_balance(customer, amount):
    Wallet.objects.filter(customer=customer).update(balance=Decimal(amount))


def _balance(customer):
    return Wallet.objects.get(customer=customer).balance


@pytest.fixture
def gateway():
    """Paystack as seen by the wallet service"""
    with mock.patch('apps.payments.wallet_service.paystack_client') as client:
        client.initialize_transaction.return_value = {
            'authorization_url': 'https://checkout.paystack.com/abc123',
            'access_code': 'abc123',
        }
        client.verify_transaction.return_value = {'status': 'success'}
        yield client


def _sign(body: bytes) -> str:
    return hmac.new(settings.PAYSTACK_SECRET_KEY.encode('utf-8'), body, hashlib.sha512).hexdigest()


def _post_webhook(client, event, signature=None):
    body = json.dumps(event).encode('utf-8')
    headers = {}
    if signature is not False:
        headers['HTTP_X_PAYSTACK_SIGNATURE'] = signature or _sign(body)
    return client.post(WEBHOOK_URL, data=body, content_type='application/json', **headers)


# ============================================================================
# UNITS
# ============================================================================

class TestMinorUnits:

    def test_naira_to_kobo(self):
        assert to_minor_units(Decimal('4500.50')) == 450050
        assert to_minor_units(5000) == 500000

    def test_kobo_to_naira(self):
        assert from_minor_units(450050) == Decimal('4500.50')
        assert from_minor_units(1) == Decimal('0.01')


# ============================================================================
# WALLET CREATION
# ============================================================================

class TestWalletCreation:

    def test_every_customer_gets_an_empty_wallet(self, customer):
        wallet = Wallet.objects.get(customer=customer)
        assert wallet.balance == Decimal('0.00')
        assert wallet.currency == 'NGN'

    def test_barbers_have_no_wallet(self, barber):
        assert not Wallet.objects.exists()


# ============================================================================
# FUNDING
# ============================================================================

class TestFundWallet:

    def test_scenario_d_pending_until_reconciled(self, customer, gateway):
        result = wallet_service.fund_wallet(customer, Decimal('5000'))

        txn = result['transaction']
        assert txn.status == TRANSACTION_PENDING
        assert txn.type == TRANSACTION_DEPOSIT
        assert txn.reference.startswith('FUND-')
        assert result['authorization_url'] == 'https://checkout.paystack.com/abc123'
        assert _balance(customer) == Decimal('0.00')

        args, kwargs = gateway.initialize_transaction.call_args
        assert args[0] == 500000
        assert args[1] == 'ada@example.com'
        assert args[2] == txn.reference

        wallet_service.reconcile(txn.reference, 'success')

        assert _balance(customer) == Decimal('5000.00')
        txn.refresh_from_db()
        assert txn.status == TRANSACTION_SUCCESSFUL
        assert txn.processed_at is not None

    @pytest.mark.parametrize('amount', [0, -100])
    def test_amount_must_be_positive(self, customer, gateway, amount):
        with pytest.raises(InvalidInput):
            wallet_service.fund_wallet(customer, amount)
        assert not Transaction.objects.exists()
        gateway.initialize_transaction.assert_not_called()

    def test_gateway_failure_marks_transaction_failed(self, customer, gateway):
        gateway.initialize_transaction.side_effect = PaymentGatewayError()

        with pytest.raises(PaymentGatewayError):
            wallet_service.fund_wallet(customer, Decimal('2000'))

        assert Transaction.objects.get().status == TRANSACTION_FAILED
        assert _balance(customer) == Decimal('0.00')


# ============================================================================
# RECONCILE
# ============================================================================

class TestReconcile:

    @pytest.fixture
    def pending_deposit(self, customer, gateway):
        return wallet_service.fund_wallet(customer, Decimal('5000'))['transaction']

    def test_idempotent(self, customer, pending_deposit):
        wallet_service.reconcile(pending_deposit.reference, 'success')
        wallet_service.reconcile(pending_deposit.reference, 'success')

        assert _balance(customer) == Decimal('5000.00')

    def test_failed_is_terminal(self, customer, pending_deposit):
        failed = wallet_service.reconcile(pending_deposit.reference, 'failed')
        assert failed.status == TRANSACTION_FAILED

        again = wallet_service.reconcile(pending_deposit.reference, 'success')
        assert again.status == TRANSACTION_FAILED
        assert _balance(customer) == Decimal('0.00')

    def test_unknown_status_fails_the_transaction(self, customer, pending_deposit):
        txn = wallet_service.reconcile(pending_deposit.reference, 'abandoned')

        assert txn.status == TRANSACTION_FAILED
        assert _balance(customer) == Decimal('0.00')

    def test_unknown_reference(self):
        with pytest.raises(TransactionNotFound):
            wallet_service.reconcile('FUND-0-NOPE', 'success')

    def test_notifies_customer(self, customer_user, pending_deposit):
        wallet_service.reconcile(pending_deposit.reference, 'success')

        notification = Notification.objects.get(user=customer_user)
        assert notification.title == 'Wallet Funded'
        assert notification.data['reference'] == pending_deposit.reference

    def test_verify_payment_asks_the_gateway(self, customer, customer_user, pending_deposit, gateway):
        txn = wallet_service.verify_payment(pending_deposit.reference, user=customer_user)

        gateway.verify_transaction.assert_called_once_with(pending_deposit.reference)
        assert txn.status == TRANSACTION_SUCCESSFUL
        assert _balance(customer) == Decimal('5000.00')

    def test_verify_payment_of_someone_else(self, pending_deposit, make_user):
        with pytest.raises(NotAuthorized):
            wallet_service.verify_payment(pending_deposit.reference, user=make_user(USER_ROLE_CUSTOMER))

    def test_matching_gateway_amount_credits(self, customer, pending_deposit):
        txn = wallet_service.reconcile(pending_deposit.reference, 'success', 500000)

        assert txn.status == TRANSACTION_SUCCESSFUL
        assert _balance(customer) == Decimal('5000.00')

    def test_short_gateway_amount_is_not_credited(self, customer, pending_deposit):
        txn = wallet_service.reconcile(pending_deposit.reference, 'success', 100)

        assert txn.status == TRANSACTION_FAILED
        assert txn.metadata['gateway_amount'] == '1.00'
        assert _balance(customer) == Decimal('0.00')

        # a correct redelivery cannot revive it
        wallet_service.reconcile(pending_deposit.reference, 'success', 500000)
        assert _balance(customer) == Decimal('0.00')

    def test_verify_payment_checks_the_amount(self, customer, customer_user, pending_deposit, gateway):
        gateway.verify_transaction.return_value = {'status': 'success', 'amount': 250000}

        txn = wallet_service.verify_payment(pending_deposit.reference, user=customer_user)

        assert txn.status == TRANSACTION_FAILED
        assert _balance(customer) == Decimal('0.00')

    def test_pending_booking_payment_marks_booking_paid(self, customer, customer_user, make_booking):
        booking = make_booking(total_amount=Decimal('4500.00'))
        txn = Transaction.objects.create(
            user=customer_user,
            type=TRANSACTION_PAYMENT,
            amount=Decimal('4500.00'),
            reference='PAY-1-CARD',
            metadata={'booking_id': str(booking.id)},
        )

        result = wallet_service.reconcile(txn.reference, 'success', 450000)

        assert result.status == TRANSACTION_SUCCESSFUL
        booking.refresh_from_db()
        assert booking.payment_status == BOOKING_PAYMENT_PAID
        assert _balance(customer) == Decimal('0.00')


# ============================================================================
# BOOKING PAYMENTS
# ============================================================================

class TestPayForBooking:

    def test_scenario_c_insufficient_balance(self, customer, make_booking):
        _set_balance(customer, '1000.00')
        booking = make_booking(total_amount=Decimal('4500.00'))

        with pytest.raises(InsufficientBalance):
            wallet_service.pay_for_booking(customer, booking.id)

        assert _balance(customer) == Decimal('1000.00')
        assert not Transaction.objects.exists()
        booking.refresh_from_db()
        assert booking.payment_status != BOOKING_PAYMENT_PAID

    def test_pays_from_wallet(self, customer, customer_user, barber_user, make_booking):
        _set_balance(customer, '10000.00')
        booking = make_booking(total_amount=Decimal('4500.00'))

        result = wallet_service.pay_for_booking(customer, booking.id)

        txn = result['transaction']
        assert txn.type == TRANSACTION_PAYMENT
        assert txn.status == TRANSACTION_SUCCESSFUL
        assert txn.reference.startswith('PAY-')
        assert txn.metadata == {'booking_id': str(booking.id)}
        assert result['wallet'].balance == Decimal('5500.00')
        assert _balance(customer) == Decimal('5500.00')
        assert result['booking'].payment_status == BOOKING_PAYMENT_PAID

        assert Notification.objects.get(user=customer_user).title == 'Payment Successful'
        assert Notification.objects.get(user=barber_user).title == 'Booking Paid'

    def test_exact_balance_is_enough(self, customer, make_booking):
        _set_balance(customer, '4500.00')
        booking = make_booking(total_amount=Decimal('4500.00'))

        wallet_service.pay_for_booking(customer, booking.id)

        assert _balance(customer) == Decimal('0.00')

    def test_already_paid(self, customer, make_booking):
        _set_balance(customer, '10000.00')
        booking = make_booking()
        wallet_service.pay_for_booking(customer, booking.id)

        with pytest.raises(AlreadyPaid):
            wallet_service.pay_for_booking(customer, booking.id)
        assert _balance(customer) == Decimal('5500.00')

    def test_cancelled_booking(self, customer, make_booking):
        _set_balance(customer, '10000.00')
        booking = make_booking(status=BOOKING_STATUS_CANCELLED)

        with pytest.raises(InvalidTransition):
            wallet_service.pay_for_booking(customer, booking.id)

    def test_someone_elses_booking(self, make_booking, make_user):
        other = make_user(USER_ROLE_CUSTOMER).customer_profile
        _set_balance(other, '10000.00')
        booking = make_booking()

        with pytest.raises(NotAuthorized):
            wallet_service.pay_for_booking(other, booking.id)


# ============================================================================
# BALANCE AND HISTORY
# ============================================================================

class TestBalanceAndHistory:

    def test_customer_balance(self, customer, customer_user):
        _set_balance(customer, '1200.00')

        assert wallet_service.get_balance(customer_user) == {
            'balance': Decimal('1200.00'),
            'currency': 'NGN',
        }

    def test_barber_balance_is_paid_earnings(self, barber_user, make_booking):
        make_booking(status=BOOKING_STATUS_COMPLETED, payment_status=BOOKING_PAYMENT_PAID)
        make_booking(status=BOOKING_STATUS_CANCELLED, total_amount=Decimal('9999.00'))

        assert wallet_service.get_balance(barber_user)['balance'] == Decimal('4500.00')

    def test_list_transactions_filters(self, customer, customer_user, gateway, make_booking):
        _set_balance(customer, '10000.00')
        wallet_service.pay_for_booking(customer, make_booking().id)
        wallet_service.fund_wallet(customer, Decimal('500'))

        assert wallet_service.list_transactions(customer_user).count() == 2
        payments = wallet_service.list_transactions(customer_user, type=TRANSACTION_PAYMENT)
        assert [t.type for t in payments] == [TRANSACTION_PAYMENT]
        assert wallet_service.list_transactions(customer_user, status=TRANSACTION_PENDING).count() == 1

    def test_list_transactions_rejects_unknown_type(self, customer_user):
        with pytest.raises(InvalidInput):
            wallet_service.list_transactions(customer_user, type='bonus')


# ============================================================================
# PAYSTACK CLIENT
# ============================================================================

class TestPaystackClient:

    def _response(self, status_code=200, body=None):
        response = mock.Mock(status_code=status_code)
        response.json.return_value = body
        return response

    @mock.patch('infrastructure.integrations.paystack.client.requests.request')
    def test_initialize_returns_data(self, request):
        request.return_value = self._response(body={
            'status': True,
            'message': 'Authorization URL created',
            'data': {'authorization_url': 'https://checkout.paystack.com/x', 'access_code': 'x'},
        })

        data = PaystackClient().initialize_transaction(500000, 'ada@example.com', 'FUND-1-ABC')

        assert data['access_code'] == 'x'
        method, url = request.call_args[0]
        assert method == 'POST'
        assert url.endswith('/transaction/initialize')
        assert request.call_args[1]['json']['amount'] == 500000
        assert request.call_args[1]['headers']['Authorization'] == 'Bearer sk_test_barberzon'

    @mock.patch('infrastructure.integrations.paystack.client.requests.request')
    def test_error_response(self, request):
        request.return_value = self._response(400, {'status': False, 'message': 'Invalid key'})

        with pytest.raises(PaymentGatewayError):
            PaystackClient().verify_transaction('FUND-1-ABC')

    @mock.patch('infrastructure.integrations.paystack.client.requests.request')
    def test_network_error(self, request):
        request.side_effect = requests.ConnectionError('unreachable')

        with pytest.raises(PaymentGatewayError):
            PaystackClient().verify_transaction('FUND-1-ABC')

    def test_signature_check(self):
        body = b'{"event": "charge.success"}'

        assert PaystackClient.verify_webhook_signature(body, _sign(body))
        assert not PaystackClient.verify_webhook_signature(body, 'deadbeef')
        assert not PaystackClient.verify_webhook_signature(body, None)


# ============================================================================
# WEBHOOK
# ============================================================================

class TestPaystackWebhook:

    @pytest.fixture
    def pending_deposit(self, customer, gateway):
        return wallet_service.fund_wallet(customer, Decimal('5000'))['transaction']

    def _charge_success(self, reference):
        return {'event': 'charge.success', 'data': {'reference': reference, 'status': 'success', 'amount': 500000}}

    def test_charge_success_credits_wallet(self, client, customer, pending_deposit):
        response = _post_webhook(client, self._charge_success(pending_deposit.reference))

        assert response.status_code == 200
        assert _balance(customer) == Decimal('5000.00')
        log = WebhookLog.objects.get()
        assert log.processed
        assert log.event_type == 'charge.success'
        assert log.event_id == pending_deposit.reference

    def test_redelivery_is_harmless(self, client, customer, pending_deposit):
        event = self._charge_success(pending_deposit.reference)
        _post_webhook(client, event)
        response = _post_webhook(client, event)

        assert response.status_code == 200
        assert _balance(customer) == Decimal('5000.00')
        assert WebhookLog.objects.count() == 2

    def test_invalid_signature(self, client, customer, pending_deposit):
        response = _post_webhook(client, self._charge_success(pending_deposit.reference), signature='0' * 128)

        assert response.status_code == 401
        assert _balance(customer) == Decimal('0.00')
        assert not WebhookLog.objects.exists()

    def test_missing_signature(self, client, pending_deposit):
        response = _post_webhook(client, self._charge_success(pending_deposit.reference), signature=False)

        assert response.status_code == 401

    def test_unknown_reference_is_acknowledged(self, client):
        response = _post_webhook(client, self._charge_success('FUND-0-NOPE'))

        assert response.status_code == 200
        log = WebhookLog.objects.get()
        assert not log.processed
        assert 'FUND-0-NOPE' in log.error_message

    def test_unhandled_event(self, client):
        response = _post_webhook(client, {'event': 'subscription.create', 'data': {}})

        assert response.status_code == 200
        assert WebhookLog.objects.get().processed

    def test_handler_error_asks_for_retry(self, client, pending_deposit):
        with mock.patch.object(wallet_service, 'reconcile', side_effect=RuntimeError('database unavailable')):
            response = _post_webhook(client, self._charge_success(pending_deposit.reference))

        assert response.status_code == 500
        log = WebhookLog.objects.get()
        assert log.retry_count == 1
        assert log.error_message == 'database unavailable'

    def test_underpaid_charge_is_not_credited(self, client, customer, pending_deposit):
        event = self._charge_success(pending_deposit.reference)
        event['data']['amount'] = 100

        response = _post_webhook(client, event)

        assert response.status_code == 200
        assert _balance(customer) == Decimal('0.00')
        pending_deposit.refresh_from_db()
        assert pending_deposit.status == TRANSACTION_FAILED

    @pytest.fixture
    def pending_withdrawal(self, customer_user):
        return Transaction.objects.create(
            user=customer_user,
            type=TRANSACTION_WITHDRAWAL,
            amount=Decimal('2000.00'),
            reference='WD-1-TRANSFER',
        )

    def test_transfer_success(self, client, customer_user, pending_withdrawal):
        response = _post_webhook(client, {
            'event': 'transfer.success',
            'data': {'reference': pending_withdrawal.reference, 'amount': 200000},
        })

        assert response.status_code == 200
        pending_withdrawal.refresh_from_db()
        assert pending_withdrawal.status == TRANSACTION_SUCCESSFUL
        assert Notification.objects.get(user=customer_user).title == 'Withdrawal Processed'
        assert WebhookLog.objects.get().processed

    def test_transfer_failed(self, client, customer_user, pending_withdrawal):
        response = _post_webhook(client, {
            'event': 'transfer.failed',
            'data': {'reference': pending_withdrawal.reference, 'amount': 200000},
        })

        assert response.status_code == 200
        pending_withdrawal.refresh_from_db()
        assert pending_withdrawal.status == TRANSACTION_FAILED
        assert Notification.objects.get(user=customer_user).title == 'Payment Failed'

    def test_get_not_allowed(self, client):
        assert client.get(WEBHOOK_URL).status_code == 405
