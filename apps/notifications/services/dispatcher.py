"""
Notification dispatcher.

Domain services call `notify*` after their transaction has committed. A
notification failure never undoes the state change that triggered it: errors
are logged and swallowed here.
"""
import logging
from typing import Optional

import pytz
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import NotificationNotFound
from apps.core.utils.constants import (
    TRANSACTION_DEPOSIT,
    TRANSACTION_FAILED,
    TRANSACTION_PAYMENT,
    TRANSACTION_REFUND,
    TRANSACTION_WITHDRAWAL,
)
from apps.core.utils.helpers import format_naira, full_name_or_email
from apps.notifications.models import Notification, NotificationType

logger = logging.getLogger(__name__)

BOOKING_ACTION_TITLES = {
    'created': 'New Booking',
    'confirmed': 'Booking Confirmed',
    'cancelled': 'Booking Cancelled',
    'completed': 'Booking Completed',
    'paid': 'Booking Paid',
}

PAYMENT_MESSAGES = {
    TRANSACTION_DEPOSIT: ('Wallet Funded', 'Your wallet has been funded with {amount}.'),
    TRANSACTION_WITHDRAWAL: ('Withdrawal Processed', 'Your withdrawal of {amount} has been processed.'),
    TRANSACTION_PAYMENT: ('Payment Successful', 'Your payment of {amount} has been successful.'),
    TRANSACTION_REFUND: ('Refund Processed', 'A refund of {amount} has been processed to your wallet.'),
}


def _queue_email(notification: Notification):
    from apps.notifications.tasks import send_notification_email_task
    send_notification_email_task.delay(str(notification.id))


def notify(recipient_user, notification_type: str, title: str, message: str,
           data: Optional[dict] = None) -> Optional[Notification]:
    """
    Persist an in-app notification and queue its email once the
    surrounding transaction commits. Returns None if anything failed.
    """
    try:
        notification = Notification.objects.create(
            user=recipient_user,
            notification_type=notification_type,
            title=title,
            message=message,
            data=data or {},
        )
        transaction.on_commit(lambda: _queue_email(notification), robust=True)
    except Exception:
        logger.error(
            f"Failed to notify user {getattr(recipient_user, 'id', None)}: {title}",
            exc_info=True
        )
        return None

    logger.info(f"Notification '{title}' created for user {recipient_user.id}")
    return notification


def _booking_when(booking):
    """Booking start as (date, time) strings in the shop's timezone"""
    try:
        tz = pytz.timezone(booking.shop.timezone)
    except pytz.exceptions.UnknownTimeZoneError:
        tz = pytz.UTC
    local = booking.booking_date.astimezone(tz)
    return local.strftime('%A, %B %d, %Y'), local.strftime('%I:%M %p')


def build_booking_message(booking, recipient_user, action: str):
    """
    Title and message for a booking action, naming the other party.
    """
    if recipient_user.id == booking.barber.user_id:
        counterpart = full_name_or_email(booking.customer.user)
    else:
        counterpart = full_name_or_email(booking.barber.user)

    day, time = _booking_when(booking)
    title = BOOKING_ACTION_TITLES.get(action, 'Booking Update')
    details = f"with {counterpart} at {booking.shop.name} on {day} at {time}"

    if action == 'created':
        message = f"Booking {details} has been created."
    elif action in BOOKING_ACTION_TITLES:
        message = f"Your booking {details} has been {action}."
    else:
        message = f"There's an update to your booking {details}."

    if action == 'cancelled' and booking.cancellation_fee and recipient_user.id == booking.customer.user_id:
        message += f" A cancellation fee of {format_naira(booking.cancellation_fee)} applies."

    return title, message


def notify_booking(booking, recipient_user, action: str) -> Optional[Notification]:
    try:
        title, message = build_booking_message(booking, recipient_user, action)
    except Exception:
        logger.error(f"Failed to build {action} notification for booking {booking.id}", exc_info=True)
        return None

    return notify(
        recipient_user,
        NotificationType.BOOKING,
        title,
        message,
        {'booking_id': str(booking.id), 'action': action},
    )


def build_payment_message(txn):
    amount = format_naira(txn.amount)
    if txn.status == TRANSACTION_FAILED:
        return 'Payment Failed', f"Your {txn.type} of {amount} has failed."
    title, template = PAYMENT_MESSAGES.get(
        txn.type, ('Transaction Update', 'A transaction of {amount} has been ' + txn.status + '.')
    )
    return title, template.format(amount=amount)


def notify_payment(txn, recipient_user) -> Optional[Notification]:
    title, message = build_payment_message(txn)
    return notify(
        recipient_user,
        NotificationType.PAYMENT,
        title,
        message,
        {'transaction_id': str(txn.id), 'type': txn.type, 'status': txn.status, 'reference': txn.reference},
    )


def list_notifications(user, is_read: Optional[bool] = None):
    queryset = Notification.objects.filter(user=user)
    if is_read is not None:
        queryset = queryset.filter(is_read=is_read)
    return queryset.order_by('-created_at')


def mark_read(user, notification_id) -> Notification:
    try:
        notification = Notification.objects.get(id=notification_id, user=user)
    except (Notification.DoesNotExist, DjangoValidationError, ValueError):
        raise NotificationNotFound()

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=['is_read', 'read_at', 'updated_at'])
    return notification


def mark_all_read(user, notification_ids=None) -> int:
    """
    Mark the given notifications, or all of them, as read. Returns the count updated.
    """
    queryset = Notification.objects.filter(user=user, is_read=False)
    if notification_ids:
        queryset = queryset.filter(id__in=notification_ids)
    return queryset.update(is_read=True, read_at=timezone.now(), updated_at=timezone.now())


def counts(user) -> dict:
    queryset = Notification.objects.filter(user=user)
    return {
        'total': queryset.count(),
        'unread': queryset.filter(is_read=False).count(),
    }
