"""
Email delivery for in-app notifications.
"""
import logging
from typing import Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils import timezone
from django.utils.html import escape

from apps.notifications.models import EmailNotificationLog, Notification, NotificationStatus

logger = logging.getLogger(__name__)


class EmailNotificationService:
    """
    Sends a notification to its recipient by email and records the attempt.
    """

    SUBJECT_PREFIX = 'Barberzon'

    @classmethod
    def build_subject(cls, notification: Notification) -> str:
        return f"{cls.SUBJECT_PREFIX}: {notification.title}"

    @classmethod
    def build_html(cls, notification: Notification) -> str:
        return (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">'
            f'<h2>{escape(notification.title)}</h2>'
            f'<p>{escape(notification.message)}</p>'
            '</div>'
        )

    @classmethod
    def send_for_notification(cls, notification: Notification) -> Optional[EmailNotificationLog]:
        """
        Send the email for a notification.

        Returns the log entry, or None when the recipient has no email address.
        Delivery errors are recorded on the log and re-raised so the task can retry.
        """
        recipient_email = notification.user.email
        if not recipient_email:
            logger.warning(f"Skipping email for notification {notification.id}: no recipient email")
            return None

        subject = cls.build_subject(notification)
        email_log = EmailNotificationLog.objects.create(
            notification=notification,
            recipient_email=recipient_email,
            subject=subject,
            status=NotificationStatus.PENDING,
        )

        try:
            email = EmailMultiAlternatives(
                subject=subject,
                body=notification.message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                to=[recipient_email]
            )
            email.attach_alternative(cls.build_html(notification), "text/html")
            email.send(fail_silently=False)
        except Exception as e:
            email_log.status = NotificationStatus.FAILED
            email_log.error_message = str(e)
            email_log.retry_count += 1
            email_log.save(update_fields=['status', 'error_message', 'retry_count', 'updated_at'])

            logger.error(f"Failed to send email for notification {notification.id} to {recipient_email}: {e}")
            raise

        email_log.status = NotificationStatus.SENT
        email_log.sent_at = timezone.now()
        email_log.save(update_fields=['status', 'sent_at', 'updated_at'])

        logger.info(f"Email sent for notification {notification.id} to {recipient_email}")
        return email_log
