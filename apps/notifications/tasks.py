"""
Celery tasks for notification delivery.
"""
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_notification_email_task(self, notification_id: str):
    """
    Async task to email a single in-app notification to its recipient.

    Args:
        notification_id: Notification UUID
    """
    from apps.notifications.models import Notification
    from apps.notifications.services.email_service import EmailNotificationService

    try:
        notification = Notification.objects.select_related('user').get(id=notification_id)
    except Notification.DoesNotExist:
        logger.warning(f"Notification {notification_id} not found for email delivery")
        return

    try:
        EmailNotificationService.send_for_notification(notification)
    except Exception as e:
        logger.error(f"Email task failed for notification {notification_id}: {e}")
        raise self.retry(exc=e)
