"""
Notification models for Barberzon.
Includes in-app notifications and the email delivery log.
"""
from django.db import models
from apps.core.models import BaseModel


class NotificationType(models.TextChoices):
    """Types of notifications"""
    JOIN_REQUEST = 'join_request', 'Join Request'
    JOIN_REQUEST_APPROVED = 'join_request_approved', 'Join Request Approved'
    JOIN_REQUEST_REJECTED = 'join_request_rejected', 'Join Request Rejected'
    BOOKING = 'booking', 'Booking Update'
    PAYMENT = 'payment', 'Payment Notification'
    SYSTEM = 'system', 'System Notification'


class NotificationStatus(models.TextChoices):
    """Status of email notifications"""
    PENDING = 'pending', 'Pending'
    SENT = 'sent', 'Sent'
    FAILED = 'failed', 'Failed'
    SKIPPED = 'skipped', 'Skipped'


class Notification(BaseModel):
    """
    In-app notification model for user notifications.
    These are displayed in the app's notification center.
    """
    user = models.ForeignKey(
        'authentication.User',
        on_delete=models.CASCADE,
        related_name='notifications'
    )

    title = models.CharField(max_length=255)
    message = models.TextField()

    # Type
    notification_type = models.CharField(
        max_length=50,
        choices=NotificationType.choices,
        default=NotificationType.SYSTEM
    )

    # Status
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    # Payload for the client, e.g. {"booking_id": "...", "action": "confirmed"}
    data = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = 'notifications'
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read']),
            models.Index(fields=['notification_type']),
        ]

    def __str__(self):
        return f"{self.user.email} - {self.title}"


class EmailNotificationLog(BaseModel):
    """
    Tracks every email sent for a notification, for auditing and debugging.
    """
    notification = models.ForeignKey(
        Notification,
        on_delete=models.CASCADE,
        related_name='email_logs'
    )

    recipient_email = models.EmailField(db_index=True)
    subject = models.CharField(max_length=255)

    # Status tracking
    status = models.CharField(
        max_length=20,
        choices=NotificationStatus.choices,
        default=NotificationStatus.PENDING,
        db_index=True
    )

    # Error handling
    error_message = models.TextField(blank=True)
    retry_count = models.PositiveSmallIntegerField(default=0)

    sent_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'email_notification_logs'
        verbose_name = 'Email Notification Log'
        verbose_name_plural = 'Email Notification Logs'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.subject} to {self.recipient_email} - {self.status}"
