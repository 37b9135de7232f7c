"""
Admin configuration for notifications app.
"""
from django.contrib import admin
from apps.notifications.models import Notification, EmailNotificationLog


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin for in-app notifications."""
    list_display = [
        'id', 'user', 'title', 'notification_type',
        'is_read', 'created_at'
    ]
    list_filter = ['notification_type', 'is_read', 'created_at']
    search_fields = ['user__email', 'title', 'message']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']


@admin.register(EmailNotificationLog)
class EmailNotificationLogAdmin(admin.ModelAdmin):
    """Admin for email notification logs."""
    list_display = ['id', 'recipient_email', 'subject', 'status', 'sent_at', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['recipient_email', 'subject']
    readonly_fields = ['created_at', 'updated_at', 'sent_at']
    ordering = ['-created_at']
