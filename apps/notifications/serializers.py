"""
Serializers for notifications API.
"""
from rest_framework import serializers

from apps.core.serializers import StrictSerializer
from apps.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for in-app notifications."""

    notification_type_display = serializers.CharField(
        source='get_notification_type_display',
        read_only=True,
        help_text='Human-readable notification type'
    )

    class Meta:
        model = Notification
        fields = [
            'id',
            'title',
            'message',
            'notification_type',
            'notification_type_display',
            'is_read',
            'read_at',
            'data',
            'created_at',
        ]
        read_only_fields = fields


class NotificationFilterSerializer(serializers.Serializer):
    is_read = serializers.BooleanField(required=False, allow_null=True, default=None)


class MarkNotificationReadSerializer(StrictSerializer):
    """Input serializer for marking notifications as read."""

    notification_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_empty=True,
        help_text='List of notification IDs to mark as read. If empty or not provided, marks all as read.'
    )


class MarkNotificationReadResponseSerializer(serializers.Serializer):
    """Response serializer for marking notifications as read."""

    message = serializers.CharField(help_text='Success message')
    updated_count = serializers.IntegerField(help_text='Number of notifications marked as read')


class NotificationCountSerializer(serializers.Serializer):
    """Serializer for notification counts."""

    total = serializers.IntegerField(help_text='Total number of notifications')
    unread = serializers.IntegerField(help_text='Number of unread notifications')
