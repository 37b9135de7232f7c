"""
Payment app admin interface.
"""
from django.contrib import admin
from .models import Transaction, Wallet, WebhookLog


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ['customer', 'balance', 'currency', 'updated_at']
    search_fields = ['customer__user__email']
    readonly_fields = ['id', 'balance', 'created_at', 'updated_at']


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['reference', 'user', 'type', 'amount', 'status', 'created_at']
    list_filter = ['type', 'status', 'payment_method', 'created_at']
    search_fields = ['reference', 'user__email']
    readonly_fields = ['id', 'reference', 'created_at', 'updated_at', 'processed_at']
    ordering = ['-created_at']


@admin.register(WebhookLog)
class WebhookLogAdmin(admin.ModelAdmin):
    """Admin interface for webhook logs (read-only)."""
    list_display = [
        'source', 'event_type', 'event_id', 'processed',
        'retry_count', 'created_at'
    ]
    list_filter = ['source', 'processed', 'event_type', 'created_at']
    search_fields = ['event_id', 'event_type', 'error_message']
    readonly_fields = [
        'source', 'event_type', 'event_id', 'payload',
        'processed', 'error_message', 'processing_time',
        'retry_count', 'last_retry_at', 'created_at', 'updated_at'
    ]
    ordering = ['-created_at']

    def has_add_permission(self, request):
        """Webhooks are created automatically."""
        return False

    fieldsets = (
        ('Webhook Details', {
            'fields': ('source', 'event_type', 'event_id')
        }),
        ('Processing', {
            'fields': ('processed', 'error_message', 'processing_time', 'retry_count', 'last_retry_at')
        }),
        ('Payload', {
            'fields': ('payload',),
            'classes': ('collapse',)
        }),
    )
