"""
Payment models for the wallet ledger and webhook logging.

This module contains:
- Wallet: A customer's stored balance
- Transaction: Ledger entry for deposits, payments, withdrawals and refunds
- WebhookLog: Logs all gateway webhook events for debugging and audit
"""
from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.core.models import BaseModel, money_field
from apps.core.utils.constants import (
    TRANSACTION_PENDING,
    TRANSACTION_STATUSES,
    TRANSACTION_TYPES,
)


class Wallet(BaseModel):
    """
    One wallet per customer. The balance never goes negative.
    """
    customer = models.OneToOneField(
        'customers.CustomerProfile',
        on_delete=models.CASCADE,
        related_name='wallet'
    )
    balance = money_field()
    currency = models.CharField(max_length=3, default='NGN')

    class Meta:
        db_table = 'wallets'
        verbose_name = 'Wallet'
        verbose_name_plural = 'Wallets'
        constraints = [
            models.CheckConstraint(
                condition=Q(balance__gte=0),
                name='wallet_balance_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.customer.user.email} - {self.currency} {self.balance}"


class Transaction(BaseModel):
    """
    Ledger entry. Deposits start pending and are settled by the gateway;
    wallet payments are written already successful.
    """
    user = models.ForeignKey(
        'authentication.User',
        on_delete=models.CASCADE,
        related_name='transactions'
    )
    type = models.CharField(
        max_length=20,
        choices=TRANSACTION_TYPES,
        db_index=True
    )
    amount = money_field()
    reference = models.CharField(
        max_length=100,
        unique=True,
        help_text="Our reference, shared with the payment gateway"
    )
    status = models.CharField(
        max_length=20,
        choices=TRANSACTION_STATUSES,
        default=TRANSACTION_PENDING,
        db_index=True
    )
    payment_method = models.CharField(max_length=50, blank=True)
    description = models.TextField(blank=True)
    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Extra data, e.g. booking_id for booking payments"
    )
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'transactions'
        verbose_name = 'Transaction'
        verbose_name_plural = 'Transactions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'type']),
            models.Index(fields=['user', 'status']),
        ]

    def __str__(self):
        return f"{self.reference} - {self.type} {self.amount} ({self.status})"


class WebhookLog(BaseModel):
    """
    Logs every webhook event received from the payment gateway.

    Used for debugging, audit trail, and detecting processing failures.
    """
    # Webhook source
    source = models.CharField(
        max_length=20,
        db_index=True,
        default='paystack',
        help_text="Webhook source, e.g. 'paystack'"
    )

    # Event details
    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Event type (e.g., 'charge.success')"
    )
    event_id = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        help_text="Event or transaction reference from the provider"
    )

    # Event payload
    payload = models.JSONField(
        help_text="Full webhook payload (for debugging)"
    )

    # Processing status
    processed = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether webhook was successfully processed"
    )
    error_message = models.TextField(
        blank=True,
        help_text="Error message if processing failed"
    )
    processing_time = models.FloatField(
        null=True,
        blank=True,
        help_text="Processing time in seconds"
    )

    # Retry tracking
    retry_count = models.IntegerField(
        default=0,
        help_text="Number of times processing failed"
    )
    last_retry_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the last failure happened"
    )

    class Meta:
        db_table = 'webhook_logs'
        verbose_name = 'Webhook Log'
        verbose_name_plural = 'Webhook Logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['source', 'event_type']),
            models.Index(fields=['created_at']),
        ]

    def __str__(self):
        status = "processed" if self.processed else "unprocessed"
        return f"{self.source} - {self.event_type} - {status} - {self.created_at}"

    def mark_processed(self, processing_time=None):
        """Mark webhook as successfully processed."""
        self.processed = True
        self.processing_time = processing_time
        self.save(update_fields=['processed', 'processing_time', 'updated_at'])

    def mark_failed(self, error_message):
        """Mark webhook processing as failed and increment retry count."""
        self.processed = False
        self.error_message = error_message
        self.retry_count += 1
        self.last_retry_at = timezone.now()
        self.save(update_fields=['processed', 'error_message', 'retry_count', 'last_retry_at', 'updated_at'])
