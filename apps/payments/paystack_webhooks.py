"""
Paystack webhook handlers.

This module processes Paystack webhook events for:
- Card charges (charge.success)
- Transfers (transfer.success, transfer.failed)

Every event is stored in WebhookLog before it is handled.
"""
import logging
import time

from apps.core.exceptions import TransactionNotFound
from apps.core.utils.constants import TRANSACTION_FAILED
from .models import WebhookLog
from .wallet_service import wallet_service

logger = logging.getLogger(__name__)


def log_webhook_event(event_type, event_id, payload):
    """
    Store the raw event for debugging and audit trail.
    """
    return WebhookLog.objects.create(
        source='paystack',
        event_type=event_type,
        event_id=event_id,
        payload=payload,
    )


def handle_charge_success(data):
    wallet_service.reconcile(data['reference'], data.get('status') or 'success', data.get('amount'))


def handle_transfer_success(data):
    wallet_service.reconcile(data['reference'], 'success', data.get('amount'))


def handle_transfer_failed(data):
    wallet_service.reconcile(data['reference'], TRANSACTION_FAILED)


PAYSTACK_EVENT_HANDLERS = {
    'charge.success': handle_charge_success,
    'transfer.success': handle_transfer_success,
    'transfer.failed': handle_transfer_failed,
}


def process_paystack_webhook(event):
    """
    Main entry point for processing Paystack webhooks.

    Args:
        event: Parsed webhook body whose signature has already been verified

    Returns:
        bool: True if the event was handled or can be ignored, False to have
        Paystack retry it
    """
    start_time = time.time()
    event_type = event.get('event', '')
    data = event.get('data') or {}
    reference = data.get('reference', '')

    logger.info(f"Received Paystack webhook: {event_type} ({reference})")
    webhook_log = log_webhook_event(event_type, reference, event)

    handler = PAYSTACK_EVENT_HANDLERS.get(event_type)
    if handler is None:
        logger.info(f"No handler for event type: {event_type}")
        webhook_log.mark_processed(time.time() - start_time)
        return True

    if not reference:
        logger.warning(f"Paystack {event_type} event without a reference")
        webhook_log.mark_failed('Missing reference')
        return True

    try:
        handler(data)
    except TransactionNotFound:
        logger.warning(f"Paystack {event_type} for unknown reference {reference}")
        webhook_log.mark_failed(f"Unknown reference {reference}")
        return True
    except Exception as e:
        logger.error(f"Failed to process Paystack event {event_type} ({reference}): {str(e)}", exc_info=True)
        webhook_log.mark_failed(str(e))
        return False

    processing_time = time.time() - start_time
    webhook_log.mark_processed(processing_time)
    logger.info(f"Paystack {event_type} ({reference}) processed in {processing_time:.2f}s")
    return True
