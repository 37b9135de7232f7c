"""
Webhook views for payment gateway events.
"""
import json
import logging

from django.http import HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from infrastructure.integrations.paystack.client import paystack_client
from .paystack_webhooks import process_paystack_webhook

logger = logging.getLogger(__name__)


@csrf_exempt
@require_http_methods(["POST"])
def paystack_webhook(request):
    """
    Handle incoming Paystack webhooks.

    Rejects anything whose X-Paystack-Signature does not match the body.
    """
    payload = request.body
    signature = request.META.get('HTTP_X_PAYSTACK_SIGNATURE')

    if not signature:
        logger.warning("Missing Paystack signature header")
        return HttpResponse("Missing signature", status=401)

    try:
        valid = paystack_client.verify_webhook_signature(payload, signature)
    except Exception as e:
        logger.error(f"Error verifying Paystack signature: {str(e)}", exc_info=True)
        return HttpResponse("Invalid signature", status=401)

    if not valid:
        logger.warning("Invalid Paystack webhook signature")
        return HttpResponse("Invalid signature", status=401)

    try:
        event = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.error("Invalid JSON in Paystack webhook")
        return HttpResponse("Invalid JSON", status=400)

    if process_paystack_webhook(event):
        return HttpResponse("Webhook processed successfully", status=200)
    return HttpResponse("Webhook processing failed", status=500)
