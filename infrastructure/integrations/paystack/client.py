"""
Paystack API client wrapper
"""
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from apps.core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


class PaystackClient:
    """
    Wrapper for the Paystack REST API.

    Amounts sent to and received from Paystack are in kobo.
    """

    @property
    def base_url(self) -> str:
        return settings.PAYSTACK_BASE_URL.rstrip('/')

    @property
    def timeout(self) -> int:
        return getattr(settings, 'PAYSTACK_TIMEOUT_SECONDS', 10)

    @property
    def headers(self) -> Dict[str, str]:
        return {
            'Authorization': f'Bearer {settings.PAYSTACK_SECRET_KEY}',
            'Content-Type': 'application/json',
        }

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(method, url, headers=self.headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Error calling Paystack {path}: {str(e)}")
            raise PaymentGatewayError()

        try:
            body = response.json()
        except ValueError:
            logger.error(f"Paystack {path} returned a non-JSON response ({response.status_code})")
            raise PaymentGatewayError()

        if response.status_code >= 400 or not body.get('status'):
            logger.warning(f"Paystack {path} failed: {response.status_code} {body.get('message')}")
            raise PaymentGatewayError(body.get('message') or PaymentGatewayError.default_detail)

        return body.get('data') or {}

    def initialize_transaction(self, amount_kobo: int, email: str, reference: str,
                               metadata: Optional[Dict[str, Any]] = None,
                               callback_url: Optional[str] = None) -> Dict[str, Any]:
        """
        Start a hosted checkout.

        Args:
            amount_kobo: Amount in kobo
            email: Customer email
            reference: Our transaction reference
            metadata: Extra data echoed back in webhooks
            callback_url: Where Paystack redirects after payment

        Returns:
            Dict with authorization_url, access_code and reference
        """
        payload = {
            'amount': amount_kobo,
            'email': email,
            'reference': reference,
            'metadata': metadata or {},
        }
        if callback_url:
            payload['callback_url'] = callback_url
        return self._request('POST', '/transaction/initialize', json=payload)

    def verify_transaction(self, reference: str) -> Dict[str, Any]:
        """
        Fetch a transaction's status, e.g. {"status": "success", "amount": 450000, ...}
        """
        return self._request('GET', f'/transaction/verify/{reference}')

    @staticmethod
    def verify_webhook_signature(payload: bytes, signature: Optional[str]) -> bool:
        """
        Check the X-Paystack-Signature header: HMAC-SHA512 of the raw body
        keyed with the secret key.
        """
        secret = getattr(settings, 'PAYSTACK_SECRET_KEY', '')
        if not signature or not secret:
            return False

        expected = hmac.new(secret.encode('utf-8'), payload, hashlib.sha512).hexdigest()
        return hmac.compare_digest(expected, signature)


paystack_client = PaystackClient()
