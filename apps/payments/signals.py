"""
Signals for Payments app.
Auto-creates the Wallet when a CustomerProfile is created.
"""
import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.customers.models import CustomerProfile
from .models import Wallet

logger = logging.getLogger(__name__)


@receiver(post_save, sender=CustomerProfile)
def create_customer_wallet(sender, instance, created, **kwargs):
    """
    Auto-create an empty Wallet for every new customer.
    """
    if created:
        Wallet.objects.get_or_create(
            customer=instance,
            defaults={'currency': getattr(settings, 'PLATFORM_CURRENCY', 'NGN')}
        )
        logger.info(f"Created wallet for customer {instance.id}")
