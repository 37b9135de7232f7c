"""
Signals for Customer app.
Auto-creates the CustomerProfile when a User with role 'customer' is created.
"""
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.authentication.models import User
from apps.core.utils.constants import USER_ROLE_CUSTOMER
from .models import CustomerProfile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_customer_profile(sender, instance, created, **kwargs):
    """
    Auto-create CustomerProfile when a User is created with role 'customer'.
    """
    if created and instance.role == USER_ROLE_CUSTOMER:
        CustomerProfile.objects.get_or_create(user=instance)
        logger.info(f"Created CustomerProfile for user {instance.email}")
