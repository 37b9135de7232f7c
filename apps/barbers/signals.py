"""
Signals for Barbers app.
Auto-creates the BarberProfile when a User with role 'barber' is created.
"""
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.authentication.models import User
from apps.core.utils.constants import USER_ROLE_BARBER
from .models import BarberProfile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_barber_profile(sender, instance, created, **kwargs):
    """
    Auto-create BarberProfile when a User is created with role 'barber'.
    """
    if created and instance.role == USER_ROLE_BARBER:
        BarberProfile.objects.get_or_create(user=instance)
        logger.info(f"Created BarberProfile for user {instance.email}")
