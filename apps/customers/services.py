"""
Customer profile lookups
"""
from apps.core.exceptions import CustomerNotFound
from .models import CustomerProfile


def get_customer_profile(user) -> CustomerProfile:
    """
    Get the CustomerProfile of a user or raise CustomerNotFound.
    """
    try:
        return CustomerProfile.objects.select_related('user').get(user=user)
    except CustomerProfile.DoesNotExist:
        raise CustomerNotFound()
