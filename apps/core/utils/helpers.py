"""
Helper utilities
"""
import math
import secrets
import string
import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

EARTH_RADIUS_KM = 6371.0


def generate_random_string(length: int = 10) -> str:
    """
    Generate a random uppercase alphanumeric string of specified length
    """
    alphabet = string.ascii_uppercase + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def generate_reference(prefix: str) -> str:
    """
    Generate a unique payment reference, e.g. FUND-1718035200000-8K2JQX
    """
    return f"{prefix}-{int(time.time() * 1000)}-{generate_random_string(6)}"


def quantize_money(value) -> Decimal:
    """
    Round a numeric value to two decimal places
    """
    return Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def format_naira(amount, currency: str = 'NGN') -> str:
    """
    Format an amount for humans, e.g. NGN 4,500.00
    """
    return f"{currency} {quantize_money(amount):,.2f}"


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points in kilometres
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def full_name_or_email(user) -> Optional[str]:
    """
    Display name for a user
    """
    if user is None:
        return None
    return user.full_name or user.email
