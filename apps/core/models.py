"""
Core abstract models and field helpers shared by every app
"""
import uuid
from decimal import Decimal
from django.db import models


def money_field(**kwargs):
    """
    Decimal field for amounts in the platform's base currency unit (Naira).
    """
    kwargs.setdefault('max_digits', 12)
    kwargs.setdefault('decimal_places', 2)
    kwargs.setdefault('default', Decimal('0.00'))
    return models.DecimalField(**kwargs)


class TimeStampedModel(models.Model):
    """
    Abstract base model with created_at and updated_at timestamps
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class UUIDModel(models.Model):
    """
    Abstract base model with UUID primary key
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class BaseModel(UUIDModel, TimeStampedModel):
    """
    Abstract base model combining UUID and timestamps
    """
    class Meta:
        abstract = True
