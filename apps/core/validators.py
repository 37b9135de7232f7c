"""
Custom validators
"""
import re

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from apps.core.utils.constants import DAYS_OF_WEEK

TIME_OF_DAY_REGEX = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


def validate_phone_number(value):
    """
    Validate phone number format
    """
    phone_regex = re.compile(r'^\+?\d{9,15}$')
    if not phone_regex.match(value):
        raise ValidationError(
            _('Phone number must be entered in the format: "+2348012345678". Up to 15 digits allowed.')
        )


def validate_positive_decimal(value):
    """
    Validate that decimal is positive
    """
    if value <= 0:
        raise ValidationError(
            _('Value must be greater than zero.')
        )


def validate_time_of_day(value):
    """
    Validate an HH:MM (24 hour) string
    """
    if not isinstance(value, str) or not TIME_OF_DAY_REGEX.match(value):
        raise ValidationError(
            _('Time must be in HH:MM format.')
        )


def validate_opening_hours(value):
    """
    Validate a weekly opening hours mapping.

    Keys are lowercase weekday names; each value is
    `{"open": "HH:MM", "close": "HH:MM", "closed": bool}`.
    """
    if not isinstance(value, dict):
        raise ValidationError(_('Opening hours must be an object keyed by weekday.'))

    for day, hours in value.items():
        if day not in DAYS_OF_WEEK:
            raise ValidationError(_('Unknown weekday: %(day)s'), params={'day': day})
        if not isinstance(hours, dict):
            raise ValidationError(_('Hours for %(day)s must be an object.'), params={'day': day})

        unknown = set(hours.keys()) - {'open', 'close', 'closed'}
        if unknown:
            raise ValidationError(_('Unknown keys for %(day)s.'), params={'day': day})

        closed = hours.get('closed', False)
        if not isinstance(closed, bool):
            raise ValidationError(_('"closed" for %(day)s must be a boolean.'), params={'day': day})
        if closed:
            continue

        open_time = hours.get('open')
        close_time = hours.get('close')
        validate_time_of_day(open_time)
        validate_time_of_day(close_time)
        # Zero-padded HH:MM strings compare in clock order
        if open_time >= close_time:
            raise ValidationError(
                _('Opening time must be before closing time on %(day)s.'), params={'day': day}
            )
