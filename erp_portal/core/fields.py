"""Serializer fields and field factories shared by the validation schemas"""
from datetime import date, datetime

from django.conf import settings
from rest_framework import serializers

BACKEND_DATE_FORMAT = '%Y-%m-%d'


def parse_client_date(value):
    """Accept a date, an ISO date string or a date in CLIENT_DATE_FORMAT"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValueError('A date is required')

    text = str(value).strip()
    for fmt in (BACKEND_DATE_FORMAT, settings.CLIENT_DATE_FORMAT):
        try:
            return datetime.strptime(text[:10] if fmt == BACKEND_DATE_FORMAT else text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date '{value}'")


class ClientDateField(serializers.Field):
    """Dates typed in the UI format or ISO format"""

    def to_internal_value(self, data):
        try:
            return parse_client_date(data)
        except ValueError as e:
            raise serializers.ValidationError(str(e))

    def to_representation(self, value):
        return value.strftime(settings.CLIENT_DATE_FORMAT)


def required_id(message, **kwargs):
    """Backend ids start at 1; 0 means nothing was picked"""
    return serializers.IntegerField(min_value=1, error_messages={'min_value': message, 'required': message}, **kwargs)


def required_text(message, **kwargs):
    return serializers.CharField(error_messages={'blank': message, 'required': message}, **kwargs)


def at_least(minimum, message, **kwargs):
    """Non-negative quantities and amounts"""
    return serializers.DecimalField(
        max_digits=18, decimal_places=6, min_value=minimum,
        error_messages={'min_value': message}, **kwargs
    )


def remarks_field(max_length=500, label='Remarks'):
    return serializers.CharField(
        required=False, allow_blank=True, max_length=max_length,
        error_messages={'max_length': f'{label} must be less than {max_length} characters'},
    )
