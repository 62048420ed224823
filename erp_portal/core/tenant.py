"""
Per-tenant settings read from the ERP backend: decimal places, mandatory
fields and visible fields. Answers are cached per company.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.core.cache import cache
from rest_framework import serializers

from erp_portal.proxy.client import BackendAPIError, unwrap_data
from erp_portal.proxy.routes import DecimalSetting, MandatoryFieldSetting, VisibleFieldSetting

from .cache_utils import TENANT_SETTINGS_CACHE_TTL, make_cache_key

logger = logging.getLogger(__name__)


def default_decimals():
    return dict(settings.DEFAULT_DECIMALS)


def _first_row(payload):
    data = unwrap_data(payload, [])
    if isinstance(data, list):
        return data[0] if data else {}
    return data if isinstance(data, dict) else {}


def get_decimals(client):
    """Decimal settings of the client's company, falling back to DEFAULT_DECIMALS"""
    cache_key = make_cache_key("tenant_decimals", str(client.company_id))
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug(f"Cache HIT for tenant_decimals: {cache_key}")
        return cached

    try:
        row = _first_row(client.get_data(DecimalSetting.get))
    except BackendAPIError as e:
        logger.warning(f"Decimal settings unavailable for company {client.company_id}, using defaults: {e}")
        return default_decimals()

    decimals = default_decimals()
    if row:
        decimals.update({key: value for key, value in row.items() if value is not None})
        cache.set(cache_key, decimals, TENANT_SETTINGS_CACHE_TTL)
    else:
        logger.info(f"No decimal settings for company {client.company_id}, using defaults")
    return decimals


def _get_field_flags(client, prefix, path, module_id, transaction_id):
    cache_key = make_cache_key(prefix, str(client.company_id), str(module_id), str(transaction_id))
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug(f"Cache HIT for {prefix}: {cache_key}")
        return cached

    flags = _first_row(client.get_data(f"{path}/{module_id}/{transaction_id}"))
    cache.set(cache_key, flags, TENANT_SETTINGS_CACHE_TTL)
    return flags


def get_mandatory_fields(client, module_id, transaction_id):
    return _get_field_flags(client, "tenant_mandatory", MandatoryFieldSetting.get, module_id, transaction_id)


def get_visible_fields(client, module_id, transaction_id):
    return _get_field_flags(client, "tenant_visible", VisibleFieldSetting.get, module_id, transaction_id)


def flag_to_field_name(flag):
    """m_GstId -> gstId"""
    name = flag[2:] if flag.startswith('m_') else flag
    return name[:1].lower() + name[1:]


def is_blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    if isinstance(value, (list, dict)):
        return not value
    return False


class MandatoryFieldsMixin:
    """
    Makes fields required according to the tenant's mandatory field flags.

    Pass the flags as ``context={'mandatory_fields': {...}}``; every truthy
    ``m_<Field>`` whose ``<field>`` exists on the serializer must be present,
    non-blank and non-zero.
    """

    def get_mandatory_field_names(self):
        flags = self.context.get('mandatory_fields') or {}
        names = []
        for flag, enabled in flags.items():
            if not enabled or not str(flag).startswith('m_'):
                continue
            field_name = flag_to_field_name(flag)
            if field_name in self.fields:
                names.append(field_name)
        return names

    def validate(self, attrs):
        attrs = super().validate(attrs)
        errors = {}
        for field_name in self.get_mandatory_field_names():
            if is_blank(attrs.get(field_name)):
                errors[field_name] = ['This field is required.']
        if errors:
            raise serializers.ValidationError(errors)
        return attrs
