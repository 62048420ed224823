"""
Backend-assisted defaults for account documents: exchange rates, GST
percentage, due dates, period checks and party address/contact details.
"""
import logging
from datetime import timedelta
from enum import Enum

from erp_portal.core.fields import BACKEND_DATE_FORMAT, parse_client_date
from erp_portal.proxy.client import unwrap_data
from erp_portal.proxy.routes import BasicSetting, Lookup

from .calculations import math_round, to_decimal

logger = logging.getLogger(__name__)


class EntityType(str, Enum):
    CUSTOMER = 'customer'
    SUPPLIER = 'supplier'
    BANK = 'bank'


ADDRESS_ENDPOINTS = {
    EntityType.CUSTOMER: (Lookup.get_customer_address, Lookup.get_customer_contact),
    EntityType.SUPPLIER: (Lookup.get_supplier_address, Lookup.get_supplier_contact),
    EntityType.BANK: (Lookup.get_bank_address, Lookup.get_bank_contact),
}

BLANK_ADDRESS = {
    'addressId': 0,
    'address1': '',
    'address2': '',
    'address3': '',
    'address4': '',
    'pinCode': '',
    'countryId': 0,
    'phoneNo': '',
}

BLANK_CONTACT = {
    'contactId': 0,
    'contactName': '',
    'mobileNo': '',
    'emailAdd': '',
    'faxNo': '',
}


def backend_date(value):
    return parse_client_date(value).strftime(BACKEND_DATE_FORMAT)


def get_exchange_rate(client, currency_id, account_date, decimals, local=False):
    """Rate of ``currency_id`` on ``account_date`` rounded to exhRateDec"""
    path = BasicSetting.get_exchange_rate_local if local else BasicSetting.get_exchange_rate
    payload = client.get_data(f"{path}/{currency_id}/{backend_date(account_date)}")
    return math_round(to_decimal(unwrap_data(payload, 0)), decimals.exh_rate_dec)


def get_header_exchange_rates(client, currency_id, account_date, decimals, visible=None):
    """
    ``exhRate`` and ``ctyExhRate`` for a document header. Without a separate
    country currency the country rate mirrors the base rate.
    """
    exh_rate = get_exchange_rate(client, currency_id, account_date, decimals)
    if (visible or {}).get('m_CtyCurr'):
        cty_exh_rate = get_exchange_rate(client, currency_id, account_date, decimals, local=True)
    else:
        cty_exh_rate = exh_rate
    return {'exhRate': exh_rate, 'ctyExhRate': cty_exh_rate}


def get_gst_percentage(client, gst_id, account_date):
    payload = client.get_data(f"{BasicSetting.get_gst_percentage}/{gst_id}/{backend_date(account_date)}")
    return to_decimal(unwrap_data(payload, 0))


def get_credit_term_days(client, credit_term_id, account_date):
    payload = client.get_data(f"{BasicSetting.get_days_from_credit_term}/{credit_term_id}/{backend_date(account_date)}")
    return int(to_decimal(unwrap_data(payload, 0)))


def get_due_date(client, credit_term_id, account_date, delivery_date):
    """Due date = delivery date + credit term days (looked up on the account date)"""
    days = get_credit_term_days(client, credit_term_id, account_date)
    return parse_client_date(delivery_date) + timedelta(days=days)


def is_period_closed(client, module_id, account_date):
    payload = client.get_data(f"{BasicSetting.get_check_period_closed}/{module_id}/{backend_date(account_date)}")
    return bool(unwrap_data(payload, False))


def _first(payload):
    data = unwrap_data(payload, [])
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


def fetch_address_contact(client, entity_type, entity_id):
    """Default address and contact of a customer, supplier or bank"""
    entity_type = EntityType(entity_type)
    address = dict(BLANK_ADDRESS)
    contact = dict(BLANK_CONTACT)
    if not entity_id:
        return {'address': address, 'contact': contact}

    address_path, contact_path = ADDRESS_ENDPOINTS[entity_type]
    address_row = _first(client.get_data(f"{address_path}/{entity_id}"))
    contact_row = _first(client.get_data(f"{contact_path}/{entity_id}"))

    if address_row:
        address.update({key: address_row.get(key, default) for key, default in BLANK_ADDRESS.items()})
    else:
        logger.debug(f"No address for {entity_type.value} {entity_id}")
    if contact_row:
        contact.update({key: contact_row.get(key, default) for key, default in BLANK_CONTACT.items()})

    return {'address': address, 'contact': contact}
