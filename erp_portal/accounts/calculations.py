"""
Fixed-precision money arithmetic shared by AR, AP, CB and GL documents.

Every helper rounds its result to the requested number of decimal places,
ties toward +infinity, so that totals computed here match the backend's stored values.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_DOWN, ROUND_HALF_UP

from django.conf import settings

ZERO = Decimal('0')


def to_decimal(value, default=ZERO):
    """Coerce numbers, numeric strings and None into a Decimal"""
    if value is None or value == '':
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, float):
        # str() keeps the shortest repr, 0.1 stays 0.1
        return Decimal(str(value))
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default


def math_round(value, precision):
    """Round to ``precision`` places with ties toward +infinity (2.345 -> 2.35, -2.345 -> -2.34)"""
    quantum = Decimal(1).scaleb(-int(precision))
    number = to_decimal(value)
    rounding = ROUND_HALF_UP if number >= 0 else ROUND_HALF_DOWN
    return number.quantize(quantum, rounding=rounding)


def calculate_multiplier_amount(base_amount, multiplier, precision):
    """Exchange rate conversions and quantity x price"""
    return math_round(to_decimal(base_amount) * to_decimal(multiplier), precision)


def calculate_addition_amount(base_amount, addition, precision):
    return math_round(to_decimal(base_amount) + to_decimal(addition), precision)


def calculate_percentage_amount(base_amount, percentage, precision):
    """GST and discount percentages"""
    return math_round(to_decimal(base_amount) * to_decimal(percentage) / 100, precision)


def calculate_division_amount(base_amount, divisor, precision):
    divisor = to_decimal(divisor)
    if divisor == 0:
        return math_round(ZERO, precision)
    return math_round(to_decimal(base_amount) / divisor, precision)


def calculate_subtraction_amount(base_amount, subtract, precision):
    return math_round(to_decimal(base_amount) - to_decimal(subtract), precision)


@dataclass(frozen=True)
class Decimals:
    """Decimal places configured for a company"""

    amt_dec: int = 2
    loc_amt_dec: int = 2
    cty_amt_dec: int = 2
    price_dec: int = 2
    qty_dec: int = 2
    exh_rate_dec: int = 2
    date_format: str = 'yyyy-MM-dd'

    FIELD_MAP = {
        'amtDec': 'amt_dec',
        'locAmtDec': 'loc_amt_dec',
        'ctyAmtDec': 'cty_amt_dec',
        'priceDec': 'price_dec',
        'qtyDec': 'qty_dec',
        'exhRateDec': 'exh_rate_dec',
        'dateFormat': 'date_format',
    }

    @classmethod
    def from_payload(cls, payload=None):
        """Build from a camelCase dict, filling gaps from DEFAULT_DECIMALS"""
        values = dict(getattr(settings, 'DEFAULT_DECIMALS', {}))
        if payload:
            values.update({key: value for key, value in payload.items() if value is not None})

        kwargs = {}
        for camel, attr in cls.FIELD_MAP.items():
            if camel not in values:
                continue
            kwargs[attr] = values[camel] if attr == 'date_format' else int(values[camel])
        return cls(**kwargs)

    def as_dict(self):
        return {camel: getattr(self, attr) for camel, attr in self.FIELD_MAP.items()}
