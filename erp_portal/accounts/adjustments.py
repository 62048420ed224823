"""AR/AP adjustment totals: debit and credit lines netted into one header."""
from .calculations import (
    ZERO,
    calculate_addition_amount,
    calculate_multiplier_amount,
    calculate_percentage_amount,
    calculate_subtraction_amount,
    math_round,
    to_decimal,
)

AMOUNT_KEYS = ('totAmt', 'gstAmt', 'totLocalAmt', 'gstLocalAmt', 'totCtyAmt', 'gstCtyAmt')


def _sum_pair(details, first, second, precision):
    total_first = ZERO
    total_second = ZERO
    for detail in details:
        total_first = calculate_addition_amount(total_first, detail.get(first), precision)
        total_second = calculate_addition_amount(total_second, detail.get(second), precision)
    return total_first, total_second


def calculate_total_amounts(details, amt_dec):
    tot_amt, gst_amt = _sum_pair(details, 'totAmt', 'gstAmt', amt_dec)
    return {
        'totAmt': tot_amt,
        'gstAmt': gst_amt,
        'totAmtAftGst': calculate_addition_amount(tot_amt, gst_amt, amt_dec),
    }


def calculate_local_amounts(details, loc_amt_dec):
    tot_local_amt, gst_local_amt = _sum_pair(details, 'totLocalAmt', 'gstLocalAmt', loc_amt_dec)
    return {
        'totLocalAmt': tot_local_amt,
        'gstLocalAmt': gst_local_amt,
        'totLocalAmtAftGst': calculate_addition_amount(tot_local_amt, gst_local_amt, loc_amt_dec),
    }


def calculate_cty_amounts(details, cty_amt_dec):
    tot_cty_amt, gst_cty_amt = _sum_pair(details, 'totCtyAmt', 'gstCtyAmt', cty_amt_dec)
    return {
        'totCtyAmt': tot_cty_amt,
        'gstCtyAmt': gst_cty_amt,
        'totCtyAmtAftGst': calculate_addition_amount(tot_cty_amt, gst_cty_amt, cty_amt_dec),
    }


def calculate_gst_amount(tot_amt, gst_percentage, decimals):
    return calculate_percentage_amount(tot_amt, gst_percentage, decimals.amt_dec)


def calculate_local_amount(tot_amt, exchange_rate, decimals):
    return calculate_multiplier_amount(tot_amt, exchange_rate, decimals.loc_amt_dec)


def calculate_cty_amount(tot_amt, city_exchange_rate, decimals):
    return calculate_multiplier_amount(tot_amt, city_exchange_rate, decimals.cty_amt_dec)


def calculate_total_amount(qty, unit_price, decimals):
    return calculate_multiplier_amount(qty, unit_price, decimals.amt_dec)


def recalculate_detail_amounts(detail, exchange_rate, city_exchange_rate, decimals, has_country_currency):
    """Return a new detail with GST, local and country amounts recomputed"""
    tot_amt = to_decimal(detail.get('totAmt'))
    gst_amt = calculate_gst_amount(tot_amt, to_decimal(detail.get('gstPercentage')), decimals)

    tot_cty_amt = ZERO
    gst_cty_amt = ZERO
    if has_country_currency:
        tot_cty_amt = calculate_cty_amount(tot_amt, city_exchange_rate, decimals)
        gst_cty_amt = calculate_cty_amount(gst_amt, city_exchange_rate, decimals)

    return {
        **detail,
        'gstAmt': gst_amt,
        'totLocalAmt': calculate_local_amount(tot_amt, exchange_rate, decimals),
        'gstLocalAmt': calculate_local_amount(gst_amt, exchange_rate, decimals),
        'totCtyAmt': tot_cty_amt,
        'gstCtyAmt': gst_cty_amt,
    }


def recalculate_all_detail_amounts(details, exchange_rate, city_exchange_rate, decimals, has_country_currency):
    return [
        recalculate_detail_amounts(detail, exchange_rate, city_exchange_rate, decimals, has_country_currency)
        for detail in details
    ]


def _accumulate(accumulator, detail, decimals):
    places = {
        'totAmt': decimals.amt_dec,
        'gstAmt': decimals.amt_dec,
        'totLocalAmt': decimals.loc_amt_dec,
        'gstLocalAmt': decimals.loc_amt_dec,
        'totCtyAmt': decimals.cty_amt_dec,
        'gstCtyAmt': decimals.cty_amt_dec,
    }
    for key in AMOUNT_KEYS:
        accumulator[key] = calculate_addition_amount(accumulator[key], detail.get(key), places[key])


def empty_header_totals():
    return {
        'isDebit': False,
        'totAmt': ZERO,
        'gstAmt': ZERO,
        'totAmtAftGst': ZERO,
        'totLocalAmt': ZERO,
        'gstLocalAmt': ZERO,
        'totLocalAmtAftGst': ZERO,
        'totCtyAmt': ZERO,
        'gstCtyAmt': ZERO,
        'totCtyAmtAftGst': ZERO,
    }


def calculate_adjustment_header_totals(details, decimals, has_country_currency):
    """
    Net debit lines against credit lines.

    ``isDebit`` is set when credits outweigh debits on the base amount; every
    amount is returned as an absolute value.
    """
    if not details:
        return empty_header_totals()

    debit = {key: ZERO for key in AMOUNT_KEYS}
    credit = {key: ZERO for key in AMOUNT_KEYS}
    for detail in details:
        _accumulate(debit if detail.get('isDebit') else credit, detail, decimals)

    amt_dec = decimals.amt_dec
    loc_dec = decimals.loc_amt_dec
    cty_dec = decimals.cty_amt_dec

    net = {
        'totAmt': calculate_subtraction_amount(debit['totAmt'], credit['totAmt'], amt_dec),
        'gstAmt': calculate_subtraction_amount(debit['gstAmt'], credit['gstAmt'], amt_dec),
        'totLocalAmt': calculate_subtraction_amount(debit['totLocalAmt'], credit['totLocalAmt'], loc_dec),
        'gstLocalAmt': calculate_subtraction_amount(debit['gstLocalAmt'], credit['gstLocalAmt'], loc_dec),
        'totCtyAmt': calculate_subtraction_amount(debit['totCtyAmt'], credit['totCtyAmt'], cty_dec),
        'gstCtyAmt': calculate_subtraction_amount(debit['gstCtyAmt'], credit['gstCtyAmt'], cty_dec),
    }

    totals = {
        'isDebit': net['totAmt'] < 0,
        'totAmt': math_round(abs(net['totAmt']), amt_dec),
        'gstAmt': math_round(abs(net['gstAmt']), amt_dec),
        'totAmtAftGst': math_round(
            abs(calculate_addition_amount(net['totAmt'], net['gstAmt'], amt_dec)), amt_dec
        ),
        'totLocalAmt': math_round(abs(net['totLocalAmt']), loc_dec),
        'gstLocalAmt': math_round(abs(net['gstLocalAmt']), loc_dec),
        'totLocalAmtAftGst': math_round(
            abs(calculate_addition_amount(net['totLocalAmt'], net['gstLocalAmt'], loc_dec)), loc_dec
        ),
        'totCtyAmt': ZERO,
        'gstCtyAmt': ZERO,
        'totCtyAmtAftGst': ZERO,
    }
    if has_country_currency:
        totals['totCtyAmt'] = math_round(abs(net['totCtyAmt']), cty_dec)
        totals['gstCtyAmt'] = math_round(abs(net['gstCtyAmt']), cty_dec)
        totals['totCtyAmtAftGst'] = math_round(
            abs(calculate_addition_amount(net['totCtyAmt'], net['gstCtyAmt'], cty_dec)), cty_dec
        )
    return totals
