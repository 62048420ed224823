"""
Recalculation of invoice / transaction detail rows (AR and AP).

Handlers take the document header (``exhRate``, ``ctyExhRate``), one detail
row, the company's Decimals and the visible-field flags, and update the row in
place. ``m_CtyCurr`` in the visible flags means the company keeps a separate
country currency with its own exchange rate.
"""
from .calculations import (
    ZERO,
    calculate_addition_amount,
    calculate_multiplier_amount,
    calculate_percentage_amount,
    to_decimal,
)

TRIGGERS = ('qty', 'total', 'gst')


def _exchange_rate(header):
    return to_decimal((header or {}).get('exhRate'))


def _country_rate(header, visible):
    header = header or {}
    if (visible or {}).get('m_CtyCurr'):
        return to_decimal(header.get('ctyExhRate'))
    return to_decimal(header.get('exhRate'))


def handle_qty_change(header, row, decimals, visible=None):
    """totAmt = billQTY x unitPrice; billQTY is the billed quantity, qty the physical one"""
    bill_qty = row.get('billQTY')
    if bill_qty is None:
        bill_qty = row.get('qty')
    row['totAmt'] = calculate_multiplier_amount(
        to_decimal(bill_qty), to_decimal(row.get('unitPrice')), decimals.amt_dec
    )

    if _exchange_rate(header) != 0:
        handle_total_amount_change(header, row, decimals, visible)
    return row


def handle_total_amount_change(header, row, decimals, visible=None):
    row['totLocalAmt'] = calculate_multiplier_amount(
        to_decimal(row.get('totAmt')), _exchange_rate(header), decimals.loc_amt_dec
    )
    handle_total_city_amount_change(header, row, decimals, visible)
    handle_gst_percentage_change(header, row, decimals, visible)
    return row


def handle_gst_percentage_change(header, row, decimals, visible=None):
    gst_amt = calculate_percentage_amount(
        to_decimal(row.get('totAmt')), to_decimal(row.get('gstPercentage')), decimals.amt_dec
    )
    row['gstAmt'] = gst_amt
    row['gstLocalAmt'] = calculate_multiplier_amount(gst_amt, _exchange_rate(header), decimals.loc_amt_dec)
    handle_gst_city_percentage_change(header, row, decimals, visible)
    return row


def handle_total_city_amount_change(header, row, decimals, visible=None):
    row['totCtyAmt'] = calculate_multiplier_amount(
        to_decimal(row.get('totAmt')), _country_rate(header, visible), decimals.cty_amt_dec
    )
    return row


def handle_gst_city_percentage_change(header, row, decimals, visible=None):
    row['gstCtyAmt'] = calculate_multiplier_amount(
        to_decimal(row.get('gstAmt')), _country_rate(header, visible), decimals.cty_amt_dec
    )
    return row


def handle_details_change(header, detail, decimals):
    """Local and country amounts of a simple amount/gstAmount detail (CB, GL)"""
    header = header or {}
    exh_rate = to_decimal(header.get('exhRate'))
    cty_exh_rate = to_decimal(header.get('ctyExhRate'))
    amount = to_decimal(detail.get('amount'))
    gst_amount = to_decimal(detail.get('gstAmount'))

    if amount:
        detail['localAmount'] = calculate_multiplier_amount(amount, exh_rate, decimals.loc_amt_dec)
    if gst_amount:
        detail['gstLocalAmount'] = calculate_multiplier_amount(gst_amount, exh_rate, decimals.loc_amt_dec)
    if cty_exh_rate and amount:
        detail['ctyAmount'] = calculate_multiplier_amount(amount, cty_exh_rate, decimals.cty_amt_dec)
    if cty_exh_rate and gst_amount:
        detail['gstCtyAmount'] = calculate_multiplier_amount(gst_amount, cty_exh_rate, decimals.cty_amt_dec)
    return detail


HANDLERS = {
    'qty': handle_qty_change,
    'total': handle_total_amount_change,
    'gst': handle_gst_percentage_change,
}


def calculate_detail_totals(rows, decimals):
    """Header totals in base, local and country currency"""
    totals = {
        'totAmt': ZERO,
        'gstAmt': ZERO,
        'totLocalAmt': ZERO,
        'gstLocalAmt': ZERO,
        'totCtyAmt': ZERO,
        'gstCtyAmt': ZERO,
    }
    places = {
        'totAmt': decimals.amt_dec,
        'gstAmt': decimals.amt_dec,
        'totLocalAmt': decimals.loc_amt_dec,
        'gstLocalAmt': decimals.loc_amt_dec,
        'totCtyAmt': decimals.cty_amt_dec,
        'gstCtyAmt': decimals.cty_amt_dec,
    }
    for row in rows:
        for key in totals:
            totals[key] = calculate_addition_amount(totals[key], row.get(key), places[key])

    totals['totAmtAftGst'] = calculate_addition_amount(totals['totAmt'], totals['gstAmt'], decimals.amt_dec)
    totals['totLocalAmtAftGst'] = calculate_addition_amount(
        totals['totLocalAmt'], totals['gstLocalAmt'], decimals.loc_amt_dec
    )
    totals['totCtyAmtAftGst'] = calculate_addition_amount(
        totals['totCtyAmt'], totals['gstCtyAmt'], decimals.cty_amt_dec
    )
    return totals


def recalculate_details(header, rows, decimals, visible=None, trigger='qty'):
    """Apply one trigger to every row; returns (rows, totals)"""
    if trigger not in HANDLERS:
        raise ValueError(f"Unknown trigger '{trigger}', expected one of {', '.join(TRIGGERS)}")

    handler = HANDLERS[trigger]
    for row in rows:
        handler(header, row, decimals, visible)
    return rows, calculate_detail_totals(rows, decimals)
