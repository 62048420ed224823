"""
Allocation of a receipt, payment, refund or set-off against open documents.

Each detail row is an outstanding document with ``docBalAmt`` (balance in the
document currency) and ``docExhRate`` (the rate it was booked at). Allocating
part of the header amount to a row books it at the header's ``exhRate``; the
difference against the document's own rate is the exchange gain or loss.
"""
import logging
from decimal import Decimal

from .calculations import (
    ZERO,
    calculate_addition_amount,
    calculate_multiplier_amount,
    calculate_subtraction_amount,
    math_round,
    to_decimal,
)

logger = logging.getLogger(__name__)


def validate_allocation(details):
    """True when there is at least one row with an outstanding balance"""
    if not details:
        return False
    return any(to_decimal(row.get('docBalAmt')) != 0 for row in details)


def _sum(details, key, precision):
    total = ZERO
    for row in details:
        total = calculate_addition_amount(total, row.get(key), precision)
    return total


def auto_allocate_amounts(details, tot_amt, decimals):
    """
    Allocate ``tot_amt`` over the rows in order.

    Negative balances (credit notes) are taken in full first and add to the
    amount available for positive balances. With a zero total every balance is
    allocated and the total becomes the sum of the allocations.
    Returns ``(details, tot_amt)``.
    """
    tot_amt = to_decimal(tot_amt)
    amt_dec = decimals.amt_dec

    for row in details:
        row['allocAmt'] = ZERO

    if tot_amt == 0:
        for row in details:
            row['allocAmt'] = math_round(row.get('docBalAmt'), amt_dec)
        return details, _sum(details, 'allocAmt', amt_dec)

    available = tot_amt
    for row in details:
        balance = to_decimal(row.get('docBalAmt'))
        if balance < 0:
            row['allocAmt'] = math_round(balance, amt_dec)
            available = calculate_addition_amount(available, abs(balance), amt_dec)

    for row in details:
        balance = to_decimal(row.get('docBalAmt'))
        if balance <= 0 or available <= 0:
            continue
        allocated = min(balance, available)
        row['allocAmt'] = math_round(allocated, amt_dec)
        available = calculate_subtraction_amount(available, allocated, amt_dec)

    return details, tot_amt


def calculate_manual_allocation(details, index, value, tot_amt, decimals):
    """
    Apply a typed-in allocation to one row.

    The value is capped at the row balance and, for positive balances, at what
    the other rows leave of the header total. Returns ``(row, was_auto_set_to_zero)``.
    """
    if index < 0 or index >= len(details):
        raise IndexError(f"Allocation row {index} does not exist")

    amt_dec = decimals.amt_dec
    row = details[index]
    balance = to_decimal(row.get('docBalAmt'))
    value = to_decimal(value)
    tot_amt = to_decimal(tot_amt)
    was_auto_set_to_zero = False

    if tot_amt == 0 and value != 0:
        # manual entry needs a header amount, auto allocation handles the zero case
        value = ZERO
        was_auto_set_to_zero = True
    elif value != 0 and (balance == 0 or (value > 0) != (balance > 0)):
        value = ZERO
    elif value > 0:
        others = ZERO
        for position, other in enumerate(details):
            if position != index:
                others = calculate_addition_amount(others, other.get('allocAmt'), amt_dec)
        remaining = calculate_subtraction_amount(tot_amt, others, amt_dec)
        if remaining <= 0:
            value = ZERO
            was_auto_set_to_zero = True
        else:
            value = min(value, balance, remaining)
    elif value < 0:
        value = max(value, balance)

    row['allocAmt'] = math_round(value, amt_dec)
    return row, was_auto_set_to_zero


def calculate_local_amount_and_gain_loss(details, index, exh_rate, decimals):
    """Local amounts of one row at the header rate and at the document rate"""
    row = details[index]
    alloc_amt = to_decimal(row.get('allocAmt'))
    doc_exh_rate = to_decimal(row.get('docExhRate'))

    alloc_local_amt = calculate_multiplier_amount(alloc_amt, exh_rate, decimals.loc_amt_dec)
    doc_alloc_local_amt = calculate_multiplier_amount(alloc_amt, doc_exh_rate, decimals.loc_amt_dec)

    row['allocLocalAmt'] = alloc_local_amt
    row['docAllocAmt'] = alloc_amt
    row['docAllocLocalAmt'] = doc_alloc_local_amt
    row['exhGainLoss'] = calculate_subtraction_amount(doc_alloc_local_amt, alloc_local_amt, decimals.loc_amt_dec)
    row['centDiff'] = ZERO
    return row


def calculate_unallocated(tot_amt, tot_local_amt, alloc_amt, alloc_local_amt, decimals):
    """Returns ``(unAllocAmt, unAllocLocalAmt)``"""
    return (
        calculate_subtraction_amount(tot_amt, alloc_amt, decimals.amt_dec),
        calculate_subtraction_amount(tot_local_amt, alloc_local_amt, decimals.loc_amt_dec),
    )


def apply_cent_diff_adjustment(details, un_alloc_amt, un_alloc_local_amt, decimals):
    """
    Push a local rounding residue onto the last allocated row.

    Only applies when the base amount is fully allocated and the residue is at
    most one smallest unit per allocated row plus one.
    """
    if to_decimal(un_alloc_amt) != 0:
        return False
    residue = to_decimal(un_alloc_local_amt)
    if residue == 0:
        return False

    allocated = [row for row in details if to_decimal(row.get('allocAmt')) != 0]
    if not allocated:
        return False

    tolerance = (len(allocated) + 1) * Decimal(1).scaleb(-decimals.loc_amt_dec)
    if abs(residue) > tolerance:
        logger.debug(f"Local residue {residue} exceeds cent tolerance {tolerance}")
        return False

    allocated[-1]['centDiff'] = math_round(residue, decimals.loc_amt_dec)
    return True


def reconcile_allocation(details, header, decimals):
    """
    Recompute local amounts, gain/loss and cent differences for every row and
    return the header's allocation totals.

    A zero header total takes the allocated sums as the document total.
    """
    exh_rate = to_decimal(header.get('exhRate'), default=Decimal(1))
    if exh_rate == 0:
        exh_rate = Decimal(1)
    tot_amt = to_decimal(header.get('totAmt'))
    tot_local_amt = to_decimal(header.get('totLocalAmt'))
    amt_dec = decimals.amt_dec
    loc_dec = decimals.loc_amt_dec

    for index in range(len(details)):
        calculate_local_amount_and_gain_loss(details, index, exh_rate, decimals)

    alloc_tot_amt = _sum(details, 'allocAmt', amt_dec)
    alloc_tot_local_amt = _sum(details, 'allocLocalAmt', loc_dec)

    if tot_amt == 0:
        tot_amt = alloc_tot_amt
        tot_local_amt = alloc_tot_local_amt

    un_alloc_amt, un_alloc_local_amt = calculate_unallocated(
        tot_amt, tot_local_amt, alloc_tot_amt, alloc_tot_local_amt, decimals
    )

    if apply_cent_diff_adjustment(details, un_alloc_amt, un_alloc_local_amt, decimals):
        alloc_tot_local_amt = calculate_addition_amount(
            alloc_tot_local_amt, _sum(details, 'centDiff', loc_dec), loc_dec
        )
        un_alloc_amt, un_alloc_local_amt = calculate_unallocated(
            tot_amt, tot_local_amt, alloc_tot_amt, alloc_tot_local_amt, decimals
        )

    cent_diff = _sum(details, 'centDiff', loc_dec)
    exh_gain_loss = calculate_subtraction_amount(_sum(details, 'exhGainLoss', loc_dec), cent_diff, loc_dec)

    return {
        'totAmt': tot_amt,
        'totLocalAmt': tot_local_amt,
        'allocTotAmt': alloc_tot_amt,
        'allocTotLocalAmt': alloc_tot_local_amt,
        'exhGainLoss': exh_gain_loss,
        'centDiff': cent_diff,
        'unAllocAmt': un_alloc_amt,
        'unAllocLocalAmt': un_alloc_local_amt,
    }


def reset_allocation(details, header, decimals):
    """Clear every allocation; returns ``(details, totals)``"""
    for row in details:
        row['allocAmt'] = ZERO
    return details, reconcile_allocation(details, header, decimals)
