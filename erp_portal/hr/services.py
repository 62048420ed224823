"""Leave day counting and per-employee leave summaries"""
from collections import OrderedDict
from datetime import timedelta
from decimal import Decimal

from .serializers import DEFAULT_WEEKEND_DAYS

SUMMARY_STATUSES = ('approved', 'pending', 'rejected')


def calculate_leave_days(start_date, end_date, weekend_days=None, holidays=None):
    """
    Working days between two dates, both ends included.

    Weekend days are given by name (``'Saturday'``); holidays are dates.
    """
    if end_date < start_date:
        raise ValueError('End date must be after or equal to start date')

    weekend = {day.lower() for day in (DEFAULT_WEEKEND_DAYS if weekend_days is None else weekend_days)}
    holidays = set(holidays or [])

    days = 0
    current = start_date
    while current <= end_date:
        if current.strftime('%A').lower() not in weekend and current not in holidays:
            days += 1
        current += timedelta(days=1)
    return days


def summarize_leaves(leaves):
    """Leave counts and days per employee, split by approved/pending/rejected"""
    summaries = OrderedDict()
    for leave in leaves:
        employee_id = str(leave['employeeId'])
        summary = summaries.get(employee_id)
        if summary is None:
            summary = summaries[employee_id] = {
                'employeeId': employee_id,
                'employeeName': leave.get('employeeName', ''),
                'employeeCode': leave.get('employeeCode', ''),
                'department': leave.get('departmentName', ''),
                'totalLeaves': 0,
                'approvedLeaves': 0,
                'pendingLeaves': 0,
                'rejectedLeaves': 0,
                'totalDays': Decimal('0'),
                'approvedDays': Decimal('0'),
                'pendingDays': Decimal('0'),
                'rejectedDays': Decimal('0'),
            }

        days = Decimal(str(leave.get('totalDays') or 0))
        summary['totalLeaves'] += 1
        summary['totalDays'] += days

        status_name = str(leave.get('statusName', '')).strip().lower()
        if status_name in SUMMARY_STATUSES:
            summary[f'{status_name}Leaves'] += 1
            summary[f'{status_name}Days'] += days

    return list(summaries.values())
