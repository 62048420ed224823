"""Validation rules for leave records and the leave screens' forms"""
from rest_framework import serializers

from erp_portal.core.fields import ClientDateField, at_least, required_id, required_text

WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
DEFAULT_WEEKEND_DAYS = ['Saturday', 'Sunday']


def reason_field():
    return serializers.CharField(
        max_length=500,
        error_messages={
            'blank': 'Reason is required',
            'required': 'Reason is required',
            'max_length': 'Reason must be less than 500 characters',
        },
    )


def year_field():
    return serializers.IntegerField(min_value=2020, error_messages={'min_value': 'Year must be 2020 or later'})


class DateRangeMixin:
    """End date must not fall before the start date"""

    def validate(self, attrs):
        attrs = super().validate(attrs)
        start, end = attrs.get('startDate'), attrs.get('endDate')
        if start and end and end < start:
            raise serializers.ValidationError({'endDate': 'End date must be after or equal to start date'})
        return attrs


class LeaveSerializer(DateRangeMixin, serializers.Serializer):
    leaveId = serializers.IntegerField(required=False)
    employeeId = required_id('Employee is required')
    employeeName = required_text('Employee name is required')
    employeePhoto = serializers.CharField(required=False, allow_blank=True)
    employeeCode = required_text('Employee code is required')
    departmentId = required_id('Department is required')
    departmentName = serializers.CharField(required=False, allow_blank=True)
    leaveTypeId = required_id('Leave type is required')
    leaveTypeName = required_text('Leave type name is required')
    leaveCategoryId = required_id('Leave category is required')
    leaveCategoryName = required_text('Leave category name is required')
    startDate = ClientDateField()
    endDate = ClientDateField()
    totalDays = at_least(0, 'Total days must be 0 or greater')
    reason = reason_field()
    statusName = required_text('Status is required')
    actionById = serializers.IntegerField(required=False)
    actionBy = serializers.CharField(required=False, allow_blank=True)
    actionDate = ClientDateField(required=False)
    actionRemarks = serializers.CharField(required=False, allow_blank=True)
    attachments = serializers.ListField(child=serializers.CharField(), required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class LeaveTypeSerializer(serializers.Serializer):
    leaveTypeId = serializers.IntegerField(required=False)
    code = required_text('Code is required')
    name = required_text('Name is required')
    remarks = serializers.CharField(required=False, allow_blank=True)
    isActive = serializers.BooleanField(default=True)
    createById = required_id('Create by ID is required')
    editById = serializers.IntegerField(required=False)


class LeaveBalanceSerializer(serializers.Serializer):
    leaveBalanceId = serializers.IntegerField(required=False)
    employeeId = required_id('Employee is required')
    leaveTypeId = required_id('Leave type is required')
    totalAllocated = at_least(0, 'Total allocated must be 0 or greater')
    totalUsed = at_least(0, 'Total used must be 0 or greater')
    totalPending = at_least(0, 'Total pending must be 0 or greater')
    remainingBalance = at_least(0, 'Remaining balance must be 0 or greater')
    year = year_field()
    createById = serializers.IntegerField(required=False)
    editById = serializers.IntegerField(required=False)


class LeavePolicyBaseSerializer(serializers.Serializer):
    leaveTypeId = required_id('Leave type is required')
    name = required_text('Policy name is required')
    description = serializers.CharField(required=False, allow_blank=True)
    defaultDays = at_least(0, 'Default days must be 0 or greater')
    maxDays = at_least(1, 'Maximum days must be at least 1')
    minDays = at_least(0, 'Minimum days must be 0 or greater')
    advanceNoticeDays = at_least(0, 'Advance notice days must be 0 or greater')
    maxConsecutiveDays = at_least(1, 'Maximum consecutive days must be at least 1')
    requiresApproval = serializers.BooleanField(default=True)
    requiresDocument = serializers.BooleanField(default=False)
    isActive = serializers.BooleanField(default=True)


class LeavePolicySerializer(LeavePolicyBaseSerializer):
    leavePolicyId = serializers.IntegerField(required=False)
    companyId = required_id('Company is required')
    createById = required_id('Create by ID is required')
    editById = serializers.IntegerField(required=False)


class LeaveRequestSerializer(DateRangeMixin, serializers.Serializer):
    leaveRequestId = serializers.IntegerField(required=False)
    employeeId = required_id('Employee is required')
    leaveTypeId = required_id('Leave type is required')
    startDate = ClientDateField()
    endDate = ClientDateField()
    totalDays = at_least(0, 'Total days must be 0 or greater')
    reason = reason_field()
    statusId = required_id('Status is required')
    actionById = serializers.IntegerField(required=False)
    actionDate = ClientDateField(required=False)
    remarks = serializers.CharField(required=False, allow_blank=True)
    attachments = serializers.CharField(required=False, allow_blank=True)
    createById = required_id('Create by ID is required')
    createDate = required_text('Create date is required')
    editById = serializers.IntegerField(required=False)


class LeaveApprovalSerializer(serializers.Serializer):
    leaveApprovalId = serializers.IntegerField(required=False)
    leaveRequestId = required_id('Leave request is required')
    approverId = required_id('Approver is required')
    approvalLevel = required_id('Approval level is required')
    statusId = required_id('Status is required')
    comments = serializers.CharField(required=False, allow_blank=True)
    approvedDate = ClientDateField(required=False)


class LeaveCalendarSerializer(serializers.Serializer):
    leaveCalendarId = serializers.IntegerField(required=False)
    date = ClientDateField()
    employeeId = required_id('Employee is required')
    leaveRequestId = serializers.IntegerField(required=False)
    statusId = required_id('Status is required')
    leaveTypeId = serializers.IntegerField(required=False)


class LeaveSettingSerializer(serializers.Serializer):
    leaveSettingId = serializers.IntegerField(required=False)
    companyId = required_id('Company is required')
    autoApproveLeaves = serializers.BooleanField(default=False)
    requireManagerApproval = serializers.BooleanField(default=True)
    requireHrApproval = serializers.BooleanField(default=True)
    allowNegativeBalance = serializers.BooleanField(default=False)
    maxAdvanceBookingDays = serializers.IntegerField(
        min_value=1, error_messages={'min_value': 'Maximum advance booking days must be at least 1'}
    )
    minAdvanceNoticeDays = serializers.IntegerField(
        min_value=0, error_messages={'min_value': 'Minimum advance notice days must be 0 or greater'}
    )
    weekendDays = serializers.CharField(required=False, allow_blank=True)
    holidays = serializers.CharField(required=False, allow_blank=True)
    workingHours = serializers.CharField(required=False, allow_blank=True)
    createById = serializers.IntegerField(required=False)
    editById = serializers.IntegerField(required=False)


class LeaveTypeRefSerializer(serializers.Serializer):
    leaveTypeId = serializers.IntegerField()
    code = serializers.CharField()
    name = serializers.CharField()


class LeaveFilterSerializer(serializers.Serializer):
    employeeId = serializers.CharField(required=False, allow_blank=True)
    departmentId = serializers.IntegerField(required=False)
    departmentName = serializers.CharField(required=False, allow_blank=True)
    locationId = serializers.IntegerField(required=False)
    locationName = serializers.CharField(required=False, allow_blank=True)
    leaveType = LeaveTypeRefSerializer(required=False)
    status = serializers.CharField(required=False, allow_blank=True)
    dateFrom = ClientDateField(required=False)
    dateTo = ClientDateField(required=False)
    approvedBy = serializers.CharField(required=False, allow_blank=True)


class LeaveSummarySerializer(serializers.Serializer):
    employeeId = required_text('Employee ID is required')
    employeeName = required_text('Employee name is required')
    employeeCode = required_text('Employee code is required')
    department = serializers.CharField(required=False, allow_blank=True)
    totalLeaves = serializers.IntegerField(min_value=0)
    approvedLeaves = serializers.IntegerField(min_value=0)
    pendingLeaves = serializers.IntegerField(min_value=0)
    rejectedLeaves = serializers.IntegerField(min_value=0)
    totalDays = at_least(0, 'Total days must be 0 or greater')
    approvedDays = at_least(0, 'Approved days must be 0 or greater')
    pendingDays = at_least(0, 'Pending days must be 0 or greater')
    rejectedDays = at_least(0, 'Rejected days must be 0 or greater')


class LeaveReportSerializer(serializers.Serializer):
    employeeId = required_text('Employee ID is required')
    employeeName = required_text('Employee name is required')
    employeeCode = required_text('Employee code is required')
    departmentId = serializers.IntegerField(required=False)
    departmentName = serializers.CharField(required=False, allow_blank=True)
    leaveTypeId = serializers.IntegerField(required=False)
    leaveTypeName = serializers.CharField(required=False, allow_blank=True)
    totalDays = at_least(0, 'Total days must be 0 or greater')
    usedDays = at_least(0, 'Used days must be 0 or greater')
    remainingDays = at_least(0, 'Remaining days must be 0 or greater')
    year = year_field()


class LeaveFormDataSerializer(DateRangeMixin, serializers.Serializer):
    employeeId = required_text('Employee is required')
    leaveTypeId = required_id('Leave type is required')
    leaveTypeName = required_text('Leave type name is required')
    startDate = ClientDateField()
    endDate = ClientDateField()
    reason = reason_field()
    notes = serializers.CharField(required=False, allow_blank=True)
    attachments = serializers.ListField(child=serializers.CharField(), required=False)


class LeavePolicyFormDataSerializer(LeavePolicyBaseSerializer):
    companyId = required_text('Company is required')


class LeaveBalanceFormDataSerializer(serializers.Serializer):
    employeeId = required_text('Employee is required')
    leaveTypeId = required_id('Leave type is required')
    totalAllocated = at_least(0, 'Total allocated must be 0 or greater')
    year = year_field()


class WorkingHoursSerializer(serializers.Serializer):
    start = required_text('Working hours start time is required')
    end = required_text('Working hours end time is required')


class LeaveSettingsFormDataSerializer(serializers.Serializer):
    companyId = required_text('Company is required')
    autoApproveLeaves = serializers.BooleanField(default=False)
    requireManagerApproval = serializers.BooleanField(default=True)
    requireHRApproval = serializers.BooleanField(default=True)
    allowNegativeBalance = serializers.BooleanField(default=False)
    maxAdvanceBookingDays = serializers.IntegerField(
        min_value=1, error_messages={'min_value': 'Maximum advance booking days must be at least 1'}
    )
    minAdvanceNoticeDays = serializers.IntegerField(
        min_value=0, error_messages={'min_value': 'Minimum advance notice days must be 0 or greater'}
    )
    weekendDays = serializers.ListField(
        child=serializers.ChoiceField(choices=WEEKDAYS), default=lambda: list(DEFAULT_WEEKEND_DAYS)
    )
    holidays = serializers.ListField(child=ClientDateField(), default=list)
    workingHours = WorkingHoursSerializer()


class BulkLeaveApprovalSerializer(serializers.Serializer):
    leaveIds = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
        error_messages={'empty': 'At least one leave must be selected'},
    )
    statusId = required_id('Status is required')
    comments = serializers.CharField(required=False, allow_blank=True)


class LeaveDaysSerializer(DateRangeMixin, serializers.Serializer):
    startDate = ClientDateField()
    endDate = ClientDateField()
    weekendDays = serializers.ListField(
        child=serializers.ChoiceField(choices=WEEKDAYS), default=lambda: list(DEFAULT_WEEKEND_DAYS)
    )
    holidays = serializers.ListField(child=ClientDateField(), default=list)


class LeaveRequestSaveSerializer(LeaveFormDataSerializer):
    """Leave form plus the calendar its days are counted against (the company's leave settings)"""
    weekendDays = serializers.ListField(
        child=serializers.ChoiceField(choices=WEEKDAYS), default=lambda: list(DEFAULT_WEEKEND_DAYS)
    )
    holidays = serializers.ListField(child=ClientDateField(), default=list)


class LeaveEntrySerializer(serializers.Serializer):
    """One leave as listed on the leave screens, input to the per-employee summary"""
    employeeId = serializers.CharField()
    employeeName = serializers.CharField(required=False, allow_blank=True, default='')
    employeeCode = serializers.CharField(required=False, allow_blank=True, default='')
    departmentName = serializers.CharField(required=False, allow_blank=True, default='')
    statusName = serializers.CharField()
    totalDays = at_least(0, 'Total days must be 0 or greater')


class LeaveSummaryRequestSerializer(serializers.Serializer):
    leaves = LeaveEntrySerializer(many=True)


SCHEMAS = {
    'leave': LeaveSerializer,
    'leave-type': LeaveTypeSerializer,
    'leave-balance': LeaveBalanceSerializer,
    'leave-policy': LeavePolicySerializer,
    'leave-request': LeaveRequestSerializer,
    'leave-approval': LeaveApprovalSerializer,
    'leave-calendar': LeaveCalendarSerializer,
    'leave-setting': LeaveSettingSerializer,
    'leave-filter': LeaveFilterSerializer,
    'leave-summary': LeaveSummarySerializer,
    'leave-report': LeaveReportSerializer,
    'leave-form': LeaveFormDataSerializer,
    'leave-policy-form': LeavePolicyFormDataSerializer,
    'leave-balance-form': LeaveBalanceFormDataSerializer,
    'leave-settings-form': LeaveSettingsFormDataSerializer,
    'bulk-approval': BulkLeaveApprovalSerializer,
}
