"""
Test suite for HR leave
Tests: schema validation, leave day counting, summaries, forwarding to the backend
"""
from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status

from erp_portal.core.models import AuditLog
from erp_portal.core.test_utils import BACKEND_SETTINGS, TestDataFactory, AuthenticatedAPIClient, patch_backend
from erp_portal.hr.serializers import (
    BulkLeaveApprovalSerializer,
    LeaveFormDataSerializer,
    LeaveRequestSerializer,
    LeaveSettingsFormDataSerializer,
)
from erp_portal.hr.services import calculate_leave_days, summarize_leaves


class LeaveSchemaTests(SimpleTestCase):
    """Test leave validation rules"""

    def test_valid_leave_form(self):
        serializer = LeaveFormDataSerializer(data=TestDataFactory.create_leave_request_data())
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data['startDate'], date(2024, 3, 4))

    def test_end_date_before_start_date(self):
        data = TestDataFactory.create_leave_request_data(startDate='2024-03-06', endDate='2024-03-04')
        serializer = LeaveFormDataSerializer(data=data)
        self.assertFalse(serializer.is_valid())
        self.assertEqual(serializer.errors['endDate'], ['End date must be after or equal to start date'])

    def test_same_day_leave_is_valid(self):
        data = TestDataFactory.create_leave_request_data(startDate='04/03/2024', endDate='2024-03-04')
        self.assertTrue(LeaveFormDataSerializer(data=data).is_valid())

    def test_required_messages(self):
        data = TestDataFactory.create_leave_request_data(employeeId='', leaveTypeId=0, reason='x' * 501)
        serializer = LeaveFormDataSerializer(data=data)
        self.assertFalse(serializer.is_valid())
        self.assertEqual(serializer.errors['employeeId'], ['Employee is required'])
        self.assertEqual(serializer.errors['leaveTypeId'], ['Leave type is required'])
        self.assertEqual(serializer.errors['reason'], ['Reason must be less than 500 characters'])

    def test_invalid_date(self):
        serializer = LeaveFormDataSerializer(data=TestDataFactory.create_leave_request_data(startDate='soon'))
        self.assertFalse(serializer.is_valid())
        self.assertIn('startDate', serializer.errors)

    def test_leave_request_record(self):
        data = {
            'employeeId': 101,
            'leaveTypeId': 1,
            'startDate': '2024-03-04',
            'endDate': '2024-03-05',
            'totalDays': 2,
            'reason': 'Medical',
            'statusId': 1,
            'createById': 7,
            'createDate': '2024-03-01',
        }
        self.assertTrue(LeaveRequestSerializer(data=data).is_valid())
        data['statusId'] = 0
        serializer = LeaveRequestSerializer(data=data)
        self.assertFalse(serializer.is_valid())
        self.assertEqual(serializer.errors['statusId'], ['Status is required'])

    def test_leave_settings_defaults(self):
        data = {
            'companyId': '3',
            'maxAdvanceBookingDays': 90,
            'minAdvanceNoticeDays': 2,
            'workingHours': {'start': '09:00', 'end': '18:00'},
        }
        serializer = LeaveSettingsFormDataSerializer(data=data)
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data['weekendDays'], ['Saturday', 'Sunday'])
        self.assertEqual(serializer.validated_data['holidays'], [])
        self.assertTrue(serializer.validated_data['requireHRApproval'])

    def test_leave_settings_need_working_hours(self):
        data = {'companyId': '3', 'maxAdvanceBookingDays': 0, 'minAdvanceNoticeDays': 0,
                'workingHours': {'start': '09:00', 'end': ''}}
        serializer = LeaveSettingsFormDataSerializer(data=data)
        self.assertFalse(serializer.is_valid())
        self.assertEqual(serializer.errors['maxAdvanceBookingDays'], ['Maximum advance booking days must be at least 1'])
        self.assertEqual(serializer.errors['workingHours']['end'], ['Working hours end time is required'])

    def test_bulk_approval_needs_one_leave(self):
        serializer = BulkLeaveApprovalSerializer(data={'leaveIds': [], 'statusId': 2})
        self.assertFalse(serializer.is_valid())
        self.assertEqual(serializer.errors['leaveIds'], ['At least one leave must be selected'])


class LeaveServiceTests(SimpleTestCase):
    """Test leave day counting and summaries"""

    def test_weekends_are_skipped(self):
        # Friday to Monday
        self.assertEqual(calculate_leave_days(date(2024, 3, 1), date(2024, 3, 4)), 2)

    def test_holidays_are_skipped(self):
        self.assertEqual(calculate_leave_days(date(2024, 3, 1), date(2024, 3, 4), holidays=[date(2024, 3, 4)]), 1)

    def test_custom_weekend(self):
        self.assertEqual(calculate_leave_days(date(2024, 3, 1), date(2024, 3, 4), weekend_days=[]), 4)
        self.assertEqual(calculate_leave_days(date(2024, 3, 1), date(2024, 3, 4), weekend_days=['Friday']), 3)

    def test_single_day(self):
        self.assertEqual(calculate_leave_days(date(2024, 3, 4), date(2024, 3, 4)), 1)

    def test_end_before_start(self):
        with self.assertRaises(ValueError):
            calculate_leave_days(date(2024, 3, 4), date(2024, 3, 1))

    def test_summarize_leaves(self):
        leaves = [
            {'employeeId': '101', 'employeeName': 'Ann', 'statusName': 'Approved', 'totalDays': Decimal('2')},
            {'employeeId': '101', 'employeeName': 'Ann', 'statusName': 'pending', 'totalDays': Decimal('1.5')},
            {'employeeId': '102', 'employeeName': 'Bob', 'statusName': 'Rejected', 'totalDays': Decimal('3')},
            {'employeeId': '101', 'employeeName': 'Ann', 'statusName': 'Cancelled', 'totalDays': Decimal('1')},
        ]
        ann, bob = summarize_leaves(leaves)
        self.assertEqual(ann['totalLeaves'], 3)
        self.assertEqual(ann['approvedDays'], Decimal('2'))
        self.assertEqual(ann['pendingLeaves'], 1)
        self.assertEqual(ann['totalDays'], Decimal('4.5'))
        self.assertEqual(bob['rejectedLeaves'], 1)
        self.assertEqual(bob['approvedLeaves'], 0)


@override_settings(ERP_BACKEND=BACKEND_SETTINGS)
class LeaveAPITests(TestCase):
    """Test leave endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)

    def test_validate_schema(self):
        response = self.client.post(
            '/api/v1/hr/validate/leave-form/', TestDataFactory.create_leave_request_data(), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['valid'])
        self.assertEqual(response.data['data']['startDate'], '04/03/2024')

    def test_validate_schema_errors(self):
        data = TestDataFactory.create_leave_request_data(endDate='2024-03-01')
        response = self.client.post('/api/v1/hr/validate/leave-form/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('endDate', response.data)

    def test_unknown_schema(self):
        response = self.client.post('/api/v1/hr/validate/payslip/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('error', response.data)

    def test_save_leave_request(self):
        saved = TestDataFactory.create_backend_response({'result': 1, 'message': 'Saved', 'data': 55})
        with patch_backend(saved) as request:
            response = self.client.post(
                '/api/v1/hr/leave-requests/', TestDataFactory.create_leave_request_data(), format='json'
            )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        method, url = request.call_args[0]
        self.assertEqual(method, 'POST')
        self.assertTrue(url.endswith('/hr/leave-request/saveleaverequest'))
        sent = request.call_args[1]['json']
        self.assertEqual(sent['startDate'], '2024-03-04')
        self.assertEqual(sent['totalDays'], 3)
        self.assertEqual(request.call_args[1]['headers']['X-Company-Id'], '3')

        log = AuditLog.objects.get(action='leave_request_save')
        self.assertEqual(log.object_id, '55')
        self.assertEqual(log.user_id, '7')

    def test_leave_request_uses_company_calendar(self):
        # Friday 1 March to Monday 4 March
        cases = [
            ({}, 2),
            ({'weekendDays': ['Friday', 'Saturday']}, 2),
            ({'weekendDays': []}, 4),
            ({'weekendDays': [], 'holidays': ['04/03/2024']}, 3),
        ]
        for calendar, expected in cases:
            data = TestDataFactory.create_leave_request_data(startDate='2024-03-01', endDate='2024-03-04', **calendar)
            saved = TestDataFactory.create_backend_response({'result': 1, 'data': 55})
            with patch_backend(saved) as request:
                response = self.client.post('/api/v1/hr/leave-requests/', data, format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
            sent = request.call_args[1]['json']
            self.assertEqual(sent['totalDays'], expected, calendar)
            self.assertNotIn('weekendDays', sent)
            self.assertNotIn('holidays', sent)

    def test_leave_request_rejects_unknown_weekday(self):
        data = TestDataFactory.create_leave_request_data(weekendDays=['Caturday'])
        with patch_backend() as request:
            response = self.client.post('/api/v1/hr/leave-requests/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('weekendDays', response.data)
        request.assert_not_called()

    def test_invalid_leave_request_not_forwarded(self):
        data = TestDataFactory.create_leave_request_data(reason='')
        with patch_backend() as request:
            response = self.client.post('/api/v1/hr/leave-requests/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['reason'], ['Reason is required'])
        request.assert_not_called()
        self.assertFalse(AuditLog.objects.exists())

    def test_backend_rejection(self):
        rejected = TestDataFactory.create_backend_response({'result': -1, 'message': 'Overlapping leave'}, status_code=409)
        with patch_backend(rejected):
            response = self.client.post(
                '/api/v1/hr/leave-requests/', TestDataFactory.create_leave_request_data(), format='json'
            )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data, {'error': 'Overlapping leave'})
        self.assertFalse(AuditLog.objects.exists())

    def test_bulk_action(self):
        done = TestDataFactory.create_backend_response({'result': 1, 'message': 'Updated', 'data': 2})
        with patch_backend(done) as request:
            response = self.client.post(
                '/api/v1/hr/leave-requests/bulk-action/',
                {'leaveIds': [4, 9], 'statusId': 2, 'comments': 'ok'},
                format='json',
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(request.call_args[1]['json']['leaveIds'], [4, 9])
        log = AuditLog.objects.get(action='bulk_action')
        self.assertEqual(log.object_id, '4,9')
        self.assertEqual(log.changes['statusId'], 2)

    def test_bulk_action_needs_leaves(self):
        response = self.client.post(
            '/api/v1/hr/leave-requests/bulk-action/', {'leaveIds': [], 'statusId': 2}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_leave_days(self):
        payload = {'startDate': '01/03/2024', 'endDate': '08/03/2024', 'holidays': ['2024-03-05']}
        response = self.client.post('/api/v1/hr/leave-days/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'totalDays': 5})

    def test_leave_summary(self):
        payload = {'leaves': [
            {'employeeId': '101', 'employeeName': 'Ann', 'statusName': 'Approved', 'totalDays': 2},
            {'employeeId': '101', 'employeeName': 'Ann', 'statusName': 'Pending', 'totalDays': 1},
        ]}
        response = self.client.post('/api/v1/hr/leave-summary/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['totalLeaves'], 2)
        self.assertEqual(response.data[0]['approvedDays'], Decimal('2'))
