"""
Test suite for core
Tests: token identity, audit log API, tenant settings, shared fields, error envelope
"""
from datetime import date
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import serializers, status
from rest_framework.exceptions import ValidationError

from erp_portal.core.exceptions import api_exception_handler
from erp_portal.core.fields import ClientDateField, parse_client_date
from erp_portal.core.tenant import MandatoryFieldsMixin, flag_to_field_name, is_blank
from erp_portal.core.test_utils import BACKEND_SETTINGS, TestDataFactory, AuthenticatedAPIClient, patch_backend
from erp_portal.datagrid.table import TableError
from erp_portal.proxy.client import BackendAPIError


class VesselCallSerializer(MandatoryFieldsMixin, serializers.Serializer):
    vesselId = serializers.IntegerField()
    portId = serializers.IntegerField(required=False)
    remarks = serializers.CharField(required=False, allow_blank=True)


class SharedFieldTests(SimpleTestCase):
    """Test shared serializer fields and mandatory field flags"""

    def test_parse_client_date(self):
        self.assertEqual(parse_client_date('2024-03-10'), date(2024, 3, 10))
        self.assertEqual(parse_client_date('10/03/2024'), date(2024, 3, 10))
        self.assertEqual(parse_client_date(date(2024, 3, 10)), date(2024, 3, 10))
        with self.assertRaises(ValueError):
            parse_client_date('')

    def test_client_date_field(self):
        field = ClientDateField()
        self.assertEqual(field.to_internal_value('2024-03-10'), date(2024, 3, 10))
        self.assertEqual(field.to_representation(date(2024, 3, 10)), '10/03/2024')
        with self.assertRaises(ValidationError):
            field.to_internal_value('tomorrow')

    def test_flag_to_field_name(self):
        self.assertEqual(flag_to_field_name('m_GstId'), 'gstId')
        self.assertEqual(flag_to_field_name('m_Remarks'), 'remarks')
        self.assertEqual(flag_to_field_name('PortId'), 'portId')

    def test_is_blank(self):
        for value in (None, '', '  ', 0, [], {}):
            self.assertTrue(is_blank(value), value)
        for value in ('x', 5, False, True):
            self.assertFalse(is_blank(value), value)

    def test_mandatory_flags(self):
        context = {'mandatory_fields': {'m_PortId': True, 'm_Remarks': True, 'm_VesselId': False}}
        serializer = VesselCallSerializer(data={'vesselId': 1, 'portId': 0, 'remarks': ' '}, context=context)
        self.assertFalse(serializer.is_valid())
        self.assertEqual(set(serializer.errors), {'portId', 'remarks'})

        serializer = VesselCallSerializer(data={'vesselId': 1, 'portId': 4, 'remarks': 'ok'}, context=context)
        self.assertTrue(serializer.is_valid(), serializer.errors)

    def test_no_flags_means_schema_rules_only(self):
        self.assertTrue(VesselCallSerializer(data={'vesselId': 1}).is_valid())


class ExceptionHandlerTests(SimpleTestCase):
    """Test the error envelope"""

    def test_backend_error(self):
        response = api_exception_handler(BackendAPIError('Backend service is unavailable', status_code=503), {})
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.data, {'error': 'Backend service is unavailable'})

    def test_table_error(self):
        response = api_exception_handler(TableError('Unknown column: price'), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Unknown column: price'})

    def test_other_errors_use_drf_handler(self):
        response = api_exception_handler(ValidationError({'qty': ['Required']}), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'qty': ['Required']})


@override_settings(ERP_BACKEND=BACKEND_SETTINGS)
class AuthenticationTests(TestCase):
    """Test backend token identity"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_requires_token(self):
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_malformed_token(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cookie_token(self):
        TestDataFactory.create_audit_log(company_id='3')
        self.client.cookies['auth-token'] = TestDataFactory.create_token(user_id=7, company_id=3)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_company_header_overrides_claim(self):
        TestDataFactory.create_audit_log(company_id='9')
        self.client.authenticate_identity(user_id=7, company_id=3)
        self.assertEqual(self.client.get('/api/v1/audit-logs/').data['count'], 0)
        response = self.client.get('/api/v1/audit-logs/', HTTP_X_COMPANY_ID='9')
        self.assertEqual(response.data['count'], 1)


@override_settings(ERP_BACKEND=BACKEND_SETTINGS)
class AuditLogAPITests(TestCase):
    """Test audit log list and detail"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)
        self.save = TestDataFactory.create_audit_log(
            company_id='3', action='checklist_save', model_name='JobOrderHd', object_reference='JO-0001'
        )
        TestDataFactory.create_audit_log(company_id='3', action='leave_request_save', model_name='LeaveRequest')
        TestDataFactory.create_audit_log(company_id='3', action='layout_update', model_name='GridLayout')
        self.other = TestDataFactory.create_audit_log(company_id='4', action='checklist_save')

    def test_list_is_company_scoped(self):
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertTrue(all(row['company_id'] == '3' for row in response.data['results']))

    def test_filters(self):
        response = self.client.get('/api/v1/audit-logs/', {'action': 'checklist_save'})
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/audit-logs/', {'model': 'joborderhd'})
        self.assertEqual(response.data['results'][0]['id'], self.save.pk)
        response = self.client.get('/api/v1/audit-logs/', {'reference': 'jo-00'})
        self.assertEqual(response.data['count'], 1)

    def test_invalid_filter(self):
        response = self.client.get('/api/v1/audit-logs/', {'date_from': 'last week'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pagination(self):
        response = self.client.get('/api/v1/audit-logs/', {'limit': 2})
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(response.data['next'], 2)
        self.assertIsNone(response.data['previous'])

        response = self.client.get('/api/v1/audit-logs/', {'page': 'two'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_detail(self):
        response = self.client.get(f'/api/v1/audit-logs/{self.save.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['model_name'], 'JobOrderHd')

        response = self.client.get(f'/api/v1/audit-logs/{self.other.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


@override_settings(ERP_BACKEND=BACKEND_SETTINGS)
class TenantSettingsAPITests(TestCase):
    """Test decimal, mandatory and visible field settings"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)

    def test_decimals_merge_defaults_and_cache(self):
        row = {'result': 1, 'data': [{'amtDec': 3, 'locAmtDec': 2, 'priceDec': None}]}
        with patch_backend(TestDataFactory.create_backend_response(row)) as request:
            response = self.client.get('/api/v1/settings/decimals/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['amtDec'], 3)
        self.assertEqual(response.data['priceDec'], 2)
        self.assertEqual(response.data['exhRateDec'], 2)
        self.assertTrue(request.call_args[0][1].endswith('/setting/getdecsetting'))

        with patch_backend() as request:
            response = self.client.get('/api/v1/settings/decimals/')
        request.assert_not_called()
        self.assertEqual(response.data['amtDec'], 3)

    def test_decimals_fall_back_when_backend_fails(self):
        failed = TestDataFactory.create_backend_response({'message': 'boom'}, status_code=500)
        with patch_backend(failed):
            response = self.client.get('/api/v1/settings/decimals/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['amtDec'], 2)

        row = {'result': 1, 'data': [{'amtDec': 4}]}
        with patch_backend(TestDataFactory.create_backend_response(row)) as request:
            response = self.client.get('/api/v1/settings/decimals/')
        self.assertEqual(request.call_count, 1)
        self.assertEqual(response.data['amtDec'], 4)

    def test_mandatory_fields(self):
        flags = {'result': 1, 'data': [{'m_GstId': True, 'm_Remarks': False}]}
        with patch_backend(TestDataFactory.create_backend_response(flags)) as request:
            response = self.client.get('/api/v1/settings/mandatory-fields/25/1/')
        self.assertEqual(response.data, {'m_GstId': True, 'm_Remarks': False})
        self.assertTrue(request.call_args[0][1].endswith('/setting/getmandatoryfieldsbyid/25/1'))

        # Cached per screen
        with patch_backend(TestDataFactory.create_backend_response({'data': []})) as request:
            self.client.get('/api/v1/settings/mandatory-fields/25/1/')
            response = self.client.get('/api/v1/settings/mandatory-fields/25/2/')
        self.assertEqual(request.call_count, 1)
        self.assertEqual(response.data, {})

    def test_visible_fields(self):
        flags = {'result': 1, 'data': {'m_JobOrderNo': True}}
        with patch_backend(TestDataFactory.create_backend_response(flags)) as request:
            response = self.client.get('/api/v1/settings/visible-fields/25/1/')
        self.assertEqual(response.data, {'m_JobOrderNo': True})
        self.assertTrue(request.call_args[0][1].endswith('/setting/getvisiblefieldsbyid/25/1'))

    def test_backend_error_envelope(self):
        failed = TestDataFactory.create_backend_response({'message': 'Screen not found'}, status_code=404)
        with patch_backend(failed):
            response = self.client.get('/api/v1/settings/visible-fields/25/9/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Screen not found'})


class ClearPortalCacheCommandTests(SimpleTestCase):
    """Test the clear_portal_cache management command"""

    def test_clears_both_groups(self):
        out = StringIO()
        call_command('clear_portal_cache', stdout=out)
        self.assertIn('Tenant settings cache cleared', out.getvalue())
        self.assertIn('Dashboard cache cleared', out.getvalue())

    def test_only_dashboard(self):
        out = StringIO()
        call_command('clear_portal_cache', '--only', 'dashboard', stdout=out)
        self.assertNotIn('Tenant settings', out.getvalue())
        self.assertIn('Dashboard cache cleared', out.getvalue())
