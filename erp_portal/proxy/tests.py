"""
Test suite for the backend proxy
Tests: BackendClient headers and error mapping, /api/proxy/ forwarding, auditing
"""
from unittest import mock

import requests
from django.test import TestCase, override_settings
from rest_framework import status

from erp_portal.core.models import AuditLog
from erp_portal.core.test_utils import BACKEND_SETTINGS, TestDataFactory, AuthenticatedAPIClient, patch_backend
from erp_portal.proxy.client import BackendAPIError, BackendClient, unwrap_data


@override_settings(ERP_BACKEND=BACKEND_SETTINGS)
class BackendClientTests(TestCase):
    """Test BackendClient in isolation"""

    def setUp(self):
        self.client_under_test = BackendClient(token='abc', company_id=3, user_id=7)

    def test_build_headers(self):
        headers = self.client_under_test.build_headers(module_id=25, transaction_id=1)
        self.assertEqual(headers['Authorization'], 'Bearer abc')
        self.assertEqual(headers['X-Reg-Id'], 'REG-01')
        self.assertEqual(headers['X-Company-Id'], '3')
        self.assertEqual(headers['X-User-Id'], '7')
        self.assertEqual(headers['X-Module-Id'], '25')
        self.assertEqual(headers['X-Transaction-Id'], '1')

    def test_build_headers_omits_empty_values(self):
        headers = BackendClient(token=None, company_id=None, user_id=7).build_headers()
        self.assertNotIn('Authorization', headers)
        self.assertNotIn('X-Company-Id', headers)
        self.assertNotIn('X-Module-Id', headers)
        self.assertEqual(headers['X-User-Id'], '7')

    def test_get_data_joins_base_url(self):
        with patch_backend(TestDataFactory.create_backend_response({'result': 1, 'data': [1]})) as request:
            payload = self.client_under_test.get_data('/setting/getdecsetting', params={'a': 1})
        self.assertEqual(payload['data'], [1])
        args, kwargs = request.call_args
        self.assertEqual(args[0], 'GET')
        self.assertEqual(args[1], 'https://erp.example.test/api/setting/getdecsetting')
        self.assertEqual(kwargs['timeout'], 5)
        self.assertEqual(kwargs['params'], {'a': 1})

    def test_error_status_carries_backend_message(self):
        response = TestDataFactory.create_backend_response({'message': 'Period closed'}, status_code=422)
        with patch_backend(response):
            with self.assertRaises(BackendAPIError) as ctx:
                self.client_under_test.save_data('/ar/saveinvoice', {'id': 1})
        self.assertEqual(ctx.exception.status_code, 422)
        self.assertEqual(ctx.exception.message, 'Period closed')

    def test_timeout_maps_to_504(self):
        with patch_backend(side_effect=requests.exceptions.Timeout()):
            with self.assertRaises(BackendAPIError) as ctx:
                self.client_under_test.get_data('/setting/getdecsetting')
        self.assertEqual(ctx.exception.status_code, 504)

    def test_connection_error_maps_to_502(self):
        with patch_backend(side_effect=requests.exceptions.ConnectionError('refused')):
            with self.assertRaises(BackendAPIError) as ctx:
                self.client_under_test.delete_data('/hr/leave-request/deleteleaverequest/1')
        self.assertEqual(ctx.exception.status_code, 502)

    @override_settings(ERP_BACKEND={})
    def test_missing_base_url_maps_to_500(self):
        with self.assertRaises(BackendAPIError) as ctx:
            BackendClient(token='abc').get_data('/anything')
        self.assertEqual(ctx.exception.status_code, 500)

    def test_unwrap_data(self):
        self.assertEqual(unwrap_data({'result': 1, 'data': {'a': 1}}), {'a': 1})
        self.assertEqual(unwrap_data({'result': 1, 'data': None}, default=[]), [])
        self.assertEqual(unwrap_data([1, 2]), [1, 2])


@override_settings(ERP_BACKEND=BACKEND_SETTINGS)
class ProxyViewTests(TestCase):
    """Test the /api/proxy/ route"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/proxy/setting/getdecsetting')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_get_forwards_headers_and_query(self):
        upstream = TestDataFactory.create_backend_response({'result': 1, 'data': [{'id': 1}]})
        with patch_backend(upstream) as request:
            response = self.client.get(
                '/api/proxy/ar/invoice/list?page=2&status=open',
                HTTP_X_MODULE_ID='25',
                HTTP_X_TRANSACTION_ID='1',
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], [{'id': 1}])

        args, kwargs = request.call_args
        self.assertEqual(args[0], 'GET')
        self.assertEqual(args[1], 'https://erp.example.test/api/ar/invoice/list')
        self.assertIn(('page', '2'), kwargs['params'])
        self.assertIn(('status', 'open'), kwargs['params'])
        headers = kwargs['headers']
        self.assertEqual(headers['Authorization'], f'Bearer {self.client.token}')
        self.assertEqual(headers['X-Company-Id'], '3')
        self.assertEqual(headers['X-User-Id'], '7')
        self.assertEqual(headers['X-Reg-Id'], 'REG-01')
        self.assertEqual(headers['X-Module-Id'], '25')
        self.assertEqual(headers['X-Transaction-Id'], '1')
        # GET is not audited
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_token_from_cookie(self):
        self.client.logout()
        token = TestDataFactory.create_token(user_id=9, company_id=4)
        self.client.cookies['auth-token'] = token
        with patch_backend(TestDataFactory.create_backend_response({'ok': True})) as request:
            response = self.client.get('/api/proxy/setting/getdecsetting')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        headers = request.call_args[1]['headers']
        self.assertEqual(headers['Authorization'], f'Bearer {token}')
        self.assertEqual(headers['X-Company-Id'], '4')

    def test_company_header_overrides_claim(self):
        with patch_backend(TestDataFactory.create_backend_response({'ok': True})) as request:
            self.client.get('/api/proxy/setting/getdecsetting', HTTP_X_COMPANY_ID='12')
        self.assertEqual(request.call_args[1]['headers']['X-Company-Id'], '12')

    def test_invalid_token_is_rejected(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-jwt')
        response = self.client.get('/api/proxy/setting/getdecsetting')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_post_forwards_body_and_audits(self):
        upstream = TestDataFactory.create_backend_response({'result': 1, 'data': {'invoiceId': 55}})
        with patch_backend(upstream) as request:
            response = self.client.post(
                '/api/proxy/ar/saveinvoice',
                {'invoiceNo': 'INV-1', 'totAmt': 100},
                format='json',
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        kwargs = request.call_args[1]
        self.assertIn(b'INV-1', kwargs['data'])
        self.assertEqual(kwargs['headers']['Content-Type'], 'application/json')

        log = AuditLog.objects.get()
        self.assertEqual(log.action, 'create')
        self.assertEqual(log.model_name, 'ar')
        self.assertEqual(log.object_reference, '/ar/saveinvoice')
        self.assertEqual(log.company_id, '3')
        self.assertEqual(log.user_id, '7')

    def test_backend_error_status_is_relayed(self):
        upstream = TestDataFactory.create_backend_response({'message': 'Not found'}, status_code=404)
        with patch_backend(upstream):
            response = self.client.delete('/api/proxy/ar/deleteinvoice/99')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Not found')
        # failed mutations are not audited
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_non_json_body_is_streamed_back(self):
        upstream = TestDataFactory.create_backend_response(
            content=b'%PDF-1.4 data', content_type='application/pdf'
        )
        with patch_backend(upstream):
            response = self.client.get('/api/proxy/report/invoice/1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertEqual(response.content, b'%PDF-1.4 data')

    def test_unreachable_backend_returns_502(self):
        with patch_backend(side_effect=requests.exceptions.ConnectionError('refused')):
            response = self.client.get('/api/proxy/setting/getdecsetting')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertIn('error', response.data)

    def test_timeout_returns_504(self):
        with patch_backend(side_effect=requests.exceptions.Timeout()):
            response = self.client.get('/api/proxy/setting/getdecsetting')
        self.assertEqual(response.status_code, status.HTTP_504_GATEWAY_TIMEOUT)

    def test_audit_failure_does_not_fail_request(self):
        upstream = TestDataFactory.create_backend_response({'result': 1})
        with patch_backend(upstream), \
                mock.patch('erp_portal.core.utils.AuditLog.objects.create', side_effect=RuntimeError('db down')):
            response = self.client.put('/api/proxy/ar/updateinvoice/5', {'a': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
