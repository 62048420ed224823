"""
Test utilities and factories for creating test data
"""
from decimal import Decimal
from unittest import mock
import json
import random
import string

import requests
from rest_framework.test import APIClient
from rest_framework_simplejwt.backends import TokenBackend

from erp_portal.core.models import AuditLog

TEST_SIGNING_KEY = 'erp-portal-test-signing-key'

# Backend settings used with override_settings(ERP_BACKEND=...)
BACKEND_SETTINGS = {
    'BASE_URL': 'https://erp.example.test/api',
    'REGISTRATION_ID': 'REG-01',
    'TIMEOUT': 5,
    'AUTH_COOKIE': 'auth-token',
    'TOKEN_ALGORITHM': 'HS256',
}


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_token(user_id=1, company_id=1, **claims):
        """Encode a backend-style JWT carrying userId / companyId claims"""
        payload = {'userId': user_id, 'companyId': company_id}
        payload.update(claims)
        return TokenBackend('HS256', signing_key=TEST_SIGNING_KEY).encode(payload)

    @staticmethod
    def create_audit_log(company_id='1', user_id='1', action='create', model_name='Invoice',
                         object_id=None, object_reference=None):
        """Create a test audit log entry"""
        return AuditLog.objects.create(
            company_id=company_id,
            user_id=user_id,
            action=action,
            model_name=model_name,
            object_id=object_id or TestDataFactory.random_string(6),
            object_reference=object_reference,
        )

    @staticmethod
    def create_detail_row(qty='2', unit_price='10.00', gst_percentage='9', **extra):
        """Create an invoice detail row payload"""
        row = {
            'itemNo': extra.pop('itemNo', 1),
            'qty': Decimal(qty),
            'billQTY': Decimal(qty),
            'unitPrice': Decimal(unit_price),
            'totAmt': Decimal('0'),
            'totLocalAmt': Decimal('0'),
            'totCtyAmt': Decimal('0'),
            'gstPercentage': Decimal(gst_percentage),
            'gstAmt': Decimal('0'),
            'gstLocalAmt': Decimal('0'),
            'gstCtyAmt': Decimal('0'),
        }
        row.update(extra)
        return row

    @staticmethod
    def create_allocation_row(doc_bal_amt, doc_exh_rate='1', item_no=1, **extra):
        """Create a receipt/payment allocation row payload"""
        row = {
            'itemNo': item_no,
            'documentNo': f'INV-{item_no:04d}',
            'docBalAmt': Decimal(doc_bal_amt),
            'docExhRate': Decimal(doc_exh_rate),
            'allocAmt': Decimal('0'),
            'allocLocalAmt': Decimal('0'),
            'docAllocAmt': Decimal('0'),
            'docAllocLocalAmt': Decimal('0'),
            'exhGainLoss': Decimal('0'),
            'centDiff': Decimal('0'),
        }
        row.update(extra)
        return row

    @staticmethod
    def create_leave_request_data(**overrides):
        """Create a valid leave request payload"""
        data = {
            'employeeId': '101',
            'leaveTypeId': 1,
            'leaveTypeName': 'Annual Leave',
            'startDate': '2024-03-04',
            'endDate': '2024-03-06',
            'totalDays': 3,
            'reason': 'Family function out of town',
            'notes': '',
        }
        data.update(overrides)
        return data

    @staticmethod
    def create_backend_response(payload=None, status_code=200, content_type='application/json', content=None):
        """Build a requests.Response as the ERP backend would send it"""
        response = requests.Response()
        response.status_code = status_code
        response.headers['Content-Type'] = content_type
        if content is None:
            content = json.dumps(payload if payload is not None else {}, default=str).encode()
        response._content = content
        response.encoding = 'utf-8'
        return response


def patch_backend(*responses, side_effect=None):
    """Patch requests.Session.request with canned backend responses"""
    if side_effect is None:
        side_effect = list(responses)
    return mock.patch('requests.Session.request', side_effect=side_effect)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_identity(self, user_id=1, company_id=1):
        """Authenticate the client with a backend token"""
        self.token = TestDataFactory.create_token(user_id=user_id, company_id=company_id)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {self.token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
        self.cookies.clear()
