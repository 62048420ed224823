"""
Test suite for the job order checklist
Tests: schema rules, tenant mandatory fields, validated saves
"""
from django.core.cache import cache
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status

from erp_portal.core.models import AuditLog
from erp_portal.core.test_utils import BACKEND_SETTINGS, TestDataFactory, AuthenticatedAPIClient, patch_backend
from erp_portal.operations.serializers import (
    DebitNoteDtSerializer,
    DebitNoteHdSerializer,
    JobOrderHdSerializer,
    OtherServiceSerializer,
)


def job_order_data(**overrides):
    data = {
        'jobOrderId': 0,
        'jobOrderNo': 'JO-0001',
        'jobOrderDate': '2024-03-10',
        'customerId': 5,
        'currencyId': 1,
        'exhRate': 1.35,
        'vesselId': 9,
        'vesselDistance': 12,
        'portId': 2,
        'addressId': 3,
        'contactId': 4,
        'statusId': 1,
        'isTaxable': False,
        'remarks': '',
    }
    data.update(overrides)
    return data


def debit_note_detail_data(**overrides):
    data = {
        'debitNoteId': 12,
        'debitNoteNo': 'DN-0012',
        'itemNo': 1,
        'taskId': 3,
        'chargeId': 8,
        'glId': 40,
        'qty': 2,
        'unitPrice': 50,
        'totLocalAmt': 135,
        'totAmt': 100,
        'gstId': 1,
        'gstPercentage': 9,
        'gstAmt': 9,
        'totAftGstAmt': 109,
        'editVersion': 0,
        'isServiceCharge': False,
        'serviceCharge': 0,
    }
    data.update(overrides)
    return data


class JobOrderSchemaTests(SimpleTestCase):
    """Test job order header rules"""

    def test_valid_job_order(self):
        serializer = JobOrderHdSerializer(data=job_order_data())
        self.assertTrue(serializer.is_valid(), serializer.errors)

    def test_gst_required_when_taxable(self):
        for gst_id in (None, 0):
            data = job_order_data(isTaxable=True)
            if gst_id is not None:
                data['gstId'] = gst_id
            serializer = JobOrderHdSerializer(data=data)
            self.assertFalse(serializer.is_valid())
            self.assertEqual(serializer.errors['gstId'], ['GST is required when taxable is enabled'])

        self.assertTrue(JobOrderHdSerializer(data=job_order_data(isTaxable=True, gstId=2)).is_valid())

    def test_field_messages(self):
        data = job_order_data(customerId=0, jobOrderNo='J' * 21)
        del data['jobOrderDate']
        serializer = JobOrderHdSerializer(data=data)
        self.assertFalse(serializer.is_valid())
        self.assertEqual(serializer.errors['customerId'], ['Customer is required'])
        self.assertEqual(serializer.errors['jobOrderNo'], ['Job Order No must be less than 20 characters'])
        self.assertEqual(serializer.errors['jobOrderDate'], ['Job Order Date is required'])

    def test_tenant_mandatory_fields(self):
        context = {'mandatory_fields': {'m_VoyageId': True, 'm_Remarks': False, 'm_Unknown': True}}
        serializer = JobOrderHdSerializer(data=job_order_data(), context=context)
        self.assertFalse(serializer.is_valid())
        self.assertEqual(list(serializer.errors), ['voyageId'])

        serializer = JobOrderHdSerializer(data=job_order_data(voyageId=7), context=context)
        self.assertTrue(serializer.is_valid(), serializer.errors)


class DebitNoteSchemaTests(SimpleTestCase):
    """Test debit note rules"""

    def test_service_charge_required_when_enabled(self):
        serializer = DebitNoteDtSerializer(data=debit_note_detail_data(isServiceCharge=True))
        self.assertFalse(serializer.is_valid())
        self.assertEqual(
            serializer.errors['serviceCharge'],
            ['Service charge amount is required when service charge is enabled'],
        )
        data = debit_note_detail_data(isServiceCharge=True, serviceCharge=15)
        self.assertTrue(DebitNoteDtSerializer(data=data).is_valid())

    def test_nested_details_are_validated(self):
        header = {
            'debitNoteId': 12,
            'debitNoteNo': 'DN-0012',
            'jobOrderId': 1,
            'itemNo': 1,
            'taskId': 3,
            'serviceId': 2,
            'chargeId': 8,
            'currencyId': 1,
            'exhRate': 1.35,
            'totAmt': 100,
            'gstAmt': 9,
            'totAftGstAmt': 109,
            'glId': 40,
            'taxableAmt': 100,
            'nonTaxableAmt': 0,
            'isLocked': False,
            'editVersion': 0,
            'data_details': [debit_note_detail_data(), debit_note_detail_data(itemNo=2, gstId=0)],
        }
        serializer = DebitNoteHdSerializer(data=header)
        self.assertFalse(serializer.is_valid())
        self.assertEqual(serializer.errors['data_details'][1]['gstId'], ['GST ID is required'])

    def test_other_service_needs_date(self):
        data = {
            'otherServiceId': 0,
            'jobOrderId': 1,
            'jobOrderNo': 'JO-0001',
            'taskId': 3,
            'chargeId': 8,
            'glId': 40,
            'serviceProvider': '',
            'quantity': 1,
            'amount': -5,
            'uomId': 1,
            'statusId': 1,
            'debitNoteId': 0,
            'editVersion': 0,
        }
        serializer = OtherServiceSerializer(data=data)
        self.assertFalse(serializer.is_valid())
        self.assertEqual(serializer.errors['date'], ['Service Date is required'])
        self.assertEqual(serializer.errors['serviceProvider'], ['Service Provider is required'])
        self.assertEqual(serializer.errors['amount'], ['Amount must be 0 or greater'])


@override_settings(ERP_BACKEND=BACKEND_SETTINGS)
class ChecklistAPITests(TestCase):
    """Test checklist validate and save endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)

    def test_validate_endpoint(self):
        response = self.client.post('/api/v1/operations/validate/job-order/', job_order_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['jobOrderDate'], '10/03/2024')

        response = self.client.post(
            '/api/v1/operations/validate/job-order/', job_order_data(isTaxable=True), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('gstId', response.data)

    def test_unknown_schema(self):
        response = self.client.post('/api/v1/operations/validate/crew-sign-on/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.post('/api/v1/operations/crew-sign-on/save/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_save_applies_mandatory_fields(self):
        flags = TestDataFactory.create_backend_response({'result': 1, 'data': [{'m_VoyageId': True}]})
        with patch_backend(flags) as request:
            response = self.client.post(
                '/api/v1/operations/job-order/save/', job_order_data(), format='json',
                HTTP_X_MODULE_ID='25', HTTP_X_TRANSACTION_ID='1',
            )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('voyageId', response.data)
        self.assertEqual(request.call_count, 1)
        self.assertTrue(request.call_args[0][1].endswith('/setting/getmandatoryfieldsbyid/25/1'))
        self.assertFalse(AuditLog.objects.exists())

    def test_save_forwards_to_backend(self):
        flags = TestDataFactory.create_backend_response({'result': 1, 'data': [{'m_VoyageId': True}]})
        saved = TestDataFactory.create_backend_response({'result': 1, 'message': 'Saved', 'data': 101})
        with patch_backend(flags, saved) as request:
            response = self.client.post(
                '/api/v1/operations/job-order/save/', job_order_data(voyageId=7), format='json',
                HTTP_X_MODULE_ID='25', HTTP_X_TRANSACTION_ID='1',
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], 101)

        method, url = request.call_args[0]
        self.assertEqual(method, 'POST')
        self.assertTrue(url.endswith('/operations/savejoborder'))
        sent = request.call_args[1]['json']
        self.assertEqual(sent['exhRate'], 1.35)
        self.assertEqual(sent['jobOrderDate'], '2024-03-10')
        self.assertEqual(request.call_args[1]['headers']['X-Module-Id'], '25')

        log = AuditLog.objects.get(action='checklist_save')
        self.assertEqual(log.model_name, 'JobOrderHd')
        self.assertEqual(log.object_id, '101')
        self.assertEqual(log.object_reference, 'JO-0001')

    def test_save_without_screen_ids_skips_mandatory_lookup(self):
        saved = TestDataFactory.create_backend_response({'result': 1, 'data': 5})
        data = debit_note_detail_data()
        with patch_backend(saved) as request:
            response = self.client.post('/api/v1/operations/debit-note-detail/save/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(request.call_count, 1)
        self.assertTrue(request.call_args[0][1].endswith('/operations/savedebitnotedetails'))
        self.assertEqual(AuditLog.objects.get().object_id, '12')

    def test_backend_failure(self):
        failed = TestDataFactory.create_backend_response({'result': -1, 'message': 'Job order is locked'}, status_code=400)
        with patch_backend(failed):
            response = self.client.post('/api/v1/operations/job-order/save/', job_order_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Job order is locked'})
        self.assertFalse(AuditLog.objects.exists())
