"""
Test suite for account calculations
Tests: rounding primitives, detail rows, adjustment totals, allocation, backend lookups
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status

from erp_portal.core.test_utils import BACKEND_SETTINGS, TestDataFactory, AuthenticatedAPIClient, patch_backend
from erp_portal.accounts.adjustments import (
    calculate_adjustment_header_totals,
    calculate_total_amounts,
    recalculate_detail_amounts,
)
from erp_portal.accounts.allocation import (
    apply_cent_diff_adjustment,
    auto_allocate_amounts,
    calculate_local_amount_and_gain_loss,
    calculate_manual_allocation,
    calculate_unallocated,
    reconcile_allocation,
    reset_allocation,
    validate_allocation,
)
from erp_portal.accounts.calculations import (
    Decimals,
    calculate_division_amount,
    calculate_multiplier_amount,
    calculate_percentage_amount,
    math_round,
    to_decimal,
)
from erp_portal.accounts.details import (
    handle_details_change,
    handle_qty_change,
    recalculate_details,
)
from erp_portal.core.fields import parse_client_date

TWO_PLACES = Decimals()


class CalculationPrimitiveTests(SimpleTestCase):
    """Test fixed-precision helpers"""

    def test_math_round_half_up(self):
        self.assertEqual(math_round(Decimal('2.345'), 2), Decimal('2.35'))
        self.assertEqual(math_round(Decimal('2.344'), 2), Decimal('2.34'))

    def test_math_round_negative_ties_go_toward_zero(self):
        self.assertEqual(math_round(Decimal('-2.345'), 2), Decimal('-2.34'))
        self.assertEqual(math_round('-0.125', 2), Decimal('-0.12'))
        self.assertEqual(math_round('-0.005', 2), Decimal('0'))
        self.assertEqual(math_round('-2.346', 2), Decimal('-2.35'))

    def test_math_round_float_input_keeps_literal_value(self):
        # 1.005 is stored as 1.00499999... in binary, the literal is what counts
        self.assertEqual(math_round(1.005, 2), Decimal('1.01'))

    def test_multiplier_amount(self):
        self.assertEqual(calculate_multiplier_amount(3, '12.345', 2), Decimal('37.04'))

    def test_percentage_amount(self):
        self.assertEqual(calculate_percentage_amount(100, 9, 2), Decimal('9.00'))

    def test_division_by_zero_returns_zero(self):
        self.assertEqual(calculate_division_amount(10, 0, 2), Decimal('0.00'))
        self.assertEqual(calculate_division_amount(10, 3, 3), Decimal('3.333'))

    def test_to_decimal(self):
        self.assertEqual(to_decimal(None), Decimal('0'))
        self.assertEqual(to_decimal(''), Decimal('0'))
        self.assertEqual(to_decimal('abc'), Decimal('0'))
        self.assertEqual(to_decimal(' 4.50 '), Decimal('4.50'))

    def test_decimals_from_payload_fills_defaults(self):
        decimals = Decimals.from_payload({'amtDec': 3, 'exhRateDec': 6})
        self.assertEqual(decimals.amt_dec, 3)
        self.assertEqual(decimals.exh_rate_dec, 6)
        self.assertEqual(decimals.loc_amt_dec, 2)
        self.assertEqual(decimals.as_dict()['amtDec'], 3)


class DetailRowTests(SimpleTestCase):
    """Test invoice detail row handlers"""

    def setUp(self):
        self.header = {'exhRate': Decimal('1.5'), 'ctyExhRate': Decimal('2')}

    def test_qty_change_cascades_to_local_country_and_gst(self):
        row = TestDataFactory.create_detail_row(qty='2', unit_price='10.00', gst_percentage='9')
        handle_qty_change(self.header, row, TWO_PLACES, visible={})

        self.assertEqual(row['totAmt'], Decimal('20.00'))
        self.assertEqual(row['totLocalAmt'], Decimal('30.00'))
        self.assertEqual(row['totCtyAmt'], Decimal('30.00'))
        self.assertEqual(row['gstAmt'], Decimal('1.80'))
        self.assertEqual(row['gstLocalAmt'], Decimal('2.70'))
        self.assertEqual(row['gstCtyAmt'], Decimal('2.70'))

    def test_separate_country_currency_uses_country_rate(self):
        row = TestDataFactory.create_detail_row(qty='2', unit_price='10.00', gst_percentage='9')
        handle_qty_change(self.header, row, TWO_PLACES, visible={'m_CtyCurr': True})

        self.assertEqual(row['totCtyAmt'], Decimal('40.00'))
        self.assertEqual(row['gstCtyAmt'], Decimal('3.60'))

    def test_qty_falls_back_when_bill_qty_missing(self):
        row = TestDataFactory.create_detail_row(qty='3', unit_price='4.00')
        row.pop('billQTY')
        handle_qty_change(self.header, row, TWO_PLACES)
        self.assertEqual(row['totAmt'], Decimal('12.00'))

    def test_bill_qty_zero_is_respected(self):
        row = TestDataFactory.create_detail_row(qty='3', unit_price='4.00', billQTY=Decimal('0'))
        handle_qty_change(self.header, row, TWO_PLACES)
        self.assertEqual(row['totAmt'], Decimal('0.00'))

    def test_without_exchange_rate_only_total_changes(self):
        row = TestDataFactory.create_detail_row(qty='2', unit_price='10.00')
        handle_qty_change({'exhRate': 0}, row, TWO_PLACES)
        self.assertEqual(row['totAmt'], Decimal('20.00'))
        self.assertEqual(row['totLocalAmt'], Decimal('0'))
        self.assertEqual(row['gstAmt'], Decimal('0'))

    def test_details_change(self):
        detail = {'amount': 100, 'gstAmount': 7}
        handle_details_change({'exhRate': '1.5', 'ctyExhRate': 0}, detail, TWO_PLACES)
        self.assertEqual(detail['localAmount'], Decimal('150.00'))
        self.assertEqual(detail['gstLocalAmount'], Decimal('10.50'))
        self.assertNotIn('ctyAmount', detail)

        handle_details_change({'exhRate': '1.5', 'ctyExhRate': '0.5'}, detail, TWO_PLACES)
        self.assertEqual(detail['ctyAmount'], Decimal('50.00'))
        self.assertEqual(detail['gstCtyAmount'], Decimal('3.50'))

    def test_recalculate_details_totals(self):
        rows = [
            TestDataFactory.create_detail_row(qty='2', unit_price='10.00', gst_percentage='9'),
            TestDataFactory.create_detail_row(qty='1', unit_price='5.555', gst_percentage='9', itemNo=2),
        ]
        rows, totals = recalculate_details({'exhRate': 1}, rows, TWO_PLACES, trigger='qty')

        self.assertEqual(rows[1]['totAmt'], Decimal('5.56'))
        self.assertEqual(totals['totAmt'], Decimal('25.56'))
        self.assertEqual(totals['gstAmt'], Decimal('2.30'))
        self.assertEqual(totals['totAmtAftGst'], Decimal('27.86'))
        self.assertEqual(totals['totLocalAmt'], Decimal('25.56'))

    def test_unknown_trigger(self):
        with self.assertRaises(ValueError):
            recalculate_details({}, [], TWO_PLACES, trigger='price')


class AdjustmentTests(SimpleTestCase):
    """Test AR/AP adjustment header totals"""

    def _rows(self, debit_first=True):
        debit = {
            'isDebit': True, 'totAmt': 100, 'gstAmt': 9, 'totLocalAmt': 150, 'gstLocalAmt': '13.5',
            'totCtyAmt': 0, 'gstCtyAmt': 0,
        }
        credit = {
            'isDebit': False, 'totAmt': 40, 'gstAmt': '3.6', 'totLocalAmt': 60, 'gstLocalAmt': '5.4',
            'totCtyAmt': 0, 'gstCtyAmt': 0,
        }
        if not debit_first:
            debit['isDebit'], credit['isDebit'] = False, True
        return [debit, credit]

    def test_debit_exceeding_credit(self):
        totals = calculate_adjustment_header_totals(self._rows(), TWO_PLACES, False)
        self.assertFalse(totals['isDebit'])
        self.assertEqual(totals['totAmt'], Decimal('60.00'))
        self.assertEqual(totals['gstAmt'], Decimal('5.40'))
        self.assertEqual(totals['totAmtAftGst'], Decimal('65.40'))
        self.assertEqual(totals['totLocalAmt'], Decimal('90.00'))
        self.assertEqual(totals['gstLocalAmt'], Decimal('8.10'))
        self.assertEqual(totals['totLocalAmtAftGst'], Decimal('98.10'))
        self.assertEqual(totals['totCtyAmt'], Decimal('0'))

    def test_credit_exceeding_debit_flags_and_returns_absolute_values(self):
        totals = calculate_adjustment_header_totals(self._rows(debit_first=False), TWO_PLACES, False)
        self.assertTrue(totals['isDebit'])
        self.assertEqual(totals['totAmt'], Decimal('60.00'))
        self.assertEqual(totals['totLocalAmtAftGst'], Decimal('98.10'))

    def test_empty_details(self):
        totals = calculate_adjustment_header_totals([], TWO_PLACES, True)
        self.assertFalse(totals['isDebit'])
        self.assertEqual(totals['totAmtAftGst'], Decimal('0'))

    def test_recalculate_detail_amounts(self):
        detail = {'itemNo': 1, 'totAmt': 100, 'gstPercentage': 7}
        result = recalculate_detail_amounts(detail, Decimal('1.25'), Decimal('3.1'), TWO_PLACES, True)
        self.assertEqual(result['gstAmt'], Decimal('7.00'))
        self.assertEqual(result['totLocalAmt'], Decimal('125.00'))
        self.assertEqual(result['gstLocalAmt'], Decimal('8.75'))
        self.assertEqual(result['totCtyAmt'], Decimal('310.00'))
        self.assertEqual(result['gstCtyAmt'], Decimal('21.70'))
        self.assertEqual(result['itemNo'], 1)
        self.assertNotIn('gstAmt', detail)

        without_country = recalculate_detail_amounts(detail, Decimal('1.25'), Decimal('3.1'), TWO_PLACES, False)
        self.assertEqual(without_country['totCtyAmt'], Decimal('0'))

    def test_running_totals_round_each_step(self):
        totals = calculate_total_amounts([{'totAmt': '0.005'}, {'totAmt': '0.005'}], 2)
        self.assertEqual(totals['totAmt'], Decimal('0.02'))


class AllocationTests(SimpleTestCase):
    """Test receipt/payment allocation helpers"""

    def _rows(self):
        return [
            TestDataFactory.create_allocation_row('100', '1.2', item_no=1),
            TestDataFactory.create_allocation_row('-30', '1.2', item_no=2),
            TestDataFactory.create_allocation_row('50', '1.1', item_no=3),
        ]

    def test_validate_allocation(self):
        self.assertFalse(validate_allocation([]))
        self.assertFalse(validate_allocation([TestDataFactory.create_allocation_row('0')]))
        self.assertTrue(validate_allocation(self._rows()))

    def test_auto_allocation_takes_credit_notes_first(self):
        rows, tot_amt = auto_allocate_amounts(self._rows(), Decimal('100'), TWO_PLACES)
        self.assertEqual([row['allocAmt'] for row in rows], [Decimal('100'), Decimal('-30'), Decimal('30')])
        self.assertEqual(tot_amt, Decimal('100'))

    def test_auto_allocation_with_zero_total_allocates_everything(self):
        rows, tot_amt = auto_allocate_amounts(self._rows(), 0, TWO_PLACES)
        self.assertEqual([row['allocAmt'] for row in rows], [Decimal('100'), Decimal('-30'), Decimal('50')])
        self.assertEqual(tot_amt, Decimal('120.00'))

    def test_manual_allocation_capped_by_remaining(self):
        rows = self._rows()
        rows[0]['allocAmt'] = Decimal('100')
        row, flag = calculate_manual_allocation(rows, 2, Decimal('80'), Decimal('120'), TWO_PLACES)
        self.assertEqual(row['allocAmt'], Decimal('20.00'))
        self.assertFalse(flag)

    def test_manual_allocation_capped_by_balance(self):
        row, flag = calculate_manual_allocation(self._rows(), 0, Decimal('150'), Decimal('500'), TWO_PLACES)
        self.assertEqual(row['allocAmt'], Decimal('100.00'))
        self.assertFalse(flag)

    def test_manual_allocation_nothing_left(self):
        rows = self._rows()
        rows[0]['allocAmt'] = Decimal('100')
        row, flag = calculate_manual_allocation(rows, 2, Decimal('10'), Decimal('100'), TWO_PLACES)
        self.assertEqual(row['allocAmt'], Decimal('0.00'))
        self.assertTrue(flag)

    def test_manual_allocation_needs_header_total(self):
        row, flag = calculate_manual_allocation(self._rows(), 0, Decimal('10'), 0, TWO_PLACES)
        self.assertEqual(row['allocAmt'], Decimal('0.00'))
        self.assertTrue(flag)

    def test_manual_allocation_credit_note(self):
        row, flag = calculate_manual_allocation(self._rows(), 1, Decimal('-50'), Decimal('100'), TWO_PLACES)
        self.assertEqual(row['allocAmt'], Decimal('-30.00'))
        self.assertFalse(flag)

    def test_local_amount_and_gain_loss(self):
        rows = [TestDataFactory.create_allocation_row('100', '1.2', allocAmt=Decimal('100'))]
        calculate_local_amount_and_gain_loss(rows, 0, Decimal('1.25'), TWO_PLACES)
        self.assertEqual(rows[0]['allocLocalAmt'], Decimal('125.00'))
        self.assertEqual(rows[0]['docAllocLocalAmt'], Decimal('120.00'))
        self.assertEqual(rows[0]['exhGainLoss'], Decimal('-5.00'))

    def test_calculate_unallocated(self):
        un_alloc, un_alloc_local = calculate_unallocated(100, 125, 60, 75, TWO_PLACES)
        self.assertEqual(un_alloc, Decimal('40.00'))
        self.assertEqual(un_alloc_local, Decimal('50.00'))

    def test_cent_diff_goes_to_last_allocated_row(self):
        rows = [
            TestDataFactory.create_allocation_row('50', '1.3333', item_no=1, allocAmt=Decimal('50')),
            TestDataFactory.create_allocation_row('50', '1.3333', item_no=2, allocAmt=Decimal('50')),
            TestDataFactory.create_allocation_row('10', '1.3333', item_no=3),
        ]
        totals = reconcile_allocation(
            rows, {'totAmt': 100, 'totLocalAmt': '133.33', 'exhRate': '1.3333'}, TWO_PLACES
        )
        self.assertEqual(rows[0]['centDiff'], Decimal('0'))
        self.assertEqual(rows[1]['centDiff'], Decimal('-0.01'))
        self.assertEqual(totals['allocTotLocalAmt'], Decimal('133.33'))
        self.assertEqual(totals['unAllocLocalAmt'], Decimal('0.00'))
        self.assertEqual(totals['centDiff'], Decimal('-0.01'))
        self.assertEqual(totals['exhGainLoss'], Decimal('0.01'))

    def test_cent_diff_ignored_beyond_tolerance(self):
        rows = [TestDataFactory.create_allocation_row('100', '1', allocAmt=Decimal('100'))]
        self.assertFalse(apply_cent_diff_adjustment(rows, 0, Decimal('-3.34'), TWO_PLACES))
        self.assertFalse(apply_cent_diff_adjustment(rows, Decimal('1'), Decimal('-0.01'), TWO_PLACES))

    def test_reset_allocation(self):
        rows, _ = auto_allocate_amounts(self._rows(), Decimal('100'), TWO_PLACES)
        rows, totals = reset_allocation(rows, {'totAmt': 100, 'totLocalAmt': 120, 'exhRate': '1.2'}, TWO_PLACES)
        self.assertTrue(all(row['allocAmt'] == 0 for row in rows))
        self.assertEqual(totals['allocTotAmt'], Decimal('0'))
        self.assertEqual(totals['unAllocAmt'], Decimal('100.00'))


class ParseClientDateTests(SimpleTestCase):

    def test_formats(self):
        self.assertEqual(parse_client_date('2024-03-10').isoformat(), '2024-03-10')
        self.assertEqual(parse_client_date('10/03/2024').isoformat(), '2024-03-10')
        self.assertEqual(parse_client_date('2024-03-10T08:00:00').isoformat(), '2024-03-10')
        with self.assertRaises(ValueError):
            parse_client_date('March 10')


class AccountCalculationAPITests(TestCase):
    """Test calculation endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)

    def test_recalculate_details_endpoint(self):
        payload = {
            'header': {'exhRate': 1.5, 'ctyExhRate': 2},
            'details': [{'itemNo': 1, 'qty': 2, 'unitPrice': 10, 'gstPercentage': 9}],
            'visible': {'m_CtyCurr': True},
            'trigger': 'qty',
        }
        response = self.client.post('/api/v1/accounts/details/recalculate/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        row = response.data['details'][0]
        self.assertEqual(row['totAmt'], Decimal('20.00'))
        self.assertEqual(row['totCtyAmt'], Decimal('40.00'))
        self.assertEqual(response.data['totals']['totAmtAftGst'], Decimal('21.80'))

    def test_recalculate_details_rejects_unknown_trigger(self):
        response = self.client.post(
            '/api/v1/accounts/details/recalculate/',
            {'header': {}, 'details': [], 'trigger': 'price'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('trigger', response.data)

    def test_decimals_from_payload(self):
        payload = {
            'header': {'exhRate': 1},
            'details': [{'qty': 1, 'unitPrice': '1.2345'}],
            'decimals': {'amtDec': 3},
        }
        response = self.client.post('/api/v1/accounts/details/recalculate/', payload, format='json')
        self.assertEqual(response.data['details'][0]['totAmt'], Decimal('1.235'))

    def test_adjustment_totals_endpoint(self):
        payload = {
            'details': [
                {'isDebit': False, 'totAmt': 100, 'gstAmt': 9},
                {'isDebit': True, 'totAmt': 40, 'gstAmt': 3.6},
            ],
        }
        response = self.client.post('/api/v1/accounts/adjustments/totals/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['isDebit'])
        self.assertEqual(response.data['totAmtAftGst'], Decimal('65.40'))

    def test_adjustment_recalculate_endpoint(self):
        payload = {
            'details': [{'isDebit': True, 'totAmt': 100, 'gstPercentage': 7}],
            'exhRate': '1.25',
            'ctyExhRate': '3.1',
            'hasCountryCurrency': True,
        }
        response = self.client.post('/api/v1/accounts/adjustments/recalculate/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['details'][0]['gstCtyAmt'], Decimal('21.70'))
        self.assertEqual(response.data['totals']['totLocalAmtAftGst'], Decimal('133.75'))

    def test_auto_allocation_endpoint(self):
        payload = {
            'header': {'totAmt': 0, 'totLocalAmt': 0, 'exhRate': 1},
            'details': [
                {'itemNo': 1, 'docBalAmt': 100, 'docExhRate': 1},
                {'itemNo': 2, 'docBalAmt': 20, 'docExhRate': 1},
            ],
        }
        response = self.client.post('/api/v1/accounts/allocations/auto/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totals']['totAmt'], Decimal('120.00'))
        self.assertEqual(response.data['totals']['allocTotLocalAmt'], Decimal('120.00'))
        self.assertEqual(response.data['totals']['unAllocLocalAmt'], Decimal('0.00'))

    def test_auto_allocation_without_balances(self):
        payload = {'header': {'totAmt': 10}, 'details': []}
        response = self.client.post('/api/v1/accounts/allocations/auto/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_manual_allocation_endpoint(self):
        payload = {
            'header': {'totAmt': 100, 'totLocalAmt': 100, 'exhRate': 1},
            'details': [
                {'itemNo': 1, 'docBalAmt': 100, 'docExhRate': 1, 'allocAmt': 100},
                {'itemNo': 2, 'docBalAmt': 20, 'docExhRate': 1, 'allocAmt': 0},
            ],
            'itemNo': 2,
            'allocAmt': 10,
        }
        response = self.client.post('/api/v1/accounts/allocations/manual/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['wasAutoSetToZero'])
        self.assertIn('message', response.data)
        self.assertEqual(response.data['details'][1]['allocAmt'], Decimal('0.00'))

    def test_manual_allocation_unknown_item(self):
        payload = {'header': {'totAmt': 100}, 'details': [{'itemNo': 1, 'docBalAmt': 5}], 'itemNo': 9, 'allocAmt': 1}
        response = self.client.post('/api/v1/accounts/allocations/manual/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('itemNo', response.data)

    def test_reset_allocation_endpoint(self):
        payload = {
            'header': {'totAmt': 50, 'totLocalAmt': 50, 'exhRate': 1},
            'details': [{'itemNo': 1, 'docBalAmt': 100, 'docExhRate': 1, 'allocAmt': 50}],
        }
        response = self.client.post('/api/v1/accounts/allocations/reset/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['details'][0]['allocAmt'], Decimal('0'))
        self.assertEqual(response.data['totals']['unAllocAmt'], Decimal('50.00'))

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.post('/api/v1/accounts/adjustments/totals/', {'details': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


@override_settings(ERP_BACKEND=BACKEND_SETTINGS)
class AccountLookupAPITests(TestCase):
    """Test backend-assisted lookups"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)

    def test_exchange_rate_rounded_to_tenant_decimals(self):
        decimals = TestDataFactory.create_backend_response({'result': 1, 'data': [{'exhRateDec': 4}]})
        rate = TestDataFactory.create_backend_response({'result': 1, 'data': 1.234567})
        with patch_backend(decimals, rate) as request:
            response = self.client.get('/api/v1/accounts/exchange-rate/?currencyId=2&accountDate=10/03/2024')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['exhRate'], Decimal('1.2346'))
        self.assertEqual(response.data['ctyExhRate'], Decimal('1.2346'))
        self.assertTrue(request.call_args[0][1].endswith('/setting/getexchangerate/2/2024-03-10'))

    def test_exchange_rate_with_separate_country_currency(self):
        decimals = TestDataFactory.create_backend_response({'result': 1, 'data': []})
        rate = TestDataFactory.create_backend_response({'result': 1, 'data': 1.5})
        local_rate = TestDataFactory.create_backend_response({'result': 1, 'data': 0.75})
        with patch_backend(decimals, rate, local_rate) as request:
            response = self.client.get(
                '/api/v1/accounts/exchange-rate/?currencyId=2&accountDate=2024-03-10&separateCountryCurrency=true'
            )
        self.assertEqual(response.data['exhRate'], Decimal('1.50'))
        self.assertEqual(response.data['ctyExhRate'], Decimal('0.75'))
        self.assertIn('/setting/getexchangeratelocal/2/2024-03-10', request.call_args[0][1])

    def test_exchange_rate_invalid_date(self):
        response = self.client.get('/api/v1/accounts/exchange-rate/?currencyId=2&accountDate=yesterday')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('accountDate', response.data)

    def test_gst_percentage(self):
        with patch_backend(TestDataFactory.create_backend_response({'result': 1, 'data': 9})) as request:
            response = self.client.get('/api/v1/accounts/gst-percentage/?gstId=4&accountDate=01/02/2024')
        self.assertEqual(response.data['gstPercentage'], Decimal('9'))
        self.assertTrue(request.call_args[0][1].endswith('/setting/getgstpercentage/4/2024-02-01'))

    def test_due_date_adds_credit_term_days_to_delivery_date(self):
        with patch_backend(TestDataFactory.create_backend_response({'result': 1, 'data': 30})) as request:
            response = self.client.get(
                '/api/v1/accounts/due-date/?creditTermId=7&accountDate=2024-03-01&deliveryDate=10/03/2024'
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['dueDate'], '09/04/2024')
        self.assertTrue(request.call_args[0][1].endswith('/setting/getcredittermday/7/2024-03-01'))

    def test_period_closed(self):
        with patch_backend(TestDataFactory.create_backend_response({'result': 1, 'data': True})):
            response = self.client.get('/api/v1/accounts/period-closed/?moduleId=25&accountDate=2024-03-01')
        self.assertTrue(response.data['isClosed'])

    def test_address_contact_defaults(self):
        address = TestDataFactory.create_backend_response({
            'result': 1,
            'data': [{'addressId': 11, 'address1': '1 Harbour Rd', 'countryId': 65, 'phoneNo': '123'}],
        })
        contact = TestDataFactory.create_backend_response({'result': 1, 'data': []})
        with patch_backend(address, contact) as request:
            response = self.client.get('/api/v1/accounts/address-contact/customer/5/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['address']['addressId'], 11)
        self.assertEqual(response.data['address']['address2'], '')
        self.assertEqual(response.data['contact']['contactId'], 0)
        self.assertEqual(response.data['contact']['contactName'], '')
        urls = [call[0][1] for call in request.call_args_list]
        self.assertTrue(urls[0].endswith('/master/getcustomeraddresslookup_fin/5'))
        self.assertTrue(urls[1].endswith('/master/getcustomercontactlookup_fin/5'))

    def test_address_contact_unknown_entity(self):
        response = self.client.get('/api/v1/accounts/address-contact/vendor/5/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_backend_failure_is_reported(self):
        error = TestDataFactory.create_backend_response({'message': 'Currency not found'}, status_code=404)
        with patch_backend(error):
            response = self.client.get('/api/v1/accounts/gst-percentage/?gstId=4&accountDate=2024-02-01')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Currency not found'})
