"""
Test suite for dashboard routes
Tests: filter parsing, deterministic data, caching, error envelope
"""
from unittest import mock

from django.core.cache import cache
from django.test import SimpleTestCase, TestCase
from rest_framework import status

from erp_portal.core.test_utils import AuthenticatedAPIClient
from erp_portal.dashboard import data
from erp_portal.dashboard.filters import DashboardFilters, DashboardFilterSerializer


class DashboardFilterTests(SimpleTestCase):
    """Test query-string filter parsing"""

    def test_defaults(self):
        serializer = DashboardFilterSerializer(data={})
        self.assertTrue(serializer.is_valid())
        filters = serializer.get_filters()
        self.assertEqual(filters.period, 'ytd')
        self.assertEqual(filters.comparison_period, 'prior-year')
        self.assertEqual(filters.business_units, [])

    def test_comma_lists_are_trimmed_and_sorted(self):
        serializer = DashboardFilterSerializer(data={'businessUnits': 'retail, marine,,retail', 'period': 'qtd'})
        self.assertTrue(serializer.is_valid())
        self.assertEqual(serializer.get_filters().business_units, ['marine', 'retail'])

    def test_unknown_period(self):
        serializer = DashboardFilterSerializer(data={'period': 'weekly'})
        self.assertFalse(serializer.is_valid())
        self.assertIn('period', serializer.errors)

    def test_seed_depends_on_filters(self):
        self.assertEqual(DashboardFilters(period='mtd').seed(), DashboardFilters(period='mtd').seed())
        self.assertNotEqual(DashboardFilters(period='mtd').seed(), DashboardFilters(period='qtd').seed())


class DashboardDataTests(SimpleTestCase):
    """Test dataset builders"""

    def test_procurement_spend_totals(self):
        payload = data.procurement_spend(DashboardFilters())
        summary = payload['summary']
        self.assertEqual(summary['totalActualSpend'], 6580000)
        self.assertEqual(summary['totalBudget'], 6800000)
        self.assertEqual(summary['totalVariance'], -220000)
        self.assertEqual(payload['departments'][0]['variancePercentage'], 6.7)
        self.assertEqual(
            [row['department'] for row in payload['budgetVarianceAnalysis']['overBudget']],
            ['Operations', 'Procurement'],
        )

    def test_randomized_builders_are_deterministic(self):
        filters = DashboardFilters(period='qtd', salesperson=['Ann', 'Bob'])
        for build in (data.financial_kpis, data.receivables_aging, data.sales_performance):
            self.assertEqual(build(filters), build(filters))

    def test_sales_performance_uses_requested_salespeople(self):
        payload = data.sales_performance(DashboardFilters(salesperson=['Ann', 'Bob']))
        self.assertEqual(sorted(row['salesperson'] for row in payload['bySalesperson']), ['Ann', 'Bob'])
        self.assertEqual(payload['summary']['target'], 15000000)

    def test_receivables_totals_add_up(self):
        payload = data.receivables_aging(DashboardFilters(period='mtd'))
        bucket_total = round(sum(bucket['amount'] for bucket in payload['buckets']), 2)
        self.assertAlmostEqual(payload['summary']['totalOutstanding'], bucket_total, places=2)


class DashboardAPITests(TestCase):
    """Test dashboard endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)

    def test_procurement_spend_echoes_filters(self):
        response = self.client.get('/api/v1/dashboard/procurement-spend/?period=mtd&geography=SG,MY')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['filters']['period'], 'mtd')
        self.assertEqual(response.data['filters']['geography'], ['MY', 'SG'])

    def test_same_filters_same_numbers(self):
        url = '/api/v1/dashboard/financial-kpis/?period=qtd&entities=A,B'
        first = self.client.get(url).data
        cache.clear()
        second = self.client.get('/api/v1/dashboard/financial-kpis/?entities=B,A&period=qtd').data
        self.assertEqual(first, second)

    def test_responses_are_cached(self):
        url = '/api/v1/dashboard/sales-performance/'
        with mock.patch('erp_portal.dashboard.data.sales_performance', wraps=data.sales_performance) as build:
            self.client.get(url)
            self.client.get(url)
        self.assertEqual(build.call_count, 1)

    def test_unknown_period_rejected(self):
        response = self.client.get('/api/v1/dashboard/receivables-aging/?period=weekly')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('period', response.data)

    def test_failure_returns_error_envelope(self):
        with mock.patch('erp_portal.dashboard.data.receivables_aging', side_effect=RuntimeError('boom')):
            response = self.client.get('/api/v1/dashboard/receivables-aging/')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'error': 'Failed to fetch receivables aging data'})

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/dashboard/procurement-spend/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
