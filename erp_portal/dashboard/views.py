import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from erp_portal.core.cache_utils import cache_dashboard_data, get_cached_dashboard_data

from . import data
from .filters import DashboardFilterSerializer

logger = logging.getLogger('erp_portal.dashboard')


def dashboard_response(request, name, label, build):
    """Parse filters, serve from cache or build the dataset and cache it"""
    serializer = DashboardFilterSerializer(data=request.query_params)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    filters = serializer.get_filters()

    try:
        cached_data, cache_key = get_cached_dashboard_data(name, filters.as_dict())
        if cached_data is not None:
            return Response(cached_data)

        payload = build(filters)
        cache_dashboard_data(cache_key, payload)
        return Response(payload)
    except Exception as e:
        logger.error(f"Error in {name} dashboard: {str(e)}", exc_info=True)
        return Response(
            {'error': f'Failed to fetch {label} data'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def procurement_spend(request):
    """Procurement spend against budget"""
    return dashboard_response(request, 'procurement_spend', 'procurement spend', data.procurement_spend)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def financial_kpis(request):
    """Trial balance, GL activity, bank balances and cash flow"""
    return dashboard_response(request, 'financial_kpis', 'financial KPI', data.financial_kpis)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def receivables_aging(request):
    return dashboard_response(request, 'receivables_aging', 'receivables aging', data.receivables_aging)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_performance(request):
    return dashboard_response(request, 'sales_performance', 'sales performance', data.sales_performance)
