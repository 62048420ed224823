from django.core.paginator import Paginator
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from erp_portal.proxy.client import BackendClient

from .filters import AuditLogFilter
from .models import AuditLog
from .serializers import AuditLogSerializer
from .tenant import get_decimals, get_mandatory_fields, get_visible_fields


def company_audit_logs(request):
    return AuditLog.objects.filter(company_id=str(request.user.company_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs of the caller's company with filtering"""
    queryset = company_audit_logs(request)

    filterset = AuditLogFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
    queryset = filterset.qs.order_by('-created_at')

    # Pagination
    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', 50))
    except ValueError:
        return Response({'error': 'page and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)
    limit = max(1, min(limit, 500))

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)

    serializer = AuditLogSerializer(page_obj, many=True)
    return Response({
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(company_audit_logs(request), pk=pk)
    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def decimal_settings(request):
    """Decimal places configured for the caller's company"""
    client = BackendClient.from_request(request)
    return Response(get_decimals(client))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def mandatory_fields(request, module_id, transaction_id):
    client = BackendClient.from_request(request)
    return Response(get_mandatory_fields(client, module_id, transaction_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def visible_fields(request, module_id, transaction_id):
    client = BackendClient.from_request(request)
    return Response(get_visible_fields(client, module_id, transaction_id))
