import logging

from django.core.cache import cache
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from erp_portal.core.cache_utils import GRID_LAYOUT_CACHE_TTL, grid_layout_cache_key
from erp_portal.core.utils import create_audit_log

from .models import GridLayout
from .serializers import CellEditSerializer, GridLayoutSerializer, ReorderSerializer, TableQuerySerializer
from .table import DataTable, TableQuery, TableSettings

logger = logging.getLogger(__name__)


def layout_identity(request, module_id, transaction_id, grid_name):
    return {
        'user_id': str(request.user.user_id),
        'company_id': str(request.user.company_id),
        'module_id': module_id,
        'transaction_id': transaction_id,
        'grid_name': grid_name,
    }


def load_layout(request, module_id, transaction_id, grid_name):
    """Saved layout as serialized data, or None when the user has not saved one"""
    identity = layout_identity(request, module_id, transaction_id, grid_name)
    cache_key = grid_layout_cache_key(*identity.values())
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    layout = GridLayout.objects.filter(**identity).first()
    if layout is None:
        return None
    data = GridLayoutSerializer(layout).data
    cache.set(cache_key, data, GRID_LAYOUT_CACHE_TTL)
    return data


def build_table(data):
    return DataTable(
        data['columns'],
        data['rows'],
        settings=TableSettings.from_dict(data['settings']),
        accessor_id=data['accessorId'],
    )


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def grid_layout(request, module_id, transaction_id, grid_name):
    """Get, save or reset the caller's layout of one grid"""
    identity = layout_identity(request, module_id, transaction_id, grid_name)

    if request.method == 'GET':
        data = load_layout(request, module_id, transaction_id, grid_name)
        if data is None:
            # Unsaved layouts come back with the model defaults
            data = GridLayoutSerializer(GridLayout(**identity)).data
        return Response(data)

    if request.method == 'DELETE':
        deleted, _ = GridLayout.objects.filter(**identity).delete()
        if deleted:
            create_audit_log(
                request=request,
                action='layout_reset',
                model_name='GridLayout',
                object_id=grid_name,
                object_reference=f"{module_id}/{transaction_id}/{grid_name}",
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    layout = GridLayout.objects.filter(**identity).first()
    serializer = GridLayoutSerializer(layout, data=request.data, partial=layout is not None)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    created = layout is None
    layout = serializer.save(**identity)
    create_audit_log(
        request=request,
        action='layout_update',
        model_name='GridLayout',
        object_id=layout.id,
        changes=serializer.validated_data,
        object_reference=f"{module_id}/{transaction_id}/{grid_name}",
    )
    logger.info(f"Saved grid layout {layout}")
    return Response(
        GridLayoutSerializer(layout).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def query_table(request):
    """Search, filter, sort and page rows server side"""
    serializer = TableQuerySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    table = build_table(data)
    query = TableQuery(
        search=data['search'],
        sorting=data.get('sorting') or [],
        filters=data['filters'],
        page=data['page'],
        page_size=data.get('pageSize'),
    )

    if 'gridName' in data:
        layout = load_layout(request, data['moduleId'], data['transactionId'], data['gridName'])
        if layout:
            table.apply_layout(layout['column_visibility'], layout['column_sizing'], layout['column_order'])
            if 'sorting' not in data:
                query.sorting = table.usable_sorting(layout['sort'])
            if query.page_size is None:
                query.page_size = layout['page_size']

    result = table.query(query).as_dict()
    result['columns'] = [column.key for column in table.visible_columns()]
    result['columnSizing'] = table.column_sizing
    if 'permissions' in data:
        result['rowActions'] = {
            str(row.get(table.accessor_id)): table.row_actions(row, data['permissions'], data['customActions'])
            for row in result['rows']
        }
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def edit_cell(request):
    """Apply one inline cell edit and hand the rows back"""
    serializer = CellEditSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    table = build_table(data)
    row = table.edit_cell(data['rowId'], data['key'], data['value'])
    return Response({'row': row, 'rows': table.rows})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def reorder(request):
    """Move a row (fromIndex -> toIndex) or a column (column -> toIndex)"""
    serializer = ReorderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    table = build_table(data)
    if 'column' in data:
        return Response({'columnOrder': table.move_column(data['column'], data['toIndex'])})
    return Response({'rows': table.reorder_rows(data['fromIndex'], data['toIndex'])})
