import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from erp_portal.core.tenant import get_mandatory_fields
from erp_portal.core.utils import create_audit_log
from erp_portal.proxy.client import BackendClient, to_json, unwrap_data
from erp_portal.proxy.routes import JobOrderService

from .serializers import SCHEMAS

logger = logging.getLogger('erp_portal.operations')


def unknown_schema(schema):
    return Response({'error': f"Unknown schema '{schema}'"}, status=status.HTTP_404_NOT_FOUND)


def get_screen_ids(request):
    """Module / transaction ids of the calling screen, from headers or query string"""
    module_id = request.META.get('HTTP_X_MODULE_ID') or request.query_params.get('moduleId')
    transaction_id = request.META.get('HTTP_X_TRANSACTION_ID') or request.query_params.get('transactionId')
    return module_id, transaction_id


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def validate_schema(request, schema):
    """Run a checklist schema against posted data without saving it"""
    if schema not in SCHEMAS:
        return unknown_schema(schema)
    serializer_class, _ = SCHEMAS[schema]

    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response({'valid': True, 'data': serializer.data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def save_checklist(request, schema):
    """
    Validate a checklist record against its schema and the tenant's mandatory
    fields for the calling screen, then save it in the backend
    """
    if schema not in SCHEMAS:
        return unknown_schema(schema)
    serializer_class, id_field = SCHEMAS[schema]

    client = BackendClient.from_request(request)
    module_id, transaction_id = get_screen_ids(request)
    mandatory_fields = {}
    if module_id and transaction_id:
        mandatory_fields = get_mandatory_fields(client, module_id, transaction_id)

    serializer = serializer_class(data=request.data, context={'mandatory_fields': mandatory_fields})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    payload = to_json(serializer.validated_data)
    result = client.save_data(
        JobOrderService.save[schema],
        payload,
        module_id=module_id,
        transaction_id=transaction_id,
    )

    # New records carry id 0 until the backend assigns one
    saved_id = unwrap_data(result)
    object_id = payload.get(id_field) or (saved_id if isinstance(saved_id, (int, str)) else None)
    create_audit_log(
        request=request,
        action='checklist_save',
        model_name=serializer_class.__name__.replace('Serializer', ''),
        object_id=object_id or payload.get('jobOrderId') or 0,
        changes=payload,
        object_reference=payload.get('jobOrderNo') or payload.get('debitNoteNo') or JobOrderService.save[schema],
    )
    logger.info(f"Saved {schema} for job order {payload.get('jobOrderId')}")
    return Response(result)
