import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from erp_portal.core.utils import create_audit_log
from erp_portal.proxy.client import BackendClient, to_json, unwrap_data
from erp_portal.proxy.routes import HrLeaveRequest

from .serializers import (
    SCHEMAS,
    BulkLeaveApprovalSerializer,
    LeaveDaysSerializer,
    LeaveRequestSaveSerializer,
    LeaveSummaryRequestSerializer,
)
from .services import calculate_leave_days, summarize_leaves

logger = logging.getLogger('erp_portal.hr')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def validate_schema(request, schema):
    """Run one of the leave validation schemas against the posted data"""
    serializer_class = SCHEMAS.get(schema)
    if serializer_class is None:
        return Response({'error': f"Unknown schema '{schema}'"}, status=status.HTTP_404_NOT_FOUND)

    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response({'valid': True, 'data': serializer.data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_requests(request):
    """Validate a leave request form, count its working days and save it in the backend"""
    serializer = LeaveRequestSaveSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    payload = dict(data)
    weekend_days = payload.pop('weekendDays')
    holidays = payload.pop('holidays')
    payload['totalDays'] = calculate_leave_days(data['startDate'], data['endDate'], weekend_days, holidays)

    client = BackendClient.from_request(request)
    result = client.save_data(HrLeaveRequest.add, payload)

    leave_request_id = unwrap_data(result)
    create_audit_log(
        request=request,
        action='leave_request_save',
        model_name='LeaveRequest',
        object_id=leave_request_id if isinstance(leave_request_id, (int, str)) else data['employeeId'],
        changes=to_json(payload),
        object_reference=HrLeaveRequest.add,
    )
    logger.info(f"Leave request saved for employee {data['employeeId']} ({payload['totalDays']} days)")
    return Response(result, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def bulk_leave_action(request):
    """Approve or reject several leave requests at once"""
    serializer = BulkLeaveApprovalSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    client = BackendClient.from_request(request)
    result = client.save_data(HrLeaveRequest.bulk_action, dict(data))

    create_audit_log(
        request=request,
        action='bulk_action',
        model_name='LeaveRequest',
        object_id=','.join(str(leave_id) for leave_id in data['leaveIds'])[:100],
        changes={'leaveIds': data['leaveIds'], 'statusId': data['statusId'], 'comments': data.get('comments', '')},
        object_reference=HrLeaveRequest.bulk_action,
    )
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_days(request):
    serializer = LeaveDaysSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    total = calculate_leave_days(data['startDate'], data['endDate'], data['weekendDays'], data['holidays'])
    return Response({'totalDays': total})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_summary(request):
    serializer = LeaveSummaryRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response(summarize_leaves(serializer.validated_data['leaves']))
