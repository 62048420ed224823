from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from erp_portal.core.tenant import get_decimals
from erp_portal.proxy.client import BackendClient

from .adjustments import calculate_adjustment_header_totals, recalculate_all_detail_amounts
from .allocation import (
    auto_allocate_amounts,
    calculate_manual_allocation,
    reconcile_allocation,
    reset_allocation,
    validate_allocation,
)
from .calculations import Decimals
from .details import recalculate_details
from .lookups import (
    EntityType,
    fetch_address_contact,
    get_due_date,
    get_gst_percentage,
    get_header_exchange_rates,
    is_period_closed,
)
from .serializers import (
    AdjustmentRecalculationSerializer,
    AdjustmentTotalsSerializer,
    AllocationSerializer,
    DetailRecalculationSerializer,
    DueDateQuerySerializer,
    ExchangeRateQuerySerializer,
    GstPercentageQuerySerializer,
    ManualAllocationSerializer,
    PeriodClosedQuerySerializer,
)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def recalculate_detail_rows(request):
    """Recalculate invoice detail rows after a quantity, total or GST change"""
    serializer = DetailRecalculationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    rows, totals = recalculate_details(
        data['header'],
        data['details'],
        serializer.get_decimals(),
        visible=data['visible'],
        trigger=data['trigger'],
    )
    return Response({'details': rows, 'totals': totals})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def adjustment_totals(request):
    """Net debit/credit adjustment lines into header totals"""
    serializer = AdjustmentTotalsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    totals = calculate_adjustment_header_totals(
        data['details'], serializer.get_decimals(), data['hasCountryCurrency']
    )
    return Response(totals)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def recalculate_adjustment(request):
    """Recompute adjustment lines for a new exchange rate, then the header totals"""
    serializer = AdjustmentRecalculationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    decimals = serializer.get_decimals()
    details = recalculate_all_detail_amounts(
        data['details'], data['exhRate'], data['ctyExhRate'], decimals, data['hasCountryCurrency']
    )
    totals = calculate_adjustment_header_totals(details, decimals, data['hasCountryCurrency'])
    return Response({'details': details, 'totals': totals})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def auto_allocation(request):
    serializer = AllocationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    details = data['details']
    if not validate_allocation(details):
        return Response({'error': 'No outstanding documents to allocate'}, status=status.HTTP_400_BAD_REQUEST)

    decimals = serializer.get_decimals()
    header = dict(data['header'])
    # a zero header total is replaced by the allocated sums in reconcile_allocation
    details, _ = auto_allocate_amounts(details, header['totAmt'], decimals)
    totals = reconcile_allocation(details, header, decimals)
    return Response({'details': details, 'totals': totals})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def manual_allocation(request):
    serializer = ManualAllocationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    decimals = serializer.get_decimals()
    details = data['details']
    index = next(i for i, row in enumerate(details) if row.get('itemNo') == data['itemNo'])

    _, was_auto_set_to_zero = calculate_manual_allocation(
        details, index, data['allocAmt'], data['header']['totAmt'], decimals
    )
    totals = reconcile_allocation(details, dict(data['header']), decimals)

    result = {'details': details, 'totals': totals, 'wasAutoSetToZero': was_auto_set_to_zero}
    if was_auto_set_to_zero:
        result['message'] = 'Allocation was set to zero, nothing is left to allocate'
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def reset_allocations(request):
    serializer = AllocationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    details, totals = reset_allocation(data['details'], dict(data['header']), serializer.get_decimals())
    return Response({'details': details, 'totals': totals})


def _tenant_decimals(client):
    return Decimals.from_payload(get_decimals(client))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def exchange_rate(request):
    """Header exchange rates for a currency on the account date"""
    serializer = ExchangeRateQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    client = BackendClient.from_request(request)
    rates = get_header_exchange_rates(
        client,
        data['currencyId'],
        data['accountDate'],
        _tenant_decimals(client),
        visible={'m_CtyCurr': data['separateCountryCurrency']},
    )
    return Response(rates)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def gst_percentage(request):
    serializer = GstPercentageQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    client = BackendClient.from_request(request)
    return Response({'gstPercentage': get_gst_percentage(client, data['gstId'], data['accountDate'])})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def due_date(request):
    """Due date = delivery date + credit term days"""
    serializer = DueDateQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    client = BackendClient.from_request(request)
    result = get_due_date(client, data['creditTermId'], data['accountDate'], data['deliveryDate'])
    return Response({'dueDate': result.strftime(settings.CLIENT_DATE_FORMAT)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def period_closed(request):
    serializer = PeriodClosedQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    client = BackendClient.from_request(request)
    return Response({'isClosed': is_period_closed(client, data['moduleId'], data['accountDate'])})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def address_contact(request, entity, entity_id):
    """Default address and contact of a customer, supplier or bank"""
    try:
        entity_type = EntityType(entity)
    except ValueError:
        return Response({'error': f"Unknown entity '{entity}'"}, status=status.HTTP_400_BAD_REQUEST)

    client = BackendClient.from_request(request)
    return Response(fetch_address_contact(client, entity_type, entity_id))
