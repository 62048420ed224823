from rest_framework import serializers

from erp_portal.core.fields import ClientDateField

from .calculations import Decimals
from .details import TRIGGERS


class DecimalsSerializer(serializers.Serializer):
    amtDec = serializers.IntegerField(min_value=0, max_value=10, required=False)
    locAmtDec = serializers.IntegerField(min_value=0, max_value=10, required=False)
    ctyAmtDec = serializers.IntegerField(min_value=0, max_value=10, required=False)
    priceDec = serializers.IntegerField(min_value=0, max_value=10, required=False)
    qtyDec = serializers.IntegerField(min_value=0, max_value=10, required=False)
    exhRateDec = serializers.IntegerField(min_value=0, max_value=10, required=False)
    dateFormat = serializers.CharField(required=False)


class DecimalsPayloadSerializer(serializers.Serializer):
    decimals = DecimalsSerializer(required=False)

    def get_decimals(self):
        return Decimals.from_payload(self.validated_data.get('decimals'))


class DetailRecalculationSerializer(DecimalsPayloadSerializer):
    header = serializers.DictField()
    details = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    visible = serializers.DictField(required=False, default=dict)
    trigger = serializers.ChoiceField(choices=TRIGGERS, default='qty')


class AdjustmentTotalsSerializer(DecimalsPayloadSerializer):
    details = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    hasCountryCurrency = serializers.BooleanField(default=False)


class AdjustmentRecalculationSerializer(AdjustmentTotalsSerializer):
    exhRate = serializers.DecimalField(max_digits=20, decimal_places=10)
    ctyExhRate = serializers.DecimalField(max_digits=20, decimal_places=10, required=False, default=0)


class AllocationHeaderSerializer(serializers.Serializer):
    totAmt = serializers.DecimalField(max_digits=20, decimal_places=6, required=False, default=0)
    totLocalAmt = serializers.DecimalField(max_digits=20, decimal_places=6, required=False, default=0)
    exhRate = serializers.DecimalField(max_digits=20, decimal_places=10, required=False, default=1)


class AllocationSerializer(DecimalsPayloadSerializer):
    header = AllocationHeaderSerializer()
    details = serializers.ListField(child=serializers.DictField(), allow_empty=True)


class ManualAllocationSerializer(AllocationSerializer):
    itemNo = serializers.IntegerField()
    allocAmt = serializers.DecimalField(max_digits=20, decimal_places=6)

    def validate(self, attrs):
        item_nos = [row.get('itemNo') for row in attrs['details']]
        if attrs['itemNo'] not in item_nos:
            raise serializers.ValidationError({'itemNo': f"No allocation row with itemNo {attrs['itemNo']}"})
        return attrs


class ExchangeRateQuerySerializer(serializers.Serializer):
    currencyId = serializers.IntegerField(min_value=1)
    accountDate = ClientDateField()
    separateCountryCurrency = serializers.BooleanField(default=False)


class GstPercentageQuerySerializer(serializers.Serializer):
    gstId = serializers.IntegerField(min_value=1)
    accountDate = ClientDateField()


class DueDateQuerySerializer(serializers.Serializer):
    creditTermId = serializers.IntegerField(min_value=1)
    accountDate = ClientDateField()
    deliveryDate = ClientDateField()


class PeriodClosedQuerySerializer(serializers.Serializer):
    moduleId = serializers.IntegerField(min_value=1)
    accountDate = ClientDateField()

