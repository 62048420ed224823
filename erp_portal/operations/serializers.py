"""
Validation rules for the job order checklist: the job order itself, its debit
notes and the service screens saved against it.

Every schema honours the tenant's mandatory field flags passed in the
serializer context (see MandatoryFieldsMixin).
"""
from rest_framework import serializers

from erp_portal.core.fields import (
    ClientDateField,
    at_least,
    remarks_field,
    required_id,
    required_text,
)
from erp_portal.core.tenant import MandatoryFieldsMixin, is_blank


def amount():
    return serializers.DecimalField(max_digits=18, decimal_places=6)


def exchange_rate():
    return serializers.DecimalField(
        max_digits=20, decimal_places=10, min_value=0,
        error_messages={'min_value': 'Exchange rate must be 0 or greater'},
    )


def optional_text(max_length=None, label=None):
    if max_length is None:
        return serializers.CharField(required=False, allow_blank=True)
    return serializers.CharField(
        required=False, allow_blank=True, max_length=max_length,
        error_messages={'max_length': f'{label} must be less than {max_length} characters'},
    )


class ChecklistSerializer(MandatoryFieldsMixin, serializers.Serializer):
    pass


class JobOrderHdSerializer(ChecklistSerializer):
    jobOrderId = serializers.IntegerField()
    jobOrderNo = optional_text(20, 'Job Order No')
    jobOrderDate = ClientDateField(error_messages={'required': 'Job Order Date is required'})
    customerId = required_id('Customer is required')
    currencyId = required_id('Currency is required')
    exhRate = exchange_rate()
    vesselId = required_id('Vessel is required')
    imoCode = optional_text(10, 'IMO Code')
    vesselDistance = at_least(0, 'Vessel Distance must be 0 or greater')
    portId = required_id('Port is required')
    lastPortId = serializers.IntegerField(required=False)
    nextPortId = serializers.IntegerField(required=False)
    voyageId = serializers.IntegerField(required=False)
    natureOfCall = optional_text(50, 'Nature of Call')
    isps = optional_text(20, 'ISPS')
    etaDate = ClientDateField(required=False)
    etdDate = ClientDateField(required=False)
    ownerName = optional_text(200, 'Owner Name')
    ownerAgent = optional_text(200, 'Owner Agent')
    masterName = optional_text(200, 'Master Name')
    charters = optional_text(200, 'Charters')
    chartersAgent = optional_text(200, 'Charters Agent')
    invoiceId = serializers.IntegerField(required=False)
    invoiceNo = optional_text()
    invoiceDate = ClientDateField(required=False)
    seriesDate = ClientDateField(required=False)
    addressId = required_id('Address is required')
    contactId = required_id('Contact is required')
    remarks = remarks_field(255)
    statusId = required_id('Status is required')
    gstId = serializers.IntegerField(required=False)
    gstPercentage = serializers.DecimalField(max_digits=9, decimal_places=4, required=False)
    isActive = serializers.BooleanField(required=False)
    isTaxable = serializers.BooleanField(required=False)
    isClose = serializers.BooleanField(required=False)
    isPost = serializers.BooleanField(required=False)
    editVersion = optional_text()

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get('isTaxable') and is_blank(attrs.get('gstId')):
            raise serializers.ValidationError({'gstId': 'GST is required when taxable is enabled'})
        return attrs


class JobOrderDtSerializer(ChecklistSerializer):
    jobOrderId = serializers.IntegerField()
    companyId = serializers.IntegerField(required=False)
    jobOrderNo = optional_text()
    itemNo = serializers.IntegerField()
    taskId = serializers.IntegerField()
    taskItemNo = serializers.IntegerField()
    serviceId = serializers.IntegerField()
    totAmt = amount()
    totLocalAmt = amount()
    gstAmt = amount()
    gstLocalAmt = amount()
    totAftAmt = amount()
    totLocalAftAmt = amount()


class DebitNoteDtSerializer(ChecklistSerializer):
    debitNoteId = required_id('Debit Note ID is required')
    debitNoteNo = required_text('Debit Note Number is required')
    itemNo = serializers.IntegerField(min_value=0, error_messages={'min_value': 'Item Number is required'})
    taskId = required_id('Task ID is required')
    chargeId = required_id('Charge is required')
    glId = required_id('GL Account is required')
    qty = at_least(0, 'Quantity must be 0 or greater')
    unitPrice = at_least(0, 'Unit price must be 0 or greater')
    totLocalAmt = amount()
    totAmt = at_least(0, 'Total amount must be 0 or greater')
    gstId = required_id('GST ID is required')
    gstPercentage = at_least(0, 'GST percentage must be 0 or greater')
    gstAmt = at_least(0, 'GST amount must be 0 or greater')
    totAftGstAmt = at_least(0, 'Total after GST must be 0 or greater')
    remarks = remarks_field()
    editVersion = serializers.IntegerField(min_value=0, error_messages={'min_value': 'Edit version must be 0 or greater'})
    isServiceCharge = serializers.BooleanField()
    serviceCharge = amount()

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get('isServiceCharge') and is_blank(attrs.get('serviceCharge')):
            raise serializers.ValidationError(
                {'serviceCharge': 'Service charge amount is required when service charge is enabled'}
            )
        return attrs


class DebitNoteHdSerializer(ChecklistSerializer):
    debitNoteId = serializers.IntegerField()
    debitNoteNo = required_text('Debit Note Number is required')
    debitNoteDate = ClientDateField(required=False)
    jobOrderId = required_id('Job Order ID is required')
    itemNo = serializers.IntegerField(min_value=0, error_messages={'min_value': 'Item Number is required'})
    taskId = required_id('Task ID is required')
    serviceId = required_id('Service ID is required')
    chargeId = required_id('Charge is required')
    currencyId = required_id('Currency is required')
    exhRate = exchange_rate()
    totAmt = at_least(0, 'Total amount must be 0 or greater')
    gstAmt = at_least(0, 'GST amount must be 0 or greater')
    totAftGstAmt = at_least(0, 'Total after GST must be 0 or greater')
    glId = required_id('GL Account is required')
    taxableAmt = at_least(0, 'Taxable amount must be 0 or greater')
    nonTaxableAmt = at_least(0, 'Non-taxable amount must be 0 or greater')
    isLocked = serializers.BooleanField()
    editVersion = serializers.IntegerField(min_value=0, error_messages={'min_value': 'Edit version must be 0 or greater'})
    data_details = DebitNoteDtSerializer(many=True, required=False)


class JobOrderServiceSerializer(ChecklistSerializer):
    """Fields every service screen of a job order shares"""
    jobOrderId = required_id('Job Order ID is required')
    jobOrderNo = required_text('Job Order No is required')
    debitNoteNo = optional_text()
    remarks = remarks_field()
    statusId = required_id('Status is required')
    editVersion = serializers.IntegerField()


class AgencyRemunerationSerializer(JobOrderServiceSerializer):
    agencyRemunerationId = serializers.IntegerField()
    date = ClientDateField(required=False)
    taskId = required_id('Task ID is required')
    glId = required_id('GL Account is required')
    chargeId = required_id('Charge is required')
    debitNoteId = serializers.IntegerField()


class ConsignmentSerializer(JobOrderServiceSerializer):
    taskId = required_id('Task ID is required')
    chargeId = required_id('Charge is required')
    glId = required_id('GL Account is required')
    awbNo = required_text('AWB Number is required')
    carrierTypeId = required_id('Cargo Type is required')
    uomId = required_id('UOM is required')
    modeTypeId = serializers.IntegerField()
    consignmentTypeId = required_id('Type is required')
    landingTypeId = serializers.IntegerField()
    noOfPcs = at_least(0, 'Number of pieces must be 0 or greater')
    weight = at_least(0, 'Weight must be 0 or greater')
    pickupLocation = optional_text()
    deliveryLocation = optional_text()
    clearedBy = optional_text()
    billEntryNo = optional_text()
    declarationNo = optional_text()
    receiveDate = ClientDateField(required=False)
    deliverDate = ClientDateField(required=False)
    arrivalDate = ClientDateField(required=False)
    amountDeposited = at_least(0, 'Amount deposited must be 0 or greater')
    refundInstrumentNo = optional_text()
    debitNoteId = serializers.IntegerField()


class ConsignmentExportSerializer(ConsignmentSerializer):
    consignmentExportId = serializers.IntegerField()


class ConsignmentImportSerializer(ConsignmentSerializer):
    consignmentImportId = serializers.IntegerField()


class FreshWaterSerializer(JobOrderServiceSerializer):
    freshWaterId = serializers.IntegerField()
    date = ClientDateField(required=False)
    taskId = serializers.IntegerField(required=False)
    glId = serializers.IntegerField(required=False)
    chargeId = required_id('Charge is required')
    bargeId = required_id('Barge is required')
    operatorName = optional_text()
    supplyBarge = optional_text()
    distance = at_least(0, 'Distance must be 0 or greater')
    quantity = at_least(0, 'Quantity must be 0 or greater')
    receiptNo = optional_text()
    uomId = required_id('UOM is required')
    debitNoteId = serializers.IntegerField(required=False)
    remarks = optional_text()


class PortExpensesSerializer(JobOrderServiceSerializer):
    portExpenseId = serializers.IntegerField()
    quantity = at_least(0, 'Quantity must be 0 or greater')
    supplierId = required_id('Supplier is required')
    chargeId = required_id('Charge is required')
    uomId = required_id('UOM is required')
    deliverDate = ClientDateField(error_messages={'required': 'Deliver Date is required'})
    glId = required_id('GL Account is required')
    debitNoteId = serializers.IntegerField(required=False)


class OtherServiceSerializer(JobOrderServiceSerializer):
    otherServiceId = serializers.IntegerField()
    date = ClientDateField(error_messages={'required': 'Service Date is required'})
    taskId = required_id('Task ID is required')
    chargeId = required_id('Charge is required')
    glId = required_id('GL Account is required')
    serviceProvider = required_text('Service Provider is required')
    quantity = at_least(0, 'Quantity must be 0 or greater')
    amount = at_least(0, 'Amount must be 0 or greater')
    uomId = required_id('UOM is required')
    debitNoteId = serializers.IntegerField()


class ThirdPartySerializer(JobOrderServiceSerializer):
    thirdPartyId = serializers.IntegerField()
    taskId = required_id('Task ID is required')
    debitNoteId = serializers.IntegerField()
    quantity = at_least(0, 'Quantity must be 0 or greater')
    glId = required_id('GL Account is required')
    chargeId = required_id('Charge is required')
    supplierId = required_id('Supplier is required')
    supplierMobileNumber = optional_text()
    uomId = required_id('UOM is required')
    deliverDate = ClientDateField(required=False)


# Schema name -> (serializer, field holding the record id)
SCHEMAS = {
    'job-order': (JobOrderHdSerializer, 'jobOrderId'),
    'job-order-detail': (JobOrderDtSerializer, 'jobOrderId'),
    'debit-note': (DebitNoteHdSerializer, 'debitNoteId'),
    'debit-note-detail': (DebitNoteDtSerializer, 'debitNoteId'),
    'agency-remuneration': (AgencyRemunerationSerializer, 'agencyRemunerationId'),
    'consignment-export': (ConsignmentExportSerializer, 'consignmentExportId'),
    'consignment-import': (ConsignmentImportSerializer, 'consignmentImportId'),
    'fresh-water': (FreshWaterSerializer, 'freshWaterId'),
    'port-expenses': (PortExpensesSerializer, 'portExpenseId'),
    'other-service': (OtherServiceSerializer, 'otherServiceId'),
    'third-party': (ThirdPartySerializer, 'thirdPartyId'),
}
