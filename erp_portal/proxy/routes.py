"""Endpoint paths of the external ERP backend used by this service."""


class BasicSetting:
    get_exchange_rate = "/setting/getexchangerate"
    get_exchange_rate_local = "/setting/getexchangeratelocal"
    get_check_period_closed = "/setting/getcheckperiodclosed"
    get_gst_percentage = "/setting/getgstpercentage"
    get_days_from_credit_term = "/setting/getcredittermday"


class DecimalSetting:
    get = "/setting/getdecsetting"


class MandatoryFieldSetting:
    get = "/setting/getmandatoryfieldsbyid"


class VisibleFieldSetting:
    get = "/setting/getvisiblefieldsbyid"


class Lookup:
    get_customer_address = "/master/getcustomeraddresslookup_fin"
    get_customer_contact = "/master/getcustomercontactlookup_fin"
    get_supplier_address = "/master/getsupplieraddresslookup_fin"
    get_supplier_contact = "/master/getsuppliercontactlookup_fin"
    get_bank_address = "/master/GetBankAddressbyBankId"
    get_bank_contact = "/master/GetBankContactbyBankId"


class HrLeaveRequest:
    add = "/hr/leave-request/saveleaverequest"
    bulk_action = "/hr/leave-request/bulk-action"


class JobOrder:
    add = "/operations/savejoborder"
    save_details = "/operations/savedetails"


class JobOrderService:
    """Save endpoints of the job order checklist services, keyed by schema name."""

    save = {
        'job-order': JobOrder.add,
        'job-order-detail': JobOrder.save_details,
        'debit-note': "/operations/savedebitnote",
        'debit-note-detail': "/operations/savedebitnotedetails",
        'agency-remuneration': "/operations/saveagencyremuneration",
        'consignment-export': "/operations/saveconsignmentexport",
        'consignment-import': "/operations/saveconsignmentimport",
        'fresh-water': "/operations/savefreshwater",
        'port-expenses': "/operations/saveportexpenses",
        'other-service': "/operations/saveotherservice",
        'third-party': "/operations/savethirdparty",
    }
