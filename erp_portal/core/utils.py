"""Audit trail helpers for calls forwarded to the ERP backend"""
import logging

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """First X-Forwarded-For hop, else REMOTE_ADDR"""
    meta = getattr(request, 'META', None)
    if not meta:
        return None
    forwarded = meta.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip() or None
    return meta.get('REMOTE_ADDR') or None


def _as_text(value):
    return None if value is None else str(value)


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, identity=None, object_reference=None):
    """
    Record one audited action.

    Args:
        request: DRF request; supplies the caller identity and IP
        action: one of AuditLog.ACTION_CHOICES (checklist_save, layout_update, ...)
        model_name: backend entity acted upon
        object_id: id of the entity, stored as text
        changes: JSON-safe payload that was sent
        identity: BackendIdentity to use instead of request.user
        object_reference: document number or backend path

    Returns the AuditLog, or None when the entry could not be written.
    """
    if not action or not model_name or object_id in (None, ''):
        logger.warning(
            f"Audit log skipped: action={action}, model_name={model_name}, object_id={object_id}"
        )
        return None

    if identity is None:
        identity = getattr(request, 'user', None)

    try:
        return AuditLog.objects.create(
            user_id=_as_text(getattr(identity, 'user_id', None)),
            company_id=_as_text(getattr(identity, 'company_id', None)),
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_reference=object_reference,
            changes=changes or {},
            ip_address=get_client_ip(request),
        )
    except Exception as e:
        # The forwarded call already succeeded
        logger.error(f"Failed to create audit log: {str(e)}", exc_info=True)
        return None
