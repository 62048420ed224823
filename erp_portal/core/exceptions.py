import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from erp_portal.datagrid.table import TableError
from erp_portal.proxy.client import BackendAPIError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Map backend and table errors onto the {'error': message} envelope"""
    if isinstance(exc, BackendAPIError):
        view = context.get('view')
        logger.warning(f"Backend error in {getattr(view, '__name__', view)}: {exc}")
        return Response({'error': exc.message}, status=exc.status_code)

    if isinstance(exc, TableError):
        return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    return exception_handler(exc, context)
