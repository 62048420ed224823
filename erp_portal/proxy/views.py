"""
Generic proxy to the ERP backend.

The front end calls /api/proxy/<backend path>; the request is replayed against
the configured backend with the caller's identity headers.
"""
import logging

from django.http import HttpResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from erp_portal.core.utils import create_audit_log

from .client import BackendClient

logger = logging.getLogger(__name__)

AUDITED_METHODS = {
    'POST': 'create',
    'PUT': 'update',
    'DELETE': 'delete',
}


def audit_proxied_request(request, path, response):
    action = AUDITED_METHODS.get(request.method)
    if not action or not response.ok:
        return
    segments = [segment for segment in path.split('/') if segment]
    create_audit_log(
        request=request,
        action=action,
        model_name=segments[0] if segments else 'backend',
        object_id=segments[-1] if segments else path,
        object_reference=f"/{path}",
        changes={'method': request.method, 'status': response.status_code},
    )


@api_view(['GET', 'POST', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def proxy_request(request, path):
    """Forward one request to the backend and relay its answer"""
    client = BackendClient.from_request(request)

    params = [(key, value) for key, values in request.query_params.lists() for value in values]

    extra_headers = {}
    content_type = request.META.get('CONTENT_TYPE')
    body = request.body if request.method in ('POST', 'PUT', 'DELETE') else None
    if body and content_type:
        extra_headers['Content-Type'] = content_type

    upstream = client.request(
        request.method,
        path,
        params=params or None,
        data=body or None,
        headers=extra_headers,
        module_id=request.META.get('HTTP_X_MODULE_ID'),
        transaction_id=request.META.get('HTTP_X_TRANSACTION_ID'),
    )

    if upstream.status_code >= 400:
        logger.warning(f"Backend answered {upstream.status_code} for {request.method} /{path}")

    audit_proxied_request(request, path, upstream)

    upstream_type = upstream.headers.get('Content-Type', '')
    if 'application/json' in upstream_type:
        try:
            return Response(upstream.json(), status=upstream.status_code)
        except ValueError:
            logger.warning(f"Backend sent invalid JSON for {request.method} /{path}")

    return HttpResponse(
        upstream.content,
        status=upstream.status_code,
        content_type=upstream_type or 'application/octet-stream',
    )
