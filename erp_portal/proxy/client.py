"""
HTTP client for the external ERP backend.

Every call carries the caller's bearer token together with the registration,
company and user headers the backend expects. Failures are reported once and
never retried.
"""
import json
import logging

import requests
from django.conf import settings
from rest_framework.utils.encoders import JSONEncoder

logger = logging.getLogger(__name__)


class BackendAPIError(Exception):
    """Raised when the ERP backend is unreachable or answers with an error status"""

    def __init__(self, message, status_code=502, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __str__(self):
        return f"{self.status_code}: {self.message}"


def to_json(data):
    """Plain JSON types for a request body: Decimal becomes float, dates become ISO strings"""
    return json.loads(json.dumps(data, cls=JSONEncoder))


def backend_setting(name, default=None):
    return getattr(settings, 'ERP_BACKEND', {}).get(name, default)


class BackendClient:
    """Thin wrapper around requests.Session bound to one caller's identity"""

    def __init__(self, token=None, company_id=None, user_id=None, base_url=None,
                 registration_id=None, timeout=None, session=None):
        self.token = token
        self.company_id = company_id
        self.user_id = user_id
        self.base_url = base_url if base_url is not None else backend_setting('BASE_URL', '')
        self.registration_id = (
            registration_id if registration_id is not None else backend_setting('REGISTRATION_ID', '')
        )
        self.timeout = timeout or backend_setting('TIMEOUT', 30)
        self.session = session or requests.Session()

    @classmethod
    def from_request(cls, request, **kwargs):
        """Build a client from the identity attached by BackendTokenAuthentication"""
        identity = getattr(request, 'user', None)
        return cls(
            token=getattr(identity, 'token', None),
            company_id=getattr(identity, 'company_id', None),
            user_id=getattr(identity, 'user_id', None),
            **kwargs
        )

    def url_for(self, path):
        if not self.base_url:
            raise BackendAPIError('Backend API URL is not configured', status_code=500)
        return f"{self.base_url.rstrip('/')}/{str(path).lstrip('/')}"

    def build_headers(self, module_id=None, transaction_id=None, extra=None):
        headers = {
            'Authorization': f'Bearer {self.token}' if self.token else None,
            'X-Reg-Id': self.registration_id,
            'X-Company-Id': self.company_id,
            'X-User-Id': self.user_id,
            'X-Module-Id': module_id,
            'X-Transaction-Id': transaction_id,
        }
        if extra:
            headers.update(extra)
        # Drop headers without a value so the backend never sees empty ids
        return {key: str(value) for key, value in headers.items() if value not in (None, '')}

    def request(self, method, path, params=None, data=None, json=None, headers=None,
                module_id=None, transaction_id=None):
        """Send one request and return the raw response, whatever its status"""
        url = self.url_for(path)
        request_headers = self.build_headers(module_id, transaction_id, extra=headers)
        try:
            response = self.session.request(
                method.upper(),
                url,
                params=params,
                data=data,
                json=json,
                headers=request_headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"Backend request timed out: {method.upper()} {path}")
            raise BackendAPIError('Backend request timed out', status_code=504)
        except requests.exceptions.RequestException as e:
            logger.error(f"Backend request failed: {method.upper()} {path}: {str(e)}")
            raise BackendAPIError('Backend service is unavailable', status_code=502)

        logger.debug(f"Backend {method.upper()} {path} -> {response.status_code}")
        return response

    def _decode(self, response):
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            message = None
            if isinstance(payload, dict):
                message = payload.get('message') or payload.get('error')
            raise BackendAPIError(
                message or f'Backend request failed with status {response.status_code}',
                status_code=response.status_code,
                payload=payload,
            )
        return payload

    def get_data(self, path, params=None, **kwargs):
        return self._decode(self.request('GET', path, params=params, **kwargs))

    def save_data(self, path, data, **kwargs):
        return self._decode(self.request('POST', path, json=to_json(data), **kwargs))

    def update_data(self, path, data, **kwargs):
        return self._decode(self.request('PUT', path, json=to_json(data), **kwargs))

    def delete_data(self, path, **kwargs):
        return self._decode(self.request('DELETE', path, **kwargs))


def unwrap_data(payload, default=None):
    """Return the ``data`` member of a backend envelope ({result, message, data})"""
    if isinstance(payload, dict) and 'data' in payload:
        data = payload['data']
        return default if data is None else data
    return default if payload is None else payload
