"""
Token identity for requests coming from the portal front end.

The ERP backend issues and verifies the JWT; this service only reads its claims
so that backend calls can carry the caller's user and company.
"""
import logging

from django.conf import settings
from rest_framework import authentication, exceptions
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError

logger = logging.getLogger(__name__)


class BackendIdentity:
    """Caller identity derived from the backend token"""

    is_authenticated = True
    is_anonymous = False
    is_staff = False

    def __init__(self, token, user_id=None, company_id=None, claims=None):
        self.token = token
        self.user_id = user_id
        self.company_id = company_id
        self.claims = claims or {}

    @property
    def pk(self):
        return self.user_id

    def __str__(self):
        return f"user {self.user_id} / company {self.company_id}"


def get_token_from_request(request):
    """Bearer header first, then the auth cookie"""
    header = authentication.get_authorization_header(request).split()
    if header and header[0].lower() == b'bearer':
        if len(header) != 2:
            raise exceptions.AuthenticationFailed('Invalid token header.')
        return header[1].decode()

    cookie_name = getattr(settings, 'ERP_BACKEND', {}).get('AUTH_COOKIE', 'auth-token')
    return request.COOKIES.get(cookie_name) or None


class BackendTokenAuthentication(authentication.BaseAuthentication):
    """Reads the backend JWT claims without verifying the signature"""

    def authenticate(self, request):
        token = get_token_from_request(request)
        if not token:
            return None

        algorithm = getattr(settings, 'ERP_BACKEND', {}).get('TOKEN_ALGORITHM', 'HS256')
        try:
            claims = TokenBackend(algorithm).decode(token, verify=False)
        except TokenBackendError as e:
            logger.warning(f"Rejected backend token: {str(e)}")
            raise exceptions.AuthenticationFailed('Token is invalid.')

        company_id = request.META.get('HTTP_X_COMPANY_ID') or claims.get('companyId')
        identity = BackendIdentity(
            token=token,
            user_id=claims.get('userId'),
            company_id=company_id,
            claims=claims,
        )
        return identity, token

    def authenticate_header(self, request):
        return 'Bearer'
