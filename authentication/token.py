from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed
from cryptography.fernet import Fernet, InvalidToken
from django.conf import settings

from accounts.models import Account
from .models import AuthToken

import logging
logger = logging.getLogger(__name__)

AUTH_KEYWORDS = ('bearer', 'token')


def authenticate_key(key):
    '''
    Resolves a bearer key to its principal (Account or GlobalAdmin).
    Raises AuthenticationFailed when the key is malformed, unknown, revoked,
    expired, or belongs to a disabled account.
    '''
    cipher_suite = Fernet(settings.FERNET_KEY)
    ttl = int(settings.AUTH_TOKEN_TTL.total_seconds())
    try:
        payload = cipher_suite.decrypt(key.encode(), ttl=ttl).decode()
        principal_type, principal_id, _ = payload.split(':', 2)
        auth_token = AuthToken.objects.get(key_digest=AuthToken.digest(key))
    except (InvalidToken, ValueError, TypeError, AuthToken.DoesNotExist):
        raise AuthenticationFailed('Invalid token')

    if (auth_token.principal_type != principal_type or
        str(auth_token.principal_id) != principal_id):
        logger.warning(f'Auth token {auth_token.id} payload does not match its record')
        raise AuthenticationFailed('Invalid token')

    if auth_token.is_revoked():
        raise AuthenticationFailed('Token revoked')

    if auth_token.is_key_expired():
        raise AuthenticationFailed('Token expired')

    principal = auth_token.get_principal()
    if principal is None:
        raise AuthenticationFailed('Invalid token')

    if isinstance(principal, Account) and not principal.is_usable():
        raise AuthenticationFailed('Invalid token or account disabled')

    return principal, auth_token


class TokenAuthentication(BaseAuthentication):
    '''
    Bearer-key authentication shared by regular users and global admins
    '''
    keyword = 'Bearer'

    def authenticate(self, request):
        auth_header = request.headers.get('Authorization', '').split()
        if not auth_header:
            return None

        if len(auth_header) != 2 or auth_header[0].lower() not in AUTH_KEYWORDS:
            raise AuthenticationFailed('Invalid authorization header')

        return authenticate_key(auth_header[1])

    def authenticate_header(self, request):
        return self.keyword
