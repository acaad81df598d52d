from rest_framework.permissions import BasePermission

from accounts.models import Account, GlobalAdmin
from .exceptions import OriginalAdminRequired

import logging
logger = logging.getLogger(__name__)


def is_account(principal):
    return isinstance(principal, Account)


def is_global_admin(principal):
    return isinstance(principal, GlobalAdmin)


class IsAccount(BasePermission):
    message = 'User access required'

    def has_permission(self, request, view):
        return is_account(request.user)


class IsGlobalAdmin(BasePermission):
    message = 'Global admin access required'

    def has_permission(self, request, view):
        return is_global_admin(request.user)


class IsOriginalGlobalAdmin(BasePermission):
    '''
    Restricts destructive and roster actions to the bootstrap admin.
    Views name the guarded action through `original_admin_action`.
    '''
    message = 'Global admin access required'

    def has_permission(self, request, view):
        admin = request.user
        if not is_global_admin(admin):
            return False

        if not admin.is_original:
            action = getattr(view, 'original_admin_action', None)
            logger.warning(f'Access denied: {admin.email} is not the original admin (action: {action})')
            raise OriginalAdminRequired(action=action, admin=admin)
        return True
