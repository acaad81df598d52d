from rest_framework.exceptions import APIException


class OriginalAdminRequired(APIException):
    status_code = 403
    default_detail = 'Only the original Global Admin can perform this action'
    default_code = 'original_admin_required'
    required_privilege = 'original-global-admin'

    def __init__(self, action=None, admin=None):
        detail = None
        if action is not None:
            detail = f'Only the original Global Admin can {action}'
        super().__init__(detail=detail, code=self.default_code)

        self.extra = {'requiredPrivilege': self.required_privilege}
        if admin is not None:
            self.extra['currentAdmin'] = {
                'email': admin.email,
                'isOriginal': admin.is_original
            }
