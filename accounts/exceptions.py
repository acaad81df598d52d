from rest_framework import status
from rest_framework.exceptions import APIException


class AccountNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'User not found'
    default_code = 'account_not_found'
