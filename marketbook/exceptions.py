from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error
from rest_framework.views import set_rollback

import traceback

import logging
logger = logging.getLogger(__name__)


def first_error_message(detail):
    '''
    Reduces a DRF error detail (str, list or dict) to one readable line.
    '''
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = first_error_message(value)
            if field in ('non_field_errors', 'detail'):
                return message
            return f'{field}: {message}'
        return ''
    if isinstance(detail, (list, tuple)):
        return first_error_message(detail[0]) if detail else ''
    return str(detail)


def exception_handler(exc, context):
    if isinstance(exc, (Http404, ObjectDoesNotExist)):
        exc = exceptions.NotFound('Not found')
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()
    elif isinstance(exc, DjangoValidationError):
        exc = exceptions.ValidationError(as_serializer_error(exc))

    if isinstance(exc, exceptions.APIException):
        headers = {}
        if getattr(exc, 'auth_header', None):
            headers['WWW-Authenticate'] = exc.auth_header
        if getattr(exc, 'wait', None):
            headers['Retry-After'] = '%d' % exc.wait

        data = {'message': first_error_message(exc.detail)}
        if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, (dict, list)):
            data['errors'] = exc.detail
        data.update(getattr(exc, 'extra', None) or {})

        set_rollback()
        return Response(data, status=exc.status_code, headers=headers)

    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'unknown view'
    logger.exception(f'Unhandled error in {view_name}: {exc}')

    data = {'message': 'Something went wrong!'}
    if settings.DEBUG:
        data['error'] = str(exc)
        data['traceback'] = traceback.format_exc()

    set_rollback()
    return Response(data, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
