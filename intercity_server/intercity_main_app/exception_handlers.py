"""DRF exception handler rendering every failure as one error envelope"""
import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response

from .services.exceptions import BookingEngineError

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = 'Internal server error'

DRF_ERROR_KINDS = {
    exceptions.NotAuthenticated: 'Unauthorized',
    exceptions.AuthenticationFailed: 'Unauthorized',
    exceptions.PermissionDenied: 'Forbidden',
    exceptions.NotFound: 'NotFound',
    exceptions.MethodNotAllowed: 'MethodNotAllowed',
    exceptions.ParseError: 'Validation',
    exceptions.UnsupportedMediaType: 'Validation',
    exceptions.Throttled: 'Throttled',
}


def error_response(kind, message, status_code, details=None, retryable=False):
    error = {'kind': kind, 'message': message}
    if details is not None:
        error['details'] = details
    if retryable:
        error['retryable'] = True
    return Response({'success': False, 'error': error}, status=status_code)


def _first_message(detail):
    """Pull a readable message out of nested DRF validation detail"""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if field in ('non_field_errors', 'detail'):
                return message
            return f'{field}: {message}'
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    return str(detail)


def api_exception_handler(exc, context):
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown'

    if isinstance(exc, BookingEngineError):
        if exc.status_code >= 500:
            logger.error(f'[API] {view_name} failed with {exc.kind}: {exc.message}')
            message = exc.message if settings.DEBUG else exc.default_message
        else:
            message = exc.message
        return error_response(exc.kind, message, exc.status_code, retryable=exc.retryable)

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    if isinstance(exc, exceptions.ValidationError):
        return error_response('Validation', _first_message(exc.detail), status.HTTP_400_BAD_REQUEST,
                              details=exc.detail)

    if isinstance(exc, exceptions.APIException):
        kind = next((kind for cls, kind in DRF_ERROR_KINDS.items() if isinstance(exc, cls)), 'Error')
        response = error_response(kind, _first_message(exc.detail), exc.status_code)
        if getattr(exc, 'auth_header', None):
            response['WWW-Authenticate'] = exc.auth_header
        if getattr(exc, 'wait', None):
            response['Retry-After'] = str(int(exc.wait))
        return response

    logger.exception(f'[API] Unhandled error in {view_name}: {exc}')
    if settings.DEBUG:
        return None
    return error_response('Internal', GENERIC_SERVER_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)
