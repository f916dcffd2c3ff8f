# apps/api/exceptions.py
"""
DRF exception handler.

Renders every handled error in one envelope:

    {"status": "error", "message": "...", "code": "FARM_NOT_FOUND"}

- LedgerAppError subclasses use their own code and status_code
- DRF validation errors become VALIDATION_ERROR and carry the field errors
- other DRF errors (auth, permission, 404, method) keep DRF's status and
  message with an upper-cased DRF code

Anything DRF does not handle is re-raised to Django (500, logged).
"""
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.exceptions import LedgerAppError

logger = logging.getLogger(__name__)

DJANGO_ERROR_CODES = {
    Http404: 'NOT_FOUND',
    PermissionDenied: 'PERMISSION_DENIED',
}


def _error_code(exc):
    if isinstance(exc, APIException):
        return str(exc.default_code).upper()
    for exc_class, code in DJANGO_ERROR_CODES.items():
        if isinstance(exc, exc_class):
            return code
    return 'ERROR'


def ledger_exception_handler(exc, context):
    if isinstance(exc, LedgerAppError):
        view = context.get('view')
        logger.info(f"{type(view).__name__}: {exc.code} {exc.message}")
        return Response(exc.as_dict(), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {
            'status': 'error',
            'message': 'Validation failed',
            'code': 'VALIDATION_ERROR',
            'errors': response.data,
        }
        return response

    detail = response.data.get('detail') if isinstance(response.data, dict) else None
    response.data = {
        'status': 'error',
        'message': str(detail) if detail is not None else str(exc),
        'code': _error_code(exc),
    }
    return response
