# shared/middleware.py
"""
HTTP middleware shared by every app.

SecurityHeadersMiddleware: hardening headers on all responses
RequestLoggingMiddleware: request id + one access log line per request
"""
import logging
import time
import uuid

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'


class SecurityHeadersMiddleware:
    """
    Add security headers Django does not set on its own.

    X-Frame-Options and HSTS are configured through settings instead.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        response['X-Content-Type-Options'] = 'nosniff'
        response['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response['Permissions-Policy'] = 'geolocation=(), microphone=(), camera=(), payment=()'
        return response


class RequestLoggingMiddleware:
    """
    Tag each request with an id and log method, path, status and duration.

    The id is taken from the incoming X-Request-ID header when present so that
    a proxy-assigned id survives, otherwise a new uuid4 hex is generated.
    It is exposed as ``request.request_id`` and echoed on the response.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.request_id = request.META.get('HTTP_X_REQUEST_ID') or uuid.uuid4().hex
        started = time.monotonic()

        response = self.get_response(request)

        elapsed_ms = (time.monotonic() - started) * 1000
        response[REQUEST_ID_HEADER] = request.request_id
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            f'{request.method} {request.get_full_path()} -> {response.status_code} '
            f'({elapsed_ms:.1f}ms) request_id={request.request_id}'
        )
        return response
