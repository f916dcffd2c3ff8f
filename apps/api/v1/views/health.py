# apps/api/v1/views/health.py
"""
Health check endpoint for load balancers and monitoring.

Returns HTTP 200 when the database answers, 503 otherwise.
No authentication required.
"""
import logging

from django.db import DatabaseError, connection
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """GET /api/v1/health/"""
    status = {
        'status': 'healthy',
        'database': 'unknown',
    }

    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        status['database'] = 'connected'
    except DatabaseError as e:
        logger.error(f"Health check database failure: {e}")
        status['database'] = f'error: {type(e).__name__}'
        status['status'] = 'unhealthy'
        return Response(status, status=503)

    return Response(status, status=200)
