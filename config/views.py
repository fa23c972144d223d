import logging

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """Liveness probe reporting database and cache reachability."""
    checks = {}

    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        checks['database'] = 'ok'
    except Exception:
        logger.exception("Health check: database unreachable")
        checks['database'] = 'error'

    try:
        cache.get('health-check')
        checks['cache'] = 'ok'
    except Exception:
        logger.warning("Health check: cache unreachable", exc_info=True)
        checks['cache'] = 'error'

    # The cache is advisory, only the database decides health
    healthy = checks['database'] == 'ok'
    return JsonResponse(
        {'status': 'ok' if healthy else 'error', 'checks': checks},
        status=200 if healthy else 503
    )


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Not found',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'error': 'Internal server error',
        'status': 500
    }, status=500)
