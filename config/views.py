import logging

from django.db import connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """Liveness probe that also pings the database."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except Exception:
        logger.exception('Health check failed to reach the database')
        return JsonResponse({'status': 'error', 'database': 'unavailable'}, status=503)

    return JsonResponse({'status': 'ok'})


def error_404(request, exception):
    """JSON 404 for paths outside the API routes."""
    return JsonResponse({'error': 'Recurso no encontrado'}, status=404)


def error_500(request):
    """JSON 500; the traceback is logged by Django's request logger."""
    return JsonResponse({'error': 'Error interno del servidor'}, status=500)
