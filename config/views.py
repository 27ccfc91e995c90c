import logging

from django.db import connection, DatabaseError
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """Returns 503 when the database can't be reached."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError as e:
        logger.error("Database unreachable: %s", e)
        return JsonResponse({'status': 'unhealthy', 'database': 'unreachable'}, status=503)

    return JsonResponse({'status': 'ok', 'database': 'ok'})


def not_found(request, exception):
    return JsonResponse({'error': 'Not found'}, status=404)


def server_error(request):
    logger.error("Unhandled error on %s %s", request.method, request.path)
    return JsonResponse({'error': 'Internal server error'}, status=500)
