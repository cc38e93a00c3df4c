"""
Health Check Endpoints for the rental admin

Provides endpoints for:
- Liveness checks (is the app running?)
- Readiness checks (can the app serve requests?)
- Deep health checks (database, cache, row counts)
"""

import time
import logging
from django.http import JsonResponse
from django.db import connection, DatabaseError
from django.core.cache import cache
from django.views.decorators.http import require_GET
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)

VERSION = '1.0.0'


def check_database():
    """Returns (ok, latency_ms, error)"""
    start = time.time()
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
    except DatabaseError as e:
        logger.error(f'Health check - Database error: {e}')
        return False, None, f'Database: {e}'
    return True, round((time.time() - start) * 1000, 2), None


def check_cache(key='health_check_test'):
    """Returns (ok, latency_ms, error)"""
    start = time.time()
    try:
        cache.set(key, 'ok', 10)
        ok = cache.get(key) == 'ok'
        cache.delete(key)
    except Exception as e:
        # Cache backends raise their own client errors
        logger.error(f'Health check - Cache error: {e}')
        return False, None, f'Cache: {e}'
    if not ok:
        return False, None, 'Cache: Failed to read/write'
    return True, round((time.time() - start) * 1000, 2), None


@csrf_exempt
@require_GET
def health_check(request):
    """
    Basic health check - returns 200 if app is running.
    """
    return JsonResponse({
        'status': 'healthy',
        'timestamp': time.time(),
    })


@csrf_exempt
@require_GET
def readiness_check(request):
    """
    Readiness check - verifies database and cache connectivity.
    """
    db_ok, _, db_error = check_database()
    cache_ok, _, cache_error = check_cache()
    errors = [error for error in (db_error, cache_error) if error]
    ready = db_ok and cache_ok

    return JsonResponse({
        'status': 'ready' if ready else 'not_ready',
        'timestamp': time.time(),
        'checks': {'database': db_ok, 'cache': cache_ok},
        'errors': errors or None,
    }, status=200 if ready else 503)


@csrf_exempt
@require_GET
def deep_health_check(request):
    """
    Deep health check - latencies plus row counts of the rental tables.
    """
    from apartments.models import Apartment
    from tenants.models import Tenant
    from rentals.models import Rental

    db_ok, db_latency, db_error = check_database()
    cache_ok, cache_latency, cache_error = check_cache('deep_health_check_test')
    errors = [error for error in (db_error, cache_error) if error]

    models_check = {'status': False, 'details': {}}
    if db_ok:
        try:
            models_check = {
                'status': True,
                'details': {
                    'apartments': Apartment.objects.count(),
                    'tenants': Tenant.objects.count(),
                    'rentals': Rental.objects.count(),
                    'active_rentals': Rental.objects.active().count(),
                },
            }
        except DatabaseError as e:
            errors.append(f'Models: {e}')
            logger.error(f'Deep health check - Model error: {e}')

    healthy = db_ok and cache_ok
    return JsonResponse({
        'status': 'healthy' if healthy else 'unhealthy',
        'timestamp': time.time(),
        'checks': {
            'database': {'status': db_ok, 'latency_ms': db_latency},
            'cache': {'status': cache_ok, 'latency_ms': cache_latency},
            'models': models_check,
        },
        'errors': errors or None,
        'version': VERSION,
    }, status=200 if healthy else 503)


def get_health_urls():
    """
    Returns URL patterns for health endpoints.
        urlpatterns += get_health_urls()
    """
    from django.urls import path

    return [
        path('health/', health_check, name='health_check'),
        path('health/ready/', readiness_check, name='readiness_check'),
        path('health/deep/', deep_health_check, name='deep_health_check'),
    ]
