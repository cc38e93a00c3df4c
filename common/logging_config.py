"""
Request IDs for log records and responses.
"""
import logging
import threading
import time
import uuid

_local = threading.local()

logger = logging.getLogger(__name__)


def get_request_id():
    """Request ID of the request being handled on this thread, if any"""
    return getattr(_local, 'request_id', None)


class RequestIDFilter(logging.Filter):
    """
    Sets record.request_id so formatters can print it (N/A outside a request)
    """
    def filter(self, record):
        if not getattr(record, 'request_id', None):
            record.request_id = get_request_id() or 'N/A'
        return True


class RequestIDMiddleware:
    """
    Middleware to generate and attach unique request ID to each request.
    Request ID is available in request.request_id, in all log messages
    and in the X-Request-ID response header.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())[:8]  # Short 8-character ID
        request.request_id = request_id
        _local.request_id = request_id
        started = time.monotonic()

        try:
            response = self.get_response(request)
            response['X-Request-ID'] = request_id
            logger.debug(
                f"{request.method} {request.path} -> {response.status_code} "
                f"({(time.monotonic() - started) * 1000:.1f} ms)"
            )
            return response
        finally:
            _local.request_id = None

    def process_exception(self, request, exception):
        """Log exceptions with request ID"""
        request_id = getattr(request, 'request_id', 'N/A')
        logging.getLogger('django.request').error(
            f"[{request_id}] Exception: {type(exception).__name__}: {exception}",
            exc_info=True,
            extra={'request_id': request_id}
        )
