import logging
import threading
import time
import uuid
from collections import Counter

from django.conf import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestStats:
    """Request counters owned by one middleware instance."""

    def __init__(self):
        self._lock = threading.Lock()
        self.total = 0
        self.errors = 0
        self.slow = 0
        self.by_endpoint = Counter()
        self.by_method = Counter()
        self.by_status = Counter()

    def record(self, method, endpoint, status_code, slow=False):
        with self._lock:
            self.total += 1
            if status_code >= 400:
                self.errors += 1
            if slow:
                self.slow += 1
            self.by_endpoint[f"{method} {endpoint}"] += 1
            self.by_method[method] += 1
            self.by_status[status_code] += 1

    def snapshot(self):
        with self._lock:
            return {
                "total": self.total,
                "errors": self.errors,
                "slow": self.slow,
                "errorRate": round(self.errors / self.total, 4) if self.total else 0.0,
                "byEndpoint": dict(self.by_endpoint),
                "byMethod": dict(self.by_method),
                "byStatus": dict(self.by_status),
            }


def _endpoint(request):
    # route pattern keeps per-id paths under one key
    match = getattr(request, "resolver_match", None)
    if match is not None and match.route:
        return "/" + match.route
    return request.path


class RequestLogMiddleware:
    """Tags each request with an id (kept if the client sent one) and writes one access-log line."""

    def __init__(self, get_response):
        self.get_response = get_response
        self.stats = RequestStats()
        self.slow_request_ms = settings.SLOW_REQUEST_MS

    def __call__(self, request):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.request_id = request_id

        started = time.perf_counter()
        response = self.get_response(request)
        duration_ms = (time.perf_counter() - started) * 1000

        response[REQUEST_ID_HEADER] = request_id
        slow = duration_ms > self.slow_request_ms
        self.stats.record(request.method, _endpoint(request), response.status_code, slow=slow)

        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s %s %.1fms request_id=%s",
            request.method,
            request.get_full_path(),
            response.status_code,
            duration_ms,
            request_id,
        )
        if slow:
            logger.warning(
                "Slow request %s %s took %.0fms (limit %sms) request_id=%s",
                request.method,
                request.get_full_path(),
                duration_ms,
                self.slow_request_ms,
                request_id,
            )
        return response
