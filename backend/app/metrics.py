import logging
import threading
import time
from collections import deque
from typing import Deque

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
WINDOW_SECONDS = 3600

access_logger = logging.getLogger("api_metrics")


def configure_logging(level: str | None = None) -> None:
    """Root logging for the service; the access log inherits its level."""
    logging.basicConfig(level=level or settings.LOG_LEVEL, format=LOG_FORMAT)


class APIMetrics:
    """Rolling count of requests seen during the last hour."""

    def __init__(self, window: float = WINDOW_SECONDS):
        self.window = window
        self._requests: Deque[float] = deque()
        self._lock = threading.Lock()

    def add_request(self, now: float | None = None) -> int:
        now = time.perf_counter() if now is None else now
        with self._lock:
            self._requests.append(now)
            self._cleanup(now)
            return len(self._requests)

    def _cleanup(self, now: float):
        cutoff = now - self.window
        while self._requests and self._requests[0] < cutoff:
            self._requests.popleft()

    def get_requests_last_hour(self, now: float | None = None) -> int:
        now = time.perf_counter() if now is None else now
        with self._lock:
            self._cleanup(now)
            return len(self._requests)


metrics = APIMetrics()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Access log, one line per request. Unhandled errors are logged as 500."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        seen = metrics.add_request(started)
        route = f"{request.method} {request.url.path}"

        try:
            response = await call_next(request)
        except Exception:
            access_logger.exception(
                "%s -> 500 in %.4fs (%d requests in the last hour)",
                route, time.perf_counter() - started, seen,
            )
            raise

        access_logger.info(
            "%s -> %d in %.4fs (%d requests in the last hour)",
            route, response.status_code, time.perf_counter() - started, seen,
        )
        return response
