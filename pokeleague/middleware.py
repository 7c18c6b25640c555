"""Per-endpoint request timing."""

from __future__ import annotations

import threading
import time

from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from pokeleague.utils.logging import get_logger, request_context

logger = get_logger(__name__)


class EndpointStats(BaseModel):
    endpoint: str
    count: int = 0
    total_ms: float = 0.0
    min_ms: float = 0.0
    max_ms: float = 0.0
    error_count: int = 0

    @property
    def average_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0

    @property
    def success_rate(self) -> float:
        """Percentage of requests that did not fail."""
        if not self.count:
            return 0.0
        return (self.count - self.error_count) / self.count * 100

    def record(self, elapsed_ms: float, failed: bool) -> None:
        if self.count == 0:
            self.min_ms = self.max_ms = elapsed_ms
        else:
            self.min_ms = min(self.min_ms, elapsed_ms)
            self.max_ms = max(self.max_ms, elapsed_ms)
        self.count += 1
        self.total_ms += elapsed_ms
        if failed:
            self.error_count += 1


class RequestStatistics:
    """Thread-safe counters keyed by ``"METHOD /path"``."""

    def __init__(self):
        self._stats: dict[str, EndpointStats] = {}
        self._total = 0
        self._lock = threading.Lock()

    @property
    def total_requests(self) -> int:
        with self._lock:
            return self._total

    def record(self, endpoint: str, elapsed_ms: float, status_code: int) -> None:
        failed = status_code >= 500
        with self._lock:
            self._total += 1
            stats = self._stats.get(endpoint)
            if stats is None:
                stats = self._stats[endpoint] = EndpointStats(endpoint=endpoint)
            stats.record(elapsed_ms, failed)

    def snapshot(self) -> list[EndpointStats]:
        """Copies of all endpoint stats, busiest first."""
        with self._lock:
            items = [s.model_copy() for s in self._stats.values()]
        return sorted(items, key=lambda s: s.count, reverse=True)

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()
            self._total = 0


class RequestStatisticsMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, statistics: RequestStatistics):
        super().__init__(app)
        self.statistics = statistics

    async def dispatch(self, request: Request, call_next):
        endpoint = f"{request.method} {request.url.path}"
        with request_context(request.method, request.url.path) as request_id:
            start = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                elapsed_ms = (time.perf_counter() - start) * 1000
                self.statistics.record(endpoint, elapsed_ms, 500)
                logger.exception("Request failed")
                raise

            elapsed_ms = (time.perf_counter() - start) * 1000
            self.statistics.record(endpoint, elapsed_ms, response.status_code)
            logger.info("Request handled", status=response.status_code, elapsed_ms=round(elapsed_ms, 2))
        response.headers["X-Request-ID"] = request_id
        return response
