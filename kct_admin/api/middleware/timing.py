"""
Request Timing Middleware
Keeps a rolling window of request latencies and flags slow requests.
"""

import logging
import time
from collections import deque
from threading import Lock
from typing import Callable, Dict, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ...config.settings import get_settings

logger = logging.getLogger(__name__)


class LatencyTracker:
    """Rolling latency window with percentile statistics."""

    def __init__(self, window_size: int = 1000):
        self.latencies: deque = deque(maxlen=window_size)
        self.slow_requests = 0
        self.lock = Lock()

    def record(self, latency_ms: float, slow: bool = False) -> None:
        with self.lock:
            self.latencies.append(latency_ms)
            if slow:
                self.slow_requests += 1

    def get_stats(self) -> Dict[str, float]:
        """
        Latency statistics over the window.

        Returns:
            Dict with count, p50, p95, p99, mean, max and slow_requests
        """
        with self.lock:
            values = sorted(self.latencies)
            slow = self.slow_requests

        if not values:
            return {"count": 0, "p50": 0.0, "p95": 0.0, "p99": 0.0, "mean": 0.0, "max": 0.0,
                    "slow_requests": slow}

        return {
            "count": len(values),
            "p50": self._percentile(values, 50),
            "p95": self._percentile(values, 95),
            "p99": self._percentile(values, 99),
            "mean": sum(values) / len(values),
            "max": values[-1],
            "slow_requests": slow,
        }

    def reset(self) -> None:
        with self.lock:
            self.latencies.clear()
            self.slow_requests = 0

    @staticmethod
    def _percentile(sorted_values: List[float], percentile: int) -> float:
        index = min(int(percentile / 100.0 * len(sorted_values)), len(sorted_values) - 1)
        return sorted_values[index]


_latency_tracker = LatencyTracker()


def get_latency_tracker() -> LatencyTracker:
    return _latency_tracker


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Records each request's latency and warns above the slow_request_ms setting."""

    def __init__(self, app, tracker: Optional[LatencyTracker] = None,
                 slow_request_ms: Optional[int] = None):
        super().__init__(app)
        self.tracker = tracker or get_latency_tracker()
        self.slow_request_ms = slow_request_ms or get_settings().slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        slow = duration_ms > self.slow_request_ms
        self.tracker.record(duration_ms, slow=slow)
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if slow:
            logger.warning(
                f"Slow request: {request.method} {request.url.path}",
                extra={"duration_ms": duration_ms, "threshold_ms": self.slow_request_ms},
            )

        return response
