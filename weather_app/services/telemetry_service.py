"""Request telemetry: logging plus in-memory metrics."""
import logging
import threading
import time
from typing import Dict, Iterable, Tuple

import httpx
from fastapi import FastAPI, Request

from weather_app.models import MetricsSnapshot, RequestMetric
from weather_app.utils.colored_logger import get_component_logger

logger = get_component_logger(__name__, "telemetry")

# Health probes would otherwise dominate the request counters
DEFAULT_EXCLUDED_PATHS = ("/health", "/alive")


class TelemetryService:
    """Collects per-route request counts and durations."""

    def __init__(self, service_name: str, excluded_paths: Iterable[str] = DEFAULT_EXCLUDED_PATHS):
        """Initialize telemetry service.

        Args:
            service_name: Name reported in snapshots and log lines
            excluded_paths: Request paths that are neither logged nor recorded
        """
        self.service_name = service_name
        self.excluded_paths = frozenset(excluded_paths)
        self._lock = threading.Lock()
        self._metrics: Dict[Tuple[str, str, int], RequestMetric] = {}

    def record(self, method: str, route: str, status_code: int, duration: float) -> None:
        key = (method, route, status_code)
        with self._lock:
            metric = self._metrics.get(key)
            if metric is None:
                metric = RequestMetric(method=method, route=route, status_code=status_code)
                self._metrics[key] = metric
            metric.count += 1
            metric.total_duration += duration
            metric.max_duration = max(metric.max_duration, duration)

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            requests = [m.model_copy() for m in self._metrics.values()]
        requests.sort(key=lambda m: (m.route, m.method, m.status_code))
        return MetricsSnapshot(
            service_name=self.service_name,
            total_requests=sum(m.count for m in requests),
            requests=requests,
        )

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()

    def install(self, app: FastAPI) -> None:
        """Install the request middleware on an app."""

        @app.middleware("http")
        async def telemetry_middleware(request: Request, call_next):
            path = request.url.path
            if path in self.excluded_paths:
                return await call_next(request)

            started = time.perf_counter()
            status_code = 500
            try:
                response = await call_next(request)
                status_code = response.status_code
                return response
            finally:
                duration = time.perf_counter() - started
                route = getattr(request.scope.get("route"), "path", path)
                self.record(request.method, route, status_code, duration)
                logger.info(f"{request.method} {path} -> {status_code} in {duration * 1000:.1f} ms")


async def log_outbound_request(request: httpx.Request) -> None:
    logger.debug(f"HTTP {request.method} {request.url}")


async def log_outbound_response(response: httpx.Response) -> None:
    request = response.request
    logger.info(f"HTTP {request.method} {request.url} <- {response.status_code}")
