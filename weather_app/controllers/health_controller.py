"""Health controller for liveness/readiness endpoints."""
from typing import Dict

from fastapi.responses import PlainTextResponse

from weather_app.services.health_service import HealthStatus, is_live
from weather_app.utils.colored_logger import get_component_logger

logger = get_component_logger(__name__, "health")


class HealthController:
    """Controller for health operations."""

    def __init__(self, health_service, telemetry_service=None):
        """Initialize health controller.

        Args:
            health_service: Health check service
            telemetry_service: Optional telemetry service for the metrics snapshot
        """
        self.health_service = health_service
        self.telemetry_service = telemetry_service

    async def get_health(self) -> PlainTextResponse:
        """Run all checks. Unhealthy maps to 503, anything else to 200."""
        report = await self.health_service.check_health()
        return self._to_response(report.status)

    async def get_alive(self) -> PlainTextResponse:
        """Run only the liveness checks."""
        report = await self.health_service.check_health(is_live)
        return self._to_response(report.status)

    async def get_metrics(self) -> Dict:
        if self.telemetry_service is None:
            return {"service_name": None, "total_requests": 0, "requests": []}
        return self.telemetry_service.snapshot().model_dump()

    @staticmethod
    def _to_response(status: str) -> PlainTextResponse:
        code = 503 if status == HealthStatus.UNHEALTHY.value else 200
        if code != 200:
            logger.warning(f"Health status {status}")
        return PlainTextResponse(status, status_code=code)
