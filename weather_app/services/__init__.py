"""Services package."""
from .config_service import ConfigService
from .forecast_service import ForecastService
from .health_service import HealthCheckResult, HealthCheckService, HealthStatus
from .resilient_transport import ResilientTransport
from .service_discovery_service import ServiceDiscoveryService, ServiceResolutionError
from .telemetry_service import TelemetryService
from .weather_api_client import (
    DeserializationError,
    TransportError,
    WeatherApiClient,
    WeatherApiError,
)

__all__ = [
    "ConfigService",
    "ForecastService",
    "HealthCheckResult",
    "HealthCheckService",
    "HealthStatus",
    "ResilientTransport",
    "ServiceDiscoveryService",
    "ServiceResolutionError",
    "TelemetryService",
    "DeserializationError",
    "TransportError",
    "WeatherApiClient",
    "WeatherApiError",
]
