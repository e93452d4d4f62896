"""Models package."""
from .schemas import (
    HealthCheckEntry,
    HealthReport,
    MetricsSnapshot,
    RequestMetric,
    WeatherForecast,
)

__all__ = [
    "HealthCheckEntry",
    "HealthReport",
    "MetricsSnapshot",
    "RequestMetric",
    "WeatherForecast",
]
