"""Pydantic models and schemas for the application."""
import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class WeatherForecast(BaseModel):
    """One day's forecast.

    Property names are matched case-insensitively on input, so ``Date``,
    ``temperatureC`` and ``temperature_c`` all decode to the same field.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    date: datetime.date = Field(..., description="Forecast day")
    temperature_c: int = Field(..., alias="temperatureC", description="Temperature in Celsius")
    summary: Optional[str] = Field(None, description="Short text label, e.g. 'Sunny'")

    @model_validator(mode="before")
    @classmethod
    def _match_keys_ignoring_case(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        lookup: Dict[str, str] = {}
        for name, field in cls.model_fields.items():
            lookup[name.lower()] = name
            if field.alias:
                lookup[field.alias.lower()] = name

        normalized: Dict[str, Any] = {}
        for key, value in data.items():
            target = lookup.get(str(key).lower()) if isinstance(key, str) else None
            if target is not None:
                normalized[target] = value
        return normalized

    @computed_field(alias="temperatureF")
    @property
    def temperature_f(self) -> int:
        """Temperature in Fahrenheit, truncated to an integer (25 C -> 76 F)."""
        return 32 + int(self.temperature_c / 0.5556)


class HealthCheckEntry(BaseModel):
    """Result of a single registered health check."""
    status: str = Field(..., description="Healthy, Degraded or Unhealthy")
    description: Optional[str] = Field(None, description="Optional detail, e.g. exception text")
    duration: float = Field(0.0, ge=0.0, description="Seconds spent running the check")
    tags: List[str] = Field(default_factory=list, description="Tags the check was registered with")


class HealthReport(BaseModel):
    """Aggregated health report."""
    status: str
    total_duration: float = 0.0
    entries: Dict[str, HealthCheckEntry] = Field(default_factory=dict)


class RequestMetric(BaseModel):
    """Request counters for one (method, route, status) triple."""
    method: str
    route: str
    status_code: int
    count: int = 0
    total_duration: float = 0.0
    max_duration: float = 0.0


class MetricsSnapshot(BaseModel):
    """Telemetry snapshot exposed on the development metrics endpoint."""
    service_name: str
    total_requests: int = 0
    requests: List[RequestMetric] = Field(default_factory=list)
