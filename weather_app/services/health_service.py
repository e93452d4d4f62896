"""Health check registry and evaluation."""
import asyncio
import inspect
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Union

from weather_app.models import HealthCheckEntry, HealthReport

logger = logging.getLogger(__name__)

LIVE_TAG = "live"


class HealthStatus(str, Enum):
    """Health states, ordered from worst to best."""
    UNHEALTHY = "Unhealthy"
    DEGRADED = "Degraded"
    HEALTHY = "Healthy"


_SEVERITY = {HealthStatus.UNHEALTHY: 0, HealthStatus.DEGRADED: 1, HealthStatus.HEALTHY: 2}


@dataclass(frozen=True)
class HealthCheckResult:
    status: HealthStatus
    description: Optional[str] = None

    @classmethod
    def healthy(cls, description: Optional[str] = None) -> "HealthCheckResult":
        return cls(HealthStatus.HEALTHY, description)

    @classmethod
    def degraded(cls, description: Optional[str] = None) -> "HealthCheckResult":
        return cls(HealthStatus.DEGRADED, description)

    @classmethod
    def unhealthy(cls, description: Optional[str] = None) -> "HealthCheckResult":
        return cls(HealthStatus.UNHEALTHY, description)


HealthCheck = Callable[[], Union[HealthCheckResult, Awaitable[HealthCheckResult]]]


@dataclass
class HealthCheckRegistration:
    name: str
    check: HealthCheck
    tags: List[str] = field(default_factory=list)


class HealthCheckService:
    """Service holding named, tagged health checks."""

    def __init__(self):
        self._registrations: Dict[str, HealthCheckRegistration] = {}

    def add_check(self, name: str, check: HealthCheck, tags: Iterable[str] = ()) -> "HealthCheckService":
        """Register a health check.

        Args:
            name: Unique check name
            check: Callable returning a HealthCheckResult (sync or async)
            tags: Tags used to filter checks, e.g. 'live'

        Returns:
            The service itself, so registrations can be chained

        Raises:
            ValueError: If a check with the same name already exists
        """
        if name in self._registrations:
            raise ValueError(f"Health check '{name}' is already registered")
        self._registrations[name] = HealthCheckRegistration(name=name, check=check, tags=list(tags))
        logger.debug(f"Registered health check {name} tags={list(tags)}")
        return self

    def has_check(self, name: str) -> bool:
        return name in self._registrations

    @property
    def registrations(self) -> List[HealthCheckRegistration]:
        return list(self._registrations.values())

    async def check_health(
        self,
        predicate: Optional[Callable[[HealthCheckRegistration], bool]] = None,
    ) -> HealthReport:
        """Run the selected checks and aggregate them into a report.

        The overall status is the worst status of the checks that ran;
        with no checks selected the report is Healthy.
        """
        selected = [r for r in self._registrations.values() if predicate is None or predicate(r)]
        started = time.perf_counter()
        results = await asyncio.gather(*(self._run(r) for r in selected))
        entries = {r.name: entry for r, entry in zip(selected, results)}

        overall = HealthStatus.HEALTHY
        for entry in entries.values():
            status = HealthStatus(entry.status)
            if _SEVERITY[status] < _SEVERITY[overall]:
                overall = status

        return HealthReport(
            status=overall.value,
            total_duration=time.perf_counter() - started,
            entries=entries,
        )

    async def _run(self, registration: HealthCheckRegistration) -> HealthCheckEntry:
        started = time.perf_counter()
        try:
            result = registration.check()
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.warning(f"Health check {registration.name} failed: {e}")
            result = HealthCheckResult.unhealthy(str(e))

        return HealthCheckEntry(
            status=result.status.value,
            description=result.description,
            duration=time.perf_counter() - started,
            tags=registration.tags,
        )


def is_live(registration: HealthCheckRegistration) -> bool:
    """Predicate selecting liveness checks."""
    return LIVE_TAG in registration.tags
