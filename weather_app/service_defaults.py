"""Defaults every resource of the distributed app applies at startup.

Logging and request telemetry, default health checks, service discovery for
outbound HTTP clients with a standard retry policy, and the development-only
health endpoints.
"""
import logging
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from weather_app.controllers.health_controller import HealthController
from weather_app.services.health_service import LIVE_TAG, HealthCheckResult, HealthCheckService
from weather_app.services.resilient_transport import ResilientTransport
from weather_app.services.service_discovery_service import ServiceDiscoveryService
from weather_app.services.telemetry_service import (
    TelemetryService,
    log_outbound_request,
    log_outbound_response,
)
from weather_app.utils.colored_logger import set_logging_level

logger = logging.getLogger(__name__)

HEALTH_ENDPOINT_PATH = "/health"
ALIVENESS_ENDPOINT_PATH = "/alive"
METRICS_ENDPOINT_PATH = "/metrics"


def add_service_defaults(app: FastAPI, config_service) -> FastAPI:
    """Apply telemetry, health checks and service discovery to an app.

    Args:
        app: FastAPI application
        config_service: Configuration service

    Returns:
        The same app
    """
    set_logging_level(config_service.get_logging_level())
    configure_telemetry(app, config_service)
    add_default_health_checks(app)
    app.state.service_discovery = ServiceDiscoveryService(config_service)
    return app


def configure_telemetry(app: FastAPI, config_service) -> TelemetryService:
    """Install request telemetry once per app."""
    telemetry = getattr(app.state, "telemetry", None)
    if telemetry is None:
        telemetry = TelemetryService(getattr(app.state, "service_name", app.title))
        telemetry.install(app)
        app.state.telemetry = telemetry
    return telemetry


def add_default_health_checks(app: FastAPI) -> HealthCheckService:
    """Register the default liveness check ('self', tagged 'live')."""
    health = getattr(app.state, "health_checks", None)
    if health is None:
        health = HealthCheckService()
        app.state.health_checks = health
    if not health.has_check("self"):
        health.add_check("self", lambda: HealthCheckResult.healthy(), tags=[LIVE_TAG])
    return health


def map_default_endpoints(app: FastAPI, config_service) -> FastAPI:
    """Map /health, /alive and /metrics, in Development only."""
    if not config_service.is_development():
        logger.info(f"Environment {config_service.get_environment()}: default endpoints not mapped")
        return app

    controller = HealthController(add_default_health_checks(app), getattr(app.state, "telemetry", None))

    app.add_api_route(
        HEALTH_ENDPOINT_PATH, controller.get_health,
        methods=["GET"], response_class=PlainTextResponse, include_in_schema=False,
    )
    app.add_api_route(
        ALIVENESS_ENDPOINT_PATH, controller.get_alive,
        methods=["GET"], response_class=PlainTextResponse, include_in_schema=False,
    )
    app.add_api_route(
        METRICS_ENDPOINT_PATH, controller.get_metrics,
        methods=["GET"], include_in_schema=False,
    )
    return app


def create_service_http_client(
    config_service,
    base_address: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build an AsyncClient for another resource of the app.

    Args:
        config_service: Configuration service (endpoints, timeout, retry policy)
        base_address: Plain or logical address, e.g. 'https+http://apiservice'
        transport: Inner transport, replaced in tests

    Returns:
        Client with a resolved base_url and a retrying transport
    """
    base_url = ServiceDiscoveryService(config_service).resolve(base_address)
    resilient = ResilientTransport(transport=transport, **config_service.get_resilience_settings())
    logger.info(f"HTTP client for {base_address} -> {base_url}")
    return httpx.AsyncClient(
        base_url=base_url,
        transport=resilient,
        timeout=config_service.get_http_timeout(),
        event_hooks={"request": [log_outbound_request], "response": [log_outbound_response]},
    )
