"""Weather distributed application: API service and web front end."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI

from weather_app.controllers import ForecastController, WeatherController
from weather_app.router import create_api_router, create_web_router
from weather_app.service_defaults import (
    add_service_defaults,
    create_service_http_client,
    map_default_endpoints,
)
from weather_app.services import ConfigService, ForecastService, WeatherApiClient
from weather_app.utils.colored_logger import setup_colored_logging

__version__ = "1.0.0"

# Load environment variables
load_dotenv()

# Configure colored logging
setup_colored_logging(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_api_app(
    config_path: Optional[str] = None,
    config_service: Optional[ConfigService] = None,
    forecast_service: Optional[ForecastService] = None,
) -> FastAPI:
    """Create the API service application.

    Args:
        config_path: Optional path to config file
        config_service: Pre-built configuration service (takes precedence)
        forecast_service: Optional forecast service, replaced in tests

    Returns:
        Configured FastAPI application
    """
    config_service = config_service or ConfigService(config_path)
    forecast_service = forecast_service or ForecastService(config_service)
    forecast_controller = ForecastController(forecast_service=forecast_service)

    app = FastAPI(
        title="Weather API Service",
        description="Backend serving sample weather forecasts",
        version=__version__,
    )
    app.state.service_name = "apiservice"

    add_service_defaults(app, config_service)
    app.include_router(create_api_router(forecast_controller))
    map_default_endpoints(app, config_service)

    logger.info("API service initialized successfully")
    return app


def create_web_app(
    config_path: Optional[str] = None,
    config_service: Optional[ConfigService] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Create the web front end application.

    Args:
        config_path: Optional path to config file
        config_service: Pre-built configuration service (takes precedence)
        http_client: Client for the forecast backend. When omitted one is
            built through service discovery and closed on shutdown.

    Returns:
        Configured FastAPI application
    """
    config_service = config_service or ConfigService(config_path)

    owns_client = http_client is None
    if owns_client:
        http_client = create_service_http_client(config_service, config_service.get_weather_api_address())

    weather_controller = WeatherController(
        weather_api_client=WeatherApiClient(http_client),
        max_items=config_service.get_max_items(),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_client:
            await http_client.aclose()
            logger.info("Forecast backend client closed")

    app = FastAPI(
        title="Weather Web Frontend",
        description="Web front end rendering forecasts from the API service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service_name = "webfrontend"

    add_service_defaults(app, config_service)
    app.include_router(create_web_router(weather_controller))
    map_default_endpoints(app, config_service)

    logger.info("Web front end initialized successfully")
    logger.info(f"Configuration: {config_service.get_safe_config()}")
    return app
