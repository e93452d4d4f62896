"""Forecast controller for the API service."""
from typing import List

from weather_app.models import WeatherForecast
from weather_app.utils.colored_logger import get_component_logger

logger = get_component_logger(__name__, "apiservice")

ROOT_MESSAGE = "API service is running. Navigate to /weatherforecast to see sample data."


class ForecastController:
    """Controller for forecast operations."""

    def __init__(self, forecast_service):
        """Initialize forecast controller.

        Args:
            forecast_service: Service generating forecasts
        """
        self.forecast_service = forecast_service

    def get_root_message(self) -> str:
        return ROOT_MESSAGE

    def get_forecasts(self) -> List[WeatherForecast]:
        """Return the sample forecasts for the coming days."""
        forecasts = self.forecast_service.get_forecasts()
        logger.info(f"Serving {len(forecasts)} forecasts")
        return forecasts
