"""Controllers package."""
from .forecast_controller import ForecastController
from .health_controller import HealthController
from .weather_controller import WeatherController

__all__ = [
    "ForecastController",
    "HealthController",
    "WeatherController",
]
