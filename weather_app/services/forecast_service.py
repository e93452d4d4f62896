"""Sample forecast generation for the API service."""
import datetime
import logging
import random
from typing import Callable, List, Optional

from weather_app.models import WeatherForecast

logger = logging.getLogger(__name__)

SUMMARIES = [
    "Freezing", "Bracing", "Chilly", "Cool", "Mild",
    "Warm", "Balmy", "Hot", "Sweltering", "Scorching",
]


class ForecastService:
    """Service producing sample forecasts for the days after today."""

    def __init__(
        self,
        config_service=None,
        rng: Optional[random.Random] = None,
        today: Callable[[], datetime.date] = datetime.date.today,
    ):
        """Initialize forecast service.

        Args:
            config_service: Optional configuration service (forecast.days)
            rng: Random generator, injectable for deterministic output
            today: Callable returning the current date
        """
        self.config_service = config_service
        self._rng = rng or random.Random()
        self._today = today

    def get_forecasts(self, days: Optional[int] = None) -> List[WeatherForecast]:
        """Generate one forecast per day, starting tomorrow.

        Args:
            days: Number of days. Defaults to forecast.days from config, or 5.

        Returns:
            List of WeatherForecast
        """
        if days is None:
            days = self.config_service.get_forecast_days() if self.config_service else 5
        if days < 0:
            raise ValueError(f"days must be >= 0 (got {days})")

        start = self._today()
        forecasts = [
            WeatherForecast(
                date=start + datetime.timedelta(days=index),
                temperature_c=self._rng.randrange(-20, 55),
                summary=self._rng.choice(SUMMARIES),
            )
            for index in range(1, days + 1)
        ]
        logger.debug(f"Generated {len(forecasts)} forecasts starting {start}")
        return forecasts
