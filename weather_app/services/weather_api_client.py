"""Typed client for the weather forecast endpoint."""
import logging
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from weather_app.models import WeatherForecast

logger = logging.getLogger(__name__)

FORECAST_PATH = "/weatherforecast"

_forecast_list = TypeAdapter(List[Optional[WeatherForecast]])


class WeatherApiError(Exception):
    """Base class for forecast client errors."""


class TransportError(WeatherApiError):
    """The request failed to complete or returned a non-success status.

    ``status_code`` is None when no response was received at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DeserializationError(WeatherApiError):
    """The response body was not a JSON array of forecast records."""


class WeatherApiClient:
    """Fetches forecasts through an externally configured httpx client.

    Base address, timeouts, retries and service discovery all belong to the
    injected client; this class only issues the request and decodes the body.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        """Initialize the client.

        Args:
            http_client: Configured async client whose base_url points at the backend
        """
        self.http_client = http_client

    async def get_weather(self, max_items: int = 10) -> List[WeatherForecast]:
        """Fetch forecasts and return at most ``max_items`` of them.

        Args:
            max_items: Maximum number of records to return, taken from the front.
                Zero yields an empty list. A negative value raises ValueError
                instead of yielding an empty list.

        Returns:
            Forecasts in the order the backend sent them

        Raises:
            ValueError: If max_items is negative
            TransportError: On connection failure, redirect loop or non-success status
            DeserializationError: If the body cannot be decoded or is not a forecast array
        """
        if max_items < 0:
            raise ValueError(f"max_items must be >= 0 (got {max_items})")

        try:
            response = await self.http_client.get(FORECAST_PATH)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"GET {FORECAST_PATH} returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.DecodingError as e:
            raise DeserializationError(f"Undecodable response body: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"GET {FORECAST_PATH} failed: {e}") from e

        try:
            records = _forecast_list.validate_json(response.content)
        except ValidationError as e:
            raise DeserializationError(f"Invalid forecast payload: {e}") from e

        forecasts = [r for r in records if r is not None]
        return forecasts[:max_items]
