"""Test helpers shared across modules."""
from typing import Dict, List

import httpx

from weather_app.models import WeatherForecast

BASE_URL = "https://api.example.com"


def to_payload(forecasts: List[WeatherForecast]) -> List[Dict]:
    """Serialize forecasts the way the API service does."""
    return [f.model_dump(mode="json", by_alias=True) for f in forecasts]


def mock_client(handler) -> httpx.AsyncClient:
    """AsyncClient against BASE_URL backed by an httpx.MockTransport."""
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
