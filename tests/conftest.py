"""Shared fixtures."""
import datetime
from pathlib import Path
from typing import Callable, Dict, List

import pytest
import yaml

from weather_app.models import WeatherForecast
from weather_app.services import ConfigService


@pytest.fixture
def config_data() -> Dict:
    """Baseline configuration, modified per test before config_service is built."""
    return {
        "environment": "Development",
        "logging": {"level": "INFO"},
        "services": {"apiservice": {"http": ["http://localhost:5380"]}},
        "web": {"weather_api": "https+http://apiservice", "max_items": 10},
        "http_client": {"timeout": 5.0},
        "resilience": {"max_retries": 2, "backoff_factor": 0.0},
        "forecast": {"days": 5},
    }


@pytest.fixture
def config_file(tmp_path: Path, config_data: Dict) -> Path:
    path = tmp_path / "config.yml"
    path.write_text(yaml.safe_dump(config_data), encoding="utf-8")
    return path


@pytest.fixture
def config_service(config_file: Path) -> ConfigService:
    """Config service isolated from the process environment."""
    return ConfigService(str(config_file), environ={})


@pytest.fixture
def make_forecasts() -> Callable[[int], List[WeatherForecast]]:
    def _make(count: int) -> List[WeatherForecast]:
        today = datetime.date(2024, 6, 1)
        return [
            WeatherForecast(
                date=today + datetime.timedelta(days=i),
                temperature_c=20 + i,
                summary=f"Day {i}",
            )
            for i in range(count)
        ]

    return _make
