"""Tests for service discovery."""
from pathlib import Path
from typing import Dict

import pytest
import yaml

from weather_app.services import ConfigService, ServiceDiscoveryService, ServiceResolutionError


@pytest.fixture
def discovery(config_service: ConfigService) -> ServiceDiscoveryService:
    return ServiceDiscoveryService(config_service)


def test_scheme_list_falls_back_to_http(discovery: ServiceDiscoveryService) -> None:
    """Test https+http resolves to the http endpoint when no https one exists."""
    assert discovery.resolve("https+http://apiservice") == "http://localhost:5380"


def test_scheme_list_prefers_first_scheme(config_data: Dict, tmp_path: Path) -> None:
    """Test https wins when both are configured."""
    config_data["services"]["apiservice"]["https"] = ["https://localhost:7380"]
    path = tmp_path / "both.yml"
    path.write_text(yaml.safe_dump(config_data), encoding="utf-8")
    discovery = ServiceDiscoveryService(ConfigService(str(path), environ={}))

    assert discovery.resolve("https+http://apiservice") == "https://localhost:7380"
    assert discovery.resolve("http://apiservice") == "http://localhost:5380"


def test_path_is_preserved(discovery: ServiceDiscoveryService) -> None:
    """Test logical address with a path."""
    assert discovery.resolve("https+http://apiservice/api/v1") == "http://localhost:5380/api/v1"


def test_unknown_service_passes_through(discovery: ServiceDiscoveryService) -> None:
    """Test pass-through with the preferred scheme."""
    assert discovery.resolve("https+http://catalog:8443") == "https://catalog:8443"


def test_plain_url_is_unchanged(discovery: ServiceDiscoveryService) -> None:
    """Test concrete addresses are left alone."""
    assert discovery.resolve("http://example.com:8080/x") == "http://example.com:8080/x"


def test_address_without_scheme_is_rejected(discovery: ServiceDiscoveryService) -> None:
    """Test invalid input."""
    with pytest.raises(ServiceResolutionError):
        discovery.resolve("apiservice")
