"""Tests for the app host builder (no processes started)."""
import pytest

from weather_app.hosting import DistributedApplicationBuilder, create_default_app_host


def test_default_topology_start_order() -> None:
    """Test apiservice starts before webfrontend."""
    app = create_default_app_host()
    assert [r.name for r in app._start_order()] == ["apiservice", "webfrontend"]


def test_references_are_injected_as_service_variables() -> None:
    """Test the environment handed to a referencing resource."""
    app = create_default_app_host(environment="Testing")
    api, web = app._start_order()
    api.port = 5380

    env = app._environment_for(web)

    assert env["APP_ENVIRONMENT"] == "Testing"
    assert env["services__apiservice__http__0"] == "http://127.0.0.1:5380"
    assert app.get_endpoint("apiservice") == "http://127.0.0.1:5380"


def test_endpoint_unavailable_before_start() -> None:
    """Test resources without a port."""
    app = create_default_app_host()
    with pytest.raises(RuntimeError):
        app.get_endpoint("webfrontend")
    with pytest.raises(KeyError):
        app.get_endpoint("catalog")


def test_builder_validation() -> None:
    """Test duplicate names and unknown dependencies."""
    builder = DistributedApplicationBuilder()
    api = builder.add_project("apiservice", "weather_app:create_api_app")
    with pytest.raises(ValueError):
        builder.add_project("apiservice", "weather_app:create_api_app")

    other = DistributedApplicationBuilder()
    other.add_project("webfrontend", "weather_app:create_web_app").with_reference(api)
    with pytest.raises(KeyError):
        other.build()


def test_dependency_cycle_detected() -> None:
    """Test cycles are reported when ordering resources."""
    builder = DistributedApplicationBuilder()
    a = builder.add_project("a", "weather_app:create_api_app")
    b = builder.add_project("b", "weather_app:create_api_app")
    a.wait_for(b)
    b.wait_for(a)

    with pytest.raises(ValueError):
        builder.build()._start_order()
