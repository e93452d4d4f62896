"""Configuration service for managing application config."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict, SettingsError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "WEATHER_APP_CONFIG"
DEVELOPMENT = "Development"


class EnvironmentOverrides(BaseSettings):
    """Environment variables layered over config.yml.

    Nested keys use a double underscore, so
    ``services__apiservice__http__0=http://localhost:5000`` overrides
    ``services.apiservice.http[0]``.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_environment: Optional[str] = None
    services: Dict[str, Any] = Field(default_factory=dict)
    logging: Dict[str, Any] = Field(default_factory=dict)
    web: Dict[str, Any] = Field(default_factory=dict)
    http_client: Dict[str, Any] = Field(default_factory=dict)
    resilience: Dict[str, Any] = Field(default_factory=dict)
    forecast: Dict[str, Any] = Field(default_factory=dict)


class MappingEnvSource(EnvSettingsSource):
    """Env settings source reading from an explicit mapping instead of os.environ."""

    def __init__(self, settings_cls, environ: Mapping[str, str]):
        self._environ = environ
        super().__init__(settings_cls)

    def _load_env_vars(self) -> Mapping[str, Optional[str]]:
        return {key.lower(): value for key, value in self._environ.items()}


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        """Initialize configuration service.

        Args:
            config_path: Path to config file. If None, will search default locations.
            environ: Environment variables used for overrides (defaults to os.environ)
        """
        self._config: Optional[Dict] = None
        self._config_path = config_path
        self._environ = os.environ if environ is None else environ
        self.path: Optional[Path] = None
        self.load_config()

    def _candidate_paths(self) -> List[Path]:
        if self._config_path:
            return [Path(self._config_path)]

        candidates = []
        env_path = self._environ.get(CONFIG_PATH_ENV)
        if env_path:
            candidates.append(Path(env_path))
        candidates.append(Path("config.yml"))
        candidates.append(Path("config/config.yml"))
        candidates.append(Path(__file__).resolve().parent.parent.parent / "config.yml")
        return candidates

    def load_config(self) -> Dict:
        """Load configuration from YAML file and apply environment overrides.

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If config file not found
            ValueError: If the file is not a YAML mapping
        """
        config_path = next((p for p in self._candidate_paths() if p.exists()), None)
        if config_path is None:
            raise FileNotFoundError(
                "config.yml not found in current directory or config/ directory"
            )

        with open(config_path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Failed to parse config {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config {config_path} must contain a mapping at the top level")

        self._apply_env_overrides(data)
        self._config = data
        self.path = config_path.resolve()

        logger.info(f"Configuration loaded from {config_path}")
        logger.info(f"Environment: {self.get_environment()}")

        return self._config

    def _apply_env_overrides(self, data: Dict) -> None:
        """Merge APP_ENVIRONMENT and nested double-underscore variables into the config tree."""
        try:
            overrides = MappingEnvSource(EnvironmentOverrides, self._environ)()
        except SettingsError as e:
            raise ValueError(f"Invalid environment override: {e}") from e

        environment = overrides.pop("app_environment", None)
        if environment:
            data["environment"] = environment
        _merge(data, overrides)

    @property
    def config(self) -> Dict:
        """Get current configuration."""
        if self._config is None:
            raise RuntimeError("Configuration not loaded")
        return self._config

    def _section(self, name: str) -> Dict:
        return self.config.get(name) or {}

    def get_environment(self) -> str:
        """Get environment name (Development, Production, ...)."""
        return str(self.config.get("environment") or "Production")

    def is_development(self) -> bool:
        return self.get_environment().lower() == DEVELOPMENT.lower()

    def get_logging_level(self) -> int:
        """Get configured logging level as a logging module constant."""
        level_name = str(self._section("logging").get("level", "INFO")).upper()
        level = logging.getLevelName(level_name)
        return level if isinstance(level, int) else logging.INFO

    def get_service_endpoints(self, service_name: str) -> Dict[str, List[str]]:
        """Get configured endpoints for a logical service, keyed by scheme.

        Args:
            service_name: Logical service name (e.g. 'apiservice')

        Returns:
            Mapping of scheme to endpoint URLs, in configured order
        """
        services = self._section("services")
        entry = services.get(service_name) or services.get(service_name.lower()) or {}
        endpoints: Dict[str, List[str]] = {}
        for scheme, values in entry.items():
            endpoints[str(scheme).lower()] = [str(v) for v in _as_list(values) if v]
        return endpoints

    def get_resilience_settings(self) -> Dict[str, Any]:
        """Get retry policy for outbound HTTP clients."""
        section = self._section("resilience")
        return {
            "max_retries": int(section.get("max_retries", 3)),
            "backoff_factor": float(section.get("backoff_factor", 0.5)),
            "status_forcelist": tuple(
                int(s) for s in _as_list(section.get("status_forcelist", (408, 429, 500, 502, 503, 504)))
            ),
        }

    def get_http_timeout(self) -> float:
        return float(self._section("http_client").get("timeout", 10.0))

    def get_weather_api_address(self) -> str:
        """Get the (possibly logical) base address of the forecast backend."""
        return str(self._section("web").get("weather_api", "https+http://apiservice"))

    def get_max_items(self) -> int:
        return int(self._section("web").get("max_items", 10))

    def get_forecast_days(self) -> int:
        return int(self._section("forecast").get("days", 5))

    def get_safe_config(self) -> Dict:
        """Get configuration summary suitable for logging.

        Returns:
            Safe configuration dictionary
        """
        return {
            "environment": self.get_environment(),
            "services": sorted(self._section("services").keys()),
            "weather_api": self.get_weather_api_address(),
            "max_items": self.get_max_items(),
            "resilience": self.get_resilience_settings(),
        }


def _index_key(key: Any):
    text = str(key)
    return (0, int(text)) if text.isdigit() else (1, text)


def _as_list(values: Any) -> List[Any]:
    """Normalize a list, an index-keyed mapping or a scalar to a list."""
    if isinstance(values, dict):
        return [values[k] for k in sorted(values, key=_index_key)]
    if isinstance(values, (list, tuple)):
        return list(values)
    return [values]


def _merge(base: Dict, overrides: Dict) -> None:
    for key, value in overrides.items():
        current = base.get(key)
        if isinstance(value, dict) and isinstance(current, list):
            current = {str(i): v for i, v in enumerate(current)}
            base[key] = current
        if isinstance(value, dict) and isinstance(current, dict):
            _merge(current, value)
        else:
            base[key] = value
