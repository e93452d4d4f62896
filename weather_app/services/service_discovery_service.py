"""Service discovery: resolve logical service names to endpoints."""
import logging
from typing import List, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

logger = logging.getLogger(__name__)


class ServiceResolutionError(ValueError):
    """Raised when an address cannot be parsed for resolution."""


class ServiceDiscoveryService:
    """Resolves addresses like ``https+http://apiservice`` using configuration.

    Endpoints come from ``services.<name>.<scheme>`` in the config tree, which
    the app host fills through ``services__<name>__<scheme>__0`` variables.
    """

    def __init__(self, config_service):
        """Initialize service discovery.

        Args:
            config_service: Configuration service providing service endpoints
        """
        self.config_service = config_service

    def resolve(self, address: str) -> str:
        """Resolve an address to a concrete base URL.

        Args:
            address: Plain URL or logical address with a '+'-separated scheme list

        Returns:
            Concrete URL. The path of the logical address is preserved.
        """
        schemes, host, port, path = _split_address(address)
        endpoints = self.config_service.get_service_endpoints(host)

        for scheme in schemes:
            for endpoint in endpoints.get(scheme, []):
                resolved = _join_path(endpoint, path)
                logger.debug(f"Resolved {address} -> {resolved}")
                return resolved

        if len(schemes) == 1 and not endpoints:
            return address

        # Pass-through: treat the logical name as a DNS host with the preferred scheme
        netloc = f"{host}:{port}" if port else host
        fallback = urlunsplit((schemes[0], netloc, path, "", ""))
        logger.warning(f"No endpoint configured for service '{host}', using {fallback}")
        return fallback


def _split_address(address: str) -> Tuple[List[str], str, Optional[int], str]:
    parts = urlsplit(address)
    if not parts.scheme or not parts.hostname:
        raise ServiceResolutionError(f"Cannot resolve address without scheme and host: {address!r}")
    schemes = [s for s in parts.scheme.lower().split("+") if s]
    return schemes, parts.hostname, parts.port, parts.path


def _join_path(endpoint: str, path: str) -> str:
    if not path or path == "/":
        return endpoint
    return endpoint.rstrip("/") + "/" + path.lstrip("/")
