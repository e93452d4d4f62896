"""Local orchestration of the app's resources.

Each project resource runs as ``python -m uvicorn --factory`` on a free
loopback port. References between resources are injected as
``services__<name>__http__0`` variables, which service discovery reads back.
"""
import asyncio
import os
import socket
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from weather_app.utils.colored_logger import get_component_logger

logger = get_component_logger(__name__, "apphost")

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_TIMEOUT = 30.0
HEALTH_PATH = "/health"


@dataclass
class ProjectResource:
    name: str
    factory: str
    references: List[str] = field(default_factory=list)
    wait_for: List[str] = field(default_factory=list)
    external_http_endpoints: bool = False
    port: Optional[int] = None
    process: Optional[asyncio.subprocess.Process] = None

    @property
    def url(self) -> str:
        if self.port is None:
            raise RuntimeError(f"Resource '{self.name}' has not been started")
        return f"http://127.0.0.1:{self.port}"


class ResourceBuilder:
    """Fluent configuration of one resource."""

    def __init__(self, resource: ProjectResource):
        self.resource = resource

    @property
    def name(self) -> str:
        return self.resource.name

    def with_reference(self, other: "ResourceBuilder") -> "ResourceBuilder":
        self.resource.references.append(other.name)
        return self

    def wait_for(self, other: "ResourceBuilder") -> "ResourceBuilder":
        self.resource.wait_for.append(other.name)
        return self

    def with_external_http_endpoints(self) -> "ResourceBuilder":
        self.resource.external_http_endpoints = True
        return self


class DistributedApplicationBuilder:
    """Collects resources and builds a DistributedApplication."""

    def __init__(self, environment: str = "Development", config_path: Optional[str] = None):
        self.environment = environment
        self.config_path = config_path
        self._resources: Dict[str, ProjectResource] = {}

    def add_project(self, name: str, factory: str) -> ResourceBuilder:
        """Add a project resource.

        Args:
            name: Resource name, also its service discovery name
            factory: Import path of an app factory, e.g. 'weather_app:create_api_app'

        Returns:
            Builder for further configuration
        """
        if name in self._resources:
            raise ValueError(f"Resource '{name}' already exists")
        resource = ProjectResource(name=name, factory=factory)
        self._resources[name] = resource
        return ResourceBuilder(resource)

    def build(self) -> "DistributedApplication":
        for resource in self._resources.values():
            for dependency in resource.references + resource.wait_for:
                if dependency not in self._resources:
                    raise KeyError(f"Resource '{resource.name}' depends on unknown resource '{dependency}'")
        return DistributedApplication(list(self._resources.values()), self.environment, self.config_path)


class DistributedApplication:
    """Running set of resources. Use as an async context manager."""

    def __init__(self, resources: List[ProjectResource], environment: str, config_path: Optional[str] = None):
        self._resources = {r.name: r for r in resources}
        self.environment = environment
        self.config_path = config_path

    async def __aenter__(self) -> "DistributedApplication":
        try:
            await self.start()
        except BaseException:
            await self.stop()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def _get(self, name: str) -> ProjectResource:
        if name not in self._resources:
            raise KeyError(f"Unknown resource '{name}'")
        return self._resources[name]

    def _start_order(self) -> List[ProjectResource]:
        ordered: List[ProjectResource] = []
        done = set()
        visiting = set()

        def visit(resource: ProjectResource) -> None:
            if resource.name in done:
                return
            if resource.name in visiting:
                raise ValueError(f"Dependency cycle at resource '{resource.name}'")
            visiting.add(resource.name)
            for dependency in resource.references + resource.wait_for:
                visit(self._resources[dependency])
            visiting.discard(resource.name)
            done.add(resource.name)
            ordered.append(resource)

        for resource in self._resources.values():
            visit(resource)
        return ordered

    def _environment_for(self, resource: ProjectResource) -> Dict[str, str]:
        env = dict(os.environ)
        env["APP_ENVIRONMENT"] = self.environment
        if self.config_path:
            env["WEATHER_APP_CONFIG"] = str(Path(self.config_path).resolve())
        for reference in resource.references:
            env[f"services__{reference}__http__0"] = self._get(reference).url
        return env

    async def start(self) -> None:
        """Start every resource, honoring references and wait_for order."""
        for resource in self._start_order():
            for dependency in resource.wait_for:
                await self.wait_for_resource_healthy(dependency)

            resource.port = _free_port()
            logger.info(f"Starting {resource.name} ({resource.factory}) on {resource.url}")
            resource.process = await asyncio.create_subprocess_exec(
                sys.executable, "-m", "uvicorn", "--factory", resource.factory,
                "--host", "127.0.0.1", "--port", str(resource.port),
                cwd=str(PROJECT_ROOT),
                env=self._environment_for(resource),
            )

    async def stop(self) -> None:
        """Terminate all resource processes."""
        for resource in reversed(self._start_order()):
            process = resource.process
            if process is None or process.returncode is not None:
                continue
            logger.info(f"Stopping {resource.name}")
            process.terminate()
            try:
                await asyncio.wait_for(process.wait(), timeout=10)
            except asyncio.TimeoutError:
                process.kill()
                await process.wait()

    def get_endpoint(self, name: str) -> str:
        return self._get(name).url

    def create_http_client(self, name: str, timeout: float = 10.0) -> httpx.AsyncClient:
        """Create a client whose base_url is the resource's endpoint."""
        return httpx.AsyncClient(base_url=self.get_endpoint(name), timeout=timeout, trust_env=False)

    async def wait_for_resource_healthy(self, name: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Poll the resource's health endpoint until it answers 200.

        Raises:
            RuntimeError: If the resource process exits while waiting
            TimeoutError: If the resource is not healthy within timeout seconds
        """
        resource = self._get(name)
        deadline = time.monotonic() + timeout
        async with httpx.AsyncClient(base_url=resource.url, timeout=2.0, trust_env=False) as client:
            while True:
                if resource.process is not None and resource.process.returncode is not None:
                    raise RuntimeError(
                        f"Resource '{name}' exited with code {resource.process.returncode}"
                    )
                try:
                    response = await client.get(HEALTH_PATH)
                    if response.status_code == 200:
                        logger.info(f"{name} is healthy")
                        return
                except httpx.TransportError:
                    pass
                if time.monotonic() >= deadline:
                    raise TimeoutError(f"Resource '{name}' not healthy after {timeout}s")
                await asyncio.sleep(0.25)


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def create_default_app_host(environment: str = "Development", config_path: Optional[str] = None) -> DistributedApplication:
    """Build the apiservice + webfrontend topology."""
    builder = DistributedApplicationBuilder(environment=environment, config_path=config_path)

    api_service = builder.add_project("apiservice", "weather_app:create_api_app")

    (builder.add_project("webfrontend", "weather_app:create_web_app")
        .with_external_http_endpoints()
        .with_reference(api_service)
        .wait_for(api_service))

    return builder.build()
