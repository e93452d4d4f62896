"""Local hosting of the distributed app."""
from .app_host import (
    DistributedApplication,
    DistributedApplicationBuilder,
    ProjectResource,
    ResourceBuilder,
    create_default_app_host,
)

__all__ = [
    "DistributedApplication",
    "DistributedApplicationBuilder",
    "ProjectResource",
    "ResourceBuilder",
    "create_default_app_host",
]
