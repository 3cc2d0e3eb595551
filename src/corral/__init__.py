"""
Corral - client-side orchestration for LXD-style container control planes.

Resolves container sources, submits lifecycle actions and drives the
resulting asynchronous operations to completion, including live migration
between instances.
"""

__version__ = "1.0.0"
__author__ = "Corral Development Team"

# Re-export key components for easier access
from corral.client import Client
from corral.models.config import ClientConfig
from corral.models.container import Container, ContainerSpec
from corral.models.migration import MigrationHandle, MigrationOverrides
from corral.source import resolve_source
from corral.utils.logging import setup_logging

__all__ = [
    "Client",
    "ClientConfig",
    "Container",
    "ContainerSpec",
    "MigrationHandle",
    "MigrationOverrides",
    "resolve_source",
    "setup_logging",
]
