"""Pydantic models for requests, responses and configuration."""

from corral.models.config import ClientConfig
from corral.models.container import Container, ContainerSpec, ContainerState
from corral.models.migration import MigrationHandle, MigrationOverrides
from corral.models.operation import Operation, OperationStatus
from corral.models.source import (
    CopySource,
    EmptySource,
    ImageSource,
    MigrationSecrets,
    MigrationSource,
    SourceDescriptor,
    SourceOptions,
)

__all__ = [
    "ClientConfig",
    "Container",
    "ContainerSpec",
    "ContainerState",
    "MigrationHandle",
    "MigrationOverrides",
    "Operation",
    "OperationStatus",
    "CopySource",
    "EmptySource",
    "ImageSource",
    "MigrationSecrets",
    "MigrationSource",
    "SourceDescriptor",
    "SourceOptions",
]
