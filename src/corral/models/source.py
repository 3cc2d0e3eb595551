"""Source descriptor models.

A new container is materialized from exactly one source: an image, nothing
at all, a local container, or a container streamed from another instance.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class SourceOptions(BaseModel):
    """User-facing options that select a source."""
    model_config = ConfigDict(extra="forbid")

    empty: bool = False
    alias: Optional[str] = None
    fingerprint: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None
    server: Optional[str] = None
    protocol: Optional[str] = None
    secret: Optional[str] = None
    certificate: Optional[str] = None


class ImageSource(BaseModel):
    """Container filesystem from a local or remote image."""
    type: Literal["image"] = "image"
    alias: Optional[str] = None
    fingerprint: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None

    # Remote image server
    mode: Optional[Literal["pull"]] = None
    server: Optional[str] = None
    protocol: Optional[Literal["lxd", "simplestreams"]] = None
    secret: Optional[str] = None
    certificate: Optional[str] = None


class EmptySource(BaseModel):
    """Container with no root filesystem."""
    type: Literal["none"] = "none"


class CopySource(BaseModel):
    """Copy of a container on the same instance."""
    type: Literal["copy"] = "copy"
    source: str = Field(..., description="Source container name")


class MigrationSecrets(BaseModel):
    """Single-use tokens for the control, filesystem and CRIU streams."""
    control: str
    fs: str
    criu: Optional[str] = None


class MigrationSource(BaseModel):
    """Container pulled from another instance."""
    type: Literal["migration"] = "migration"
    mode: Literal["pull"] = "pull"
    operation: str = Field(..., description="Websocket URL of the source operation")
    secrets: MigrationSecrets
    certificate: Optional[str] = None


SourceDescriptor = Annotated[
    Union[ImageSource, EmptySource, CopySource, MigrationSource],
    Field(discriminator="type"),
]


def source_payload(source: BaseModel) -> Dict[str, Any]:
    """Serialize a source descriptor, leaving out unset fields."""
    return source.model_dump(exclude_none=True)
