"""Migration models."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from corral.models.source import MigrationSecrets


class MigrationHandle(BaseModel):
    """Everything a target instance needs to pull a container from a source."""
    operation: str = Field(..., description="Websocket URL of the migration operation")
    secrets: MigrationSecrets
    certificate: Optional[str] = None

    # Source container spec at the time of the handshake
    name: str
    architecture: Optional[str] = None
    config: Dict[str, str] = Field(default_factory=dict)
    ephemeral: bool = False
    profiles: List[str] = Field(default_factory=list)


class MigrationOverrides(BaseModel):
    """Caller choices that win over the source container's spec."""
    model_config = ConfigDict(extra="forbid")

    architecture: Optional[str] = None
    certificate: Optional[str] = None
    config: Optional[Dict[str, Any]] = None
    ephemeral: Optional[bool] = None
    profiles: Optional[List[str]] = None
    move: bool = False
