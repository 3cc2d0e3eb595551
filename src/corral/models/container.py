"""Container specification models."""

from typing import Any, Dict, List, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from corral.models.source import SourceDescriptor, source_payload


def stringify_config(config: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Coerce config values to the strings the control plane stores."""
    if not config:
        return {}
    result = {}
    for key, value in config.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        result[str(key)] = str(value)
    return result


def strip_volatile(config: Mapping[str, str]) -> Dict[str, str]:
    """Drop runtime-assigned identity keys."""
    return {k: v for k, v in config.items() if not k.startswith("volatile.")}


class ContainerSpec(BaseModel):
    """Container creation request."""
    name: str = Field(..., description="Container name")
    architecture: Optional[str] = None
    profiles: Optional[List[str]] = None
    ephemeral: bool = Field(default=False)
    config: Dict[str, str] = Field(default_factory=dict)
    devices: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    source: SourceDescriptor
    base_image: Optional[str] = Field(None, description="Base image fingerprint hint")

    @field_validator("config", mode="before")
    @classmethod
    def coerce_config(cls, v):
        """Accept non-string config values."""
        return stringify_config(v)

    def to_payload(self) -> Dict[str, Any]:
        """Build the creation request body."""
        payload: Dict[str, Any] = {
            "name": self.name,
            "ephemeral": self.ephemeral,
            "config": self.config,
            "source": source_payload(self.source),
        }
        if self.architecture:
            payload["architecture"] = self.architecture
        if self.profiles is not None:
            payload["profiles"] = list(self.profiles)
        if self.devices:
            payload["devices"] = self.devices
        if self.base_image:
            payload["base-image"] = self.base_image
        return payload


class Container(BaseModel):
    """Container as reported by the control plane."""
    model_config = ConfigDict(extra="ignore")

    name: str
    architecture: Optional[str] = None
    profiles: List[str] = Field(default_factory=list)
    ephemeral: bool = False
    config: Dict[str, str] = Field(default_factory=dict)
    devices: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    status: Optional[str] = None
    status_code: Optional[int] = None
    stateful: bool = False
    created_at: Optional[str] = None

    @field_validator("config", mode="before")
    @classmethod
    def coerce_config(cls, v):
        return stringify_config(v)

    def to_payload(self) -> Dict[str, Any]:
        """Writable fields for an update."""
        return {
            "architecture": self.architecture,
            "profiles": list(self.profiles),
            "ephemeral": self.ephemeral,
            "config": self.config,
            "devices": self.devices,
        }


class ContainerState(BaseModel):
    """Runtime state of a container."""
    model_config = ConfigDict(extra="ignore")

    status: str = Field(..., description="Stopped, Running or Frozen")
    status_code: Optional[int] = None
    pid: Optional[int] = None
