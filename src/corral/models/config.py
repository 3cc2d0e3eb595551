"""Configuration models."""

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientConfig(BaseModel):
    """Connection and polling settings for one control-plane instance."""
    model_config = ConfigDict(extra="ignore")

    endpoint: str = Field(default="https://127.0.0.1:8443")
    client_cert: Optional[str] = Field(None, description="Path to client certificate")
    client_key: Optional[str] = Field(None, description="Path to client key")
    verify: Union[bool, str] = Field(default=True, description="TLS verification or CA bundle path")
    request_timeout: float = Field(default=30.0, gt=0)
    poll_interval: float = Field(default=0.5, gt=0)
    operation_timeout: Optional[float] = Field(default=None, gt=0)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Keep the endpoint joinable with absolute API paths."""
        return v.rstrip("/")
