"""Operation models."""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class OperationStatus(str, Enum):
    """Operation status as reported by the control plane."""
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCESS = "Success"
    FAILURE = "Failure"
    CANCELLED = "Cancelled"
    # Transitional states some servers report while work is in flight
    CANCELLING = "Cancelling"
    STOPPED = "Stopped"

    @property
    def is_terminal(self) -> bool:
        """Check whether the status can no longer change."""
        return self in (OperationStatus.SUCCESS, OperationStatus.FAILURE, OperationStatus.CANCELLED)


class Operation(BaseModel):
    """Snapshot of a server-side operation."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    status: OperationStatus = OperationStatus.PENDING
    status_code: Optional[int] = None
    metadata: Any = None
    err: str = ""
    may_cancel: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    synchronous: bool = Field(default=False, description="Completed inline, nothing to poll")

    @property
    def path(self) -> str:
        """API path of the operation resource."""
        return f"/1.0/operations/{self.id}"

    @property
    def error_message(self) -> str:
        """Human readable failure reason."""
        if self.err:
            return self.err
        if isinstance(self.metadata, dict) and self.metadata.get("err"):
            return str(self.metadata["err"])
        return f"Operation {self.id} ended with status {self.status.value}"


def operation_id_from_path(path: str) -> str:
    """Extract an operation id from its resource path."""
    return path.rstrip("/").rsplit("/", 1)[-1]
