"""Container state transitions."""

import logging
from typing import Any, Dict, Optional

from corral.models.container import ContainerState
from corral.models.operation import Operation
from corral.operations import OperationTracker
from corral.transport import api_request


logger = logging.getLogger(__name__)


class LifecycleController:
    """Requests state changes for containers.

    No local check is made against the current state; the control plane is
    the only authority and illegal transitions surface when the returned
    operation is awaited.
    """

    def __init__(self, operations: OperationTracker):
        """Initialize lifecycle controller."""
        self.operations = operations

    def state(self, name: str) -> ContainerState:
        """Get the runtime state of a container."""
        response = api_request(self.operations.transport, "GET", f"/1.0/containers/{name}/state")
        return ContainerState.model_validate(response.get("metadata") or {})

    def start(self, name: str, timeout: Optional[int] = None, force: Optional[bool] = None,
              stateful: Optional[bool] = None) -> Operation:
        """Start a stopped container."""
        return self._change_state(name, "start", timeout, force, stateful)

    def stop(self, name: str, timeout: Optional[int] = None, force: Optional[bool] = None,
             stateful: Optional[bool] = None) -> Operation:
        """Stop a running container."""
        return self._change_state(name, "stop", timeout, force, stateful)

    def restart(self, name: str, timeout: Optional[int] = None, force: Optional[bool] = None,
                stateful: Optional[bool] = None) -> Operation:
        """Restart a running container."""
        return self._change_state(name, "restart", timeout, force, stateful)

    def freeze(self, name: str, timeout: Optional[int] = None, force: Optional[bool] = None,
               stateful: Optional[bool] = None) -> Operation:
        """Suspend all processes of a running container."""
        return self._change_state(name, "freeze", timeout, force, stateful)

    def unfreeze(self, name: str, timeout: Optional[int] = None, force: Optional[bool] = None,
                 stateful: Optional[bool] = None) -> Operation:
        """Resume a frozen container."""
        return self._change_state(name, "unfreeze", timeout, force, stateful)

    def _change_state(self, name: str, action: str, timeout, force, stateful) -> Operation:
        body: Dict[str, Any] = {"action": action}
        if timeout is not None:
            body["timeout"] = timeout
        if force is not None:
            body["force"] = force
        if stateful is not None:
            body["stateful"] = stateful

        logger.info(f"Requesting {action} of container {name}")
        return self.operations.submit("PUT", f"/1.0/containers/{name}/state", body)
