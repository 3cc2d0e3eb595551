"""Submission and tracking of asynchronous server-side operations."""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Union

from corral.errors import BadRequest, Cancelled, InvalidArgument, Timeout
from corral.models.operation import Operation, OperationStatus, operation_id_from_path
from corral.transport import Transport, api_request


logger = logging.getLogger(__name__)

OperationRef = Union[Operation, str]


def _operation_id(handle: OperationRef) -> str:
    operation_id = handle.id if isinstance(handle, Operation) else handle
    if not operation_id:
        raise InvalidArgument("Operation has no id; await synchronous handles as the returned object")
    return operation_id


class OperationTracker:
    """Submits actions and drives their operations to a terminal state.

    The tracker only reads operations; every poll yields a new snapshot.
    Waiting never cancels the server-side work, even on timeout.
    """

    def __init__(
        self,
        transport: Transport,
        poll_interval: float = 0.5,
        timeout: Optional[float] = None,
    ):
        """Initialize operation tracker."""
        self.transport = transport
        self.poll_interval = poll_interval
        self.timeout = timeout

    def submit(
        self, method: str, path: str, body: Optional[Dict[str, Any]] = None
    ) -> Operation:
        """Submit an action and return a handle to its operation."""
        logger.info(f"Submitting {method} {path}")
        response = api_request(self.transport, method, path, json=body)

        if response.get("type") == "async":
            metadata = response.get("metadata") or {}
            if "id" not in metadata:
                metadata = dict(metadata, id=operation_id_from_path(response.get("operation", "")))
            operation = Operation.model_validate(metadata)
            logger.debug(f"Operation {operation.id} started for {method} {path}")
            return operation

        # Synchronous responses are already complete and have no server-side id
        return Operation(
            id="",
            status=OperationStatus.SUCCESS,
            status_code=response.get("status_code"),
            metadata=response.get("metadata"),
            synchronous=True,
        )

    def get(self, handle: OperationRef) -> Operation:
        """Fetch the current snapshot of an operation."""
        response = api_request(self.transport, "GET", f"/1.0/operations/{_operation_id(handle)}")
        return Operation.model_validate(response.get("metadata") or {})

    def list(self) -> List[str]:
        """List the ids of all operations known to the instance."""
        response = api_request(self.transport, "GET", "/1.0/operations")
        metadata = response.get("metadata") or {}
        if isinstance(metadata, dict):
            paths = [p for group in metadata.values() for p in group]
        else:
            paths = metadata
        return [operation_id_from_path(p) for p in paths]

    def cancel(self, handle: OperationRef) -> None:
        """Ask the server to cancel an operation."""
        operation_id = _operation_id(handle)
        logger.info(f"Cancelling operation {operation_id}")
        api_request(self.transport, "DELETE", f"/1.0/operations/{operation_id}")

    def wait(
        self,
        handle: OperationRef,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Block until the operation finishes and return its metadata.

        Raises:
            BadRequest: the operation failed.
            Cancelled: the operation was cancelled.
            Timeout: no terminal state before ``timeout`` seconds passed.

        Synchronous handles have an empty id and must be passed as the
        returned ``Operation``, not by id.
        """
        interval = poll_interval if poll_interval is not None else self.poll_interval
        timeout = timeout if timeout is not None else self.timeout
        if isinstance(handle, Operation) and handle.synchronous:
            return self._result(handle)
        operation_id = _operation_id(handle)

        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            operation = self.get(operation_id)
            if operation.status.is_terminal:
                return self._result(operation)

            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                raise self._timeout(operation_id, timeout)

            logger.debug(f"Operation {operation_id} is {operation.status.value}, polling again")
            time.sleep(interval if remaining is None else min(interval, remaining))

    async def wait_async(
        self,
        handle: OperationRef,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Cancellable variant of :meth:`wait` for use inside an event loop."""
        interval = poll_interval if poll_interval is not None else self.poll_interval
        timeout = timeout if timeout is not None else self.timeout
        if isinstance(handle, Operation) and handle.synchronous:
            return self._result(handle)
        operation_id = _operation_id(handle)

        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while True:
            operation = await asyncio.to_thread(self.get, operation_id)
            if operation.status.is_terminal:
                return self._result(operation)

            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                raise self._timeout(operation_id, timeout)

            logger.debug(f"Operation {operation_id} is {operation.status.value}, polling again")
            await asyncio.sleep(interval if remaining is None else min(interval, remaining))

    def _result(self, operation: Operation) -> Any:
        """Translate a terminal operation into its result or error."""
        if operation.status == OperationStatus.SUCCESS:
            logger.debug(f"Operation {operation.id} succeeded")
            return operation.metadata

        if operation.status == OperationStatus.CANCELLED:
            logger.warning(f"Operation {operation.id} was cancelled")
            raise Cancelled(operation.error_message, status_code=operation.status_code, operation_id=operation.id)

        logger.error(f"Operation {operation.id} failed: {operation.error_message}")
        raise BadRequest(operation.error_message, status_code=operation.status_code, operation_id=operation.id)

    def _timeout(self, operation_id: str, timeout: Optional[float]) -> Timeout:
        logger.warning(f"Operation {operation_id} did not finish within {timeout}s")
        return Timeout(
            f"Operation {operation_id} did not finish within {timeout}s",
            operation_id=operation_id,
        )
