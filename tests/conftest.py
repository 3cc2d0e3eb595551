"""Shared fixtures."""

import pytest

from corral.operations import OperationTracker


class FakeTransport:
    """Scripted transport that records every request.

    Responses queued for a route are returned in order; the last one keeps
    being returned once the queue is drained.
    """

    endpoint = "https://lxd.example:8443"

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, body, status=200):
        self.routes.setdefault((method, path), []).append((status, body))

    def add_sync(self, method, path, metadata=None):
        self.add(method, path, {"type": "sync", "status": "Success", "status_code": 200, "metadata": metadata})

    def add_async(self, method, path, operation_id, metadata=None):
        self.add(method, path, {
            "type": "async",
            "status": "Operation created",
            "status_code": 100,
            "operation": f"/1.0/operations/{operation_id}",
            "metadata": {"id": operation_id, "status": "Running", "status_code": 103, "metadata": metadata},
        }, status=202)

    def add_operation(self, operation_id, status, metadata=None, err="", status_code=None):
        codes = {"Running": 103, "Pending": 105, "Success": 200, "Failure": 400, "Cancelled": 401}
        self.add_sync("GET", f"/1.0/operations/{operation_id}", {
            "id": operation_id,
            "status": status,
            "status_code": status_code or codes.get(status),
            "metadata": metadata,
            "err": err,
            "created_at": "2026-10-19T10:00:00Z",
        })

    def add_error(self, method, path, code, message):
        self.add(method, path, {"type": "error", "error": message, "error_code": code}, status=code)

    def request(self, method, path, json=None):
        self.requests.append((method, path, json))
        queue = self.routes.get((method, path))
        if not queue:
            return 404, {"type": "error", "error": "not found", "error_code": 404}
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def calls(self, method=None):
        """Requests made, optionally filtered by method."""
        return [r for r in self.requests if method is None or r[0] == method]


@pytest.fixture
def transport():
    """Create an empty fake transport."""
    return FakeTransport()


@pytest.fixture
def tracker(transport):
    """Create an operation tracker that does not actually sleep."""
    return OperationTracker(transport, poll_interval=0.001)
