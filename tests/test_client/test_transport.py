"""Tests for the HTTP transport and client wiring."""

import httpx
import pytest
from unittest.mock import patch

from corral.client import Client
from corral.errors import BadRequest, Conflict, InternalServerError, NotFound, ServerError
from corral.models.config import ClientConfig
from corral.transport import HttpTransport, api_request


def make_transport(handler):
    """Create an HTTP transport served by a handler function."""
    return HttpTransport("https://lxd.example:8443/", verify=False, transport=httpx.MockTransport(handler))


class TestHttpTransport:
    """Test HttpTransport."""

    def test_request_round_trip(self):
        """Test that method, path and JSON body are sent and decoded."""
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = request.read()
            return httpx.Response(200, json={"type": "sync", "metadata": {"ok": True}})

        with make_transport(handler) as transport:
            status, body = transport.request("POST", "/1.0/containers", json={"name": "test"})

        assert status == 200
        assert body == {"type": "sync", "metadata": {"ok": True}}
        assert seen["method"] == "POST"
        assert seen["url"] == "https://lxd.example:8443/1.0/containers"
        assert b'"name"' in seen["body"]

    def test_empty_body(self):
        """Test responses without content."""
        transport = make_transport(lambda request: httpx.Response(204))

        assert transport.request("DELETE", "/1.0/operations/x") == (204, {})

    def test_plain_text_error(self):
        """Test that non-JSON error bodies become error envelopes."""
        transport = make_transport(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(ServerError, match="Bad Gateway"):
            api_request(transport, "GET", "/1.0")

    def test_connection_errors_pass_through(self):
        """Test that transport failures are not wrapped."""
        def handler(request):
            raise httpx.ConnectError("connection refused")

        transport = make_transport(handler)

        with pytest.raises(httpx.ConnectError):
            transport.request("GET", "/1.0")


class TestErrorMapping:
    """Test mapping of error envelopes."""

    @pytest.mark.parametrize("code, error", [
        (400, BadRequest),
        (404, NotFound),
        (409, Conflict),
        (500, InternalServerError),
    ])
    def test_error_codes(self, transport, code, error):
        """Test that server error codes select the error class."""
        transport.add_error("GET", "/1.0/containers/test", code, "nope")

        with pytest.raises(error) as exc_info:
            api_request(transport, "GET", "/1.0/containers/test")

        assert exc_info.value.status_code == code
        assert exc_info.value.message == "nope"


class TestClient:
    """Test the client facade."""

    def test_shares_one_tracker(self, transport):
        """Test that all managers use the same operation tracker."""
        client = Client(ClientConfig(poll_interval=2.0, operation_timeout=60), transport=transport)

        assert client.containers.operations is client.operations
        assert client.lifecycle.operations is client.operations
        assert client.migration.operations is client.operations
        assert client.operations.poll_interval == 2.0
        assert client.operations.timeout == 60

    def test_create_and_wait(self, transport):
        """Test an end-to-end create through the facade."""
        transport.add_async("POST", "/1.0/containers", "op-1")
        transport.add_operation("op-1", "Success")

        with Client(transport=transport) as client:
            client.operations.wait(client.containers.create("test", alias="cirros"), poll_interval=0.001)

        assert [r[0] for r in transport.requests] == ["POST", "GET"]

    def test_from_file(self, tmp_path):
        """Test building a client from a config file."""
        config_file = tmp_path / "client.yaml"
        config_file.write_text("client:\n  endpoint: https://lxd2.example:8443\n  verify: false\n")

        with Client.from_file(config_file) as client:
            assert client.transport.endpoint == "https://lxd2.example:8443"

    def test_from_file_applies_log_level(self, tmp_path):
        """Test that the configured log level is applied."""
        config_file = tmp_path / "client.yaml"
        config_file.write_text("client:\n  verify: false\n  log_level: debug\n")

        with patch("corral.client.setup_logging") as mock_setup:
            Client.from_file(config_file).close()

        mock_setup.assert_called_once_with("DEBUG")
