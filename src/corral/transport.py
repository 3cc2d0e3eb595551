"""HTTP transport for talking to a control-plane instance."""

import logging
import ssl
from typing import Any, Dict, Optional, Protocol, Tuple, Union

import httpx

from corral.errors import error_for
from corral.models.config import ClientConfig


logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Minimal request/response facility the client is built on."""

    endpoint: str

    def request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Tuple[int, Dict[str, Any]]:
        """Send a request and return the status code and decoded body."""
        ...


def _ssl_context(
    verify: Union[bool, str], cert: Optional[str], key: Optional[str]
) -> ssl.SSLContext:
    """Build the TLS context for client-certificate authentication."""
    if isinstance(verify, str):
        context = ssl.create_default_context(cafile=verify)
    else:
        context = ssl.create_default_context()
        if not verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
    if cert:
        context.load_cert_chain(cert, key)
    return context


class HttpTransport:
    """Transport backed by ``httpx.Client``.

    Connection failures surface as ``httpx.TransportError`` and are not
    retried.
    """

    def __init__(
        self,
        endpoint: str,
        cert: Optional[str] = None,
        key: Optional[str] = None,
        verify: Union[bool, str] = True,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize HTTP transport."""
        self.endpoint = endpoint.rstrip("/")
        self._client = httpx.Client(
            base_url=self.endpoint,
            verify=_ssl_context(verify, cert, key),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, transport: Optional[httpx.BaseTransport] = None) -> "HttpTransport":
        """Create a transport from client configuration."""
        return cls(
            config.endpoint,
            cert=config.client_cert,
            key=config.client_key,
            verify=config.verify,
            timeout=config.request_timeout,
            transport=transport,
        )

    def request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Tuple[int, Dict[str, Any]]:
        """Send REST request to the control plane."""
        logger.debug(f"{method} {path}")
        response = self._client.request(method, path, json=json)

        if not response.content:
            return response.status_code, {}
        try:
            body = response.json()
        except ValueError:
            # Proxies and load balancers answer with plain text
            body = {"type": "error", "error": response.text}
        return response.status_code, body

    def close(self):
        """Close pooled connections."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def api_request(
    transport: Transport,
    method: str,
    path: str,
    json: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Send a request and unwrap the response envelope.

    Returns the full envelope. Error responses are raised as the matching
    ``ApiError`` subclass.
    """
    status_code, body = transport.request(method, path, json=json)

    if status_code >= 400 or body.get("type") == "error":
        code = body.get("error_code") or status_code
        message = body.get("error") or f"{method} {path} failed"
        logger.error(f"{method} {path} failed with {code}: {message}")
        raise error_for(code, message)

    return body
