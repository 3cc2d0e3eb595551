"""Client for one control-plane instance."""

import logging
from pathlib import Path
from typing import Optional, Union

from corral.config import load_config
from corral.containers import ContainerManager
from corral.lifecycle import LifecycleController
from corral.migration import MigrationOrchestrator
from corral.models.config import ClientConfig
from corral.operations import OperationTracker
from corral.transport import HttpTransport, Transport
from corral.utils.logging import setup_logging


logger = logging.getLogger(__name__)


class Client:
    """Entry point bundling the managers of one instance.

    Example::

        with Client(ClientConfig(endpoint="https://lxd1:8443")) as client:
            op = client.containers.create("web", alias="ubuntu/jammy")
            client.operations.wait(op)
            client.operations.wait(client.lifecycle.start("web"))
    """

    def __init__(self, config: Optional[ClientConfig] = None, transport: Optional[Transport] = None):
        """Initialize client."""
        self.config = config or ClientConfig()
        self.transport = transport or HttpTransport.from_config(self.config)

        self.operations = OperationTracker(
            self.transport,
            poll_interval=self.config.poll_interval,
            timeout=self.config.operation_timeout,
        )
        self.containers = ContainerManager(self.operations)
        self.lifecycle = LifecycleController(self.operations)
        self.migration = MigrationOrchestrator(self.operations)
        logger.debug(f"Client ready for {self.transport.endpoint}")

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Client":
        """Create a client from a YAML configuration file.

        The configured log level is applied to the process.
        """
        config = load_config(path)
        setup_logging(config.log_level)
        return cls(config)

    def close(self):
        """Release transport resources."""
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
