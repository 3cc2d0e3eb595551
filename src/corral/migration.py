"""Container migration between control-plane instances.

Migration is a two-step handshake. The source instance opens a migration
operation and hands out one-time secrets for it; the target instance is then
asked to create a container that pulls its state from that operation.
"""

import logging
from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

from corral.containers import ContainerManager, name_from_path
from corral.errors import MissingProfiles
from corral.models.container import ContainerSpec, stringify_config, strip_volatile
from corral.models.migration import MigrationHandle, MigrationOverrides
from corral.models.operation import Operation
from corral.models.source import MigrationSecrets, MigrationSource
from corral.operations import OperationTracker
from corral.transport import api_request


logger = logging.getLogger(__name__)

WEBSOCKET_SCHEMES = {"https": "wss", "http": "ws"}


def websocket_url(endpoint: str, path: str) -> str:
    """Build the websocket URL of an operation on an instance."""
    parts = urlsplit(endpoint)
    scheme = WEBSOCKET_SCHEMES.get(parts.scheme, parts.scheme)
    return urlunsplit((scheme, parts.netloc, parts.path.rstrip("/") + path, "", ""))


class MigrationOrchestrator:
    """Runs either side of a migration against one instance."""

    def __init__(self, operations: OperationTracker):
        """Initialize migration orchestrator."""
        self.operations = operations
        self.containers = ContainerManager(operations)

    @property
    def transport(self):
        return self.operations.transport

    def init_migration(self, name: str) -> MigrationHandle:
        """Open a migration of ``name`` on this (source) instance."""
        logger.info(f"Initializing migration of container {name}")
        response = api_request(self.transport, "POST", f"/1.0/containers/{name}", {"migration": True})

        operation = response.get("metadata") or {}
        secrets = MigrationSecrets.model_validate(operation.get("metadata") or {})
        operation_path = response.get("operation") or f"/1.0/operations/{operation.get('id', '')}"

        container = self.containers.get(name)
        server = api_request(self.transport, "GET", "/1.0").get("metadata") or {}
        certificate = (server.get("environment") or {}).get("certificate")

        return MigrationHandle(
            operation=websocket_url(self.transport.endpoint, operation_path),
            secrets=secrets,
            certificate=certificate,
            name=container.name,
            architecture=container.architecture,
            config=container.config,
            ephemeral=container.ephemeral,
            profiles=container.profiles,
        )

    def profiles(self) -> List[str]:
        """List profile names known to this instance."""
        response = api_request(self.transport, "GET", "/1.0/profiles")
        return [name_from_path(path) for path in response.get("metadata") or []]

    def migrate(
        self,
        source: MigrationHandle,
        target_name: str,
        overrides: Optional[MigrationOverrides] = None,
        **kwargs,
    ) -> Operation:
        """Create ``target_name`` on this (target) instance from a migration source.

        Unset overrides are inherited from the source container. Inherited
        config loses its ``volatile.*`` keys unless ``move`` is set, since a
        moved container keeps its identity while a copy must not.

        Raises:
            MissingProfiles: an inherited profile does not exist here.
        """
        if overrides is None:
            overrides = MigrationOverrides(**kwargs)
        elif kwargs:
            overrides = MigrationOverrides(**{**overrides.model_dump(exclude_unset=True), **kwargs})

        if overrides.profiles is not None:
            profiles = overrides.profiles
        else:
            profiles = source.profiles
            # Fetched per call, profile sets differ between instances
            available = self.profiles()
            missing = [p for p in profiles if p not in available]
            if missing:
                logger.error(f"Cannot migrate {source.name}: missing profiles {missing}")
                raise MissingProfiles(missing, available)

        if overrides.config is not None:
            config = stringify_config(overrides.config)
        elif overrides.move:
            config = dict(source.config)
        else:
            config = strip_volatile(source.config)

        spec = ContainerSpec(
            name=target_name,
            architecture=overrides.architecture or source.architecture,
            profiles=profiles,
            ephemeral=overrides.ephemeral if overrides.ephemeral is not None else source.ephemeral,
            config=config,
            source=MigrationSource(
                operation=source.operation,
                secrets=source.secrets,
                certificate=overrides.certificate or source.certificate,
            ),
            base_image=source.config.get("volatile.base_image"),
        )

        logger.info(f"Migrating container {source.name} to {target_name}")
        return self.operations.submit("POST", "/1.0/containers", spec.to_payload())
