"""Container creation, copying and housekeeping."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel

from corral.models.container import Container, ContainerSpec, stringify_config, strip_volatile
from corral.models.operation import Operation
from corral.models.source import CopySource
from corral.operations import OperationTracker
from corral.source import resolve_source
from corral.transport import api_request


logger = logging.getLogger(__name__)


def name_from_path(path: str) -> str:
    """Extract a bare resource name from an API path."""
    return path.rstrip("/").rsplit("/", 1)[-1]


class ContainerManager:
    """Manages containers on one control-plane instance."""

    def __init__(self, operations: OperationTracker):
        """Initialize container manager."""
        self.operations = operations

    @property
    def transport(self):
        return self.operations.transport

    def list(self) -> List[str]:
        """List container names."""
        response = api_request(self.transport, "GET", "/1.0/containers")
        return [name_from_path(path) for path in response.get("metadata") or []]

    def get(self, name: str) -> Container:
        """Get a container."""
        response = api_request(self.transport, "GET", f"/1.0/containers/{name}")
        return Container.model_validate(response.get("metadata") or {})

    def create(
        self,
        name: str,
        architecture: Optional[str] = None,
        profiles: Optional[List[str]] = None,
        ephemeral: bool = False,
        config: Optional[Mapping[str, Any]] = None,
        devices: Optional[Dict[str, Dict[str, Any]]] = None,
        **source_options,
    ) -> Operation:
        """Create a container.

        ``source_options`` select the root filesystem, see
        :func:`corral.source.resolve_source`. Bad options raise before any
        request is made.
        """
        spec = ContainerSpec(
            name=name,
            architecture=architecture,
            profiles=profiles,
            ephemeral=ephemeral,
            config=config or {},
            devices=devices or {},
            source=resolve_source(**source_options),
        )
        logger.info(f"Creating container {name} from {spec.source.type} source")
        return self.operations.submit("POST", "/1.0/containers", spec.to_payload())

    def copy(
        self,
        source_name: str,
        target_name: str,
        architecture: Optional[str] = None,
        profiles: Optional[List[str]] = None,
        ephemeral: bool = False,
        config: Optional[Mapping[str, Any]] = None,
    ) -> Operation:
        """Copy a container within this instance.

        Unset fields are taken from the source container. Inherited config
        loses its volatile keys so the copy gets a fresh identity; the copy
        is persistent unless ``ephemeral`` is set.
        """
        source = self.get(source_name)

        if config is None:
            config = strip_volatile(source.config)

        spec = ContainerSpec(
            name=target_name,
            architecture=architecture or source.architecture,
            profiles=profiles if profiles is not None else source.profiles,
            ephemeral=ephemeral,
            config=config,
            source=CopySource(source=source_name),
        )
        logger.info(f"Copying container {source_name} to {target_name}")
        return self.operations.submit("POST", "/1.0/containers", spec.to_payload())

    def update(self, name: str, container: Union[Container, BaseModel, Mapping[str, Any]]) -> Operation:
        """Replace the configuration of a container."""
        if isinstance(container, Container):
            body = container.to_payload()
        elif isinstance(container, BaseModel):
            body = container.model_dump(exclude_none=True)
        else:
            body = dict(container)

        if "config" in body:
            body["config"] = stringify_config(body["config"])

        logger.info(f"Updating container {name}")
        return self.operations.submit("PUT", f"/1.0/containers/{name}", body)

    def delete(self, name: str) -> Operation:
        """Delete a container."""
        logger.info(f"Deleting container {name}")
        return self.operations.submit("DELETE", f"/1.0/containers/{name}")

    def rename(self, name: str, new_name: str) -> Operation:
        """Rename a stopped container."""
        logger.info(f"Renaming container {name} to {new_name}")
        return self.operations.submit("POST", f"/1.0/containers/{name}", {"name": new_name})
