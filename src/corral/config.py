"""Configuration file loading."""

import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError
from ruamel.yaml import YAML

from corral.models.config import ClientConfig


logger = logging.getLogger(__name__)


def _read_yaml(file_path: Path) -> Dict[str, Any]:
    """Read and parse YAML file."""
    yaml = YAML(typ="safe")
    data = yaml.load(file_path.read_text())
    return data or {}


def load_config(path: Union[str, Path]) -> ClientConfig:
    """Load client configuration from a YAML file.

    Settings may sit at the top level or under a ``client:`` key.
    """
    config_file = Path(path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config not found: {config_file}")

    data = _read_yaml(config_file)
    if "client" in data:
        data = data["client"] or {}

    try:
        config = ClientConfig(**data)
    except ValidationError as e:
        logger.error(f"Invalid config {config_file}: {e}")
        raise

    logger.debug(f"Loaded config: {config_file}")
    return config
