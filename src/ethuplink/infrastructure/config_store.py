"""JSON file persistence for the uplink config.

The connection name lives inside the stored server URI, which is what lets a
node reconnect under the same name after a restart.
"""

from __future__ import annotations

import json
import logging
import os

from pydantic import ValidationError

from ..application.dtos import UplinkConfig
from ..domain.errors import ConfigurationError

logger = logging.getLogger(__name__)


def save_config(config: UplinkConfig, path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    # The file holds the private key.
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(config.to_plugin_dict(), f, indent=2)
        f.write("\n")
    logger.info("Wrote uplink config to %s", path)


def load_config(path: str) -> UplinkConfig:
    """Read a config written by `save_config`.

    Raises:
        ConfigurationError: If the file is missing or does not hold a valid config.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"No uplink config at {path}; run 'ethuplink configure' first"
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Uplink config at {path} is not valid JSON: {e}") from e
    try:
        return UplinkConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid uplink config at {path}: {e}") from e
