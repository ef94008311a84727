from __future__ import annotations

import logging
import os
from typing import Optional

from pydantic import BaseModel, field_validator

DEFAULT_CONFIG_PATH = os.path.join("~", ".ethuplink", "config.json")

# Parent connectors offered as the default BTP host, per network.
PARENT_CONNECTORS: dict[str, list[str]] = {
    "live": ["client.scyl.la"],
    "test": ["rs3.xpring.dev"],
}


class Settings(BaseModel):
    """Typed uplink settings built from environment variables."""

    config_path: str = DEFAULT_CONFIG_PATH
    testnet: bool = False
    plugin: Optional[str] = None
    log_level: str = "INFO"
    parent_connectors: list[str] = []

    @field_validator("config_path")
    @classmethod
    def validate_config_path(cls, v: str) -> str:
        if not v:
            raise ValueError("Config path cannot be empty")
        return os.path.expanduser(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def network(self) -> str:
        return "test" if self.testnet else "live"

    @property
    def connectors(self) -> list[str]:
        """Parent hosts for the selected network, overridable from the environment."""
        return self.parent_connectors or PARENT_CONNECTORS[self.network]


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    connectors = os.environ.get("UPLINK_PARENT_CONNECTORS", "")
    return Settings(
        config_path=os.environ.get("UPLINK_CONFIG_PATH", DEFAULT_CONFIG_PATH),
        testnet=os.environ.get("UPLINK_TESTNET", "false").lower() == "true",
        plugin=os.environ.get("UPLINK_PLUGIN") or None,
        log_level=os.environ.get("UPLINK_LOG_LEVEL", "INFO"),
        parent_connectors=[c.strip() for c in connectors.split(",") if c.strip()],
    )
