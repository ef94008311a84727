"""Assemble the parent-link configuration from identity fields."""

from __future__ import annotations

import logging
import random
from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import ValidationError

from ..crypto.derivation import derive, generate_connection_name
from ..domain.errors import ConfigurationError
from ..domain.identity import IdentityFields
from ..domain.shared import PrompterProtocol
from ..envs.uplink_env import Settings
from .dtos import PluginOptions, UplinkConfig

logger = logging.getLogger(__name__)

# HTTP-RPC only; websocket providers are not supported.
PROVIDERS: dict[str, dict[str, str]] = {
    "infura": {
        "live": "https://mainnet.infura.io/bXIbx0x6ofEuDANTSeKI",
        "test": "https://kovan.infura.io/bXIbx0x6ofEuDANTSeKI",
    },
    "local": {
        "live": "http://localhost:8545",
        "test": "http://localhost:8545",
    },
}
DEFAULT_PROVIDER = "infura"


def resolve_provider(provider: Optional[str], testnet: bool = False) -> str:
    """Map a provider alias or URL to the HTTP-RPC endpoint to use.

    Raises:
        ConfigurationError: If the provider is neither a known alias nor an http(s) URL.
    """
    network = "test" if testnet else "live"
    name = provider or DEFAULT_PROVIDER
    if name in PROVIDERS:
        return PROVIDERS[name][network]
    parsed = urlparse(name)
    if parsed.scheme in {"http", "https"} and parsed.netloc:
        return name
    raise ConfigurationError(
        f"Unsupported provider {name!r}: expected one of "
        f"{sorted(PROVIDERS)} or an http(s) URL"
    )


def build_identity(**fields: Any) -> IdentityFields:
    """Validate raw identity fields, reporting problems as `ConfigurationError`."""
    try:
        return IdentityFields(**fields)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid identity fields: {e}") from e


def build_uplink_config(
    identity: IdentityFields,
    testnet: bool = False,
    plugin: Optional[str] = None,
) -> UplinkConfig:
    """Derive the server URI and assemble the config for the settlement plugin."""
    # Provider is checked before anything is derived.
    provider_url = resolve_provider(identity.provider, testnet)

    _, server = derive(
        identity.upstream_host, identity.connection_name, identity.hmac_message
    )

    return UplinkConfig(
        plugin=plugin,
        options=PluginOptions(
            credential=identity.secret_material,
            account=identity.account,
            provider=provider_url,
            server=server,
        ),
    )


def configure(settings: Settings, prompter: PrompterProtocol) -> UplinkConfig:
    """Prompt for identity fields and build the uplink config."""
    default_parent = random.choice(settings.connectors)

    private_key = prompter.ask("Ethereum private key:")
    parent = prompter.ask("BTP host of parent connector:", default=default_parent)
    name = prompter.ask(
        "Name to assign to this connection:", default=generate_connection_name()
    )

    identity = build_identity(
        secret_material=private_key,
        upstream_host=parent,
        connection_name=name,
    )
    config = build_uplink_config(identity, settings.testnet, settings.plugin)
    logger.info(
        "Configured uplink to parent %s on %s network", parent, settings.network
    )
    return config
