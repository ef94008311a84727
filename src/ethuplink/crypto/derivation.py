"""Connection-secret derivation for the parent BTP link.

The shared secret is a nested HMAC-SHA256:

    inner_key = HMAC(key=PARENT_BTP_HMAC_KEY, msg=upstream_host + connection_name)
    secret    = HMAC(key=inner_key,           msg=secret_material)

It is a pure function of its inputs, so a node can rebuild its server URI
after a restart from the same identity fields without storing the secret.
"""

from __future__ import annotations

import base64
import os
from typing import Final

from cryptography.hazmat.primitives import hashes, hmac
from pydantic import BaseModel

from ..domain.errors import ConfigurationError

# Domain-separation constant, not a secret.
PARENT_BTP_HMAC_KEY: Final[str] = "parent_btp_uri"
BTP_SCHEME: Final[str] = "btp+wss"
CONNECTION_NAME_BYTES: Final[int] = 32


class ServerUri(BaseModel):
    """Components of a parent BTP server URI."""

    name: str
    secret: str
    host: str

    def __str__(self) -> str:
        return build_server_uri(self.name, self.secret, self.host)


def _to_bytes(value: str | bytes) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def hmac_sha256(key: str | bytes, message: str | bytes) -> bytes:
    """HMAC-SHA256 digest of `message` under `key`."""
    h = hmac.HMAC(_to_bytes(key), hashes.SHA256())
    h.update(_to_bytes(message))
    return h.finalize()


def derive_connection_secret(
    upstream_host: str,
    connection_name: str,
    secret_material: str | bytes,
    hmac_domain_key: str | bytes = PARENT_BTP_HMAC_KEY,
) -> str:
    """Return the hex-encoded connection secret for this host/name/credential."""
    inner_key = hmac_sha256(hmac_domain_key, upstream_host + connection_name)
    return hmac_sha256(inner_key, secret_material).hex()


def build_server_uri(name: str, secret: str, host: str) -> str:
    return f"{BTP_SCHEME}://{name}:{secret}@{host}"


def derive(
    upstream_host: str,
    connection_name: str,
    secret_material: str | bytes,
    hmac_domain_key: str | bytes = PARENT_BTP_HMAC_KEY,
) -> tuple[str, str]:
    """Derive the connection secret and the server URI embedding it.

    Returns:
        `(connection_secret, server_uri)`
    """
    secret = derive_connection_secret(
        upstream_host, connection_name, secret_material, hmac_domain_key
    )
    return secret, build_server_uri(connection_name, secret, upstream_host)


def parse_server_uri(uri: str) -> ServerUri:
    """Split a server URI built by `build_server_uri` back into its parts.

    Raises:
        ConfigurationError: If the URI does not use the BTP scheme or lacks credentials.
    """
    prefix = f"{BTP_SCHEME}://"
    if not uri.startswith(prefix):
        raise ConfigurationError(f"Server URI must start with {prefix}")
    userinfo, sep, host = uri[len(prefix) :].rpartition("@")
    if not sep or not host:
        raise ConfigurationError("Server URI must be of the form name:secret@host")
    name, sep, secret = userinfo.partition(":")
    if not sep:
        raise ConfigurationError("Server URI is missing the connection secret")
    return ServerUri(name=name, secret=secret, host=host)


def base64url(data: bytes) -> str:
    """URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def generate_connection_name() -> str:
    """Fresh random connection name. Callers must persist it to reconnect."""
    return base64url(os.urandom(CONNECTION_NAME_BYTES))
