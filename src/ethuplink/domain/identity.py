"""Identity fields collected once at configuration time."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

SecretSource = Literal["credential", "account"]


class IdentityFields(BaseModel):
    """User-supplied identity of this uplink.

    `secret_source` picks what feeds the innermost HMAC: the raw private key
    (`credential`) or the delegated account handle (`account`).
    """

    model_config = ConfigDict(frozen=True)

    secret_material: str
    upstream_host: str
    connection_name: str = ""
    provider: str | None = None
    account: str | None = None
    secret_source: SecretSource = "credential"

    @field_validator("secret_material")
    @classmethod
    def validate_secret_material(cls, v: str) -> str:
        if not v:
            raise ValueError("Secret material cannot be empty")
        return v

    @field_validator("upstream_host")
    @classmethod
    def validate_upstream_host(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Upstream host cannot be empty")
        if "://" in v or "@" in v or "/" in v:
            raise ValueError(
                "Upstream host must be a bare host[:port], without scheme, credentials or path"
            )
        return v

    @field_validator("connection_name")
    @classmethod
    def validate_connection_name(cls, v: str) -> str:
        if any(c in v for c in ":@/"):
            raise ValueError("Connection name cannot contain ':', '@' or '/'")
        return v

    @model_validator(mode="after")
    def validate_account_source(self) -> "IdentityFields":
        if self.secret_source == "account" and not self.account:
            raise ValueError("An account is required when secret_source is 'account'")
        return self

    @property
    def hmac_message(self) -> str:
        """The innermost HMAC message selected by `secret_source`."""
        if self.secret_source == "account":
            if not self.account:
                raise ValueError("An account is required when secret_source is 'account'")
            return self.account
        return self.secret_material
