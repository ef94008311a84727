"""Data Transfer Objects for the uplink application layer."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

NEGATIVE_INFINITY = "-Infinity"


class _CamelModel(BaseModel):
    """Dumps with camelCase keys, the shape settlement plugins read."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BalancePolicy(_CamelModel):
    """Balance bounds in base units (gwei). `minimum=None` means unbounded."""

    minimum: Optional[Decimal] = None
    maximum: Decimal = Decimal("5000000")
    settle_threshold: Decimal = Decimal("2000000")
    settle_to: Decimal = Decimal("2000000")

    @field_validator("minimum", mode="before")
    @classmethod
    def parse_unbounded_minimum(cls, v: Any) -> Any:
        if v == NEGATIVE_INFINITY:
            return None
        return v

    @field_serializer("minimum")
    def serialize_minimum(self, value: Optional[Decimal]) -> str:
        return NEGATIVE_INFINITY if value is None else str(value)

    @field_serializer("maximum", "settle_threshold", "settle_to")
    def serialize_amount(self, value: Decimal) -> str:
        return str(value)


class PluginOptions(_CamelModel):
    """Plugin-specific options of the parent link."""

    role: Literal["client"] = "client"
    credential: str = Field(alias="ethereumPrivateKey", repr=False)
    account: Optional[str] = Field(default=None, alias="ethereumAccount")
    provider: str = Field(alias="ethereumProvider")
    server: str = Field(repr=False)
    outgoing_channel_amount: Decimal = Decimal("10000000")

    @field_serializer("outgoing_channel_amount")
    def serialize_amount(self, value: Decimal) -> str:
        return str(value)


class UplinkConfig(_CamelModel):
    """Configuration object handed to the settlement plugin."""

    relation: Literal["parent"] = "parent"
    plugin: Optional[str] = None
    asset_code: str = "ETH"
    asset_scale: int = 9
    send_routes: Literal[False] = False
    receive_routes: Literal[False] = False
    balance: BalancePolicy = Field(default_factory=BalancePolicy)
    options: PluginOptions

    def to_plugin_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
