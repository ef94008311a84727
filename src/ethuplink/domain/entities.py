"""Uplink domain entities: payment channels and cleanup results."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class ChannelState(IntEnum):
    """On-chain lifecycle of a payment channel."""

    OPEN = 0
    SETTLING = 1
    SETTLED = 2


UNKNOWN_STATE = "unknown"


class Channel(BaseModel):
    """A payment channel owned by this account, as reported by the ledger.

    `state` keeps the raw code so that codes outside `ChannelState` survive
    parsing and can be rendered as unknown.
    """

    model_config = ConfigDict(frozen=True)

    channel_id: str
    receiver: str
    spent: int = 0
    value: int
    state: int

    @property
    def state_label(self) -> str:
        try:
            return ChannelState(self.state).name.lower()
        except ValueError:
            return UNKNOWN_STATE


class CloseResult(BaseModel):
    """Outcome of a single close request."""

    channel_id: str
    ok: bool
    error: str | None = None


class CleanupReport(BaseModel):
    """Per-channel results of a cleanup pass, in selection order."""

    results: list[CloseResult] = Field(default_factory=list)

    @property
    def closed(self) -> list[str]:
        return [r.channel_id for r in self.results if r.ok]

    @property
    def failed(self) -> list[str]:
        return [r.channel_id for r in self.results if not r.ok]

    @property
    def warnings(self) -> list[str]:
        return [
            f"Failed to close channel {r.channel_id}: {r.error}"
            for r in self.results
            if not r.ok
        ]
