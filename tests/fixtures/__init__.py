"""Test doubles for the uplink's external collaborators."""

from .fake_settlement_plugin import (
    DEFAULT_ACCOUNT,
    FakeBalanceReader,
    FakeLedger,
    FakePluginFactory,
    FakeSettlementPlugin,
    ScriptedPrompter,
)

__all__ = [
    "DEFAULT_ACCOUNT",
    "FakeBalanceReader",
    "FakeLedger",
    "FakePluginFactory",
    "FakeSettlementPlugin",
    "ScriptedPrompter",
]
