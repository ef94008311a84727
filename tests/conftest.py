"""Shared pytest fixtures for uplink tests."""

from __future__ import annotations

import io

import pytest

from ethuplink.application.configure import build_identity, build_uplink_config
from ethuplink.application.dtos import UplinkConfig
from ethuplink.application.uplink import ChannelUplink
from ethuplink.domain.entities import Channel
from tests.fixtures import (
    DEFAULT_ACCOUNT,
    FakeBalanceReader,
    FakeLedger,
    FakePluginFactory,
    ScriptedPrompter,
)

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture
def uplink_config() -> UplinkConfig:
    """Config for a parent link built from fixed identity fields."""
    identity = build_identity(
        secret_material=TEST_PRIVATE_KEY,
        upstream_host="parent.example.org",
        connection_name="test-node",
        provider="local",
    )
    return build_uplink_config(identity, plugin="tests.fixtures:FakePluginFactory")


@pytest.fixture
def three_channels() -> list[Channel]:
    return [
        Channel(channel_id="0x01", receiver="0xaaa1", spent=0, value=10**16, state=0),
        Channel(channel_id="0x02", receiver="0xaaa2", spent=5 * 10**15, value=10**16, state=1),
        Channel(channel_id="0x03", receiver="0xaaa3", spent=10**16, value=10**16, state=2),
    ]


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def plugin_factory(ledger: FakeLedger) -> FakePluginFactory:
    return FakePluginFactory(ledger)


@pytest.fixture
def balance_reader() -> FakeBalanceReader:
    return FakeBalanceReader({DEFAULT_ACCOUNT: 2 * 10**18})


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def uplink(
    uplink_config: UplinkConfig,
    plugin_factory: FakePluginFactory,
    balance_reader: FakeBalanceReader,
    prompter: ScriptedPrompter,
    out: io.StringIO,
) -> ChannelUplink:
    return ChannelUplink(uplink_config, plugin_factory, balance_reader, prompter, out)
