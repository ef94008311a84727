"""Unit tests for assembling the parent-link configuration."""

from decimal import Decimal

import pytest

from ethuplink.application.configure import (
    PROVIDERS,
    build_identity,
    build_uplink_config,
    configure,
    resolve_provider,
)
from ethuplink.application.dtos import UplinkConfig
from ethuplink.crypto.derivation import derive, parse_server_uri
from ethuplink.domain.errors import ConfigurationError
from ethuplink.domain.identity import IdentityFields
from ethuplink.envs.uplink_env import Settings
from tests.fixtures import ScriptedPrompter


class TestResolveProvider:
    def test_default_is_infura_mainnet(self) -> None:
        assert resolve_provider(None) == PROVIDERS["infura"]["live"]

    def test_testnet_alias(self) -> None:
        assert resolve_provider("infura", testnet=True) == PROVIDERS["infura"]["test"]

    def test_http_url_passes_through(self) -> None:
        assert resolve_provider("https://rpc.example.org/v1") == "https://rpc.example.org/v1"

    @pytest.mark.parametrize(
        "provider", ["alchemy", "wss://mainnet.example.org", "http://", "localhost:8545"]
    )
    def test_unsupported_provider_raises(self, provider: str) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported provider"):
            resolve_provider(provider)


class TestBuildIdentity:
    def test_valid_fields(self) -> None:
        identity = build_identity(
            secret_material="0xkey", upstream_host="parent.example.org"
        )
        assert identity.connection_name == ""
        assert identity.hmac_message == "0xkey"

    @pytest.mark.parametrize(
        "fields",
        [
            {"secret_material": "", "upstream_host": "parent.example.org"},
            {"secret_material": "0xkey", "upstream_host": ""},
            {"secret_material": "0xkey", "upstream_host": "btp+wss://parent.example.org"},
            {"secret_material": "0xkey", "upstream_host": "a@parent.example.org"},
            {
                "secret_material": "0xkey",
                "upstream_host": "parent.example.org",
                "connection_name": "bad:name",
            },
            {
                "secret_material": "0xkey",
                "upstream_host": "parent.example.org",
                "secret_source": "account",
            },
        ],
    )
    def test_malformed_fields_raise_configuration_error(self, fields: dict) -> None:
        with pytest.raises(ConfigurationError, match="Invalid identity fields"):
            build_identity(**fields)

    def test_account_secret_source_uses_account_as_message(self) -> None:
        identity = build_identity(
            secret_material="0xkey",
            upstream_host="parent.example.org",
            account="0xaccount",
            secret_source="account",
        )
        assert identity.hmac_message == "0xaccount"

    def test_unvalidated_account_source_without_account_raises(self) -> None:
        identity = IdentityFields.model_construct(
            secret_material="0xkey",
            upstream_host="parent.example.org",
            account=None,
            secret_source="account",
        )
        with pytest.raises(ValueError, match="An account is required"):
            identity.hmac_message


class TestBuildUplinkConfig:
    def test_assembles_parent_config(self) -> None:
        identity = build_identity(
            secret_material="0xkey",
            upstream_host="parent.example.org",
            connection_name="node1",
            provider="local",
        )
        config = build_uplink_config(identity, plugin="pkg.mod:Plugin")

        _, expected_server = derive("parent.example.org", "node1", "0xkey")
        assert config.relation == "parent"
        assert config.asset_code == "ETH"
        assert config.asset_scale == 9
        assert config.send_routes is False
        assert config.receive_routes is False
        assert config.plugin == "pkg.mod:Plugin"
        assert config.options.server == expected_server
        assert config.options.credential == "0xkey"
        assert config.options.provider == "http://localhost:8545"

    def test_unsupported_provider_rejected(self) -> None:
        identity = build_identity(
            secret_material="0xkey",
            upstream_host="parent.example.org",
            provider="ws://localhost:8546",
        )
        with pytest.raises(ConfigurationError):
            build_uplink_config(identity)

    def test_account_source_changes_secret(self) -> None:
        common = dict(
            secret_material="0xkey", upstream_host="parent.example.org", account="0xacc"
        )
        by_key = build_uplink_config(build_identity(**common))
        by_account = build_uplink_config(
            build_identity(**common, secret_source="account")
        )
        assert parse_server_uri(by_key.options.server).secret != parse_server_uri(
            by_account.options.server
        ).secret

    def test_plugin_dict_shape(self, uplink_config: UplinkConfig) -> None:
        data = uplink_config.to_plugin_dict()
        assert data["relation"] == "parent"
        assert data["assetCode"] == "ETH"
        assert data["assetScale"] == 9
        assert data["sendRoutes"] is False
        assert data["receiveRoutes"] is False
        assert data["balance"] == {
            "minimum": "-Infinity",
            "maximum": "5000000",
            "settleThreshold": "2000000",
            "settleTo": "2000000",
        }
        assert set(data["options"]) == {
            "role",
            "ethereumPrivateKey",
            "ethereumAccount",
            "ethereumProvider",
            "server",
            "outgoingChannelAmount",
        }
        assert data["options"]["role"] == "client"
        assert data["options"]["ethereumPrivateKey"] == uplink_config.options.credential
        assert data["options"]["ethereumAccount"] is None
        assert data["options"]["ethereumProvider"] == "http://localhost:8545"
        assert data["options"]["server"].startswith("btp+wss://test-node:")
        assert data["options"]["outgoingChannelAmount"] == "10000000"

    def test_plugin_dict_loads_back(self, uplink_config: UplinkConfig) -> None:
        reloaded = UplinkConfig.model_validate(uplink_config.to_plugin_dict())
        assert reloaded == uplink_config
        assert reloaded.balance.minimum is None
        assert reloaded.balance.maximum == Decimal("5000000")

    def test_credential_hidden_from_repr(self, uplink_config: UplinkConfig) -> None:
        assert uplink_config.options.credential not in repr(uplink_config)


class TestConfigure:
    def test_prompts_and_builds_config(self) -> None:
        settings = Settings(parent_connectors=["parent.example.org"])
        prompter = ScriptedPrompter(
            answers={
                "Ethereum private key:": "0xkey",
                "Name to assign to this connection:": "node1",
            }
        )

        config = configure(settings, prompter)

        _, expected_server = derive("parent.example.org", "node1", "0xkey")
        assert config.options.server == expected_server
        messages = [message for message, _ in prompter.asked]
        assert messages == [
            "Ethereum private key:",
            "BTP host of parent connector:",
            "Name to assign to this connection:",
        ]
        assert prompter.asked[1][1] == "parent.example.org"

    def test_default_name_is_random(self) -> None:
        settings = Settings(parent_connectors=["parent.example.org"])
        prompter = ScriptedPrompter(answers={"Ethereum private key:": "0xkey"})

        config = configure(settings, prompter)

        default_name = prompter.asked[2][1]
        assert default_name and len(default_name) == 43
        assert parse_server_uri(config.options.server).name == default_name

    def test_testnet_uses_testnet_provider(self) -> None:
        settings = Settings(testnet=True, parent_connectors=["parent.example.org"])
        prompter = ScriptedPrompter(answers={"Ethereum private key:": "0xkey"})

        config = configure(settings, prompter)

        assert config.options.provider == PROVIDERS["infura"]["test"]
