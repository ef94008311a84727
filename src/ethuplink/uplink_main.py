from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional, Sequence

import httpx

from .application.configure import configure
from .application.uplink import ChannelUplink
from .domain.errors import ConfigurationError, InvalidAmountError, UplinkError
from .envs.uplink_env import Settings, get_settings
from .infrastructure.config_store import load_config, save_config
from .infrastructure.ethereum.rpc_client import EthereumRpcClient
from .infrastructure.plugin_loader import load_plugin_factory
from .infrastructure.prompt import ConsolePrompter

logger = logging.getLogger("ethuplink")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ethuplink",
        description="Manage the Ethereum payment-channel uplink to a parent connector.",
    )
    parser.add_argument("--testnet", action="store_true", help="Use testnet connectors and provider")
    parser.add_argument("--config", help="Path of the uplink config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    sub = parser.add_subparsers(dest="command", required=True)
    configure_cmd = sub.add_parser("configure", help="Create the uplink config interactively")
    configure_cmd.add_argument("--force", action="store_true", help="Overwrite an existing config")
    sub.add_parser("info", help="Get info about your ETH account and payment channels")
    sub.add_parser("cleanup", help="Close unused payment channels")
    topup = sub.add_parser("topup", help="Pre-fund your balance with the parent")
    topup.add_argument("--amount", required=True, help="Amount to send, in gwei")
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    updates: dict[str, object] = {}
    if args.testnet:
        updates["testnet"] = True
    if args.config:
        updates["config_path"] = os.path.expanduser(args.config)
    if args.verbose:
        updates["log_level"] = "DEBUG"
    return settings.model_copy(update=updates) if updates else settings


def run_configure(settings: Settings, force: bool = False) -> None:
    if os.path.exists(settings.config_path) and not force:
        raise ConfigurationError(
            f"Config already exists at {settings.config_path}; pass --force to overwrite"
        )
    config = configure(settings, ConsolePrompter())
    save_config(config, settings.config_path)
    print(f"Uplink config written to {settings.config_path}")


async def run_command(settings: Settings, command: str, amount: Optional[str] = None) -> None:
    config = load_config(settings.config_path)
    plugin_factory = load_plugin_factory(config.plugin or settings.plugin)

    async with EthereumRpcClient(config.options.provider) as balance_reader:
        uplink = ChannelUplink(config, plugin_factory, balance_reader, ConsolePrompter())
        if command == "info":
            await uplink.print_channels()
        elif command == "cleanup":
            report = await uplink.cleanup_channels()
            if report.results:
                print(f"Closed {len(report.closed)} channel(s), {len(report.failed)} failed")
        elif command == "topup":
            if amount is None:
                raise InvalidAmountError("topup requires an amount")
            await uplink.topup(amount)
            print(f"Sent {amount} gwei to parent")
        else:
            raise ValueError(f"Unknown command: {command}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = _apply_overrides(get_settings(), args)
    except ValueError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "configure":
            run_configure(settings, force=args.force)
        else:
            asyncio.run(run_command(settings, args.command, getattr(args, "amount", None)))
    except (UplinkError, httpx.HTTPError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
