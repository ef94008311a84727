"""Channel management for the parent uplink.

`ChannelUplink` owns at most one live settlement-plugin connection. It is
opened lazily by the first operation that needs the ledger and closed at the
end of every terminal operation, on success and on failure alike. `topup`
never touches that shared connection: it brackets its own.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator, Optional, Sequence, TextIO

from ..domain.entities import Channel, CleanupReport, CloseResult
from ..domain.errors import ChannelCloseError, UplinkConnectionError
from ..domain.shared import (
    BalanceReaderProtocol,
    PrompterProtocol,
    SettlementPluginFactory,
    SettlementPluginProtocol,
)
from ..infrastructure.prompt import ConsolePrompter
from ..middleware.timing import log_timing
from .dtos import UplinkConfig
from .validators import validate_amount

logger = logging.getLogger(__name__)

WEI_PER_ETH = Decimal(10) ** 18
TABLE_COLUMNS = ("index", "receiver", "spent", "value", "state")


def format_wei(amount: int) -> str:
    """Render a wei amount as ETH without trailing zeros."""
    eth = Decimal(amount) / WEI_PER_ETH
    text = format(eth, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} ETH"


def render_channel_table(channels: Sequence[Channel]) -> str:
    rows = [TABLE_COLUMNS] + [
        (
            str(i),
            c.receiver,
            format_wei(c.spent),
            format_wei(c.value),
            c.state_label,
        )
        for i, c in enumerate(channels)
    ]
    widths = [max(len(row[col]) for row in rows) for col in range(len(TABLE_COLUMNS))]
    lines = ["  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip() for row in rows]
    lines.insert(1, "  ".join("-" * w for w in widths))
    return "\n".join(lines)


class ChannelUplink:
    """Session wrapper around the settlement plugin for one parent link."""

    def __init__(
        self,
        config: UplinkConfig,
        plugin_factory: SettlementPluginFactory,
        balance_reader: BalanceReaderProtocol,
        prompter: Optional[PrompterProtocol] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.config = config
        self._plugin_factory = plugin_factory
        self._balance_reader = balance_reader
        self._prompter = prompter or ConsolePrompter()
        # None prints to whatever sys.stdout is at call time
        self._out = out
        self._plugin: Optional[SettlementPluginProtocol] = None

    @property
    def connected(self) -> bool:
        return self._plugin is not None

    # ---------- Connection handling ----------

    @staticmethod
    async def _connect(plugin: SettlementPluginProtocol) -> None:
        try:
            await plugin.connect()
        except Exception as e:
            # A half-open transport still needs tearing down.
            try:
                await plugin.disconnect()
            except Exception:
                logger.warning("Disconnect after failed connect also failed", exc_info=True)
            raise UplinkConnectionError(f"Failed to connect settlement plugin: {e}") from e
        logger.info("Connected settlement plugin for %s", plugin.account)

    @staticmethod
    async def _disconnect(plugin: SettlementPluginProtocol) -> None:
        try:
            await plugin.disconnect()
        except Exception as e:
            raise UplinkConnectionError(
                f"Failed to disconnect settlement plugin: {e}"
            ) from e
        logger.info("Disconnected settlement plugin")

    async def _ensure_session(self) -> SettlementPluginProtocol:
        if self._plugin is None:
            plugin = self._plugin_factory(self.config)
            await self._connect(plugin)
            self._plugin = plugin
        return self._plugin

    @classmethod
    async def _disconnect_after_error(cls, plugin: SettlementPluginProtocol) -> None:
        # The operation's own error is already propagating and must win.
        try:
            await cls._disconnect(plugin)
        except UplinkConnectionError:
            logger.warning("Disconnect after failed operation also failed", exc_info=True)

    async def close(self) -> None:
        """Disconnect the shared session, if one is open."""
        plugin, self._plugin = self._plugin, None
        if plugin is not None:
            await self._disconnect(plugin)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[SettlementPluginProtocol]:
        """Shared connection, closed on exit whatever happens inside."""
        try:
            yield await self._ensure_session()
        except BaseException:
            plugin, self._plugin = self._plugin, None
            if plugin is not None:
                await self._disconnect_after_error(plugin)
            raise
        await self.close()

    @asynccontextmanager
    async def _dedicated_connection(self) -> AsyncIterator[SettlementPluginProtocol]:
        plugin = self._plugin_factory(self.config)
        await self._connect(plugin)
        try:
            yield plugin
        except BaseException:
            await self._disconnect_after_error(plugin)
            raise
        await self._disconnect(plugin)

    # ---------- Operations ----------

    @log_timing("list_channels")
    async def list_channels(self) -> list[Channel]:
        """Return all channels of the account, in ledger order.

        Leaves the session open so further operations can reuse it.
        """
        plugin = await self._ensure_session()
        raw_channels = await plugin.get_channels()
        return [
            c if isinstance(c, Channel) else Channel.model_validate(c)
            for c in raw_channels
        ]

    async def _print_account(
        self, plugin: SettlementPluginProtocol, channels: Sequence[Channel]
    ) -> None:
        balance = await self._balance_reader.get_balance(plugin.account)
        print(f"Account: {plugin.account}", file=self._out)
        print(f"Balance: {format_wei(balance)}", file=self._out)
        if not channels:
            print("No channels found.", file=self._out)
            return
        print(render_channel_table(channels), file=self._out)

    @log_timing("print_channels")
    async def print_channels(self) -> list[Channel]:
        async with self.session() as plugin:
            channels = await self.list_channels()
            await self._print_account(plugin, channels)
        return channels

    async def _request_close(
        self, plugin: SettlementPluginProtocol, channel: Channel
    ) -> None:
        try:
            await plugin.close_channel(channel.channel_id)
        except Exception as e:
            raise ChannelCloseError(channel.channel_id, str(e) or type(e).__name__) from e

    @log_timing("cleanup_channels")
    async def cleanup_channels(self) -> CleanupReport:
        """Close the channels the user selects, one at a time.

        A failed close is logged and recorded in the report; the remaining
        selections are still attempted.
        """
        report = CleanupReport()
        async with self.session() as plugin:
            channels = await self.list_channels()
            await self._print_account(plugin, channels)
            if not channels:
                return report

            choices = [
                f"{c.receiver} ({format_wei(c.value)}, {c.state_label})"
                for c in channels
            ]
            selected = self._prompter.select("Select channels to close:", choices)

            # each channel is closed at most once, in selection order
            for index in dict.fromkeys(selected):
                if not 0 <= index < len(channels):
                    logger.warning("Ignoring out-of-range channel selection %d", index)
                    continue
                channel = channels[index]
                try:
                    await self._request_close(plugin, channel)
                except ChannelCloseError as e:
                    logger.warning("%s", e)
                    report.results.append(
                        CloseResult(channel_id=e.channel_id, ok=False, error=e.reason)
                    )
                    continue
                logger.info("Closed channel %s", channel.channel_id)
                report.results.append(CloseResult(channel_id=channel.channel_id, ok=True))
        return report

    @log_timing("topup")
    async def topup(self, amount: str) -> None:
        """Pre-fund the parent by settling `amount` base units upstream."""
        amount = validate_amount(amount)
        async with self._dedicated_connection() as plugin:
            await plugin.send_money(amount)
        logger.info("Sent top-up of %s to parent", amount)
