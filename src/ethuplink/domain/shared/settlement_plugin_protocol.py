"""Protocol interfaces for the uplink's external collaborators.

The settlement plugin, the ledger balance lookup and the interactive prompt
layer all live outside this package. These protocols define the contract the
uplink relies on, which also lets tests substitute call-counting doubles.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities import Channel
    from ...application.dtos import UplinkConfig


class SettlementPluginProtocol(Protocol):
    """Connection to the settlement plugin for a single parent peer.

    Implementations should provide async methods for:
    - Connecting and disconnecting the underlying transport
    - Sending a settlement payment upstream
    - Enumerating and closing the account's on-chain payment channels
    """

    @property
    def account(self) -> str:
        """Ledger address of the account this plugin settles from."""
        ...

    async def connect(self) -> None:
        """Open the transport and ledger connection."""
        ...

    async def disconnect(self) -> None:
        """Tear down the transport and ledger connection."""
        ...

    async def send_money(self, amount: str) -> None:
        """Settle `amount` base units to the parent peer.

        Args:
            amount: Positive integer amount, as a decimal string
        """
        ...

    async def get_channels(self) -> Sequence["Channel | Mapping[str, Any]"]:
        """Return every payment channel owned by the account.

        Returns:
            Channels as `Channel` models or mappings with the same fields
        """
        ...

    async def close_channel(self, channel_id: str) -> None:
        """Request the ledger to close a channel.

        Args:
            channel_id: Identifier of the channel to close
        """
        ...


class BalanceReaderProtocol(Protocol):
    """Native-currency balance lookup on the ledger."""

    async def get_balance(self, account: str) -> int:
        """Return the balance of `account` in the ledger's smallest unit (wei)."""
        ...


class PrompterProtocol(Protocol):
    """Interactive prompt layer."""

    def ask(self, message: str, default: Optional[str] = None) -> str:
        """Ask for a single free-form value, returning `default` on empty input."""
        ...

    def select(self, message: str, choices: Sequence[str]) -> list[int]:
        """Let the user pick any subset of `choices`, returning their indices."""
        ...


# Factory type for creating settlement plugins from an uplink config.
# Each call must return a new, unconnected plugin instance.
SettlementPluginFactory = Callable[["UplinkConfig"], SettlementPluginProtocol]
