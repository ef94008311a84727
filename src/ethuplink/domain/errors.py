"""Domain-specific exceptions."""

from __future__ import annotations


class UplinkError(Exception):
    """Base class for all uplink errors."""


class ConfigurationError(UplinkError, ValueError):
    """Raised when identity fields, providers or stored config are unusable."""


class UplinkConnectionError(UplinkError, ConnectionError):
    """Raised when the settlement plugin fails to connect or disconnect."""


class ChannelCloseError(UplinkError):
    """Raised when closing a single payment channel fails."""

    def __init__(self, channel_id: str, reason: str) -> None:
        super().__init__(f"Failed to close channel {channel_id}: {reason}")
        self.channel_id = channel_id
        self.reason = reason


class InvalidAmountError(UplinkError, ValueError):
    """Raised when a top-up amount is not a positive base-unit integer."""
