"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .settlement_plugin_protocol import (
    BalanceReaderProtocol,
    PrompterProtocol,
    SettlementPluginFactory,
    SettlementPluginProtocol,
)

__all__ = [
    "BalanceReaderProtocol",
    "PrompterProtocol",
    "SettlementPluginFactory",
    "SettlementPluginProtocol",
]
