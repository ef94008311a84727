"""Pure validation functions for uplink operations.

These functions contain input rules that can be tested in isolation without
a settlement plugin.
"""

from __future__ import annotations

import re

from ..domain.errors import InvalidAmountError

_BASE_UNIT_AMOUNT = re.compile(r"[0-9]+")


def validate_amount(amount: str) -> str:
    """Validate a top-up amount in the asset's base unit. Pure function.

    Args:
        amount: Decimal string of a positive integer, e.g. "2000000"

    Returns:
        The amount with surrounding whitespace removed.

    Raises:
        InvalidAmountError: If the amount is not a positive integer string.
    """
    value = amount.strip() if isinstance(amount, str) else ""
    if not _BASE_UNIT_AMOUNT.fullmatch(value):
        raise InvalidAmountError(
            f"Amount must be a positive integer in base units, got {amount!r}"
        )
    if int(value) <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {amount!r}")
    return value
