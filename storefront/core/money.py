"""Fixed-point money helpers.

Amounts are kept as ``Decimal`` with two places and written to the
database as strings so PostgREST never round-trips them through float.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Coerce a database or request value to a two-place ``Decimal``."""
    if isinstance(value, float):
        value = repr(value)
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def money_str(value: Any) -> str:
    """Format an amount for storage, e.g. ``Decimal("30")`` -> ``"30.00"``."""
    return str(to_money(value))
