from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def format_naira(amount: Decimal | int | float, *, decimals: bool = False) -> str:
    """Format an NGN amount: ``₦50,000`` or, with *decimals*, ``₦50,000.00``.

    Fractional kobo are kept when present even without *decimals*.
    """
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    q = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if not decimals and q == q.to_integral_value():
        return f"₦{q.to_integral_value():,}"
    return f"₦{q:,}"
