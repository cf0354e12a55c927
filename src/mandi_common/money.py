"""Decimal money helpers.

Prices and totals are rupees held as Decimal quantized to paise (2 places).
Never float: `total_amount` must equal `amount * quantity` exactly.
"""

from decimal import ROUND_HALF_UP, Decimal

_PAISE = Decimal("0.01")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Coerce to a 2-place Decimal. Floats go through str() to avoid binary noise."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(_PAISE, rounding=ROUND_HALF_UP)


def line_total(amount: Decimal, quantity: int) -> Decimal:
    return to_money(amount * quantity)


def money_to_display(amount: Decimal) -> str:
    """Display string: Decimal('2250') -> '₹2,250.00', Decimal('-12.5') -> '-₹12.50'."""
    amount = to_money(amount)
    if amount < 0:
        return f"-₹{-amount:,.2f}"
    return f"₹{amount:,.2f}"
