# app/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity: int, unit_price) -> Decimal:
    return to_money(to_money(unit_price) * quantity)


def subtotal(lines: Iterable[Tuple[int, Decimal]]) -> Decimal:
    """Sum of quantity * unit price over (quantity, unit_price) pairs."""
    return sum((line_total(q, p) for q, p in lines), ZERO)


def discount_for(subtotal_amount: Decimal, percent=None, amount=None) -> Decimal:
    """
    Percent-off wins over a flat amount when both are set. The result never
    exceeds the subtotal.
    """
    if percent:
        discount = to_money(subtotal_amount * to_money(percent) / 100)
    elif amount:
        discount = to_money(amount)
    else:
        discount = ZERO
    return min(discount, subtotal_amount)
