"""
Decimal money helpers shared by the split engine, the ledger and the
settlement reducer.

Every per-participant share is rounded with `round_money` before it is
stored or returned, and every "does this add up" check goes through
`is_approximately_equal` with the single `EPSILON` tolerance.
"""
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Iterable, Union

EPSILON = Decimal("0.01")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
# Finest percentage a split can carry; matches the expense_splits.percentage column
PERCENT_PRECISION = Decimal("0.0001")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Round to two decimal places, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def truncate_money(value: Number) -> Decimal:
    """Round to two decimal places toward zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_DOWN)


def is_approximately_equal(a: Number, b: Number, epsilon: Number = EPSILON) -> bool:
    """True when `a` and `b` differ by less than `epsilon`."""
    return abs(to_decimal(a) - to_decimal(b)) < to_decimal(epsilon)


def sum_money(values: Iterable[Number]) -> Decimal:
    """Sum values as Decimals (an empty iterable sums to 0)."""
    return sum((to_decimal(v) for v in values), Decimal("0"))


def distribute_cents(shares: list, remainder: Decimal) -> list:
    """
    Spread `remainder` over `shares` one cent at a time, starting at the
    first share. A negative remainder takes cents away instead.
    """
    step = CENT if remainder >= 0 else -CENT
    cents = int(abs(remainder) / CENT)
    result = list(shares)
    for i in range(cents):
        result[i % len(result)] += step
    return result
