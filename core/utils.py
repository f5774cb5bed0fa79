from __future__ import annotations

from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation, localcontext
from typing import Iterator, Union

import numpy as np

from .errors import InvalidInput

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Coerce to Decimal; floats go through repr so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize_money(value: Number) -> Decimal:
    """Round to cents, half away from zero (same rule as excel_round)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def float_to_money(value: float) -> Decimal:
    """
    Cents for a simulated float of any finite magnitude.

    A float carries at most 17 significant digits, so the working precision is
    widened to hold every digit of the integer part. Infinities and NaN raise
    InvalidOperation.
    """
    exact = to_decimal(float(value))
    if not exact.is_finite():
        raise InvalidOperation(f"{value!r} is not a finite amount")
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + 3)
        return exact.quantize(CENT, rounding=ROUND_HALF_UP)


def periodic_rate(annual_rate_percent: Number, periods_per_year: int = 12) -> Decimal:
    """Annual rate in percent (7 means 7%) -> per-period fraction."""
    return to_decimal(annual_rate_percent) / HUNDRED / periods_per_year


def compound_growth(principal: Decimal, rate: Decimal, periods: Decimal) -> Decimal:
    """principal * (1 + rate) ** periods"""
    return principal * (ONE + rate) ** periods


def annuity_future_value(
    payment: Decimal,
    rate: Decimal,
    periods: Decimal,
    *,
    beginning_of_period: bool = False,
) -> Decimal:
    """
    Future value of a level annuity; linear when rate is zero.

    Payments land at the end of each period unless ``beginning_of_period`` is
    set (annuity due), which earns one extra period of growth: FV * (1 + rate).
    """
    if rate == ZERO:
        return payment * periods
    fv = payment * (((ONE + rate) ** periods - ONE) / rate)
    if beginning_of_period:
        fv *= ONE + rate
    return fv


def annuity_present_value(payment: Decimal, rate: Decimal, periods: Decimal) -> Decimal:
    """Present value of a level ordinary annuity; linear when rate is zero."""
    if rate == ZERO:
        return payment * periods
    growth = (ONE + rate) ** periods
    return payment * ((growth - ONE) / (rate * growth))


def level_payment(balance: Decimal, rate: Decimal, periods: int) -> Decimal:
    """Standard fully-amortizing level payment (PMT) with zero-rate guard."""
    if periods <= 0:
        return balance
    if rate == ZERO:
        return balance / periods
    growth = (ONE + rate) ** periods
    return balance * (rate * growth) / (growth - ONE)


@contextmanager
def decimal_guard(calculator: str) -> Iterator[None]:
    """Turn decimal overflow / invalid-operation traps into InvalidInput.

    Money is kept to the context precision (28 digits), so amounts beyond
    about 10**26 land here too.
    """
    try:
        yield
    except DecimalException as exc:
        raise InvalidInput.from_violations(
            calculator, [f"inputs produce a non-finite result ({type(exc).__name__})"]
        ) from exc


def excel_round(x, decimals: int = 2):
    """Excel ROUND: half away from zero (vectorized)."""
    m = 10 ** decimals
    x = np.asarray(x, dtype=float)
    return np.sign(x) * (np.floor(np.abs(x) * m + 0.5) / m)
