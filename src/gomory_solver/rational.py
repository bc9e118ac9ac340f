"""
Exact rational arithmetic for tableau entries.

Every scalar in the tableau is a ``fractions.Fraction``. Fractions are
always kept in lowest terms with a positive denominator, so the helpers
here only add what Fraction does not provide directly:

- construction from mixed input types with a package-specific error
- truncation toward zero and the two fractional-part conventions
- compact string rendering ("3", "-3/2")
"""

import math
from decimal import Decimal
from fractions import Fraction
from numbers import Rational
from typing import Union

from .config import FRACTIONAL_MODES
from .errors import DivisionByZeroError

Number = Union[int, float, str, Decimal, Fraction]


def rational(numerator: Number, denominator: Number = 1) -> Fraction:
    """
    Build an exact fraction numerator / denominator.

    Parameters
    ----------
    numerator : int, Fraction, Decimal, float or str
        Floats are converted exactly (their binary value), strings are
        parsed by Fraction ("3/4", "-1.25").
    denominator : same types as numerator
        Must be non-zero.

    Returns
    -------
    Fraction

    Raises
    ------
    DivisionByZeroError
        If the denominator is zero.
    """
    num = _as_fraction(numerator)
    den = _as_fraction(denominator)
    if den == 0:
        raise DivisionByZeroError(f"Zero denominator in {numerator}/{denominator}")
    if den == 1:
        return num
    return num / den


def _as_fraction(value: Number) -> Fraction:
    if isinstance(value, Fraction):
        return value
    if isinstance(value, (Rational, Decimal, float, str)):
        return Fraction(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to a rational value")


def divide(a: Fraction, b: Fraction) -> Fraction:
    """Exact a / b, raising DivisionByZeroError when b is zero."""
    if b == 0:
        raise DivisionByZeroError(f"Division of {a} by zero")
    return Fraction(a) / b


def truncate_to_integer(x: Fraction) -> int:
    """Integer part of x, rounded toward zero."""
    return math.trunc(x)


def fractional_part(x: Fraction, mode: str = "floor") -> Fraction:
    """
    Fractional part of x.

    Parameters
    ----------
    x : Fraction
    mode : str
        "floor" gives x - floor(x) in [0, 1).
        "truncate" gives x - trunc(x) in (-1, 1), carrying the sign of x.

    Raises
    ------
    ValueError
        If mode is unknown.
    """
    if mode == "floor":
        return x - math.floor(x)
    if mode == "truncate":
        return x - truncate_to_integer(x)
    raise ValueError(f"Unknown fractional mode {mode!r}, expected one of {FRACTIONAL_MODES}")


def is_integral(x: Fraction) -> bool:
    """True if x is a whole number."""
    return Fraction(x).denominator == 1


def format_rational(x: Fraction) -> str:
    """Render as "n" or "n/d" with the sign on the numerator."""
    x = Fraction(x)
    if x.denominator == 1:
        return str(x.numerator)
    return f"{x.numerator}/{x.denominator}"
