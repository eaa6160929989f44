"""
JACOBItools: Arithmetic Providers

One provider per numeric family. The generic Jacobi kernels only touch
matrix elements through a provider, so the same control flow serves native
floats, ``decimal.Decimal`` and ``fractions.Fraction`` without mixing
families inside a decomposition.

Author: James R. Beattie

"""

import math
import numbers
import operator
from decimal import Decimal, getcontext
from fractions import Fraction
from typing import Optional

import mpmath

from .constants import *


class Arithmetic:
    """
    Base provider. The four field operations, absolute value and ordering
    default to the Python operators, which every supported family overloads.
    Subclasses supply the constants, conversion and trigonometry.
    """
    family = None
    zero = None
    one = None

    add = staticmethod(operator.add)
    subtract = staticmethod(operator.sub)
    multiply = staticmethod(operator.mul)
    divide = staticmethod(operator.truediv)
    absolute = staticmethod(operator.abs)
    less = staticmethod(operator.lt)

    def convert(self, value):
        raise NotImplementedError

    def sin(self, theta):
        raise NotImplementedError

    def cos(self, theta):
        raise NotImplementedError

    def atan(self, value):
        raise NotImplementedError

    def quarter_pi(self):
        raise NotImplementedError

    @staticmethod
    def to_float(value) -> float:
        return float(value)

    def __repr__(self):
        return f"{type(self).__name__}()"


class FloatArithmetic(Arithmetic):
    """Native double precision with the ``math`` module."""
    family = FLOATING
    zero = 0.0
    one = 1.0

    def convert(self, value):
        return float(value)

    def sin(self, theta):
        return math.sin(theta)

    def cos(self, theta):
        return math.cos(theta)

    def atan(self, value):
        return math.atan(value)

    def quarter_pi(self):
        return math.pi / 4.0


class DecimalArithmetic(Arithmetic):
    """
    ``decimal.Decimal`` arithmetic. The field operations run under whatever
    decimal context is active, so callers wrap a decomposition in a local
    context of ``self.precision`` digits. Trigonometry has no Decimal
    implementation and is evaluated by mpmath with guard digits, then
    rounded back to the active context.
    """
    family = ARBITRARY_PRECISION
    zero = Decimal(0)
    one = Decimal(1)

    def __init__(
        self,
        precision: Optional[int] = None):
        """
        Args:
            precision (int, optional): significant digits. Defaults to the
                current decimal context precision.
        """
        self.precision = precision if precision is not None else getcontext().prec

    def convert(self, value):
        if isinstance(value, float):
            return Decimal(repr(value))
        if isinstance(value, numbers.Integral):
            return Decimal(int(value))
        return Decimal(value)

    def _evaluate(self, func, value):
        with mpmath.workdps(self.precision + MPMATH_GUARD_DIGITS):
            result = func(mpmath.mpf(str(value)))
            text = mpmath.nstr(result, self.precision + MPMATH_GUARD_DIGITS,
                               strip_zeros=False)
        return +Decimal(text)

    def sin(self, theta):
        return self._evaluate(mpmath.sin, theta)

    def cos(self, theta):
        return self._evaluate(mpmath.cos, theta)

    def atan(self, value):
        return self._evaluate(mpmath.atan, value)

    def quarter_pi(self):
        with mpmath.workdps(self.precision + MPMATH_GUARD_DIGITS):
            text = mpmath.nstr(mpmath.pi / 4, self.precision + MPMATH_GUARD_DIGITS)
        return +Decimal(text)

    def __repr__(self):
        return f"DecimalArithmetic(precision={self.precision})"


class FractionArithmetic(Arithmetic):
    """
    ``fractions.Fraction`` arithmetic. Field operations are exact; sin, cos,
    atan and pi/4 are irrational, so they are evaluated in double precision
    and turned back into the exact Fraction of that double.
    """
    family = RATIONAL
    zero = Fraction(0)
    one = Fraction(1)

    def convert(self, value):
        if isinstance(value, float):
            return Fraction(repr(value))
        if isinstance(value, numbers.Integral):
            return Fraction(int(value))
        return Fraction(value)

    def sin(self, theta):
        return Fraction.from_float(math.sin(float(theta)))

    def cos(self, theta):
        return Fraction.from_float(math.cos(float(theta)))

    def atan(self, value):
        return Fraction.from_float(math.atan(float(value)))

    def quarter_pi(self):
        return Fraction.from_float(math.pi / 4.0)


def provider_for(
    family: str,
    decimal_precision: Optional[int] = None) -> Arithmetic:
    """
    Return the arithmetic provider of a numeric family.

    Args:
        family (str): one of FLOATING, ARBITRARY_PRECISION, RATIONAL
        decimal_precision (int, optional): digits for ARBITRARY_PRECISION

    Returns:
        Arithmetic: the provider
    """
    if family == FLOATING:
        return FloatArithmetic()
    if family == ARBITRARY_PRECISION:
        return DecimalArithmetic(decimal_precision)
    if family == RATIONAL:
        return FractionArithmetic()
    raise TypeError(f"Unsupported numeric family: {family!r}")
