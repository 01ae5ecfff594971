"""Exact number kernel.

Rationals are plain :class:`fractions.Fraction` values.  Real algebraic
numbers are represented by :class:`AlgebraicReal`: a square-free rational
polynomial together with a rational interval that isolates exactly one of its
roots.  Intervals are narrowed by bisection and never widened, so every
decision taken on an interval stays valid after further refinement.

Root isolation, root counting, gcds and resultants are delegated to sympy.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Any, List, Sequence, Tuple

import sympy
from sympy import QQ, Poly, Symbol

from .types import EQUAL, LARGER, SMALLER, Comparison

logger = logging.getLogger(__name__)

# Generator used by every defining polynomial of an AlgebraicReal.
Z = Symbol("z")

# Bisections tried on both operands before computing a gcd.
_QUICK_REFINEMENTS = 4


def to_fraction(value: Any) -> Fraction:
    """Convert ints, decimal strings, floats and sympy rationals exactly."""

    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers here")
    if isinstance(value, (int, float)):
        return Fraction(value)
    if isinstance(value, str):
        return Fraction(value.strip())
    if hasattr(value, "p") and hasattr(value, "q"):
        return Fraction(int(value.p), int(value.q))
    if hasattr(value, "numerator") and hasattr(value, "denominator"):
        return Fraction(int(value.numerator), int(value.denominator))
    raise TypeError(f"cannot convert {value!r} to an exact rational")


def sympy_rational(value: Fraction) -> sympy.Rational:
    return sympy.Rational(value.numerator, value.denominator)


def sign(value: Fraction) -> int:
    return (value > 0) - (value < 0)


def horner(coeffs: Sequence[Fraction], x: Fraction) -> Fraction:
    """Evaluate a dense polynomial given highest degree first."""

    acc = Fraction(0)
    for coeff in coeffs:
        acc = acc * x + coeff
    return acc


def poly_coeffs(poly: Poly) -> Tuple[Fraction, ...]:
    return tuple(to_fraction(c) for c in poly.all_coeffs())


def as_poly(expr: Any, gen: Symbol) -> Poly:
    return Poly(expr, gen, domain=QQ)


def rebase(poly: Poly, gen: Symbol = Z) -> Poly:
    """Return ``poly`` over QQ with ``gen`` as its only generator."""

    return Poly(list(poly.all_coeffs()), gen, domain=QQ)


def eliminate(f: Any, g: Any, var: Symbol) -> Any:
    """Resultant of ``f`` and ``g`` with respect to ``var``.

    Expressions constant in ``var`` are handled explicitly so that the result
    follows the usual convention ``res(c, g) = c ** deg(g)``.
    """

    f = sympy.expand(f)
    g = sympy.expand(g)
    if f == 0 or g == 0:
        return sympy.S.Zero
    df = sympy.degree(f, var)
    dg = sympy.degree(g, var)
    if df == 0:
        return sympy.expand(f ** dg)
    if dg == 0:
        return sympy.expand(g ** df)
    return sympy.expand(sympy.resultant(f, g, var))


class AlgebraicReal:
    """A real algebraic number isolated by a closed rational interval.

    The number is the unique root of the square-free polynomial ``poly`` in
    ``[lo, hi]``.  Passing an interval that holds more than one root is a
    precondition violation.  When the interval collapses the number is
    rational and ``lo == hi``.
    """

    __slots__ = ("_poly", "_coeffs", "_lo", "_hi", "_sign_lo")

    def __init__(self, poly: Poly, lo: Any, hi: Any):
        lo = to_fraction(lo)
        hi = to_fraction(hi)
        if lo > hi:
            raise ValueError(f"empty isolating interval [{lo}, {hi}]")
        if poly.is_zero:
            raise ValueError("the zero polynomial does not define a number")
        poly = rebase(poly).sqf_part()
        if poly.degree() < 1:
            raise ValueError("a constant polynomial has no roots")
        self._poly = poly
        self._coeffs = poly_coeffs(poly)
        self._lo = lo
        self._hi = hi
        self._sign_lo = 0
        if lo == hi:
            self._collapse(lo)
        elif poly.degree() == 1:
            root = -self._coeffs[1] / self._coeffs[0]
            assert lo <= root <= hi, "linear root outside its interval"
            self._collapse(root)
        elif horner(self._coeffs, lo) == 0:
            self._collapse(lo)
        elif horner(self._coeffs, hi) == 0:
            self._collapse(hi)
        else:
            self._sign_lo = sign(horner(self._coeffs, lo))
            assert self._sign_lo != sign(horner(self._coeffs, hi)), "interval does not isolate a root"

    @classmethod
    def from_rational(cls, value: Any) -> "AlgebraicReal":
        value = to_fraction(value)
        return cls(Poly(Z - sympy_rational(value), Z, domain=QQ), value, value)

    def _collapse(self, value: Fraction) -> None:
        self._lo = self._hi = value
        self._poly = Poly(Z - sympy_rational(value), Z, domain=QQ)
        self._coeffs = (Fraction(1), -value)
        self._sign_lo = 0

    @property
    def poly(self) -> Poly:
        return self._poly

    @property
    def lo(self) -> Fraction:
        return self._lo

    @property
    def hi(self) -> Fraction:
        return self._hi

    @property
    def interval(self) -> Tuple[Fraction, Fraction]:
        return self._lo, self._hi

    @property
    def width(self) -> Fraction:
        return self._hi - self._lo

    @property
    def is_rational(self) -> bool:
        return self._lo == self._hi

    def poly_in(self, gen: Symbol) -> Any:
        """The defining polynomial as an expression in ``gen``."""

        return rebase(self._poly, gen).as_expr()

    def refine(self) -> bool:
        """Halve the isolating interval; return ``False`` once it is exact."""

        if self.is_rational:
            return False
        mid = (self._lo + self._hi) / 2
        value = horner(self._coeffs, mid)
        if value == 0:
            self._collapse(mid)
        elif sign(value) == self._sign_lo:
            self._lo = mid
        else:
            self._hi = mid
        return True

    def refine_to(self, width: Fraction) -> None:
        while self.width > width and self.refine():
            pass

    def approximate(self, eps: Fraction = Fraction(1, 1 << 60)) -> Fraction:
        self.refine_to(eps)
        return (self._lo + self._hi) / 2

    def compare_rational(self, value: Any) -> Comparison:
        """Compare this number against an exact rational."""

        value = to_fraction(value)
        while True:
            if value < self._lo:
                return LARGER
            if value > self._hi:
                return SMALLER
            if self.is_rational:
                return EQUAL
            if horner(self._coeffs, value) == 0:
                self._collapse(value)
                return EQUAL
            self.refine()

    def _separated(self, other: "AlgebraicReal"):
        if self._hi < other._lo:
            return SMALLER
        if self._lo > other._hi:
            return LARGER
        return None

    def _holds_root_of(self, poly: Poly) -> bool:
        return poly.count_roots(sympy_rational(self._lo), sympy_rational(self._hi)) > 0

    def compare(self, other: Any) -> Comparison:
        """Exact three-way comparison with another number."""

        if not isinstance(other, AlgebraicReal):
            return self.compare_rational(other)
        if other is self:
            return EQUAL
        if other.is_rational:
            return self.compare_rational(other._lo)
        if self.is_rational:
            return other.compare_rational(self._lo).reversed()

        for _ in range(_QUICK_REFINEMENTS):
            result = self._separated(other)
            if result is not None:
                return result
            self.refine()
            other.refine()
            if self.is_rational or other.is_rational:
                return self.compare(other)

        common = sympy.gcd(self._poly, other._poly)
        if common.degree() > 0 and self._holds_root_of(common) and other._holds_root_of(common):
            # Both numbers are roots of ``common``; they are equal iff one
            # interval covering both isolates a single root of it.
            while True:
                result = self._separated(other)
                if result is not None:
                    return result
                lo = min(self._lo, other._lo)
                hi = max(self._hi, other._hi)
                if common.count_roots(sympy_rational(lo), sympy_rational(hi)) == 1:
                    return EQUAL
                self.refine()
                other.refine()

        while True:
            result = self._separated(other)
            if result is not None:
                return result
            self.refine()
            other.refine()
            if self.is_rational or other.is_rational:
                return self.compare(other)

    def __float__(self) -> float:
        return float(self.approximate())

    def _coerce(self, other: Any):
        if isinstance(other, (AlgebraicReal, Fraction, int)) and not isinstance(other, bool):
            return self.compare(other)
        return NotImplemented

    def __eq__(self, other: Any):
        result = self._coerce(other)
        return result if result is NotImplemented else result == EQUAL

    def __lt__(self, other: Any):
        result = self._coerce(other)
        return result if result is NotImplemented else result == SMALLER

    def __le__(self, other: Any):
        result = self._coerce(other)
        return result if result is NotImplemented else result != LARGER

    def __gt__(self, other: Any):
        result = self._coerce(other)
        return result if result is NotImplemented else result == LARGER

    def __ge__(self, other: Any):
        result = self._coerce(other)
        return result if result is NotImplemented else result != SMALLER

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.is_rational:
            return f"AlgebraicReal({self._lo})"
        return f"AlgebraicReal(root of {self._poly.as_expr()} in [{self._lo}, {self._hi}])"


def real_roots_in(
    poly: Poly, lo: Any, hi: Any, *, include_ends: bool = True
) -> List[AlgebraicReal]:
    """Isolate the distinct real roots of ``poly`` lying in ``[lo, hi]``.

    Roots are returned in ascending order.  With ``include_ends=False`` roots
    equal to ``lo`` or ``hi`` are dropped.
    """

    if poly.is_zero:
        raise ValueError("the zero polynomial has no isolated roots")
    lo = to_fraction(lo)
    hi = to_fraction(hi)
    sqf = rebase(poly).sqf_part()
    if sqf.degree() < 1:
        return []

    roots: List[AlgebraicReal] = []
    for (a, b), _multiplicity in sqf.intervals():
        root = AlgebraicReal(sqf, a, b)
        at_lo = root.compare_rational(lo)
        at_hi = root.compare_rational(hi)
        if at_lo == SMALLER or at_hi == LARGER:
            continue
        if not include_ends and (at_lo == EQUAL or at_hi == EQUAL):
            continue
        roots.append(root)
    roots.sort(key=lambda r: r.lo)
    logger.debug("Isolated %d root(s) of degree-%d polynomial in [%s, %s]", len(roots), sqf.degree(), lo, hi)
    return roots


def rational_between(a: AlgebraicReal, b: AlgebraicReal) -> Fraction:
    """Return a rational strictly between ``a < b``."""

    if a.compare(b) != SMALLER:
        raise ValueError(f"{a!r} is not smaller than {b!r}")
    while a.hi >= b.lo:
        a.refine()
        b.refine()
    return (a.hi + b.lo) / 2


def max_of(values: Sequence[AlgebraicReal]) -> AlgebraicReal:
    best = values[0]
    for value in values[1:]:
        if value.compare(best) == LARGER:
            best = value
    return best


def min_of(values: Sequence[AlgebraicReal]) -> AlgebraicReal:
    best = values[0]
    for value in values[1:]:
        if value.compare(best) == SMALLER:
            best = value
    return best


__all__ = [
    "Z",
    "AlgebraicReal",
    "as_poly",
    "eliminate",
    "horner",
    "max_of",
    "min_of",
    "poly_coeffs",
    "rational_between",
    "real_roots_in",
    "rebase",
    "sign",
    "sympy_rational",
    "to_fraction",
]
