"""Bezier curves with rational control points."""

from __future__ import annotations

import itertools
import logging
import math
from functools import cached_property
from fractions import Fraction
from typing import Any, Iterable, Sequence, Tuple

import numpy as np
import sympy
from sympy import Poly, Symbol

from .bounding import BoundingBox, as_control_array, evaluate_bernstein, restrict_bernstein
from .numbers import (
    Z,
    AlgebraicReal,
    as_poly,
    eliminate,
    sympy_rational,
    to_fraction,
)

logger = logging.getLogger(__name__)

T = Symbol("t")

RationalPoint = Tuple[Fraction, Fraction]

_ids = itertools.count(1)


class BezierCurve:
    """An immutable Bezier curve ``B(t), t in [0, 1]``.

    Every curve gets a process-wide unique ``id`` used to key the caches.
    The coordinate polynomials are derived on first use and expressed as
    integer polynomials with a positive normalization, so that
    ``X(t) = x_polynomial(t) / x_norm``.
    """

    def __init__(self, control_points: Iterable[Sequence[Any]]):
        points = []
        for point in control_points:
            try:
                x, y = point
                points.append(_rational_point(x, y))
            except (TypeError, ValueError, OverflowError) as exc:
                raise ValueError(f"malformed control point {point!r}") from exc
        if not points:
            raise ValueError("a Bezier curve needs at least one control point")
        self._id = next(_ids)
        self._control_points: Tuple[RationalPoint, ...] = tuple(points)
        self._ctrl = as_control_array(points)

    @property
    def id(self) -> int:
        return self._id

    @property
    def control_points(self) -> Tuple[RationalPoint, ...]:
        return self._control_points

    @property
    def degree(self) -> int:
        return len(self._control_points) - 1

    @cached_property
    def is_vertical(self) -> bool:
        x0 = self._control_points[0][0]
        return all(p[0] == x0 for p in self._control_points)

    def same_control_polygon(self, other: "BezierCurve") -> bool:
        """True when both curves trace the same point set."""

        if other.id == self.id:
            return True
        return other.control_points in (self._control_points, self._control_points[::-1])

    def axis_expr(self, axis: int, gen: Symbol = T) -> Any:
        """Coordinate polynomial (rational coefficients) as a sympy expression."""

        n = self.degree
        return sympy.expand(
            sum(
                sympy_rational(p[axis]) * math.comb(n, i) * gen ** i * (1 - gen) ** (n - i)
                for i, p in enumerate(self._control_points)
            )
        )

    @cached_property
    def _axis_polys(self) -> Tuple[Poly, Poly]:
        return as_poly(self.axis_expr(0), T), as_poly(self.axis_expr(1), T)

    @cached_property
    def _normalized(self) -> Tuple[Tuple[int, Poly], Tuple[int, Poly]]:
        out = []
        for poly in self._axis_polys:
            norm, integral = poly.clear_denoms(convert=True)
            out.append((int(norm), integral))
        return out[0], out[1]

    @property
    def x_polynomial(self) -> Poly:
        return self._normalized[0][1]

    @property
    def x_norm(self) -> int:
        return self._normalized[0][0]

    @property
    def y_polynomial(self) -> Poly:
        return self._normalized[1][1]

    @property
    def y_norm(self) -> int:
        return self._normalized[1][0]

    @cached_property
    def x_derivative(self) -> Poly:
        """``X'(t)`` over the rationals."""

        return self._axis_polys[0].diff(T)

    def evaluate(self, t: Any) -> RationalPoint:
        x, y = evaluate_bernstein(self._ctrl, to_fraction(t))
        return x, y

    def subdivide(self, a: Fraction, b: Fraction) -> np.ndarray:
        """Control points of the sub-curve over ``[a, b]``."""

        return restrict_bernstein(self._ctrl, to_fraction(a), to_fraction(b))

    def bbox(self, a: Any = 0, b: Any = 1) -> BoundingBox:
        a = to_fraction(a)
        b = to_fraction(b)
        if a == b:
            return BoundingBox.from_points([self.evaluate(a)])
        return BoundingBox.from_points(self.subdivide(a, b))

    def coordinate_at(self, parameter: AlgebraicReal, axis: int) -> AlgebraicReal:
        """Exact coordinate ``B(parameter)[axis]``.

        For an irrational parameter the coordinate is the root of
        ``res_t(p(t), C(t) - z)`` isolated by the control hull of the sub-curve
        over the parameter interval.  The parameter is refined until that hull
        holds a single root.
        """

        if parameter.is_rational:
            return AlgebraicReal.from_rational(self.evaluate(parameter.lo)[axis])
        first = self._control_points[0][axis]
        if all(p[axis] == first for p in self._control_points):
            return AlgebraicReal.from_rational(first)

        defining = as_poly(eliminate(parameter.poly_in(T), self.axis_expr(axis) - Z, T), Z).sqf_part()
        while True:
            lo, hi = self.bbox(parameter.lo, parameter.hi).range(axis)
            if lo == hi:
                return AlgebraicReal.from_rational(lo)
            if defining.count_roots(sympy_rational(lo), sympy_rational(hi)) == 1:
                return AlgebraicReal(defining, lo, hi)
            parameter.refine()
            if parameter.is_rational:
                return AlgebraicReal.from_rational(self.evaluate(parameter.lo)[axis])

    def sample(self, count: int = 32) -> np.ndarray:
        """Float polyline through ``count`` evenly spaced parameters."""

        ts = np.linspace(0.0, 1.0, count)[:, None]
        pts = np.array(self._control_points, dtype=float)[None, :, :]
        pts = np.repeat(pts, count, axis=0)
        while pts.shape[1] > 1:
            pts = pts[:, :-1, :] * (1.0 - ts[:, :, None]) + pts[:, 1:, :] * ts[:, :, None]
        return pts[:, 0, :]

    def __repr__(self) -> str:
        pts = ", ".join(f"({x}, {y})" for x, y in self._control_points)
        return f"BezierCurve#{self._id}[{pts}]"


def _rational_point(x: Any, y: Any) -> RationalPoint:
    return to_fraction(x), to_fraction(y)


__all__ = ["BezierCurve", "RationalPoint", "T"]
