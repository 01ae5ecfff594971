"""Memo tables for exactly computed vertical tangencies and intersections."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Dict, List, Optional, Sequence, Tuple

import sympy
from sympy import Poly, Symbol

from .config import get_traits_config
from .curve import BezierCurve
from .logging_utils import apply_debug_logging
from .numbers import AlgebraicReal, as_poly, eliminate, real_roots_in
from .point import BezierPoint
from .types import EQUAL, SMALLER

logger = logging.getLogger(__name__)

S = Symbol("s")
T = Symbol("t")

CurvePair = Tuple[int, int]


@dataclass(frozen=True)
class IntersectionParams:
    """One intersection: ``A(s) == B(t) == (x, y)``."""

    s: AlgebraicReal
    t: AlgebraicReal
    x: AlgebraicReal
    y: AlgebraicReal


@dataclass(frozen=True)
class IntersectionInfo:
    """Cached intersections of a curve pair, sorted by x and then y.

    ``overlap`` is set when the two curves share a common component, in
    which case ``params`` is empty and overlaps are resolved per arc.
    """

    params: Tuple[IntersectionParams, ...] = ()
    overlap: bool = False


def pair_key(curve_a: BezierCurve, curve_b: BezierCurve) -> CurvePair:
    return (curve_a.id, curve_b.id) if curve_a.id <= curve_b.id else (curve_b.id, curve_a.id)


class BezierCache:
    """Append-only tables keyed by curve id and by unordered curve-id pairs."""

    def __init__(self) -> None:
        self._vertical_tangencies: Dict[int, Tuple[AlgebraicReal, ...]] = {}
        self._vertical_turns: Dict[int, Tuple[AlgebraicReal, ...]] = {}
        self._intersections: Dict[CurvePair, IntersectionInfo] = {}
        self.stats: Counter = Counter()

    def get_vertical_tangencies(
        self, curve_id: int, x_polynomial: Poly, normalization: int
    ) -> Tuple[AlgebraicReal, ...]:
        """Ascending parameters in ``(0, 1)`` where ``X'(t)`` vanishes.

        ``x_polynomial / normalization`` is the x-coordinate polynomial; the
        normalization is a positive constant and does not move the roots.
        """

        found = self._vertical_tangencies.get(curve_id)
        if found is None:
            assert normalization > 0, "normalization must be positive"
            self.stats["tangency_solves"] += 1
            found = _critical_parameters(x_polynomial)
            logger.debug("Curve #%d has %d vertical tangency point(s)", curve_id, len(found))
            self._vertical_tangencies[curve_id] = found
        return found

    def get_vertical_turns(
        self, curve_id: int, y_polynomial: Poly, normalization: int
    ) -> Tuple[AlgebraicReal, ...]:
        """Ascending parameters in ``(0, 1)`` where ``Y'(t)`` vanishes.

        Only vertical curves need them: splitting there keeps each vertical
        arc monotone in y.
        """

        found = self._vertical_turns.get(curve_id)
        if found is None:
            assert normalization > 0, "normalization must be positive"
            self.stats["turn_solves"] += 1
            found = _critical_parameters(y_polynomial)
            logger.debug("Vertical curve #%d turns back %d time(s)", curve_id, len(found))
            self._vertical_turns[curve_id] = found
        return found

    def get_intersections(self, curve_a: BezierCurve, curve_b: BezierCurve) -> IntersectionInfo:
        """Intersections of two curves, in the orientation of :func:`pair_key`.

        ``s`` is the parameter on the curve with the smaller id.  Passing the
        same curve twice returns its self-intersections with ``s < t``.
        """

        key = pair_key(curve_a, curve_b)
        found = self._intersections.get(key)
        if found is None:
            first, second = (curve_a, curve_b) if curve_a.id == key[0] else (curve_b, curve_a)
            self.stats["intersection_solves"] += 1
            if first.id == second.id:
                found = _self_intersections(first)
            else:
                found = _intersections(first, second)
            logger.debug(
                "Curves #%d/#%d: %d intersection(s), overlap=%s",
                key[0],
                key[1],
                len(found.params),
                found.overlap,
            )
            self._intersections[key] = found
        return found


class IntersectionMap:
    """Intersection points already materialized for a curve pair.

    The list stored for a pair runs parallel to the cached
    :class:`IntersectionInfo` params so every intersection becomes a single
    :class:`BezierPoint` shared by all arcs of the two curves.
    """

    def __init__(self) -> None:
        self._points: Dict[CurvePair, List[Optional[BezierPoint]]] = {}

    def point(
        self, curve_a: BezierCurve, curve_b: BezierCurve, info: IntersectionInfo, index: int
    ) -> BezierPoint:
        key = pair_key(curve_a, curve_b)
        first, second = (curve_a, curve_b) if curve_a.id == key[0] else (curve_b, curve_a)
        slots = self._points.setdefault(key, [None] * len(info.params))
        point = slots[index]
        if point is None:
            params = info.params[index]
            point = BezierPoint.from_originators(
                [(first, params.s), (second, params.t)], x=params.x, y=params.y
            )
            slots[index] = point
        return point

    def points(self, curve_a: BezierCurve, curve_b: BezierCurve) -> List[BezierPoint]:
        """The points materialized so far for the pair."""

        return [p for p in self._points.get(pair_key(curve_a, curve_b), []) if p is not None]


def _critical_parameters(polynomial: Poly) -> Tuple[AlgebraicReal, ...]:
    derivative = polynomial.diff(polynomial.gens[0])
    if derivative.is_zero:
        return ()
    return tuple(real_roots_in(derivative, 0, 1, include_ends=False))


def _intersections(curve_a: BezierCurve, curve_b: BezierCurve) -> IntersectionInfo:
    fx = curve_a.axis_expr(0, S) - curve_b.axis_expr(0, T)
    fy = curve_a.axis_expr(1, S) - curve_b.axis_expr(1, T)
    in_s = as_poly(eliminate(fx, fy, T), S)
    in_t = as_poly(eliminate(fx, fy, S), T)
    if in_s.is_zero or in_t.is_zero:
        return IntersectionInfo(overlap=True)
    s_roots = real_roots_in(in_s, 0, 1)
    t_roots = real_roots_in(in_t, 0, 1)
    return IntersectionInfo(params=_pair_roots(curve_a, s_roots, curve_b, t_roots))


def _self_intersections(curve: BezierCurve) -> IntersectionInfo:
    if curve.degree < 3:
        return IntersectionInfo()
    # Divided differences drop the trivial solutions s == t.
    fx = sympy.cancel((curve.axis_expr(0, S) - curve.axis_expr(0, T)) / (S - T))
    fy = sympy.cancel((curve.axis_expr(1, S) - curve.axis_expr(1, T)) / (S - T))
    in_s = as_poly(eliminate(fx, fy, T), S)
    in_t = as_poly(eliminate(fx, fy, S), T)
    if in_s.is_zero or in_t.is_zero:
        logger.debug("Curve #%d is degenerate; self-intersections are not reported", curve.id)
        return IntersectionInfo()
    s_roots = real_roots_in(in_s, 0, 1)
    t_roots = real_roots_in(in_t, 0, 1)
    return IntersectionInfo(params=_pair_roots(curve, s_roots, curve, t_roots, ordered=True))


class _Located:
    """A candidate parameter with lazily computed exact coordinates."""

    def __init__(self, curve: BezierCurve, parameter: AlgebraicReal):
        self.curve = curve
        self.parameter = parameter
        self._coords: List[Optional[AlgebraicReal]] = [None, None]

    def bbox(self):
        return self.curve.bbox(self.parameter.lo, self.parameter.hi)

    def coordinate(self, axis: int) -> AlgebraicReal:
        if self._coords[axis] is None:
            self._coords[axis] = self.curve.coordinate_at(self.parameter, axis)
        return self._coords[axis]


def _same_location(a: _Located, b: _Located, attempts: int) -> bool:
    for _ in range(attempts):
        if not a.bbox().overlaps(b.bbox()):
            return False
        if not (a.parameter.refine() | b.parameter.refine()):
            break
    if not a.bbox().overlaps(b.bbox()):
        return False
    return a.coordinate(0).compare(b.coordinate(0)) == EQUAL and a.coordinate(1).compare(b.coordinate(1)) == EQUAL


def _pair_roots(
    curve_a: BezierCurve,
    s_roots: Sequence[AlgebraicReal],
    curve_b: BezierCurve,
    t_roots: Sequence[AlgebraicReal],
    ordered: bool = False,
) -> Tuple[IntersectionParams, ...]:
    attempts = get_traits_config().max_filter_refinements
    on_a = [_Located(curve_a, s) for s in s_roots]
    on_b = [_Located(curve_b, t) for t in t_roots]
    found: List[IntersectionParams] = []
    for a in on_a:
        for b in on_b:
            if ordered and a.parameter.compare(b.parameter) != SMALLER:
                continue
            if _same_location(a, b, attempts):
                found.append(IntersectionParams(a.parameter, b.parameter, a.coordinate(0), a.coordinate(1)))

    def _order(p: IntersectionParams, q: IntersectionParams) -> int:
        result = p.x.compare(q.x)
        if result == EQUAL:
            result = p.y.compare(q.y)
        return int(result)

    found.sort(key=cmp_to_key(_order))
    return tuple(found)


apply_debug_logging(globals(), logger=logger)
