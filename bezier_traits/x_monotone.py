"""X-monotone arcs of Bezier curves."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Tuple, Union

import sympy

from .bounding import BoundingBox
from .cache import BezierCache, IntersectionInfo, IntersectionMap, pair_key
from .config import get_traits_config
from .curve import T, BezierCurve
from .numbers import Z, AlgebraicReal, as_poly, max_of, min_of, rational_between, sympy_rational
from .point import BezierPoint
from .types import EQUAL, LARGER, SMALLER, Comparison

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntersectionPoint:
    """An isolated intersection; ``multiplicity == 0`` means unknown."""

    point: BezierPoint
    multiplicity: int = 0


ArcIntersection = Union[IntersectionPoint, "XMonotoneArc"]


class XMonotoneArc:
    """A directed piece of a Bezier curve over which ``X(t)`` is monotone.

    The arc spans the parameter range between its source and target
    parameters on the supporting curve.  ``left()`` and ``right()`` are the
    lexicographically smaller and larger endpoints; the arc is directed
    right when its source is the left endpoint.  A vertical arc lies on a
    curve whose control points share one x-coordinate; its left endpoint
    is the lower one.
    """

    def __init__(
        self,
        curve: BezierCurve,
        source: BezierPoint,
        target: BezierPoint,
        cache: BezierCache,
        *,
        source_parameter: Optional[AlgebraicReal] = None,
        target_parameter: Optional[AlgebraicReal] = None,
    ):
        if source_parameter is None:
            source_parameter = source.parameter_on(curve)
        if target_parameter is None:
            target_parameter = target.parameter_on(curve)
        if source_parameter is None or target_parameter is None:
            raise ValueError(f"arc endpoints must lie on {curve!r}")

        self._curve = curve
        self._cache = cache
        self._source = source
        self._target = target
        self._source_parameter = source_parameter
        self._target_parameter = target_parameter
        self._is_vertical = curve.is_vertical
        self._dir_right = source.compare_xy(target) == SMALLER

        if self._dir_right:
            self._left_parameter, self._right_parameter = source_parameter, target_parameter
        else:
            self._left_parameter, self._right_parameter = target_parameter, source_parameter
        if source_parameter.compare(target_parameter) == LARGER:
            self._t_lo, self._t_hi = target_parameter, source_parameter
        else:
            self._t_lo, self._t_hi = source_parameter, target_parameter
        self._bbox: Optional[BoundingBox] = None

    # -- accessors -----------------------------------------------------

    @property
    def curve(self) -> BezierCurve:
        return self._curve

    @property
    def cache(self) -> BezierCache:
        return self._cache

    @property
    def source_parameter(self) -> AlgebraicReal:
        return self._source_parameter

    @property
    def target_parameter(self) -> AlgebraicReal:
        return self._target_parameter

    @property
    def parameter_range(self) -> Tuple[AlgebraicReal, AlgebraicReal]:
        return self._t_lo, self._t_hi

    def source(self) -> BezierPoint:
        return self._source

    def target(self) -> BezierPoint:
        return self._target

    def left(self) -> BezierPoint:
        return self._source if self._dir_right else self._target

    def right(self) -> BezierPoint:
        return self._target if self._dir_right else self._source

    def is_vertical(self) -> bool:
        return self._is_vertical

    def is_directed_right(self) -> bool:
        return self._dir_right

    def bbox(self) -> BoundingBox:
        if self._bbox is None:
            self._bbox = self._curve.bbox(self._t_lo.lo, self._t_hi.hi)
        return self._bbox

    # -- parameters ----------------------------------------------------

    def _contains_parameter(self, param: AlgebraicReal) -> bool:
        return self._t_lo.compare(param) != LARGER and param.compare(self._t_hi) != LARGER

    def _parameter_of(self, p: BezierPoint) -> AlgebraicReal:
        """Parameter of ``p`` on the supporting curve, inside the arc range."""

        for param in p.parameters_on(self._curve):
            if self._contains_parameter(param):
                return param
        if p.compare_xy(self.left()) == EQUAL:
            param = self._left_parameter
        elif p.compare_xy(self.right()) == EQUAL:
            param = self._right_parameter
        else:
            axis = 1 if self._is_vertical else 0
            param = self._parameter_at(p.coordinate(axis), axis)
        p.add_originator(self._curve, param)
        return param

    def _parameter_at(self, value: AlgebraicReal, axis: int) -> AlgebraicReal:
        """The unique parameter in range where the curve's ``axis`` coordinate is ``value``.

        ``value`` must lie in the arc's range along ``axis``.  The root is
        bracketed by rationals strictly inside the parameter range and then
        bisected, using monotonicity, until the bracket isolates it.
        """

        if value.compare(self.left().coordinate(axis)) == EQUAL:
            return self._left_parameter
        if value.compare(self.right().coordinate(axis)) == EQUAL:
            return self._right_parameter

        increasing = self._t_lo is self._left_parameter
        before = LARGER if increasing else SMALLER
        a = self._inner_bound(self._t_lo, value, axis, before, use_hi=True)
        b = self._inner_bound(self._t_hi, value, axis, before.reversed(), use_hi=False)

        if value.is_rational:
            level = self._curve.axis_expr(axis) - sympy_rational(value.lo)
        else:
            level = value.poly.as_expr().subs(Z, self._curve.axis_expr(axis))
        level_poly = as_poly(sympy.expand(level), T).sqf_part()

        while True:
            if level_poly.count_roots(sympy_rational(a), sympy_rational(b)) == 1:
                return AlgebraicReal(level_poly, a, b)
            mid = (a + b) / 2
            side = value.compare_rational(self._curve.evaluate(mid)[axis])
            if side == EQUAL:
                return AlgebraicReal.from_rational(mid)
            if side == before:
                a = mid
            else:
                b = mid

    def _inner_bound(
        self, param: AlgebraicReal, value: AlgebraicReal, axis: int, expected: Comparison, use_hi: bool
    ) -> Fraction:
        while True:
            if param.is_rational:
                return param.lo
            r = param.hi if use_hi else param.lo
            inside = self._t_hi.compare_rational(r) == LARGER if use_hi else self._t_lo.compare_rational(r) == SMALLER
            if inside and value.compare_rational(self._curve.evaluate(r)[axis]) == expected:
                return r
            param.refine()

    def _y_at(self, x: Fraction) -> AlgebraicReal:
        param = self._parameter_at(AlgebraicReal.from_rational(x), 0)
        return self._curve.coordinate_at(param, 1)

    # -- predicates ----------------------------------------------------

    def point_position(self, p: BezierPoint) -> Comparison:
        """Compare ``p.y`` with the arc at ``p.x``; ``p`` must be in the x-range."""

        for param in p.parameters_on(self._curve):
            if self._contains_parameter(param):
                return EQUAL

        if self._is_vertical:
            if p.compare_y(self.left()) == SMALLER:
                return SMALLER
            if p.compare_y(self.right()) == LARGER:
                return LARGER
            return EQUAL

        box = self.bbox()
        p_box = p.bbox()
        if p_box.y_max < box.y_min:
            return SMALLER
        if p_box.y_min > box.y_max:
            return LARGER

        if p.compare_x(self.left()) == EQUAL:
            return p.compare_y(self.left())
        if p.compare_x(self.right()) == EQUAL:
            return p.compare_y(self.right())

        param = self._parameter_at(p.x, 0)
        attempts = get_traits_config().max_filter_refinements
        for _ in range(attempts):
            lo, hi = self._curve.bbox(param.lo, param.hi).range(1)
            p_lo, p_hi = p.bbox().range(1)
            if p_hi < lo:
                return SMALLER
            if p_lo > hi:
                return LARGER
            refined = param.refine()
            refined = p.refine() or refined
            if not refined:
                break
        return p.y.compare(self._curve.coordinate_at(param, 1))

    def contains_point(self, p: BezierPoint) -> bool:
        for param in p.parameters_on(self._curve):
            if self._contains_parameter(param):
                return True
        if self._is_vertical:
            if p.compare_x(self.left()) != EQUAL:
                return False
        elif p.compare_x(self.left()) == SMALLER or p.compare_x(self.right()) == LARGER:
            return False
        return self.point_position(p) == EQUAL

    def _crossing_xs(self, other: "XMonotoneArc") -> List[AlgebraicReal]:
        return [info.params[index].x for info, index in self._crossings(other)]

    def _crossings(self, other: "XMonotoneArc") -> List[Tuple[IntersectionInfo, int]]:
        """Cached intersections of the supporting curves that lie on both arcs."""

        info = self._cache.get_intersections(self._curve, other._curve)
        found = []
        for index, params in enumerate(info.params):
            if self._curve.id == other._curve.id:
                hit = (self._contains_parameter(params.s) and other._contains_parameter(params.t)) or (
                    self._contains_parameter(params.t) and other._contains_parameter(params.s)
                )
            else:
                mine, theirs = self._oriented(other, params.s, params.t)
                hit = self._contains_parameter(mine) and other._contains_parameter(theirs)
            if hit:
                found.append((info, index))
        return found

    def _oriented(self, other: "XMonotoneArc", s: AlgebraicReal, t: AlgebraicReal):
        if pair_key(self._curve, other._curve)[0] == self._curve.id:
            return s, t
        return t, s

    def compare_to_right(self, other: "XMonotoneArc", p: BezierPoint) -> Comparison:
        """Vertical order of the two arcs immediately to the right of ``p``."""

        if other is self:
            return EQUAL
        if self._is_vertical or other._is_vertical:
            if self._is_vertical and other._is_vertical:
                return EQUAL
            return LARGER if self._is_vertical else SMALLER

        px = p.x
        limits = [self.right().x, other.right().x]
        limits.extend(x for x in self._crossing_xs(other) if x.compare(px) == LARGER)
        x_star = rational_between(px, min_of(limits))
        return self._y_at(x_star).compare(other._y_at(x_star))

    def compare_to_left(self, other: "XMonotoneArc", p: BezierPoint) -> Comparison:
        """Vertical order of the two arcs immediately to the left of ``p``."""

        if other is self:
            return EQUAL
        if self._is_vertical or other._is_vertical:
            if self._is_vertical and other._is_vertical:
                return EQUAL
            return SMALLER if self._is_vertical else LARGER

        px = p.x
        limits = [self.left().x, other.left().x]
        limits.extend(x for x in self._crossing_xs(other) if x.compare(px) == SMALLER)
        x_star = rational_between(max_of(limits), px)
        return self._y_at(x_star).compare(other._y_at(x_star))

    # -- intersection --------------------------------------------------

    def intersect(self, other: "XMonotoneArc", intersection_map: IntersectionMap) -> List[ArcIntersection]:
        """Intersection points and overlapping sub-arcs of two arcs."""

        if self._curve.id == other._curve.id:
            return self._intersect_same_curve(other, intersection_map)
        if not self.bbox().overlaps(other.bbox()):
            return []

        info = self._cache.get_intersections(self._curve, other._curve)
        if info.overlap:
            return self._common_part(other)
        return [
            IntersectionPoint(intersection_map.point(self._curve, other._curve, info, index))
            for info, index in self._crossings(other)
        ]

    def _intersect_same_curve(self, other: "XMonotoneArc", intersection_map: IntersectionMap) -> List[ArcIntersection]:
        out: List[ArcIntersection] = []
        lo = self._t_lo if self._t_lo.compare(other._t_lo) != SMALLER else other._t_lo
        hi = self._t_hi if self._t_hi.compare(other._t_hi) != LARGER else other._t_hi
        order = lo.compare(hi)
        overlap: Optional[Tuple[AlgebraicReal, AlgebraicReal]] = None
        if order == SMALLER:
            overlap = (lo, hi)
            out.append(self._sub_arc(self._endpoint_with(lo, other), self._endpoint_with(hi, other), lo, hi))
        elif order == EQUAL:
            out.append(IntersectionPoint(self._endpoint_with(lo, other)))

        for info, index in self._crossings(other):
            params = info.params[index]
            if overlap is not None and any(
                overlap[0].compare(t) != LARGER and t.compare(overlap[1]) != LARGER for t in (params.s, params.t)
            ):
                continue
            out.append(IntersectionPoint(intersection_map.point(self._curve, self._curve, info, index)))
        return out

    def _endpoint_with(self, param: AlgebraicReal, other: "XMonotoneArc") -> BezierPoint:
        for arc in (self, other):
            if param is arc._source_parameter:
                return arc._source
            if param is arc._target_parameter:
                return arc._target
        raise ValueError("parameter is not an arc endpoint")

    def _common_part(self, other: "XMonotoneArc") -> List[ArcIntersection]:
        candidates: List[BezierPoint] = []
        for p in (self.left(), self.right()):
            if other.contains_point(p):
                candidates.append(p)
        for p in (other.left(), other.right()):
            if self.contains_point(p) and not any(p.compare_xy(q) == EQUAL for q in candidates):
                candidates.append(p)
        if not candidates:
            return []
        first = candidates[0]
        last = candidates[0]
        for p in candidates[1:]:
            if p.compare_xy(first) == SMALLER:
                first = p
            if p.compare_xy(last) == LARGER:
                last = p
        if first is last:
            return [IntersectionPoint(first)]
        return [self._sub_arc(first, last, self._parameter_of(first), self._parameter_of(last))]

    # -- construction --------------------------------------------------

    def _sub_arc(
        self, p: BezierPoint, q: BezierPoint, p_param: AlgebraicReal, q_param: AlgebraicReal
    ) -> "XMonotoneArc":
        """The part of this arc between ``p`` and ``q``, in this arc's direction."""

        p_first = p.compare_xy(q) == SMALLER
        if p_first != self._dir_right:
            p, q, p_param, q_param = q, p, q_param, p_param
        return XMonotoneArc(self._curve, p, q, self._cache, source_parameter=p_param, target_parameter=q_param)

    def split(self, p: BezierPoint) -> Tuple["XMonotoneArc", "XMonotoneArc"]:
        """Split at the interior point ``p`` into ``(left_part, right_part)``."""

        param = self._parameter_of(p)
        left_part = self._sub_arc(self.left(), p, self._left_parameter, param)
        right_part = self._sub_arc(p, self.right(), param, self._right_parameter)
        return left_part, right_part

    def _adjacent_on_curve(self, other: "XMonotoneArc") -> bool:
        if self._t_hi.compare(other._t_lo) == EQUAL:
            mine, theirs = self._t_hi, other._t_lo
        elif self._t_lo.compare(other._t_hi) == EQUAL:
            mine, theirs = self._t_lo, other._t_hi
        else:
            return False
        return (mine is self._right_parameter and theirs is other._left_parameter) or (
            mine is self._left_parameter and theirs is other._right_parameter
        )

    def _collinear_vertical(self, other: "XMonotoneArc") -> bool:
        if not (self._is_vertical and other._is_vertical) or self.left().compare_x(other.left()) != EQUAL:
            return False
        if self.right().compare_xy(other.left()) != EQUAL and self.left().compare_xy(other.right()) != EQUAL:
            return False
        ends = (self.left(), self.right(), other.left(), other.right())
        return all(p.y.is_rational for p in ends)

    def can_merge_with(self, other: "XMonotoneArc") -> bool:
        if other is self:
            return False
        if self._curve.id == other._curve.id:
            return self._adjacent_on_curve(other)
        return self._collinear_vertical(other)

    def merge(self, other: "XMonotoneArc") -> "XMonotoneArc":
        """Join two mergeable arcs; the result keeps this arc's direction."""

        assert self.can_merge_with(other), "arcs are not mergeable"
        if self.right().compare_xy(other.left()) == EQUAL:
            left, left_param = self.left(), self._left_parameter
            right, right_param = other.right(), other._right_parameter
        else:
            left, left_param = other.left(), other._left_parameter
            right, right_param = self.right(), self._right_parameter

        if self._curve.id == other._curve.id:
            return self._sub_arc(left, right, left_param, right_param)

        x = self._curve.control_points[0][0]
        segment = BezierCurve([(x, left.y.lo), (x, right.y.lo)])
        left.add_originator(segment, 0)
        right.add_originator(segment, 1)
        if self._dir_right:
            return XMonotoneArc(segment, left, right, self._cache)
        return XMonotoneArc(segment, right, left, self._cache)

    def flip(self) -> "XMonotoneArc":
        return XMonotoneArc(
            self._curve,
            self._target,
            self._source,
            self._cache,
            source_parameter=self._target_parameter,
            target_parameter=self._source_parameter,
        )

    def equals(self, other: "XMonotoneArc") -> bool:
        """Same point set, regardless of direction."""

        if other is self:
            return True
        same_support = self._curve.same_control_polygon(other._curve) or (
            self._is_vertical and other._is_vertical
        )
        if not same_support and self._curve.id != other._curve.id:
            # Distinct curves can still share a common component.
            same_support = self.bbox().overlaps(other.bbox()) and self._cache.get_intersections(
                self._curve, other._curve
            ).overlap
        if not same_support:
            return False
        return self.left().equals(other.left()) and self.right().equals(other.right())

    def __repr__(self) -> str:
        direction = "->" if self._dir_right else "<-"
        return (
            f"XMonotoneArc(#{self._curve.id} t=[{float(self._t_lo.lo):.6g}, {float(self._t_hi.hi):.6g}] "
            f"{direction}{' vertical' if self._is_vertical else ''})"
        )


__all__ = ["ArcIntersection", "IntersectionPoint", "XMonotoneArc"]
