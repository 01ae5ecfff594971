"""Points anchored on Bezier curves."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Any, Iterable, List, Optional, Tuple

from .bounding import BoundingBox
from .config import get_traits_config
from .curve import BezierCurve
from .numbers import AlgebraicReal, to_fraction
from .types import EQUAL, LARGER, SMALLER, Comparison

logger = logging.getLogger(__name__)


class PointKind(Enum):
    EXACT = "exact"
    BOUNDED = "bounded"


@dataclass(eq=False)
class Originator:
    """A curve together with the (possibly refinable) parameter of a point on it."""

    curve: BezierCurve
    parameter: AlgebraicReal

    @property
    def is_exact(self) -> bool:
        return self.parameter.is_rational

    @property
    def bound(self) -> Tuple[Fraction, Fraction]:
        return self.parameter.interval

    def refine(self) -> bool:
        return self.parameter.refine()

    def bbox(self) -> BoundingBox:
        lo, hi = self.parameter.interval
        return self.curve.bbox(lo, hi)


class BezierPoint:
    """A point of the plane known through the curves that pass through it.

    A point is EXACT when one of its originators has a rational parameter,
    and BOUNDED otherwise.  Bounded points narrow their parameter intervals
    on demand; the exact coordinates are only computed when the interval
    filter cannot decide a comparison.
    """

    def __init__(self, curve: Optional[BezierCurve] = None, t: Any = None):
        self._originators: List[Originator] = []
        self._given_bbox: Optional[BoundingBox] = None
        self._bbox: Optional[BoundingBox] = None
        self._coords: List[Optional[AlgebraicReal]] = [None, None]
        if curve is not None:
            if t is None:
                raise ValueError("an exact point needs a parameter")
            self.add_originator(curve, AlgebraicReal.from_rational(t))

    @classmethod
    def bounded(
        cls, curve: BezierCurve, parameter: AlgebraicReal, bbox: Optional[BoundingBox] = None
    ) -> "BezierPoint":
        point = cls()
        point.add_originator(curve, parameter)
        if bbox is not None:
            point.set_bbox(bbox)
        return point

    @classmethod
    def from_originators(
        cls,
        originators: Iterable[Tuple[BezierCurve, AlgebraicReal]],
        x: Optional[AlgebraicReal] = None,
        y: Optional[AlgebraicReal] = None,
    ) -> "BezierPoint":
        point = cls()
        for curve, parameter in originators:
            point.add_originator(curve, parameter)
        point._coords = [x, y]
        return point

    @property
    def originators(self) -> Tuple[Originator, ...]:
        return tuple(self._originators)

    @property
    def kind(self) -> PointKind:
        if any(o.is_exact for o in self._originators):
            return PointKind.EXACT
        return PointKind.BOUNDED

    def add_originator(self, curve: BezierCurve, bound: Any) -> None:
        """Record that the point lies on ``curve`` at parameter ``bound``."""

        if not isinstance(bound, AlgebraicReal):
            bound = AlgebraicReal.from_rational(to_fraction(bound))
        for originator in self._originators:
            if originator.curve.id == curve.id and (
                originator.parameter is bound or originator.parameter.compare(bound) == EQUAL
            ):
                return
        self._originators.append(Originator(curve, bound))
        self._bbox = None

    def parameters_on(self, curve: BezierCurve) -> List[AlgebraicReal]:
        return [o.parameter for o in self._originators if o.curve.id == curve.id]

    def parameter_on(self, curve: BezierCurve) -> Optional[AlgebraicReal]:
        params = self.parameters_on(curve)
        return params[0] if params else None

    def set_bbox(self, box: BoundingBox) -> None:
        self._given_bbox = box
        self._bbox = None

    def bbox(self) -> BoundingBox:
        if self._bbox is None:
            box = self._given_bbox
            for originator in self._originators:
                mine = originator.bbox()
                if box is None:
                    box = mine
                else:
                    box = box.intersection(mine) or box
            if box is None:
                raise ValueError("point has no originator")
            self._bbox = box
        return self._bbox

    def refine(self) -> bool:
        """Narrow every bounded originator once; ``False`` if nothing changed."""

        refined = False
        for originator in self._originators:
            if not originator.is_exact:
                refined = originator.refine() or refined
        if refined:
            self._bbox = None
        return refined

    def _anchor(self) -> Originator:
        if not self._originators:
            raise ValueError("point has no originator")
        for originator in self._originators:
            if originator.is_exact:
                return originator
        return self._originators[0]

    def coordinate(self, axis: int) -> AlgebraicReal:
        value = self._coords[axis]
        if value is None:
            anchor = self._anchor()
            value = anchor.curve.coordinate_at(anchor.parameter, axis)
            self._coords[axis] = value
        return value

    @property
    def x(self) -> AlgebraicReal:
        return self.coordinate(0)

    @property
    def y(self) -> AlgebraicReal:
        return self.coordinate(1)

    def _compare_axis(self, other: "BezierPoint", axis: int) -> Comparison:
        attempts = get_traits_config().max_filter_refinements
        for _ in range(attempts + 1):
            lo1, hi1 = self.bbox().range(axis)
            lo2, hi2 = other.bbox().range(axis)
            if hi1 < lo2:
                return SMALLER
            if lo1 > hi2:
                return LARGER
            if lo1 == hi1 == lo2 == hi2:
                return EQUAL
            refined = self.refine()
            refined = other.refine() or refined
            if not refined:
                break
        return self.coordinate(axis).compare(other.coordinate(axis))

    def compare_x(self, other: "BezierPoint") -> Comparison:
        if other is self:
            return EQUAL
        return self._compare_axis(other, 0)

    def compare_y(self, other: "BezierPoint") -> Comparison:
        if other is self:
            return EQUAL
        return self._compare_axis(other, 1)

    def compare_xy(self, other: "BezierPoint") -> Comparison:
        """Lexicographic comparison, by x and then by y."""

        if self._shares_parameter(other):
            return EQUAL
        result = self.compare_x(other)
        if result != EQUAL:
            return result
        return self.compare_y(other)

    def _shares_parameter(self, other: "BezierPoint") -> bool:
        if other is self:
            return True
        for mine in self._originators:
            for theirs in other._originators:
                if mine.curve.id != theirs.curve.id:
                    continue
                if mine.parameter is theirs.parameter:
                    return True
                if mine.is_exact and theirs.is_exact and mine.parameter.lo == theirs.parameter.lo:
                    return True
        return False

    def equals(self, other: "BezierPoint") -> bool:
        return self.compare_xy(other) == EQUAL

    def approximate(self, eps: Fraction = Fraction(1, 10 ** 12)) -> Tuple[float, float]:
        """Float coordinates, evaluated at a narrowed parameter."""

        anchor = self._anchor()
        anchor.parameter.refine_to(eps)
        lo, hi = anchor.parameter.interval
        x, y = anchor.curve.evaluate((lo + hi) / 2)
        return float(x), float(y)

    def __repr__(self) -> str:
        anchors = ", ".join(
            f"#{o.curve.id}@{o.parameter.lo}" if o.is_exact else f"#{o.curve.id}@[{o.bound[0]}, {o.bound[1]}]"
            for o in self._originators
        )
        return f"BezierPoint({self.kind.value}: {anchors})"


__all__ = ["BezierPoint", "Originator", "PointKind"]
