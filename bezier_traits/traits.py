"""Arrangement traits facade for Bezier curves.

:class:`BezierTraits` binds the shared :class:`~bezier_traits.cache.BezierCache`
and :class:`~bezier_traits.cache.IntersectionMap` to the point and arc
operations.  Copies made with :meth:`BezierTraits.copy` (or ``copy.copy``)
share both tables through one :class:`SharedCaches` handle.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .bounding import BoundingTraits, BoundType
from .cache import BezierCache, IntersectionMap
from .curve import BezierCurve
from .logging_utils import apply_debug_logging
from .numbers import AlgebraicReal
from .point import BezierPoint
from .types import LARGER, SMALLER, Comparison, IntersectionResult
from .x_monotone import XMonotoneArc

logger = logging.getLogger(__name__)


@dataclass
class SharedCaches:
    """The tables every copy of a traits facade works against."""

    cache: BezierCache = field(default_factory=BezierCache)
    intersection_map: IntersectionMap = field(default_factory=IntersectionMap)


class BezierTraits:
    """Geometry traits consumed by a sweep-line arrangement."""

    def __init__(self, bounding: Optional[BoundingTraits] = None, *, shared: Optional[SharedCaches] = None):
        self.bounding = bounding or BoundingTraits()
        self._shared = shared or SharedCaches()

    @property
    def shared(self) -> SharedCaches:
        return self._shared

    @property
    def cache(self) -> BezierCache:
        return self._shared.cache

    @property
    def intersection_map(self) -> IntersectionMap:
        return self._shared.intersection_map

    def copy(self) -> "BezierTraits":
        return copy.copy(self)

    # -- decomposition -------------------------------------------------

    def _fast_tangency_points(self, curve: BezierCurve) -> Optional[List[Tuple[BezierPoint, AlgebraicReal]]]:
        candidates = self.bounding.vertical_tangency_points(curve.control_points)
        if any(not bound.can_refine for bound, _box in candidates):
            logger.debug("Fast path rejected for curve #%d; using exact tangencies", curve.id)
            return None

        points = []
        for bound, box in sorted(candidates, key=lambda candidate: candidate[0].t_min):
            if bound.point_type is BoundType.RATIONAL or bound.t_min == bound.t_max:
                point = BezierPoint(curve, bound.t_min)
            else:
                point = BezierPoint.bounded(curve, AlgebraicReal(curve.x_derivative, bound.t_min, bound.t_max), box)
            points.append((point, point.parameter_on(curve)))
        return points

    def _exact_tangency_points(self, curve: BezierCurve) -> List[Tuple[BezierPoint, AlgebraicReal]]:
        if curve.is_vertical:
            params = self.cache.get_vertical_turns(curve.id, curve.y_polynomial, curve.y_norm)
        else:
            params = self.cache.get_vertical_tangencies(curve.id, curve.x_polynomial, curve.x_norm)
        points = []
        for param in params:
            if param.is_rational:
                point = BezierPoint(curve, param.lo)
                points.append((point, point.parameter_on(curve)))
            else:
                points.append((BezierPoint.bounded(curve, param), param))
        return points

    def make_x_monotone(self, curve: BezierCurve) -> List[XMonotoneArc]:
        """Split ``curve`` at its vertical tangencies, in ascending parameter order.

        A vertical curve is split where its y-coordinate turns back instead.
        """

        tangencies = None if curve.is_vertical else self._fast_tangency_points(curve)
        if tangencies is None:
            tangencies = self._exact_tangency_points(curve)

        start = BezierPoint(curve, 0)
        end = BezierPoint(curve, 1)
        stops = [(start, start.parameter_on(curve))] + tangencies + [(end, end.parameter_on(curve))]
        arcs = []
        for (source, s), (target, t) in zip(stops, stops[1:]):
            arcs.append(XMonotoneArc(curve, source, target, self.cache, source_parameter=s, target_parameter=t))
        logger.debug("Curve #%d split into %d x-monotone arc(s)", curve.id, len(arcs))
        return arcs

    # -- comparisons ---------------------------------------------------

    def compare_x(self, p1: BezierPoint, p2: BezierPoint) -> Comparison:
        return p1.compare_x(p2)

    def compare_xy(self, p1: BezierPoint, p2: BezierPoint) -> Comparison:
        return p1.compare_xy(p2)

    def compare_y_at_x(self, p: BezierPoint, cv: XMonotoneArc) -> Comparison:
        return cv.point_position(p)

    def compare_y_at_x_left(self, cv1: XMonotoneArc, cv2: XMonotoneArc, p: BezierPoint) -> Comparison:
        return cv1.compare_to_left(cv2, p)

    def compare_y_at_x_right(self, cv1: XMonotoneArc, cv2: XMonotoneArc, p: BezierPoint) -> Comparison:
        return cv1.compare_to_right(cv2, p)

    def equal(self, a: Any, b: Any) -> bool:
        if isinstance(a, XMonotoneArc) and isinstance(b, XMonotoneArc):
            return a.equals(b)
        if isinstance(a, BezierPoint) and isinstance(b, BezierPoint):
            return a.equals(b)
        raise TypeError(f"cannot compare {type(a).__name__} with {type(b).__name__}")

    def construct_min_vertex(self, cv: XMonotoneArc) -> BezierPoint:
        return cv.left()

    def construct_max_vertex(self, cv: XMonotoneArc) -> BezierPoint:
        return cv.right()

    def is_vertical(self, cv: XMonotoneArc) -> bool:
        return cv.is_vertical()

    # -- intersections, split and merge --------------------------------

    def intersect(self, cv1: XMonotoneArc, cv2: XMonotoneArc) -> List[IntersectionResult]:
        return cv1.intersect(cv2, self.intersection_map)

    def split(self, cv: XMonotoneArc, p: BezierPoint) -> Tuple[XMonotoneArc, XMonotoneArc]:
        return cv.split(p)

    def are_mergeable(self, cv1: XMonotoneArc, cv2: XMonotoneArc) -> bool:
        return cv1.can_merge_with(cv2)

    def merge(self, cv1: XMonotoneArc, cv2: XMonotoneArc) -> XMonotoneArc:
        return cv1.merge(cv2)

    # -- directed curves -----------------------------------------------

    def compare_endpoints_xy(self, cv: XMonotoneArc) -> Comparison:
        return SMALLER if cv.is_directed_right() else LARGER

    def construct_opposite(self, cv: XMonotoneArc) -> XMonotoneArc:
        return cv.flip()


apply_debug_logging(globals(), logger=logger, skip={"BezierTraits.copy"})
