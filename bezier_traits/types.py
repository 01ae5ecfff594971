from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Any, List, Protocol, Tuple, Union, runtime_checkable

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .curve import BezierCurve
    from .point import BezierPoint
    from .x_monotone import IntersectionPoint, XMonotoneArc


class Comparison(IntEnum):
    """Three-valued comparison result used by every predicate."""

    SMALLER = -1
    EQUAL = 0
    LARGER = 1

    def reversed(self) -> "Comparison":
        return Comparison(-int(self))


SMALLER = Comparison.SMALLER
EQUAL = Comparison.EQUAL
LARGER = Comparison.LARGER


IntersectionResult = Union["IntersectionPoint", "XMonotoneArc"]


@runtime_checkable
class ComparisonTraits(Protocol):
    """Order predicates a sweep-line needs on points and x-monotone arcs."""

    def compare_x(self, p1: "BezierPoint", p2: "BezierPoint") -> Comparison: ...

    def compare_xy(self, p1: "BezierPoint", p2: "BezierPoint") -> Comparison: ...

    def compare_y_at_x(self, p: "BezierPoint", cv: "XMonotoneArc") -> Comparison: ...

    def compare_y_at_x_left(
        self, cv1: "XMonotoneArc", cv2: "XMonotoneArc", p: "BezierPoint"
    ) -> Comparison: ...

    def compare_y_at_x_right(
        self, cv1: "XMonotoneArc", cv2: "XMonotoneArc", p: "BezierPoint"
    ) -> Comparison: ...

    def equal(self, a: Any, b: Any) -> bool: ...

    def construct_min_vertex(self, cv: "XMonotoneArc") -> "BezierPoint": ...

    def construct_max_vertex(self, cv: "XMonotoneArc") -> "BezierPoint": ...

    def is_vertical(self, cv: "XMonotoneArc") -> bool: ...


@runtime_checkable
class IntersectionTraits(Protocol):
    """Curve decomposition and pairwise intersection."""

    def make_x_monotone(self, curve: "BezierCurve") -> List["XMonotoneArc"]: ...

    def intersect(self, cv1: "XMonotoneArc", cv2: "XMonotoneArc") -> List[IntersectionResult]: ...


@runtime_checkable
class SplitMergeTraits(Protocol):
    """Splitting and merging of x-monotone arcs."""

    def split(self, cv: "XMonotoneArc", p: "BezierPoint") -> Tuple["XMonotoneArc", "XMonotoneArc"]: ...

    def are_mergeable(self, cv1: "XMonotoneArc", cv2: "XMonotoneArc") -> bool: ...

    def merge(self, cv1: "XMonotoneArc", cv2: "XMonotoneArc") -> "XMonotoneArc": ...


@runtime_checkable
class DirectedCurveTraits(Protocol):
    """Source/target conventions used by boolean-set style consumers."""

    def compare_endpoints_xy(self, cv: "XMonotoneArc") -> Comparison: ...

    def construct_opposite(self, cv: "XMonotoneArc") -> "XMonotoneArc": ...


__all__ = [
    "Comparison",
    "SMALLER",
    "EQUAL",
    "LARGER",
    "IntersectionResult",
    "ComparisonTraits",
    "IntersectionTraits",
    "SplitMergeTraits",
    "DirectedCurveTraits",
]
