"""Approximate filtering of Bezier curves by control-polygon subdivision.

The helpers here work on Bernstein coefficient arrays (numpy object arrays of
``Fraction``) so that every bound they report is a certified enclosure: the
curve over a parameter interval lies in the convex hull of the sub-curve
control polygon, and Descartes' rule of signs on the Bernstein coefficients
bounds the number of roots.  :class:`BoundingTraits` uses them to propose
vertical-tangency candidates without computing any root exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .config import TraitsConfig, get_traits_config
from .numbers import to_fraction

logger = logging.getLogger(__name__)

_HALF = Fraction(1, 2)


def as_control_array(points: Iterable[Sequence[object]]) -> np.ndarray:
    return np.array([tuple(to_fraction(c) for c in point) for point in points], dtype=object)


def split_bernstein(coeffs: np.ndarray, t: Fraction) -> Tuple[np.ndarray, np.ndarray]:
    """de Casteljau split of a Bernstein array at local parameter ``t``."""

    pts = coeffs
    left = [pts[0]]
    right = [pts[-1]]
    while len(pts) > 1:
        pts = pts[:-1] * (1 - t) + pts[1:] * t
        left.append(pts[0])
        right.append(pts[-1])
    return np.array(left, dtype=object), np.array(right[::-1], dtype=object)


def restrict_bernstein(coeffs: np.ndarray, a: Fraction, b: Fraction) -> np.ndarray:
    """Bernstein coefficients of the same polynomial over ``[a, b]``.

    Coefficient ``i`` is the blossom evaluated at ``(a,) * (n - i) + (b,) * i``;
    any ``a`` and ``b`` are accepted, including values outside ``[0, 1]``.
    """

    if a == 0 and b == 1:
        return coeffs
    n = len(coeffs) - 1
    out = []
    for i in range(n + 1):
        pts = coeffs
        for k in range(n):
            u = b if k < i else a
            pts = pts[:-1] * (1 - u) + pts[1:] * u
        out.append(pts[0])
    return np.array(out, dtype=object)


def evaluate_bernstein(coeffs: np.ndarray, t: Fraction):
    pts = coeffs
    while len(pts) > 1:
        pts = pts[:-1] * (1 - t) + pts[1:] * t
    return pts[0]


def sign_variations(values: Iterable[Fraction]) -> int:
    """Number of sign changes in ``values``, zeros ignored."""

    changes = 0
    previous = 0
    for value in values:
        current = (value > 0) - (value < 0)
        if current == 0:
            continue
        if previous and current != previous:
            changes += 1
        previous = current
    return changes


@dataclass(frozen=True)
class BoundingBox:
    """Closed axis-parallel box with exact rational bounds."""

    x_min: Fraction
    x_max: Fraction
    y_min: Fraction
    y_max: Fraction

    @classmethod
    def from_points(cls, points: Iterable[Sequence[Fraction]]) -> "BoundingBox":
        pts = list(points)
        if not pts:
            raise ValueError("cannot bound an empty point set")
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return cls(min(xs), max(xs), min(ys), max(ys))

    def range(self, axis: int) -> Tuple[Fraction, Fraction]:
        if axis == 0:
            return self.x_min, self.x_max
        return self.y_min, self.y_max

    @property
    def is_point(self) -> bool:
        return self.x_min == self.x_max and self.y_min == self.y_max

    def overlaps(self, other: "BoundingBox") -> bool:
        return (
            self.x_min <= other.x_max
            and other.x_min <= self.x_max
            and self.y_min <= other.y_max
            and other.y_min <= self.y_max
        )

    def intersection(self, other: "BoundingBox") -> Optional["BoundingBox"]:
        if not self.overlaps(other):
            return None
        return BoundingBox(
            max(self.x_min, other.x_min),
            min(self.x_max, other.x_max),
            max(self.y_min, other.y_min),
            min(self.y_max, other.y_max),
        )


class BoundType(Enum):
    RATIONAL = "rational"
    APPROXIMATE = "approximate"


@dataclass(frozen=True)
class PointBound:
    """Parameter interval proposed for a single vertical tangency."""

    t_min: Fraction
    t_max: Fraction
    point_type: BoundType = BoundType.APPROXIMATE
    can_refine: bool = True

    @property
    def width(self) -> Fraction:
        return self.t_max - self.t_min


TangencyCandidate = Tuple[PointBound, BoundingBox]


class BoundingTraits:
    """Proposes vertical-tangency bounds by subdividing the control polygon.

    Each reported bound either holds exactly one simple root of ``X'(t)``
    with non-vanishing endpoint values (``APPROXIMATE``), or collapses to an
    exact rational root (``RATIONAL``).  When subdivision hits
    ``max_subdivision_depth`` without isolating a root the last candidate is
    flagged ``can_refine=False`` and the search stops.
    """

    def __init__(self, config: Optional[TraitsConfig] = None):
        self.config = config or get_traits_config()

    def vertical_tangency_points(
        self,
        control_points: Sequence[Sequence[object]],
        t_min: object = 0,
        t_max: object = 1,
    ) -> List[TangencyCandidate]:
        a = to_fraction(t_min)
        b = to_fraction(t_max)
        ctrl = restrict_bernstein(as_control_array(control_points), a, b)
        out: List[TangencyCandidate] = []
        dx = ctrl[1:, 0] - ctrl[:-1, 0]
        if len(dx) == 0 or all(v == 0 for v in dx):
            return out
        if not self._isolate(ctrl, a, b, 0, out):
            logger.debug("Tangency bounding gave up on [%s, %s] after %d candidate(s)", a, b, len(out))
        return out

    def _isolate(self, ctrl: np.ndarray, a: Fraction, b: Fraction, depth: int, out: List[TangencyCandidate]) -> bool:
        dx = ctrl[1:, 0] - ctrl[:-1, 0]
        variations = sign_variations(dx)
        if variations == 0:
            return True
        if variations == 1:
            return self._narrow(ctrl, a, b, depth, out)
        if depth >= self.config.max_subdivision_depth:
            out.append((PointBound(a, b, can_refine=False), BoundingBox.from_points(ctrl)))
            return False

        mid = (a + b) / 2
        left, right = split_bernstein(ctrl, _HALF)
        if not self._isolate(left, a, mid, depth + 1, out):
            return False
        if left[-1, 0] == left[-2, 0]:
            out.append((PointBound(mid, mid, BoundType.RATIONAL), BoundingBox.from_points([left[-1]])))
        return self._isolate(right, mid, b, depth + 1, out)

    def _narrow(self, ctrl: np.ndarray, a: Fraction, b: Fraction, depth: int, out: List[TangencyCandidate]) -> bool:
        tolerance = self.config.tangency_tolerance
        while True:
            dx = ctrl[1:, 0] - ctrl[:-1, 0]
            if b - a <= tolerance and dx[0] != 0 and dx[-1] != 0:
                out.append((PointBound(a, b), BoundingBox.from_points(ctrl)))
                return True
            if depth >= self.config.max_subdivision_depth:
                out.append((PointBound(a, b, can_refine=False), BoundingBox.from_points(ctrl)))
                return False
            mid = (a + b) / 2
            left, right = split_bernstein(ctrl, _HALF)
            if left[-1, 0] == left[-2, 0]:
                out.append((PointBound(mid, mid, BoundType.RATIONAL), BoundingBox.from_points([left[-1]])))
                return True
            left_dx = left[1:, 0] - left[:-1, 0]
            if sign_variations(left_dx) == 1:
                ctrl, b = left, mid
            else:
                ctrl, a = right, mid
            depth += 1


__all__ = [
    "BoundType",
    "BoundingBox",
    "BoundingTraits",
    "PointBound",
    "TangencyCandidate",
    "as_control_array",
    "evaluate_bernstein",
    "restrict_bernstein",
    "sign_variations",
    "split_bernstein",
]
