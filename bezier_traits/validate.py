from __future__ import annotations

from typing import Tuple

from .curve import BezierCurve
from .point import BezierPoint
from .traits import BezierTraits
from .types import EQUAL, LARGER, SMALLER, Comparison
from .x_monotone import XMonotoneArc


class ValidationError(ValueError):
    pass


def _ensure_in_x_range(p: BezierPoint, cv: XMonotoneArc) -> None:
    if p.compare_x(cv.left()) == SMALLER or p.compare_x(cv.right()) == LARGER:
        raise ValidationError(f'{p!r} is outside the x-range of {cv!r}')


def _ensure_on_arc(p: BezierPoint, cv: XMonotoneArc) -> None:
    _ensure_in_x_range(p, cv)
    if not cv.contains_point(p):
        raise ValidationError(f'{p!r} does not lie on {cv!r}')


class CheckedBezierTraits(BezierTraits):
    """:class:`BezierTraits` that checks every caller precondition first.

    The unchecked facade leaves these cases undefined; this one raises
    :class:`ValidationError` instead.  The checks cost exact comparisons, so
    use it while developing a consumer rather than in production sweeps.
    """

    def make_x_monotone(self, curve):
        if not isinstance(curve, BezierCurve):
            raise ValidationError(f'expected a BezierCurve, got {type(curve).__name__}')
        return super().make_x_monotone(curve)

    def compare_y_at_x(self, p: BezierPoint, cv: XMonotoneArc) -> Comparison:
        _ensure_in_x_range(p, cv)
        return super().compare_y_at_x(p, cv)

    def compare_y_at_x_left(self, cv1: XMonotoneArc, cv2: XMonotoneArc, p: BezierPoint) -> Comparison:
        for cv in (cv1, cv2):
            _ensure_on_arc(p, cv)
            if p.compare_xy(cv.left()) != LARGER:
                raise ValidationError(f'{cv!r} is not defined to the left of {p!r}')
        return super().compare_y_at_x_left(cv1, cv2, p)

    def compare_y_at_x_right(self, cv1: XMonotoneArc, cv2: XMonotoneArc, p: BezierPoint) -> Comparison:
        for cv in (cv1, cv2):
            _ensure_on_arc(p, cv)
            if p.compare_xy(cv.right()) != SMALLER:
                raise ValidationError(f'{cv!r} is not defined to the right of {p!r}')
        return super().compare_y_at_x_right(cv1, cv2, p)

    def split(self, cv: XMonotoneArc, p: BezierPoint) -> Tuple[XMonotoneArc, XMonotoneArc]:
        _ensure_on_arc(p, cv)
        if p.compare_xy(cv.left()) == EQUAL or p.compare_xy(cv.right()) == EQUAL:
            raise ValidationError(f'split point {p!r} must be interior to {cv!r}')
        return super().split(cv, p)

    def merge(self, cv1: XMonotoneArc, cv2: XMonotoneArc) -> XMonotoneArc:
        if not self.are_mergeable(cv1, cv2):
            raise ValidationError(f'{cv1!r} and {cv2!r} are not mergeable')
        return super().merge(cv1, cv2)
