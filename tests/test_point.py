from fractions import Fraction

import pytest

from bezier_traits.curve import BezierCurve
from bezier_traits.numbers import AlgebraicReal, real_roots_in
from bezier_traits.point import BezierPoint, PointKind
from bezier_traits.types import EQUAL, LARGER, SMALLER


def _s_curve():
    return BezierCurve([(0, 0), (3, 1), (0, 2), (2, 3)])


def test_exact_point_coordinates():
    curve = BezierCurve([(0, 0), (2, 1), (2, 2), (0, 3)])
    p = BezierPoint(curve, Fraction(1, 2))

    assert p.kind is PointKind.EXACT
    assert p.x.compare(Fraction(3, 2)) == EQUAL
    assert p.y.compare(Fraction(3, 2)) == EQUAL
    assert p.bbox().is_point
    assert p.approximate() == (1.5, 1.5)


def test_point_needs_parameter_and_originator():
    curve = BezierCurve([(0, 0), (1, 1)])

    with pytest.raises(ValueError):
        BezierPoint(curve)
    with pytest.raises(ValueError):
        BezierPoint().bbox()


def test_lexicographic_order():
    segment = BezierCurve([(0, 0), (2, 2)])
    other = BezierCurve([(1, 0), (1, 4)])
    a = BezierPoint(segment, Fraction(1, 2))
    below = BezierPoint(other, Fraction(0))
    above = BezierPoint(other, Fraction(1, 2))

    assert a.compare_x(below) == EQUAL
    assert a.compare_xy(below) == LARGER
    assert a.compare_xy(above) == SMALLER
    assert above.compare_xy(a) == LARGER


def test_points_on_different_curves_can_be_equal():
    first = BezierCurve([(0, 0), (2, 2)])
    second = BezierCurve([(0, 2), (2, 0)])
    p = BezierPoint(first, Fraction(1, 2))
    q = BezierPoint(second, Fraction(1, 2))

    assert p.equals(q)
    assert p.compare_xy(q) == EQUAL


def test_bounded_point_refines_towards_exact_coordinates():
    curve = _s_curve()
    roots = real_roots_in(curve.x_derivative, 0, 1)
    p = BezierPoint.bounded(curve, roots[0])
    q = BezierPoint.bounded(curve, roots[1])
    start = BezierPoint(curve, 0)

    assert p.kind is PointKind.BOUNDED
    assert start.compare_x(p) == SMALLER
    assert p.compare_x(q) == LARGER
    assert q.compare_xy(p) == SMALLER
    width = p.bbox().x_max - p.bbox().x_min
    assert p.refine()
    assert p.bbox().x_max - p.bbox().x_min <= width


def test_repeated_comparisons_are_consistent():
    curve = _s_curve()
    root = real_roots_in(curve.x_derivative, 0, 1)[0]
    p = BezierPoint.bounded(curve, root)
    same = BezierPoint.bounded(curve, AlgebraicReal(curve.x_derivative, root.lo, root.hi))

    results = {p.compare_xy(same) for _ in range(3)}

    assert results == {EQUAL}


def test_add_originator_deduplicates():
    curve = BezierCurve([(0, 0), (2, 2)])
    p = BezierPoint(curve, Fraction(1, 4))

    p.add_originator(curve, Fraction(1, 4))
    p.add_originator(curve, AlgebraicReal.from_rational(Fraction(1, 4)))

    assert len(p.originators) == 1
    assert p.parameter_on(curve).compare(Fraction(1, 4)) == EQUAL
