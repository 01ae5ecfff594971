from fractions import Fraction

import numpy as np
import pytest

from bezier_traits.curve import BezierCurve
from bezier_traits.numbers import real_roots_in


def test_control_points_are_exact_rationals():
    curve = BezierCurve([(0, "1/3"), ("0.5", 2)])

    assert curve.control_points == ((Fraction(0), Fraction(1, 3)), (Fraction(1, 2), Fraction(2)))
    assert curve.degree == 1


@pytest.mark.parametrize('points', [[], [(0,)], [("a", 1)], [(0, 0, 0)]])
def test_malformed_input_is_rejected(points):
    with pytest.raises(ValueError):
        BezierCurve(points)


def test_ids_are_unique_and_increasing():
    a = BezierCurve([(0, 0), (1, 1)])
    b = BezierCurve([(0, 0), (1, 1)])

    assert a.id < b.id
    assert a.same_control_polygon(b)
    assert a.same_control_polygon(BezierCurve([(1, 1), (0, 0)]))
    assert not a.same_control_polygon(BezierCurve([(0, 0), (2, 2)]))


def test_polynomials_are_normalized_to_integers():
    curve = BezierCurve([(0, 0), (1, "1/3")])

    assert curve.x_norm == 1
    assert curve.x_polynomial.all_coeffs() == [1, 0]
    assert curve.y_norm == 3
    assert curve.y_polynomial.all_coeffs() == [1, 0]


def test_evaluate_and_bbox():
    curve = BezierCurve([(0, 0), (2, 1), (2, 2), (0, 3)])

    assert curve.evaluate(Fraction(1, 2)) == (Fraction(3, 2), Fraction(3, 2))
    box = curve.bbox()
    assert (box.x_min, box.x_max, box.y_min, box.y_max) == (0, 2, 0, 3)
    assert curve.bbox(Fraction(1, 2), Fraction(1, 2)).is_point


def test_vertical_flag():
    assert BezierCurve([(1, 0), (1, 4), (1, 2)]).is_vertical
    assert not BezierCurve([(1, 0), (2, 4)]).is_vertical


def test_coordinate_at_irrational_parameter():
    curve = BezierCurve([(0, 0), (3, 1), (0, 2), (2, 3)])
    first, second = real_roots_in(curve.x_derivative, 0, 1)

    x = curve.coordinate_at(first, 0)
    y = curve.coordinate_at(first, 1)

    t = (6 - 3 ** 0.5) / 11
    assert abs(float(x) - (9 * t * (1 - t) ** 2 + 2 * t ** 3)) < 1e-9
    assert abs(float(y) - (3 * t * (1 - t) ** 2 + 6 * t ** 2 * (1 - t) + 3 * t ** 3)) < 1e-9
    assert x.compare(curve.coordinate_at(second, 0)) == 1


def test_sample_returns_float_polyline():
    curve = BezierCurve([(0, 0), (1, 2), (2, 0)])
    pts = curve.sample(5)

    assert pts.shape == (5, 2)
    assert np.allclose(pts[0], (0.0, 0.0))
    assert np.allclose(pts[2], (1.0, 1.0))
    assert np.allclose(pts[-1], (2.0, 0.0))
