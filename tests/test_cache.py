from fractions import Fraction

from bezier_traits.cache import BezierCache, IntersectionMap, pair_key
from bezier_traits.curve import BezierCurve
from bezier_traits.types import EQUAL, SMALLER


def test_vertical_tangencies_are_memoized():
    cache = BezierCache()
    curve = BezierCurve([(0, 0), (3, 1), (0, 2), (2, 3)])

    first = cache.get_vertical_tangencies(curve.id, curve.x_polynomial, curve.x_norm)
    second = cache.get_vertical_tangencies(curve.id, curve.x_polynomial, curve.x_norm)

    assert first is second
    assert len(first) == 2
    assert first[0].compare(first[1]) == SMALLER
    assert abs(float(first[0]) - (6 - 3 ** 0.5) / 11) < 1e-12
    assert cache.stats["tangency_solves"] == 1


def test_tangency_at_rational_parameter():
    cache = BezierCache()
    curve = BezierCurve([(0, 0), (2, 1), (2, 2), (0, 3)])

    (only,) = cache.get_vertical_tangencies(curve.id, curve.x_polynomial, curve.x_norm)

    assert only.compare(Fraction(1, 2)) == EQUAL


def test_monotone_curve_has_no_tangency():
    cache = BezierCache()
    curve = BezierCurve([(0, 0), (1, 1)])

    assert cache.get_vertical_tangencies(curve.id, curve.x_polynomial, curve.x_norm) == ()


def test_vertical_turns_are_memoized_separately():
    cache = BezierCache()
    curve = BezierCurve([(1, 0), (1, 2), (1, 1)])

    (turn,) = cache.get_vertical_turns(curve.id, curve.y_polynomial, curve.y_norm)

    assert turn.compare(Fraction(2, 3)) == EQUAL
    assert cache.get_vertical_turns(curve.id, curve.y_polynomial, curve.y_norm)[0] is turn
    assert cache.get_vertical_tangencies(curve.id, curve.x_polynomial, curve.x_norm) == ()
    assert cache.stats["turn_solves"] == 1


def test_intersections_are_symmetric_and_memoized():
    cache = BezierCache()
    a = BezierCurve([(0, 0), (2, 2)])
    b = BezierCurve([(0, 2), (2, 0)])

    info = cache.get_intersections(a, b)

    assert cache.get_intersections(b, a) is info
    assert cache.stats["intersection_solves"] == 1
    assert pair_key(b, a) == (a.id, b.id)
    assert not info.overlap
    (params,) = info.params
    assert params.s.compare(Fraction(1, 2)) == EQUAL
    assert params.x.compare(1) == EQUAL
    assert params.y.compare(1) == EQUAL


def test_irrational_intersections_are_sorted_by_x():
    cache = BezierCache()
    parabola = BezierCurve([(0, 0), (1, 2), (2, 0)])
    line = BezierCurve([(0, "1/2"), (2, "1/2")])

    info = cache.get_intersections(parabola, line)

    assert len(info.params) == 2
    low, high = info.params
    assert low.x.compare(high.x) == SMALLER
    assert abs(float(low.x) - (2 - 2 ** 0.5) / 2) < 1e-12
    assert abs(float(high.x) - (2 + 2 ** 0.5) / 2) < 1e-12
    assert low.y.compare(Fraction(1, 2)) == EQUAL


def test_collinear_segments_overlap():
    cache = BezierCache()
    a = BezierCurve([(0, 0), (2, 2)])
    b = BezierCurve([(1, 1), (3, 3)])

    info = cache.get_intersections(a, b)

    assert info.overlap
    assert info.params == ()


def test_self_intersection_of_loop():
    cache = BezierCache()
    loop = BezierCurve([(0, 0), (3, 2), (-1, 2), (2, 0)])

    info = cache.get_intersections(loop, loop)

    (params,) = info.params
    assert params.s.compare(params.t) == SMALLER
    assert abs(float(params.s) - (7 - 21 ** 0.5) / 14) < 1e-12
    assert params.x.compare(1) == EQUAL
    assert params.y.compare(Fraction(6, 7)) == EQUAL


def test_quadratic_has_no_self_intersection():
    cache = BezierCache()
    parabola = BezierCurve([(0, 0), (1, 2), (2, 0)])

    assert cache.get_intersections(parabola, parabola).params == ()


def test_intersection_map_materializes_each_point_once():
    cache = BezierCache()
    points = IntersectionMap()
    a = BezierCurve([(0, 0), (2, 2)])
    b = BezierCurve([(0, 2), (2, 0)])
    info = cache.get_intersections(a, b)

    p = points.point(a, b, info, 0)

    assert points.point(b, a, info, 0) is p
    assert points.points(a, b) == [p]
    assert pair_key(a, b) in points
    assert p.parameter_on(a).compare(Fraction(1, 2)) == EQUAL
    assert p.parameter_on(b).compare(Fraction(1, 2)) == EQUAL
