from fractions import Fraction

import pytest
from sympy import Poly

from bezier_traits.numbers import (
    Z,
    AlgebraicReal,
    eliminate,
    max_of,
    min_of,
    rational_between,
    real_roots_in,
    to_fraction,
)
from bezier_traits.types import EQUAL, LARGER, SMALLER


def sqrt_of(n, lo, hi):
    return AlgebraicReal(Poly(Z ** 2 - n, Z), lo, hi)


def test_to_fraction_is_exact():
    assert to_fraction(3) == Fraction(3)
    assert to_fraction("1/3") == Fraction(1, 3)
    assert to_fraction(" 0.25 ") == Fraction(1, 4)
    assert to_fraction(0.5) == Fraction(1, 2)


def test_to_fraction_rejects_booleans_and_junk():
    with pytest.raises(TypeError):
        to_fraction(True)
    with pytest.raises(TypeError):
        to_fraction(object())


def test_sqrt_two_compares_with_rationals():
    root = sqrt_of(2, 1, 2)

    assert root.compare(Fraction(3, 2)) == SMALLER
    assert root.compare(Fraction(7, 5)) == LARGER
    assert root < Fraction(3, 2)
    assert root > 1
    assert not root.is_rational


def test_equal_numbers_with_different_polynomials():
    root = sqrt_of(2, 1, 2)
    # (z^2 - 2)(z - 5) has sqrt(2) as its only root in [1, 2].
    other = AlgebraicReal(Poly((Z ** 2 - 2) * (Z - 5), Z), Fraction(1), Fraction(2))

    assert root.compare(other) == EQUAL
    assert other.compare(root) == EQUAL


def test_distinct_irrationals_are_ordered():
    two = sqrt_of(2, 1, 2)
    three = sqrt_of(3, 1, 2)

    assert two.compare(three) == SMALLER
    assert three.compare(two) == LARGER
    assert max_of([two, three]) is three
    assert min_of([two, three]) is two


def test_interval_collapses_on_rational_root():
    at_end = AlgebraicReal(Poly(4 * Z ** 2 - 1, Z), Fraction(1, 2), 1)
    assert at_end.is_rational
    assert at_end.lo == Fraction(1, 2)

    inside = AlgebraicReal(Poly(4 * Z ** 2 - 1, Z), 0, 1)
    assert not inside.is_rational
    assert inside.compare_rational(Fraction(1, 2)) == EQUAL
    assert inside.is_rational


def test_refinement_keeps_the_root_inside():
    root = sqrt_of(2, 1, 2)
    root.refine_to(Fraction(1, 1000))

    assert root.width <= Fraction(1, 1000)
    assert root.lo ** 2 < 2 < root.hi ** 2
    assert abs(float(root) - 2 ** 0.5) < 1e-12


def test_real_roots_in_sorts_and_filters_ends():
    poly = Poly(Z ** 3 - Z, Z)

    everything = real_roots_in(poly, -2, 2)
    assert [r.compare_rational(expected) for r, expected in zip(everything, (-1, 0, 1))] == [EQUAL] * 3
    assert len(real_roots_in(poly, 0, 1)) == 2
    assert real_roots_in(poly, 0, 1, include_ends=False) == []


def test_rational_between_is_strict():
    two = sqrt_of(2, 1, 2)
    three = sqrt_of(3, 1, 2)

    r = rational_between(two, three)

    assert two.compare_rational(r) == SMALLER
    assert three.compare_rational(r) == LARGER
    with pytest.raises(ValueError):
        rational_between(three, two)


def test_eliminate_constant_operand():
    from sympy import symbols

    s, t = symbols("s t")
    assert eliminate(2 * s - 1, s + t, t) == 2 * s - 1
    assert eliminate(s - t, s - t, t) == 0
