import logging
from fractions import Fraction

import numpy as np
from sympy import Poly, Symbol

from bezier_traits.logging_utils import _safe_repr, apply_debug_logging, debug_log_call


def test_safe_repr_summarizes_exact_values():
    t = Symbol("t")

    assert _safe_repr(Fraction(1, 2)) == "1/2 (~0.5)"
    assert _safe_repr(Fraction(3)) == "3"
    assert _safe_repr(Poly(t ** 2 - 2, t)) == "Poly(t**2 - 2)"
    assert "values=[0.5, 2]" in _safe_repr(np.array([Fraction(1, 2), Fraction(2)], dtype=object))
    assert _safe_repr(list(range(10))).endswith("...]")


def test_debug_log_call_traces_entry_and_exit(caplog):
    logger = logging.getLogger("bezier_traits.tests.trace")

    @debug_log_call(logger)
    def double(value):
        return value * 2

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        assert double(Fraction(1, 3)) == Fraction(2, 3)

    assert "Entering" in caplog.text
    assert "Exiting" in caplog.text
    assert "2/3" in caplog.text


def test_apply_debug_logging_wraps_module_functions():
    logger = logging.getLogger("bezier_traits.tests.namespace")

    def helper():
        return 1

    helper.__module__ = "fake_module"
    namespace = {"__name__": "fake_module", "helper": helper, "skipped": helper}

    apply_debug_logging(namespace, logger=logger, skip={"skipped"})

    assert getattr(namespace["helper"], "_debug_logging_wrapped", False)
    assert namespace["skipped"] is helper
    assert namespace["helper"]() == 1
