import math
import warnings

import numpy as np
import pytest

from integral.errors import StackUnderflow, TreeInvariantError, ValidationError
from integral.integrate import (
    IntegrationResult,
    integrate,
    integrate_expression,
    lower_darboux_sum,
    riemann_sum,
    upper_darboux_sum,
)
from integral.parser import compile_tokens, tokenize
from integral.settings import IntegrationSettings

FAST_STEP = 1e-3


def tree(text: str):
    return compile_tokens(tokenize(text))


def test_constant_on_unit_partition():
    sums = integrate(tree("5"), 0.0, 2.0, 1)
    assert sums.riemann == 10.0
    assert sums.lower_darboux == 10.0
    assert sums.upper_darboux == 10.0


@pytest.mark.parametrize(
    "constant, start, end, refinement",
    [
        ("3", -1.0, 4.0, 1),
        ("3", -1.0, 4.0, 7),
        ("-2.5", 0.5, 1.5, 10),
        ("0.1", -3.0, 3.0, 64),
    ],
)
def test_constant_sums_agree(constant, start, end, refinement):
    sums = integrate(tree(constant), start, end, refinement, step=FAST_STEP)
    expected = float(constant) * (end - start)
    assert sums.riemann == pytest.approx(expected)
    assert sums.lower_darboux == pytest.approx(expected)
    assert sums.upper_darboux == pytest.approx(expected)


def test_identity_riemann_sum_converges():
    assert riemann_sum(tree("x"), 0.0, 1.0, 1000) == pytest.approx(0.5, abs=1e-3)


def test_riemann_sum_samples_left_edges():
    # left edges 0, 0.5 of x on [0, 1]
    assert riemann_sum(tree("x"), 0.0, 1.0, 2) == pytest.approx(0.25)


@pytest.mark.parametrize(
    "text, start, end",
    [
        ("x sin", 0.0, 2 * math.pi),
        ("x x *", -2.0, 3.0),
        ("1 x /", 0.1, 2.0),
        ("x exp x cos *", -1.0, 1.0),
    ],
)
def test_lower_sum_never_exceeds_upper_sum(text, start, end):
    sums = integrate(tree(text), start, end, 25, step=FAST_STEP)
    assert sums.lower_darboux <= sums.upper_darboux


def test_darboux_sums_bracket_the_integral():
    node = tree("x x *")
    lower = lower_darboux_sum(node, 0.0, 1.0, 50, FAST_STEP)
    upper = upper_darboux_sum(node, 0.0, 1.0, 50, FAST_STEP)
    assert lower <= 1.0 / 3.0 <= upper
    assert upper - lower == pytest.approx(1.0 / 50, abs=1e-9)


def test_swapping_bounds_negates_every_sum():
    node = tree("x x * 1 +")
    forward = integrate(node, 0.0, 2.0, 20, step=FAST_STEP)
    backward = integrate(node, 2.0, 0.0, 20, step=FAST_STEP)
    assert backward.riemann == -forward.riemann
    assert backward.lower_darboux == -forward.lower_darboux
    assert backward.upper_darboux == -forward.upper_darboux


def test_degenerate_interval_is_rejected():
    with pytest.raises(ValidationError):
        integrate(tree("x"), 1.0, 1.0, 10)


@pytest.mark.parametrize("refinement", [0, -3, 2.5, True])
def test_invalid_refinement_is_rejected(refinement):
    with pytest.raises(ValidationError):
        integrate(tree("x"), 0.0, 1.0, refinement)


def test_non_finite_bounds_are_rejected():
    with pytest.raises(ValidationError):
        integrate(tree("x"), 0.0, math.inf, 10)
    with pytest.raises(ValidationError):
        integrate(tree("x"), math.nan, 1.0, 10)


def test_invalid_step_is_rejected():
    with pytest.raises(ValidationError):
        integrate(tree("x"), 0.0, 1.0, 10, step=0.0)


def test_missing_tree_is_an_invariant_violation():
    with pytest.raises(TreeInvariantError):
        integrate(None, 0.0, 1.0, 10)


def test_non_finite_values_flow_through():
    sums = integrate(tree("1 x /"), 0.0, 1.0, 4, step=FAST_STEP)
    assert sums.riemann == math.inf
    assert sums.upper_darboux == math.inf


def test_timings_are_reported():
    sums = integrate(tree("x"), 0.0, 1.0, 10, step=FAST_STEP)
    assert set(sums.elapsed_ms) == {"riemann", "lower_darboux", "upper_darboux"}
    assert all(value >= 0.0 for value in sums.elapsed_ms.values())


def test_integrate_expression_pipeline():
    settings = IntegrationSettings(step=FAST_STEP)
    result = integrate_expression(" x x * ", "[0 ; 1]", "100", settings)
    assert isinstance(result, IntegrationResult)
    assert result.integrand == "x x *"
    assert (result.start, result.end, result.refinement) == (0.0, 1.0, 100)
    assert result.sums.riemann == pytest.approx(1.0 / 3.0, abs=1e-2)
    assert result.sums.lower_darboux <= result.sums.upper_darboux


def test_integrate_expression_reversed_interval():
    settings = IntegrationSettings(step=FAST_STEP)
    result = integrate_expression("2", "[3 ; 1]", 4, settings)
    assert result.sums.riemann == pytest.approx(-4.0)
    assert result.sums.upper_darboux == pytest.approx(-4.0)


@pytest.mark.parametrize(
    "integrand, interval, refinement",
    [
        ("x", "[ ; ]", 10),
        ("x", "[2 ; 2]", 10),
        ("x", "[0 ; 1]", 0),
        ("x", "[0 ; 1]", "ten"),
        ("   ", "[0 ; 1]", 10),
        ("x " * 60, "[0 ; 1]", 10),
    ],
)
def test_integrate_expression_rejects_bad_input(integrand, interval, refinement):
    with pytest.raises(ValidationError):
        integrate_expression(integrand, interval, refinement, IntegrationSettings(step=FAST_STEP))


def test_integrate_expression_reports_compile_errors():
    with pytest.raises(StackUnderflow):
        integrate_expression("x +", "[0 ; 1]", 10, IntegrationSettings(step=FAST_STEP))


def test_integrate_expression_respects_refinement_bounds():
    settings = IntegrationSettings(step=FAST_STEP, max_refinement=50)
    with pytest.raises(ValidationError):
        integrate_expression("x", "[0 ; 1]", 51, settings)


def test_numpy_integer_refinement_is_accepted():
    sums = integrate(tree("x"), 0.0, 1.0, np.int64(2), step=FAST_STEP)
    assert sums.riemann == pytest.approx(0.25)
    result = integrate_expression("x", "[0 ; 1]", np.int32(2), IntegrationSettings(step=FAST_STEP))
    assert result.refinement == 2
    assert type(result.refinement) is int


def test_riemann_sum_of_opposite_infinities_is_nan_without_warnings():
    # 1 / ((x - 1) * x) is -inf at x = 0 and +inf at x = 1
    node = tree("1 x 1 - x * /")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert math.isnan(riemann_sum(node, 0.0, 2.0, 2))
