"""
Riemann and Darboux sums of a compiled expression.

The interval is split into ``refinement`` sub-intervals of equal width. The
Riemann sum samples each sub-interval at its left edge; the Darboux sums use
the grid-search infimum and supremum of each sub-interval, so their cost
grows with ``(end - start) / step`` rather than with ``refinement`` alone.
"""
import math
import numbers
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np

from integral.errors import TreeInvariantError, ValidationError
from integral.evaluator import evaluate
from integral.extremum import CHUNK_SIZE, Extremum, find_extremum
from integral.parser import compiled_expression
from integral.settings import DEFAULT_STEP, IntegrationSettings
from integral.validate import parse_interval, validate_integrand, validate_refinement


@dataclass
class IntegralSums:
    riemann: float
    lower_darboux: float
    upper_darboux: float
    # CPU milliseconds spent on each sum, for reporting only
    elapsed_ms: Dict[str, float] = field(default_factory=dict)

    def negated(self) -> "IntegralSums":
        return IntegralSums(
            riemann=-self.riemann,
            lower_darboux=-self.lower_darboux,
            upper_darboux=-self.upper_darboux,
            elapsed_ms=dict(self.elapsed_ms),
        )


@dataclass
class IntegrationResult:
    integrand: str
    start: float
    end: float
    refinement: int
    step: float
    sums: IntegralSums


def _sub_interval(start: float, end: float, dx: float, index: int, refinement: int) -> Tuple[float, float]:
    left = start + index * dx
    right = end if index == refinement - 1 else start + (index + 1) * dx
    return left, right


def riemann_sum(node: object, start: float, end: float, refinement: int) -> float:
    dx = (end - start) / refinement
    total = 0.0
    for first in range(0, refinement, CHUNK_SIZE):
        edges = start + np.arange(first, min(first + CHUNK_SIZE, refinement), dtype=np.float64) * dx
        values = evaluate(node, edges)
        # inf + -inf and overflow in the reduction are expected
        with np.errstate(over="ignore", invalid="ignore"):
            total += float(np.sum(values)) * dx
    return total


def _darboux_sum(node: object, start: float, end: float, refinement: int, step: float, kind: Extremum) -> float:
    dx = (end - start) / refinement
    total = 0.0
    for index in range(refinement):
        left, right = _sub_interval(start, end, dx, index, refinement)
        total += find_extremum(node, left, right, step, kind) * dx
    return total


def lower_darboux_sum(node: object, start: float, end: float, refinement: int, step: float = DEFAULT_STEP) -> float:
    return _darboux_sum(node, start, end, refinement, step, Extremum.MIN)


def upper_darboux_sum(node: object, start: float, end: float, refinement: int, step: float = DEFAULT_STEP) -> float:
    return _darboux_sum(node, start, end, refinement, step, Extremum.MAX)


def _timed(func: Callable[..., float], *args) -> Tuple[float, float]:
    began = time.thread_time()
    result = func(*args)
    return result, (time.thread_time() - began) * 1000.0


def integrate(
    node: object,
    start: float,
    end: float,
    refinement: int,
    step: float = DEFAULT_STEP,
) -> IntegralSums:
    """
    Estimate the integral of ``node`` over ``[start, end]``.

    ``start > end`` is allowed: the sums are computed on the ascending
    interval and negated. A degenerate interval is rejected before any
    evaluation.
    """
    if node is None:
        raise TreeInvariantError("Cannot integrate an empty expression")
    if not (math.isfinite(start) and math.isfinite(end)):
        raise ValidationError("The interval bounds must be finite numbers.")
    if start == end:
        raise ValidationError("Integrating in a [c ; c] interval is defined to be equal to 0.")
    if isinstance(refinement, bool) or not isinstance(refinement, numbers.Integral) or refinement < 1:
        raise ValidationError(f"The scale of refinement must be a positive integer, got {refinement!r}")
    refinement = int(refinement)
    if not math.isfinite(step) or step <= 0:
        raise ValidationError(f"The extremum step must be a positive number, got {step}")

    minus = start > end
    if minus:
        start, end = end, start

    riemann, riemann_ms = _timed(riemann_sum, node, start, end, refinement)
    lower, lower_ms = _timed(lower_darboux_sum, node, start, end, refinement, step)
    upper, upper_ms = _timed(upper_darboux_sum, node, start, end, refinement, step)

    sums = IntegralSums(
        riemann=riemann,
        lower_darboux=lower,
        upper_darboux=upper,
        elapsed_ms={"riemann": riemann_ms, "lower_darboux": lower_ms, "upper_darboux": upper_ms},
    )
    return sums.negated() if minus else sums


def integrate_expression(
    integrand: str,
    interval: str,
    refinement: Union[int, str],
    settings: Optional[IntegrationSettings] = None,
) -> IntegrationResult:
    """Validate raw input, compile the integrand and integrate it; the tree is always released."""
    settings = (settings or IntegrationSettings()).validate()
    expression = validate_integrand(integrand, settings.max_integrand_length)
    start, end = parse_interval(interval)
    partitions = validate_refinement(refinement, settings.min_refinement, settings.max_refinement)

    with compiled_expression(expression, capacity=settings.stack_capacity) as node:
        sums = integrate(node, start, end, partitions, settings.step)

    return IntegrationResult(
        integrand=expression,
        start=start,
        end=end,
        refinement=partitions,
        step=settings.step,
        sums=sums,
    )
