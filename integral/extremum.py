import math
from enum import Enum

import numpy as np

from integral.errors import TreeInvariantError
from integral.evaluator import evaluate

# Grid points evaluated per numpy call
CHUNK_SIZE = 1 << 16


class Extremum(Enum):
    MIN = "min"
    MAX = "max"


def find_extremum(node: object, a: float, b: float, step: float, kind: Extremum) -> float:
    """
    Approximate the infimum or supremum of the expression over ``[a, b]``.

    This is a linear grid search: the function is sampled at
    ``a, a + step, a + 2*step, ...`` up to ``b`` (and at ``b`` itself), so
    extrema narrower than ``step`` can be missed. The running extremum is
    seeded with ``f(a)`` and only replaced by a strictly better sample, which
    means ``nan`` samples are skipped but a ``nan`` seed is kept.
    """
    if node is None:
        raise TreeInvariantError("Cannot search for an extremum of an empty expression")
    if not math.isfinite(step) or step <= 0:
        raise ValueError(f"Step must be a positive number, got {step}")
    if not (math.isfinite(a) and math.isfinite(b)):
        raise ValueError(f"Interval bounds must be finite, got [{a} ; {b}]")
    if b < a:
        raise ValueError(f"Interval start {a} is greater than its end {b}")

    best = evaluate(node, a)
    if math.isnan(best):
        return best
    combine = np.fmin if kind is Extremum.MIN else np.fmax

    total = int(math.floor((b - a) / step)) + 1
    last_sampled = a
    for first in range(0, total, CHUNK_SIZE):
        grid = a + np.arange(first, min(first + CHUNK_SIZE, total), dtype=np.float64) * step
        grid = grid[grid <= b]
        if grid.size == 0:
            break
        candidate = combine.reduce(evaluate(node, grid))
        if not math.isnan(candidate):
            best = float(combine(best, candidate))
        last_sampled = float(grid[-1])

    if last_sampled < b:
        value = evaluate(node, b)
        if not math.isnan(value):
            best = float(combine(best, value))
    return best


def find_infimum(node: object, a: float, b: float, step: float) -> float:
    return find_extremum(node, a, b, step, Extremum.MIN)


def find_supremum(node: object, a: float, b: float, step: float) -> float:
    return find_extremum(node, a, b, step, Extremum.MAX)
