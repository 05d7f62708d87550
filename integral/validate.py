"""
Validation of raw integrand, interval and refinement input.

Everything here runs before the expression is compiled, so a rejected input
never allocates a tree.
"""
import math
import numbers
import re
from typing import Tuple, Union

from integral.errors import ValidationError
from integral.settings import MAX_INTEGRAND_LENGTH, MAX_REFINEMENT, MIN_REFINEMENT

UNDEFINED_INTERVAL_RE = re.compile(r"^\[\s*;\s*\]$")
INTERVAL_RE = re.compile(r"^\[\s*(\S+?)\s*;\s*(\S+?)\s*\]$")


def remove_spaces(text: str) -> str:
    """Trim leading and trailing whitespace, including the trailing newline of a log line."""
    return text.strip()


def validate_integrand(text: str, max_length: int = MAX_INTEGRAND_LENGTH) -> str:
    integrand = remove_spaces(text)
    if not integrand:
        raise ValidationError("The integrand is empty.")
    if len(integrand) > max_length:
        raise ValidationError("The integrand is too long.")
    return integrand


def format_interval(start_text: str, end_text: str) -> str:
    return f"[{start_text.strip()} ; {end_text.strip()}]"


def parse_interval(text: str) -> Tuple[float, float]:
    """
    Parse ``"[<start> ; <end>]"`` into two floats.

    ``"[ ; ]"`` is how an interval with no bounds is saved and is rejected as
    undefined. A degenerate interval ``[c ; c]`` is rejected as well: its
    integral is 0 by definition, and such input is almost always a mistake.
    """
    interval = remove_spaces(text)
    if UNDEFINED_INTERVAL_RE.match(interval):
        raise ValidationError("The interval is not defined.")
    match = INTERVAL_RE.match(interval)
    if not match:
        raise ValidationError(f"The interval {interval!r} is not of the form [start ; end].")
    try:
        start = float(match.group(1))
        end = float(match.group(2))
    except ValueError:
        raise ValidationError(f"The interval {interval!r} has a non-numeric bound.") from None
    if not (math.isfinite(start) and math.isfinite(end)):
        raise ValidationError("The interval bounds must be finite numbers.")
    if start == end:
        raise ValidationError("Integrating in a [c ; c] interval is defined to be equal to 0.")
    return start, end


def validate_refinement(
    value: Union[int, str],
    minimum: int = MIN_REFINEMENT,
    maximum: int = MAX_REFINEMENT,
) -> int:
    if isinstance(value, bool):
        raise ValidationError("The scale of refinement must be an integer.")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError("The scale of refinement must be an integer.") from None
    if not isinstance(value, numbers.Integral):
        raise ValidationError("The scale of refinement must be an integer.")
    if value < minimum or value > maximum:
        raise ValidationError(
            f"The scale of refinement must be between {minimum} and {maximum}."
        )
    return int(value)
