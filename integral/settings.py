import math
from dataclasses import dataclass
from pathlib import Path

from integral.errors import ValidationError

# Symbol of the single free variable
VARIABLE = "x"

# Historical capacity of the parse stack
STACK_SIZE = 50

MAX_INTEGRAND_LENGTH = 100
MIN_REFINEMENT = 1
MAX_REFINEMENT = 20_000_000

# Grid step of the extremum search. Halving it doubles the cost of both
# Darboux sums; the sums can miss extrema narrower than the step.
DEFAULT_STEP = 1e-5

DEFAULT_LOG_FILE = "functions.txt"
REPORT_PRECISION = 6


@dataclass
class IntegrationSettings:
    """Tunable limits of one integration run."""

    step: float = DEFAULT_STEP
    min_refinement: int = MIN_REFINEMENT
    max_refinement: int = MAX_REFINEMENT
    max_integrand_length: int = MAX_INTEGRAND_LENGTH
    stack_capacity: int = STACK_SIZE
    log_path: Path = Path(DEFAULT_LOG_FILE)

    def validate(self) -> "IntegrationSettings":
        if not math.isfinite(self.step) or self.step <= 0:
            raise ValidationError(f"The extremum step must be a positive number, got {self.step}")
        if self.min_refinement < 1 or self.min_refinement > self.max_refinement:
            raise ValidationError(
                f"Invalid refinement bounds [{self.min_refinement} ; {self.max_refinement}]"
            )
        if self.stack_capacity < 1:
            raise ValidationError("The stack capacity must be at least 1")
        if self.max_integrand_length < 1:
            raise ValidationError("The maximum integrand length must be at least 1")
        return self
