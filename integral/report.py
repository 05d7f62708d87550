from typing import List

from integral.integrate import IntegrationResult
from integral.settings import REPORT_PRECISION


def _fmt(value: float, precision: int) -> str:
    # Python prints non-finite floats as inf/-inf/nan for any precision
    return f"{value:.{precision}f}"


def generate_report(result: IntegrationResult, precision: int = REPORT_PRECISION) -> str:
    """Render the sums of one integration run as human-readable text."""
    sums = result.sums
    average = (sums.upper_darboux + sums.lower_darboux) / 2
    darboux_difference = abs(sums.upper_darboux - sums.lower_darboux)
    riemann_difference = abs(average - sums.riemann)

    lines: List[str] = []
    lines.append("=" * 80)
    lines.append(f"Integrand: {result.integrand}")
    lines.append(f"Interval: [{result.start:g} ; {result.end:g}]")
    lines.append(f"Refinement: {result.refinement}; extremum step: {result.step:g}")
    lines.append("=" * 80)
    lines.append(f"Riemann-sum = {_fmt(sums.riemann, precision)}")
    lines.append(f"Lower Darboux-sum = {_fmt(sums.lower_darboux, precision)}")
    lines.append(f"Upper Darboux-sum = {_fmt(sums.upper_darboux, precision)}")
    lines.append("")
    lines.append(f"Difference between Darboux-sums = {_fmt(darboux_difference, precision)}")
    lines.append(f"Average of the Darboux-sums = {_fmt(average, precision)}")
    lines.append(
        f"Difference between Riemann-sum and average of the Darboux-sums = {_fmt(riemann_difference, precision)}"
    )
    if sums.elapsed_ms:
        lines.append("")
        lines.append("CPU time:")
        labels = {
            "riemann": "Riemann-sum",
            "lower_darboux": "Lower Darboux-sum",
            "upper_darboux": "Upper Darboux-sum",
        }
        for key, label in labels.items():
            if key in sums.elapsed_ms:
                lines.append(f"  {label}: {sums.elapsed_ms[key]:.3f} ms")
    return "\n".join(lines)
