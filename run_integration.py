#!/usr/bin/env python3
"""
Integrate one RPN expression from the command line and print the report.

Usage: run_integration.py "<rpn expression>" "[start ; end]" <refinement> [step]
"""

import sys
from typing import List, Optional

from integral.errors import CompileError, ValidationError
from integral.integrate import integrate_expression
from integral.report import generate_report
from integral.settings import IntegrationSettings


def main(argv: Optional[List[str]] = None) -> int:
    """Run a single integration."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) not in (3, 4):
        print(__doc__.strip().splitlines()[-1])
        return 2

    integrand, interval, refinement = args[0], args[1], args[2]
    settings = IntegrationSettings()
    if len(args) == 4:
        try:
            settings.step = float(args[3])
        except ValueError:
            print(f"Error: invalid step {args[3]!r}")
            return 1

    try:
        result = integrate_expression(integrand, interval, refinement, settings)
    except (ValidationError, CompileError) as exc:
        print(f"Error: {exc}")
        return 1

    print(generate_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
