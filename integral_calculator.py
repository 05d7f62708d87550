"""
Interactive numerical integrator for expressions in Reverse Polish Notation.

Integrands and intervals are appended to a plain text log, so the last saved
function can be integrated again without retyping it.
"""

from pathlib import Path
from typing import Callable, Optional

from integral.errors import CompileError, ValidationError
from integral.history import append_entry, iter_entries, read_last_entry
from integral.integrate import integrate_expression
from integral.report import generate_report
from integral.settings import DEFAULT_LOG_FILE, IntegrationSettings

Prompt = Callable[[str], str]

RULES = "\n".join([
    "Welcome to my program of numerical integration!",
    "-" * 80,
    "| The rules of integrating:",
    "| \t a. You have to use Reverse Polish Notation!",
    "| \t b. You must enter spaces between all operands and operators.",
    "| \t c. The variable is x; operators: + - * / ^; functions: sin cos tg ctg ln exp.",
    "| \t d. You must enter the right amount of operators. (Stack Over-/Underflow)",
    "| \t e. The entry for the integrand must not exceed 100 characters.",
    "-" * 80,
])

MENU = "\n".join([
    "",
    "I can do the following tasks for you:",
    "\t 1. Numerical integration",
    "\t 2. Integrate the last saved function",
    "\t 3. List the functions that have been saved",
    "\t Other: Exit",
    "",
])


def _integrate_and_report(integrand: str, interval: str, prompt: Prompt, settings: IntegrationSettings) -> None:
    refinement = prompt(
        f"Enter the scale of refinement (x in [{settings.min_refinement} ; {settings.max_refinement}]): "
    )
    try:
        result = integrate_expression(integrand, interval, refinement, settings)
    except (ValidationError, CompileError) as exc:
        print(f"Error: {exc}")
        return
    print(generate_report(result))


def numerical_integration(prompt: Prompt, settings: IntegrationSettings) -> None:
    integrand = prompt("Function to integrate (RPN): ")
    start_text = prompt("Interval start: ")
    end_text = prompt("Interval end: ")
    try:
        interval = append_entry(settings.log_path, integrand, start_text, end_text)
    except OSError as exc:
        print(f"Error: cannot save the function to {settings.log_path}: {exc}")
        return
    _integrate_and_report(integrand, interval, prompt, settings)


def integrate_last(prompt: Prompt, settings: IntegrationSettings) -> None:
    try:
        integrand, interval = read_last_entry(settings.log_path)
    except FileNotFoundError:
        print(f"Error: no saved functions yet ({settings.log_path})")
        return
    except OSError as exc:
        print(f"Error: cannot read {settings.log_path}: {exc}")
        return
    except ValidationError as exc:
        print(f"Error: {exc}")
        return
    print(f"Function to integrate: {integrand}")
    print(f"Interval: {interval}")
    _integrate_and_report(integrand, interval, prompt, settings)


def list_saved(settings: IntegrationSettings) -> None:
    try:
        entries = list(iter_entries(settings.log_path))
    except FileNotFoundError:
        print(f"Error: no saved functions yet ({settings.log_path})")
        return
    except OSError as exc:
        print(f"Error: cannot read {settings.log_path}: {exc}")
        return
    if not entries:
        print("No saved functions yet.")
        return
    print(f"Saved functions ({len(entries)}):")
    for idx, (integrand, interval) in enumerate(entries, 1):
        print(f"  {idx:4d}. {integrand}  on  {interval}")


def main(prompt: Prompt = input, settings: Optional[IntegrationSettings] = None) -> None:
    """Run the menu loop until the user picks anything other than 1, 2 or 3."""
    settings = settings or IntegrationSettings(log_path=Path(DEFAULT_LOG_FILE))
    print(RULES)
    while True:
        print(MENU)
        try:
            choice = prompt("To execute a task, enter a number chosen from above: ").strip()
            print()
            if choice == "1":
                numerical_integration(prompt, settings)
            elif choice == "2":
                integrate_last(prompt, settings)
            elif choice == "3":
                list_saved(settings)
            else:
                break
        except EOFError:
            break


if __name__ == "__main__":
    main()
