from pathlib import Path
from typing import Iterator, List, Tuple, Union

from integral.errors import ValidationError
from integral.validate import format_interval

PathLike = Union[str, Path]


def append_entry(path: PathLike, integrand: str, start_text: str, end_text: str) -> str:
    """Append an integrand line followed by its interval line; return the interval text."""
    interval = format_interval(start_text, end_text)
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "a", encoding="utf-8") as handle:
        handle.write(f"{integrand.strip()}\n")
        handle.write(f"{interval}\n")
    return interval


def _read_lines(path: PathLike) -> List[str]:
    with open(path, "r", encoding="utf-8", errors="ignore") as handle:
        return [line.rstrip("\n") for line in handle]


def read_last_entry(path: PathLike) -> Tuple[str, str]:
    # The log ends with the integrand line followed by the interval line
    lines = _read_lines(path)
    while lines and not lines[-1].strip():
        lines.pop()
    if len(lines) < 2:
        raise ValidationError(f"No saved function in {path}")
    return lines[-2], lines[-1]


def iter_entries(path: PathLike) -> Iterator[Tuple[str, str]]:
    lines = [line for line in _read_lines(path) if line.strip()]
    for idx in range(0, len(lines) - 1, 2):
        yield lines[idx], lines[idx + 1]
