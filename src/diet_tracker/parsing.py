"""Lenient number parsing for form input and stored rows."""

import math
import re

_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def parse_int(value: object, fallback: int) -> int:
    """Return an integer for numbers or numeric text, else the fallback.

    Text is read up to the first non-digit, so ``"72kg"`` parses as 72.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else fallback
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if match is None:
            return fallback
        return int(match.group(0))
    return fallback


def parse_float(value: object, fallback: float) -> float:
    """Return a float for numbers or numeric text, else the fallback."""
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if match is None:
            return fallback
        number = float(match.group(0))
    else:
        return fallback
    return number if math.isfinite(number) else fallback
