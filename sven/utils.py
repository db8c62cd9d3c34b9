"""Lenient conversions for the bridge's environment settings.

A bad value never stops the bridge from starting; it falls back to the
documented default instead.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

_Number = TypeVar("_Number", int, float)

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Read an on/off flag; unrecognised words keep the default."""
    if value is None:
        return default
    word = value.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return default


def _parse_number(value: str | None, default: _Number, convert: Callable[[str], _Number]) -> _Number:
    if value is None or not value.strip():
        return default
    try:
        return convert(value.strip())
    except ValueError:
        return default


def parse_int(value: str | None, default: int) -> int:
    return _parse_number(value, default, int)


def parse_float(value: str | None, default: float) -> float:
    return _parse_number(value, default, float)


def clamp_int(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def split_csv(value: str | None) -> list[str]:
    """``"a, ,b"`` -> ``["a", "b"]``."""
    return [token for token in (part.strip() for part in (value or "").split(",")) if token]
