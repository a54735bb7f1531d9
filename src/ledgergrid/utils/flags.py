"""Boolean flag coercion."""

from typing import Any

_TRUE_VALUES = ("true", "1")
_FALSE_VALUES = ("false", "0")


def coerce_bool(value: Any, default: bool = False) -> bool:
    """Coerce a stored or ledger cell value to a boolean.

    Booleans pass through; ``true``/``1`` and ``false``/``0`` (as text or
    numbers, case-insensitive) map to True/False; anything else yields
    ``default``.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
        return bool(default)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    return bool(default)
