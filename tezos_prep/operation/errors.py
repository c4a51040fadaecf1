"""
Errors raised while reading node-reported values.
"""

from __future__ import annotations

import re
from typing import Any

_DECIMAL_DIGITS_RE = re.compile(r"[0-9]+")


class NetworkFieldParseError(ValueError):
    """A simulation or constants field is missing or not a non-negative integer.

    Limits and fees are never guessed: the operation must not be
    submitted with a defaulted value.

    Attributes:
        field: Dotted path of the field (e.g. "operation_result.consumed_gas").
        value: The raw value found, or None if missing.
    """

    def __init__(self, field: str, value: Any = None) -> None:
        self.field = field
        self.value = value
        if value is None:
            message = f"missing network field {field!r}"
        else:
            message = f"network field {field!r} is not a non-negative integer: {value!r}"
        super().__init__(message)


def parse_int_field(field: str, value: Any) -> int:
    """Parse a non-negative integer node field, as a decimal string or int.

    Strings must be plain ASCII digits: no sign, whitespace or underscores.

    Raises:
        NetworkFieldParseError: If ``value`` is missing, negative or not integral.
    """
    if value is None or isinstance(value, bool):
        raise NetworkFieldParseError(field, value)
    if isinstance(value, int):
        if value < 0:
            raise NetworkFieldParseError(field, value)
        return value
    if isinstance(value, str) and _DECIMAL_DIGITS_RE.fullmatch(value):
        return int(value)
    raise NetworkFieldParseError(field, value)
