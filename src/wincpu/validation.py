"""
Input validation for values that end up on an external command line.
"""

import re
from typing import Any, Union

from .exceptions import ValidationError

_FIRST_WHITESPACE = re.compile(r"\s")
_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9.]")


def sanitize_argument(arg: Union[int, str]) -> Union[int, str]:
    """
    Reduce a process filter to characters that are safe on a shell command line.

    Integers (process ids) pass through unchanged. Text is cut at the first
    whitespace character and then stripped of everything that is not an ASCII
    letter, digit or period.

    This is a narrow allow-list, not general shell escaping: a filter such as
    ``"Windows Explorer"`` is reduced to ``"Windows"`` and names containing
    ``-`` or ``_`` lose those characters.

    Examples:
        >>> sanitize_argument("node & calc.exe")
        'node'
        >>> sanitize_argument(1234)
        1234
    """
    if isinstance(arg, int) and not isinstance(arg, bool):
        return arg
    text = str(arg)
    head = _FIRST_WHITESPACE.split(text, maxsplit=1)[0]
    return _DISALLOWED_CHARS.sub("", head)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    field_name: str = "value",
    allow_min: bool = True,
) -> float:
    """
    Validate that a value is a number no smaller than ``min_value``.

    Args:
        value: Value to validate
        min_value: Minimum allowed value
        field_name: Name of the field being validated
        allow_min: Whether ``min_value`` itself is accepted

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value,
        )
    if float_value < min_value or (not allow_min and float_value == min_value):
        bound = ">=" if allow_min else ">"
        raise ValidationError(
            f"{field_name} must be {bound} {min_value}, got {float_value}",
            field_name=field_name,
            value=value,
        )
    return float_value
