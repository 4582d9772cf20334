"""Argument validation shared by the operation groups.

Every check raises ``InvalidCommandError`` so that a bad argument is reported
before any request reaches the device.
"""

from __future__ import annotations

from pytasmota.exceptions import InvalidCommandError


__all__ = ["check_float_range", "check_range", "require_int", "require_text"]


def require_int(name: str, value: int) -> None:
    """Validate that a value is an integer.

    Booleans are rejected even though Python treats them as integers.

    Raises:
        InvalidCommandError: If the value is not an integer.
    """
    if not isinstance(value, int) or isinstance(value, bool):
        msg = f"{name} must be an integer, got {value!r}"
        raise InvalidCommandError(msg, parameter_name=name, value=value)


def check_range(name: str, value: int, minimum: int, maximum: int) -> None:
    """Validate that an integer setting lies within its documented range.

    Raises:
        InvalidCommandError: If the value is not an integer or is outside
            [minimum, maximum].
    """
    require_int(name, value)
    if not minimum <= value <= maximum:
        msg = f"{name} must be between {minimum} and {maximum}, got {value}"
        raise InvalidCommandError(msg, parameter_name=name, value=value)


def check_float_range(name: str, value: float, minimum: float, maximum: float) -> None:
    """Validate that a fractional setting lies within its documented range.

    Raises:
        InvalidCommandError: If the value is not a number or is outside
            [minimum, maximum].
    """
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        msg = f"{name} must be a number, got {value!r}"
        raise InvalidCommandError(msg, parameter_name=name, value=value)
    if not minimum <= value <= maximum:
        msg = f"{name} must be between {minimum} and {maximum}, got {value}"
        raise InvalidCommandError(msg, parameter_name=name, value=value)


def require_text(name: str, value: str) -> None:
    """Validate that a text setting is not empty.

    Raises:
        InvalidCommandError: If the value is empty or not text.
    """
    if not isinstance(value, str) or not value:
        msg = f"{name} cannot be empty"
        raise InvalidCommandError(msg, parameter_name=name, value=value)
