"""Custom exceptions for pytasmota library.

Every failure is tagged with an ``ErrorKind`` at the point where it happens and
is never re-classified on its way up. Callers can test for a kind with the
``is_*_error`` predicates instead of inspecting message text.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


__all__ = [
    "AuthenticationError",
    "DeviceError",
    "ErrorKind",
    "InvalidCommandError",
    "InvalidConfigurationError",
    "ParseError",
    "TasmotaConnectionError",
    "TasmotaError",
    "TasmotaTimeoutError",
    "is_auth_error",
    "is_command_error",
    "is_device_error",
    "is_network_error",
    "is_parse_error",
    "is_timeout_error",
]


class ErrorKind(StrEnum):
    """Category of a pytasmota failure."""

    NETWORK = "network"
    AUTH = "auth"
    COMMAND = "command"
    PARSE = "parse"
    TIMEOUT = "timeout"
    DEVICE = "device"


class TasmotaError(Exception):
    """Base exception for all Tasmota errors.

    Attributes:
        kind: Category of the failure.
        message: Human readable description.
        cause: Optional lower-level exception that triggered this error.
    """

    kind: ErrorKind = ErrorKind.NETWORK

    def __init__(self, message: str = "", cause: BaseException | None = None) -> None:
        """Initialize TasmotaError.

        Args:
            message: Error message.
            cause: Optional wrapped exception.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Render the error with its kind and wrapped cause."""
        if self.cause is not None:
            return f"{self.kind} error: {self.message}: {self.cause}"
        return f"{self.kind} error: {self.message}"


class TasmotaConnectionError(TasmotaError):
    """Exception raised for transport failures that are neither timeouts nor auth.

    Attributes:
        status_code: HTTP status code when the device answered with a non-200.
    """

    kind = ErrorKind.NETWORK

    def __init__(
        self,
        message: str = "",
        cause: BaseException | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize TasmotaConnectionError.

        Args:
            message: Error message.
            cause: Optional wrapped exception.
            status_code: Optional HTTP status code returned by the device.
        """
        super().__init__(message, cause)
        self.status_code = status_code


class AuthenticationError(TasmotaError):
    """Exception raised when the device rejects the credentials (HTTP 401)."""

    kind = ErrorKind.AUTH


class InvalidCommandError(TasmotaError):
    """Exception raised for invalid commands or parameter values.

    Raised before any network I/O happens.

    Attributes:
        parameter_name: Optional name of the invalid parameter.
        value: Optional value that was invalid.
    """

    kind = ErrorKind.COMMAND

    def __init__(
        self,
        message: str = "",
        parameter_name: str | None = None,
        value: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize InvalidCommandError.

        Args:
            message: Error message.
            parameter_name: Optional name of the invalid parameter.
            value: Optional value that was invalid.
            cause: Optional wrapped exception.
        """
        super().__init__(message, cause)
        self.parameter_name = parameter_name
        self.value = value


class InvalidConfigurationError(InvalidCommandError):
    """Exception raised when the device host or base URL cannot be used."""


class ParseError(TasmotaError):
    """Exception raised when a response is not valid JSON or lacks an expected field."""

    kind = ErrorKind.PARSE


class TasmotaTimeoutError(TasmotaError):
    """Exception raised when a request exceeds its deadline."""

    kind = ErrorKind.TIMEOUT


class DeviceError(TasmotaError):
    """Exception raised when the device answered but is not in the expected state."""

    kind = ErrorKind.DEVICE


def _find_kind(err: BaseException | None, kind: ErrorKind) -> bool:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, TasmotaError):
            return err.kind == kind
        # A caller's own deadline, e.g. asyncio.timeout() around a call
        if isinstance(err, TimeoutError):
            return kind == ErrorKind.TIMEOUT
        seen.add(id(err))
        err = err.__cause__
    return False


def is_network_error(err: BaseException | None) -> bool:
    """Check if the error is a network error."""
    return _find_kind(err, ErrorKind.NETWORK)


def is_auth_error(err: BaseException | None) -> bool:
    """Check if the error is an authentication error."""
    return _find_kind(err, ErrorKind.AUTH)


def is_command_error(err: BaseException | None) -> bool:
    """Check if the error is a command error."""
    return _find_kind(err, ErrorKind.COMMAND)


def is_parse_error(err: BaseException | None) -> bool:
    """Check if the error is a parse error."""
    return _find_kind(err, ErrorKind.PARSE)


def is_timeout_error(err: BaseException | None) -> bool:
    """Check if the error is a timeout error or a caller's own deadline expiry."""
    return _find_kind(err, ErrorKind.TIMEOUT)


def is_device_error(err: BaseException | None) -> bool:
    """Check if the error is a device error."""
    return _find_kind(err, ErrorKind.DEVICE)
