"""Low-level command client for the Tasmota HTTP interface.

This module provides direct HTTP communication with a Tasmota device. Every
command is sent as ``GET <base>/cm?cmnd=<command>`` and answered with a JSON
object. Multiple commands can be batched into a single ``Backlog`` request.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from aiohttp import ClientError, ClientSession, ClientTimeout
from yarl import URL

from pytasmota.const import (
    BACKLOG_MAX_COMMANDS,
    BACKLOG_PREFIX,
    BACKLOG_SEPARATOR,
    COMMAND_ENDPOINT,
    USER_AGENT,
)
from pytasmota.exceptions import (
    AuthenticationError,
    InvalidCommandError,
    InvalidConfigurationError,
    ParseError,
    TasmotaConnectionError,
    TasmotaTimeoutError,
)
from pytasmota.models import ClientConfig


if TYPE_CHECKING:
    from types import TracebackType

_LOGGER = logging.getLogger(__name__)

__all__ = ["TasmotaAPI", "build_backlog", "normalize_host"]


def normalize_host(host: str) -> str:
    """Validate a device address and turn it into a base URL.

    Args:
        host: IP address or host name, optionally with scheme and port,
            e.g. "192.168.1.100", "tasmota.local:8080" or "https://plug/".

    Returns:
        Base URL with a scheme and without trailing slashes.

    Raises:
        InvalidConfigurationError: If the host is empty, cannot be parsed or
            uses a scheme other than http or https.
    """
    if not host or not host.strip():
        msg = "host cannot be empty"
        raise InvalidConfigurationError(msg, parameter_name="host", value=host)

    base = host.strip().rstrip("/")
    scheme, sep, rest = base.partition("://")
    if not sep:
        base = f"http://{base}"
    elif scheme.lower() in ("http", "https"):
        base = f"{scheme.lower()}://{rest}"
    else:
        msg = f"invalid host: {host} (unsupported scheme {scheme!r})"
        raise InvalidConfigurationError(msg, parameter_name="host", value=host)

    try:
        url = URL(base)
        hostname = url.host
        # Accessing port validates it
        url.port  # noqa: B018
    except (TypeError, ValueError) as err:
        msg = f"invalid host: {host}"
        raise InvalidConfigurationError(msg, parameter_name="host", value=host, cause=err) from err

    if not hostname:
        msg = f"invalid host: {host}"
        raise InvalidConfigurationError(msg, parameter_name="host", value=host)

    return base


def build_backlog(commands: Sequence[str]) -> str:
    """Compose a ``Backlog`` command from individual commands.

    Each command is trimmed and blank commands are dropped. The device runs the
    commands in order but does not roll back when one of them fails.

    Args:
        commands: 1-30 commands.

    Returns:
        Single command string, e.g. "Backlog Power1 ON; Power2 OFF".

    Raises:
        InvalidCommandError: If no commands, more than 30 commands, or only
            blank commands are supplied.
    """
    if isinstance(commands, str):
        commands = [commands]

    if not commands:
        msg = "no commands provided"
        raise InvalidCommandError(msg, parameter_name="commands", value=list(commands))

    if len(commands) > BACKLOG_MAX_COMMANDS:
        msg = f"backlog supports maximum {BACKLOG_MAX_COMMANDS} commands, got {len(commands)}"
        raise InvalidCommandError(msg, parameter_name="commands", value=len(commands))

    valid = [command.strip() for command in commands if command and command.strip()]
    if not valid:
        msg = "no valid commands provided"
        raise InvalidCommandError(msg, parameter_name="commands", value=list(commands))

    return f"{BACKLOG_PREFIX} {BACKLOG_SEPARATOR.join(valid)}"


class TasmotaAPI:
    """Low-level command client for a single Tasmota device.

    This class handles raw HTTP communication with the device: URL
    construction, credentials, timeouts, failure classification and JSON
    validation. It holds no mutable state after construction apart from the
    lazily created session, so one instance can be shared by concurrent tasks.

    Example:
        ```python
        from pytasmota.api import TasmotaAPI
        from pytasmota.models import ClientConfig, Credentials

        config = ClientConfig(timeout=5, credentials=Credentials("admin", "secret"))
        async with TasmotaAPI("192.168.1.100", config) as api:
            data = await api.execute_command("Power1 ON")
            await api.execute_backlog(["DeviceName Kitchen", "LedState 1"])
        ```

    Attributes:
        base_url: Normalized base URL of the device.
    """

    def __init__(self, host: str, config: ClientConfig | None = None) -> None:
        """Initialize the API client.

        Args:
            host: Device address, see ``normalize_host``.
            config: Optional client configuration. If it carries no session,
                one is created on first use and closed by ``close``.

        Raises:
            InvalidConfigurationError: If the host is invalid.
        """
        self._config = config or ClientConfig()
        self._base_url = normalize_host(host)
        self._session = self._config.session
        self._owns_session = self._session is None
        self._logger = self._config.logger or _LOGGER
        self._log_traffic = self._config.debug or self._config.logger is not None

    @property
    def base_url(self) -> str:
        """Get the normalized base URL."""
        return self._base_url

    @property
    def config(self) -> ClientConfig:
        """Get the client configuration."""
        return self._config

    async def __aenter__(self) -> TasmotaAPI:
        """Enter the context manager.

        Returns:
            Self for use in async with statements.
        """
        self._get_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager.

        Closes the session if it was created by this client.

        Args:
            exc_type: Exception type if an exception occurred.
            exc_val: Exception value if an exception occurred.
            exc_tb: Exception traceback if an exception occurred.
        """
        await self.close()

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> ClientSession:
        if self._session is None:
            self._session = ClientSession()
            self._owns_session = True
        elif self._session.closed:
            msg = "Session is closed. Cannot make request."
            raise RuntimeError(msg)
        return self._session

    def build_command_url(self, command: str) -> URL:
        """Build the request URL for a single command.

        Args:
            command: Command string, e.g. "Power1 ON".

        Returns:
            URL with ``cmnd`` and, when configured, ``user``/``password``
            query parameters.

        Raises:
            InvalidCommandError: If the command is empty.
            InvalidConfigurationError: If the stored base URL cannot be parsed.
        """
        if not command:
            msg = "command cannot be empty"
            raise InvalidCommandError(msg, parameter_name="command", value=command)

        try:
            url = URL(self._base_url)
        except (TypeError, ValueError) as err:
            msg = "invalid base URL"
            raise InvalidConfigurationError(msg, parameter_name="base_url", value=self._base_url, cause=err) from err

        query = {"cmnd": command}
        credentials = self._config.credentials
        if credentials is not None:
            if credentials.username:
                query["user"] = credentials.username
            if credentials.password:
                query["password"] = credentials.password

        return url.with_path(COMMAND_ENDPOINT).with_query(query)

    async def _get(self, url: URL, *, timeout: float | None = None) -> bytes:
        """Issue a GET request and return the response body.

        Args:
            url: Fully built request URL.
            timeout: Optional deadline in seconds overriding the configured one.

        Returns:
            Raw response body.

        Raises:
            AuthenticationError: If the device answers 401.
            TasmotaConnectionError: On any other non-200 answer or transport failure.
            TasmotaTimeoutError: If the deadline is exceeded.
        """
        session = self._get_session()
        client_timeout = ClientTimeout(
            total=timeout if timeout is not None else self._config.timeout,
            connect=self._config.connect_timeout,
        )
        headers = {"User-Agent": USER_AGENT}

        if self._log_traffic:
            self._logger.debug("GET %s", url)

        try:
            async with session.get(url, headers=headers, timeout=client_timeout) as response:
                status = response.status
                body = await response.read()
        except TimeoutError as err:
            self._logger.warning("Request to %s timed out", self._base_url)
            msg = "request timeout"
            raise TasmotaTimeoutError(msg, err) from err
        except ClientError as err:
            self._logger.warning("Connection error for %s: %s", self._base_url, err)
            msg = "request failed"
            raise TasmotaConnectionError(msg, err) from err

        if self._log_traffic:
            self._logger.debug("Response status: %d", status)
            self._logger.debug("Response body: %s", body.decode("utf-8", errors="replace"))

        if status == HTTPStatus.UNAUTHORIZED:
            msg = "authentication failed"
            raise AuthenticationError(msg)

        if status != HTTPStatus.OK:
            msg = f"unexpected status code: {status}"
            raise TasmotaConnectionError(msg, status_code=status)

        return body

    async def execute_command(self, command: str, *, timeout: float | None = None) -> Any:
        """Send a single command and return the decoded JSON response.

        Args:
            command: Command string, e.g. "Status 5".
            timeout: Optional deadline in seconds for this call.

        Returns:
            Decoded JSON payload, usually a dict.

        Raises:
            InvalidCommandError: If the command is empty or the device reports
                it as unknown.
            ParseError: If the response body is not valid JSON.
            AuthenticationError: If the device rejects the credentials.
            TasmotaConnectionError: If the request fails.
            TasmotaTimeoutError: If the request times out.
        """
        if not command:
            msg = "command cannot be empty"
            raise InvalidCommandError(msg, parameter_name="command", value=command)

        url = self.build_command_url(command)
        body = await self._get(url, timeout=timeout)

        try:
            payload = json.loads(body)
        except ValueError as err:
            msg = "invalid JSON response"
            raise ParseError(msg, err) from err

        if isinstance(payload, dict) and payload.get("Command") == "Unknown":
            msg = f"device rejected command: {command.split(' ', 1)[0]}"
            raise InvalidCommandError(msg, parameter_name="command", value=command)

        return payload

    async def execute_backlog(self, commands: Sequence[str], *, timeout: float | None = None) -> Any:
        """Send several commands in one ``Backlog`` request.

        One HTTP round trip is made. The device executes the commands in order
        and may have applied some of them when a later one fails.

        Args:
            commands: 1-30 commands; blank entries are dropped.
            timeout: Optional deadline in seconds for this call.

        Returns:
            The device's combined JSON response.

        Raises:
            InvalidCommandError: For an empty, oversized or all-blank batch.
        """
        backlog = build_backlog(commands)
        return await self.execute_command(backlog, timeout=timeout)
