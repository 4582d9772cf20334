"""High-level client for Tasmota devices.

This module composes the low-level command client with the typed operation
groups for power, settings, MQTT, network and status.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pytasmota.api import TasmotaAPI
from pytasmota.config import DeviceSettings
from pytasmota.mqtt import MQTTSettings
from pytasmota.network import NetworkSettings
from pytasmota.power import PowerControl
from pytasmota.status import StatusQueries


if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from pytasmota.models import ClientConfig

_LOGGER = logging.getLogger(__name__)

__all__ = ["TasmotaClient"]


class TasmotaClient:
    """Client for a single Tasmota device.

    Operations are grouped by concern and share one low-level ``TasmotaAPI``.
    The client keeps no device state between calls, so it can be shared by
    concurrent tasks.

    Example:
        Basic usage with automatic session management:

        ```python
        from pytasmota import TasmotaClient

        async with TasmotaClient("192.168.1.100") as client:
            await client.power.turn_on(1)
            info = await client.status.get_device_info()
            print(info.device_name)
        ```

        Session injection and credentials:

        ```python
        from aiohttp import ClientSession
        from pytasmota import ClientConfig, Credentials, TasmotaClient

        async with ClientSession() as session:
            config = ClientConfig(
                timeout=5,
                credentials=Credentials("admin", "secret"),
                session=session,
            )
            async with TasmotaClient("tasmota-kitchen.local", config) as client:
                await client.execute_backlog(["Power1 ON", "LedState 1"])
        ```

    Attributes:
        power: Relay control.
        settings: General device settings.
        mqtt: MQTT broker settings.
        network: Addressing and Wi-Fi settings.
        status: Typed status queries.
    """

    def __init__(self, host: str, config: ClientConfig | None = None) -> None:
        """Initialize the Tasmota client.

        Args:
            host: Device address, e.g. "192.168.1.100" or "http://plug:8080".
            config: Optional client configuration (timeouts, credentials,
                session, logger, debug).

        Raises:
            InvalidConfigurationError: If the host is invalid.
        """
        self._api = TasmotaAPI(host, config)
        self.power = PowerControl(self._api)
        self.settings = DeviceSettings(self._api)
        self.mqtt = MQTTSettings(self._api)
        self.network = NetworkSettings(self._api)
        self.status = StatusQueries(self._api)

    @property
    def api(self) -> TasmotaAPI:
        """Get the underlying API client."""
        return self._api

    @property
    def base_url(self) -> str:
        """Get the normalized base URL of the device."""
        return self._api.base_url

    async def __aenter__(self) -> TasmotaClient:
        """Enter the context manager.

        Returns:
            Self for use in async with statements.
        """
        await self._api.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager and release the session if owned."""
        await self._api.__aexit__(exc_type, exc_val, exc_tb)

    async def close(self) -> None:
        """Close the session if this client created it."""
        await self._api.close()

    async def execute_command(self, command: str, *, timeout: float | None = None) -> Any:
        """Send a raw command and return the decoded JSON response."""
        return await self._api.execute_command(command, timeout=timeout)

    async def execute_backlog(self, commands: Sequence[str], *, timeout: float | None = None) -> Any:
        """Send up to 30 raw commands in one ``Backlog`` request."""
        return await self._api.execute_backlog(commands, timeout=timeout)
