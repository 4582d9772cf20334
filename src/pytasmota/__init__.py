"""Python client library for Tasmota devices.

This package provides an async client for controlling and configuring
Tasmota-firmware devices through their HTTP command interface.

The library is organized into two layers:
1. **API Layer** (pytasmota.api): Command encoding, HTTP transport, error
   classification and ``Backlog`` batching
2. **Client Layer** (pytasmota.client): Typed operation groups for power,
   settings, MQTT, network and status

Example:
    Basic usage:

    ```python
    from pytasmota import TasmotaClient

    async with TasmotaClient("192.168.1.100") as client:
        resp = await client.power.turn_on(3)
        print(resp.state(3))

        info = await client.status.get_device_info()
        print(info.device_name)
    ```

    Applying several settings in one request:

    ```python
    from pytasmota import DeviceConfig, TasmotaClient

    async with TasmotaClient("192.168.1.100") as client:
        await client.settings.apply_config(
            DeviceConfig(device_name="TestDevice", power_on_state=3, led_state=1)
        )
    ```
"""

from __future__ import annotations

from pytasmota.addresses import IPAddr, MACAddr
from pytasmota.api import TasmotaAPI, build_backlog, normalize_host
from pytasmota.client import TasmotaClient
from pytasmota.config import DeviceSettings
from pytasmota.const import VERSION
from pytasmota.exceptions import (
    AuthenticationError,
    DeviceError,
    ErrorKind,
    InvalidCommandError,
    InvalidConfigurationError,
    ParseError,
    TasmotaConnectionError,
    TasmotaError,
    TasmotaTimeoutError,
    is_auth_error,
    is_command_error,
    is_device_error,
    is_network_error,
    is_parse_error,
    is_timeout_error,
)
from pytasmota.models import (
    ClientConfig,
    Credentials,
    DeviceConfig,
    MQTTConfig,
    NetworkConfig,
    OptionKind,
    OptionValue,
    PowerResponse,
    PowerState,
    StatusResponse,
)
from pytasmota.mqtt import MQTTSettings
from pytasmota.network import IPConfig, NetworkSettings
from pytasmota.power import PowerControl
from pytasmota.status import StatusQueries


__version__ = VERSION

__all__ = [
    "AuthenticationError",
    "ClientConfig",
    "Credentials",
    "DeviceConfig",
    "DeviceError",
    "DeviceSettings",
    "ErrorKind",
    "IPAddr",
    "IPConfig",
    "InvalidCommandError",
    "InvalidConfigurationError",
    "MACAddr",
    "MQTTConfig",
    "MQTTSettings",
    "NetworkConfig",
    "NetworkSettings",
    "OptionKind",
    "OptionValue",
    "ParseError",
    "PowerControl",
    "PowerResponse",
    "PowerState",
    "StatusQueries",
    "StatusResponse",
    "TasmotaAPI",
    "TasmotaClient",
    "TasmotaConnectionError",
    "TasmotaError",
    "TasmotaTimeoutError",
    "__version__",
    "build_backlog",
    "is_auth_error",
    "is_command_error",
    "is_device_error",
    "is_network_error",
    "is_parse_error",
    "is_timeout_error",
    "normalize_host",
]
