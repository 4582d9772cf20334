"""Status queries for Tasmota devices.

``Status <n>`` selects which section of device state the firmware returns.
Each helper here issues one status command and returns one typed section.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, TypeVar

from pytasmota.const import STATUS_CATEGORY_MAX, STATUS_CATEGORY_MIN
from pytasmota.exceptions import DeviceError, ParseError
from pytasmota.parsers import parse_status_response
from pytasmota.validation import check_range


if TYPE_CHECKING:
    from pytasmota.api import TasmotaAPI
    from pytasmota.models import (
        StatusFirmware,
        StatusInfo,
        StatusLog,
        StatusMemory,
        StatusMQTT,
        StatusNetwork,
        StatusParam,
        StatusPower,
        StatusResponse,
        StatusSensor,
        StatusState,
        StatusTime,
    )

_LOGGER = logging.getLogger(__name__)

__all__ = ["StatusQueries"]

_T = TypeVar("_T")


def _require(section: _T | None, name: str) -> _T:
    if section is None:
        msg = f"status response missing {name} field"
        raise ParseError(msg)
    return section


class StatusQueries:
    """Typed access to the device's ``Status`` categories.

    Categories:
        0: all sections, 1: parameters (StatusPRM), 2: firmware (StatusFWR),
        3: logging (StatusLOG), 4: memory (StatusMEM), 5: network (StatusNET),
        6: MQTT (StatusMQT), 7: time (StatusTIM), 8 and 10: sensors (StatusSNS),
        9: power thresholds (StatusPTH), 11: state (StatusSTS).

    The basic ``Status`` section (device name, topic, retain flags) is only
    returned as part of category 0.
    """

    def __init__(self, api: TasmotaAPI) -> None:
        """Initialize status queries.

        Args:
            api: TasmotaAPI instance for HTTP communication.
        """
        self._api = api

    async def status(self, category: int = 0) -> StatusResponse:
        """Query a status category.

        Args:
            category: Status category (0-11).

        Returns:
            StatusResponse with the sections the device returned.

        Raises:
            InvalidCommandError: If the category is not an integer in range.
            ParseError: If the response cannot be parsed.
        """
        check_range("status category", category, STATUS_CATEGORY_MIN, STATUS_CATEGORY_MAX)

        data = await self._api.execute_command(f"Status {category}")
        return parse_status_response(data)

    async def get_device_info(self) -> StatusInfo:
        """Get basic device information (``Status`` section of Status 0)."""
        resp = await self.status(0)
        return _require(resp.status, "Status")

    async def get_param_info(self) -> StatusParam:
        """Get device parameters (Status 1)."""
        resp = await self.status(1)
        return _require(resp.status_prm, "StatusPRM")

    async def get_firmware_info(self) -> StatusFirmware:
        """Get firmware version information (Status 2)."""
        resp = await self.status(2)
        return _require(resp.status_fwr, "StatusFWR")

    async def get_log_info(self) -> StatusLog:
        """Get logging configuration (Status 3)."""
        resp = await self.status(3)
        return _require(resp.status_log, "StatusLOG")

    async def get_memory_info(self) -> StatusMemory:
        """Get memory information (Status 4)."""
        resp = await self.status(4)
        return _require(resp.status_mem, "StatusMEM")

    async def get_network_info(self) -> StatusNetwork:
        """Get network configuration (Status 5)."""
        resp = await self.status(5)
        return _require(resp.status_net, "StatusNET")

    async def get_mqtt_info(self) -> StatusMQTT:
        """Get MQTT configuration (Status 6)."""
        resp = await self.status(6)
        return _require(resp.status_mqt, "StatusMQT")

    async def get_time_info(self) -> StatusTime:
        """Get time information (Status 7)."""
        resp = await self.status(7)
        return _require(resp.status_tim, "StatusTIM")

    async def get_power_thresholds(self) -> StatusPower:
        """Get power monitoring thresholds (Status 9)."""
        resp = await self.status(9)
        return _require(resp.status_pth, "StatusPTH")

    async def get_sensor_data(self) -> StatusSensor:
        """Get sensor readings (Status 10)."""
        resp = await self.status(10)
        return _require(resp.status_sns, "StatusSNS")

    async def get_state(self) -> StatusState:
        """Get current device state (Status 11)."""
        resp = await self.status(11)
        return _require(resp.status_sts, "StatusSTS")

    async def get_uptime(self) -> timedelta:
        """Get the device uptime."""
        state = await self.get_state()
        return timedelta(seconds=state.uptime_sec)

    async def get_wifi_signal(self) -> int:
        """Get the Wi-Fi signal strength (RSSI percentage as reported by Tasmota).

        Raises:
            DeviceError: If the device reports no Wi-Fi information.
        """
        state = await self.get_state()
        if state.wifi is None:
            msg = "WiFi information not available"
            raise DeviceError(msg)
        _LOGGER.debug("WiFi RSSI for %s: %d", self._api.base_url, state.wifi.rssi)
        return state.wifi.rssi
