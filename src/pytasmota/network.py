"""Network configuration for Tasmota devices."""

from __future__ import annotations

import ipaddress
import json
import logging
from typing import TYPE_CHECKING, NamedTuple

from pytasmota.addresses import IPAddr
from pytasmota.const import (
    AP_MODE_MAX,
    AP_MODE_MIN,
    HOSTNAME_MAX_LENGTH,
    UNSET_IP_ADDRESS,
    WIFI_CONFIG_MAX,
    WIFI_CONFIG_MIN,
    WIFI_POWER_MAX,
    WIFI_POWER_MIN,
    WIFI_SLOT_MAX,
    WIFI_SLOT_MIN,
)
from pytasmota.exceptions import InvalidCommandError
from pytasmota.models import NetworkConfig
from pytasmota.parsers import ensure_object
from pytasmota.status import StatusQueries
from pytasmota.validation import check_float_range, check_range, require_text


if TYPE_CHECKING:
    from pytasmota.addresses import MACAddr
    from pytasmota.api import TasmotaAPI

_LOGGER = logging.getLogger(__name__)

__all__ = ["IPConfig", "NetworkSettings"]


class IPConfig(NamedTuple):
    """Current IP configuration of a device."""

    ip_address: IPAddr
    gateway: IPAddr
    subnet: IPAddr
    dns_server: IPAddr


def _check_address(label: str, value: str) -> None:
    try:
        ipaddress.ip_address(value)
    except ValueError as err:
        msg = f"invalid {label}: {value!r}"
        raise InvalidCommandError(msg, parameter_name=label, value=value, cause=err) from err


def _check_hostname(hostname: str) -> None:
    require_text("hostname", hostname)
    if len(hostname) > HOSTNAME_MAX_LENGTH:
        msg = f"hostname cannot exceed {HOSTNAME_MAX_LENGTH} characters"
        raise InvalidCommandError(msg, parameter_name="hostname", value=hostname)


class NetworkSettings:
    """Configure addressing and Wi-Fi on the device.

    Address changes take effect after the device restarts.
    """

    def __init__(self, api: TasmotaAPI) -> None:
        """Initialize network settings.

        Args:
            api: TasmotaAPI instance for HTTP communication.
        """
        self._api = api
        self._status = StatusQueries(api)

    async def get_config(self) -> NetworkConfig:
        """Read the network configuration (Status 5).

        DHCP is reported when the device has no static IP address.
        """
        info = await self._status.get_network_info()
        return NetworkConfig(
            hostname=info.hostname,
            ip_address=str(info.ip_address),
            gateway=str(info.gateway),
            subnet=str(info.subnetmask),
            dns_server=str(info.dns_server),
            use_dhcp=info.ip_address.is_unset,
        )

    async def get_ip_config(self) -> IPConfig:
        """Get the IP address, gateway, subnet mask and DNS server."""
        info = await self._status.get_network_info()
        return IPConfig(info.ip_address, info.gateway, info.subnetmask, info.dns_server)

    async def get_mac_address(self) -> MACAddr:
        """Get the device's MAC address."""
        info = await self._status.get_network_info()
        return info.mac

    async def set_hostname(self, hostname: str) -> None:
        """Set the host name (at most 32 characters)."""
        _check_hostname(hostname)
        await self._api.execute_command(f"Hostname {hostname}")

    async def set_static_ip(self, ip: str, gateway: str, subnet: str) -> None:
        """Configure a static address in one ``Backlog`` request."""
        _check_address("IP address", ip)
        _check_address("gateway address", gateway)
        _check_address("subnet mask", subnet)
        await self._api.execute_backlog([f"IPAddress1 {ip}", f"IPAddress2 {gateway}", f"IPAddress3 {subnet}"])

    async def enable_dhcp(self) -> None:
        """Switch to DHCP by clearing the static address.

        Use ``set_static_ip`` to leave DHCP.
        """
        await self._api.execute_command(f"IPAddress1 {UNSET_IP_ADDRESS}")

    async def set_dns_server(self, dns_server: str) -> None:
        """Set the DNS server address."""
        _check_address("DNS server address", dns_server)
        await self._api.execute_command(f"IPAddress4 {dns_server}")

    async def set_wifi(self, ssid: str, password: str = "", slot: int = 1) -> None:
        """Set Wi-Fi credentials for access point slot 1 or 2.

        The password is only sent when given.
        """
        check_range("WiFi slot", slot, WIFI_SLOT_MIN, WIFI_SLOT_MAX)
        require_text("SSID", ssid)
        commands = [f"SSId{slot} {ssid}"]
        if password:
            commands.append(f"Password{slot} {password}")
        await self._api.execute_backlog(commands)

    async def get_ssids(self) -> list[str]:
        """Get the configured SSIDs, skipping empty slots."""
        data = ensure_object(await self._api.execute_command("SSId"), "SSId")
        return [str(data[key]) for key in ("SSId1", "SSId2") if data.get(key)]

    async def set_ap_mode(self, mode: int) -> None:
        """Set the access point mode.

        Values:
            0: disabled, 1: enabled (default), 2: enabled without authentication.
        """
        check_range("AP mode", mode, AP_MODE_MIN, AP_MODE_MAX)
        await self._api.execute_command(f"AP {mode}")

    async def set_web_password(self, password: str) -> None:
        """Set the web UI password."""
        await self._api.execute_command(f"WebPassword {password}")

    async def has_web_password(self) -> bool:
        """Check if a web UI password is set."""
        data = ensure_object(await self._api.execute_command("WebPassword"), "WebPassword")
        return data.get("WebPassword") == 1

    async def set_wifi_power(self, power: float) -> None:
        """Set the transmit power in dBm (0-20.5, one decimal place)."""
        check_float_range("WiFi power", power, WIFI_POWER_MIN, WIFI_POWER_MAX)
        await self._api.execute_command(f"WifiPower {power:.1f}")

    async def get_wifi_power(self) -> float:
        """Get the transmit power in dBm."""
        info = await self._status.get_network_info()
        return info.wifi_power

    async def set_wifi_config(self, mode: int) -> None:
        """Set the Wi-Fi configuration mode.

        Values:
            0: restart Wi-Fi, 1: smart config for 1 minute, 2: Wi-Fi manager for
            3 minutes, 3: WPS for 1 minute, 4: disable Wi-Fi auto-restart,
            5: enable Wi-Fi auto-restart.
        """
        check_range("WiFi config mode", mode, WIFI_CONFIG_MIN, WIFI_CONFIG_MAX)
        await self._api.execute_command(f"WifiConfig {mode}")

    async def ping(self, host: str) -> bool:
        """Ask the device to ping a host.

        Returns:
            True when the device's answer mentions success or a reply.
        """
        require_text("ping host", host)
        data = await self._api.execute_command(f"Ping {host}")
        text = json.dumps(data).lower()
        return "success" in text or "reply" in text

    @staticmethod
    def build_commands(cfg: NetworkConfig) -> list[str]:
        """Validate a NetworkConfig and turn it into commands.

        A static address is only emitted when IP, gateway and subnet are all
        set; ``use_dhcp`` takes precedence over it.

        Raises:
            InvalidCommandError: If the host name is too long or an address is invalid.
        """
        commands: list[str] = []

        if cfg.hostname:
            _check_hostname(cfg.hostname)
            commands.append(f"Hostname {cfg.hostname}")

        if cfg.use_dhcp:
            commands.append(f"IPAddress1 {UNSET_IP_ADDRESS}")
        elif cfg.ip_address and cfg.gateway and cfg.subnet:
            _check_address("IP address", cfg.ip_address)
            _check_address("gateway address", cfg.gateway)
            _check_address("subnet mask", cfg.subnet)
            commands.extend(
                [f"IPAddress1 {cfg.ip_address}", f"IPAddress2 {cfg.gateway}", f"IPAddress3 {cfg.subnet}"]
            )

        if cfg.dns_server:
            _check_address("DNS server address", cfg.dns_server)
            commands.append(f"IPAddress4 {cfg.dns_server}")

        for slot, ssid, password in ((1, cfg.ssid1, cfg.password1), (2, cfg.ssid2, cfg.password2)):
            if ssid:
                commands.append(f"SSId{slot} {ssid}")
                if password:
                    commands.append(f"Password{slot} {password}")

        return commands

    async def apply_config(self, cfg: NetworkConfig) -> None:
        """Apply network settings in one ``Backlog`` request.

        Raises:
            InvalidCommandError: If a field is invalid or nothing would change.
        """
        if cfg is None:
            msg = "network config cannot be None"
            raise InvalidCommandError(msg, parameter_name="cfg")

        commands = self.build_commands(cfg)
        if not commands:
            msg = "no valid network configuration changes to apply"
            raise InvalidCommandError(msg, parameter_name="cfg", value=cfg)

        _LOGGER.debug("Applying %d network settings to %s", len(commands), self._api.base_url)
        await self._api.execute_backlog(commands)
