"""Data models for Tasmota commands and responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pytasmota.addresses import IPAddr, MACAddr
from pytasmota.const import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT
from pytasmota.exceptions import InvalidCommandError


if TYPE_CHECKING:
    import logging

    from aiohttp import ClientSession


__all__ = [
    "ClientConfig",
    "Credentials",
    "DeviceConfig",
    "EnergyData",
    "EthernetInfo",
    "MQTTConfig",
    "NetworkConfig",
    "OptionKind",
    "OptionValue",
    "PowerResponse",
    "PowerState",
    "StatusFirmware",
    "StatusInfo",
    "StatusLog",
    "StatusMQTT",
    "StatusMemory",
    "StatusNetwork",
    "StatusParam",
    "StatusPower",
    "StatusResponse",
    "StatusSensor",
    "StatusState",
    "StatusTime",
    "WifiInfo",
]


# -------------------------------------------------------------------------
# Client configuration
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class Credentials:
    """Web UI credentials sent as ``user``/``password`` query parameters.

    Attributes:
        username: Web admin user name (Tasmota uses "admin").
        password: Web admin password.
    """

    username: str = ""
    password: str = ""

    def __repr__(self) -> str:
        """Hide the password from reprs and logs."""
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class ClientConfig:
    """Construction-time configuration for a Tasmota client.

    Applied once when the client is created and never mutated afterwards.

    Attributes:
        timeout: Total request deadline in seconds.
        connect_timeout: Connection establishment deadline in seconds.
        credentials: Optional web credentials.
        session: Optional aiohttp ClientSession used as the HTTP transport.
        logger: Optional logger receiving request/response debug records.
        debug: Whether to log outgoing URLs and response bodies.
    """

    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    credentials: Credentials | None = None
    session: ClientSession | None = None
    logger: logging.Logger | None = None
    debug: bool = False


# -------------------------------------------------------------------------
# Generic option values
# -------------------------------------------------------------------------


class OptionKind(StrEnum):
    """Variant tag of an OptionValue."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    TEXT = "text"


@dataclass(frozen=True)
class OptionValue:
    """Value for a ``SetOption<N>`` command: a boolean, an integer or text.

    Attributes:
        kind: Which variant the value holds.
        value: The held value.
    """

    kind: OptionKind
    value: bool | int | str

    @classmethod
    def of(cls, value: Any) -> OptionValue:
        """Build an OptionValue from a plain Python value.

        Args:
            value: A bool, int, str or an existing OptionValue.

        Returns:
            OptionValue tagged with the matching variant.

        Raises:
            InvalidCommandError: If the value has any other type.
        """
        if isinstance(value, OptionValue):
            return value
        # bool first, it is a subclass of int
        if isinstance(value, bool):
            return cls(OptionKind.BOOLEAN, value)
        if isinstance(value, int):
            return cls(OptionKind.INTEGER, value)
        if isinstance(value, str):
            return cls(OptionKind.TEXT, value)
        msg = f"unsupported value type for SetOption: {type(value).__name__}"
        raise InvalidCommandError(msg, parameter_name="value", value=value)

    def format(self) -> str:
        """Format the value as a command argument."""
        if self.kind is OptionKind.BOOLEAN:
            return "1" if self.value else "0"
        return str(self.value)


# -------------------------------------------------------------------------
# Power
# -------------------------------------------------------------------------


class PowerState(StrEnum):
    """Relay power commands."""

    OFF = "OFF"
    ON = "ON"
    TOGGLE = "TOGGLE"
    BLINK = "BLINK"


@dataclass
class PowerResponse:
    """Relay states reported by a ``Power`` command or ``StatusSTS``.

    Attributes:
        states: Relay number to state text. Relay 0 is the bare ``POWER`` key,
            1-8 are ``POWER1``-``POWER8``.
    """

    states: dict[int, str] = field(default_factory=dict)

    def state(self, relay: int) -> str:
        """Get the reported state of a relay.

        Single-relay devices answer ``Power1`` with a bare ``POWER`` key and
        vice versa, so relay 0 and relay 1 fall back to each other.

        Args:
            relay: Relay number (0-8).

        Returns:
            State text such as "ON" or "OFF", empty if not reported.
        """
        if relay in self.states:
            return self.states[relay]
        if relay == 0:
            return self.states.get(1, "")
        if relay == 1:
            return self.states.get(0, "")
        return ""

    def is_on(self, relay: int) -> bool:
        """Check if a relay is reported on."""
        return self.state(relay).upper() == PowerState.ON


# -------------------------------------------------------------------------
# Composite configuration records
# -------------------------------------------------------------------------


@dataclass
class DeviceConfig:
    """Device configuration settings.

    Fields left as None are not changed by ``apply_config``.

    Attributes:
        device_name: Device name shown in the web UI.
        friendly_names: Friendly names for relays 1-8, in order.
        power_on_state: Relay state after power up (0-5).
        led_state: LED behaviour (0-8).
        sleep: Dynamic sleep in milliseconds (0-250).
        button_retain: MQTT retain flag for button messages.
        switch_retain: MQTT retain flag for switch messages.
        sensor_retain: MQTT retain flag for sensor messages.
        power_retain: MQTT retain flag for power messages.
    """

    device_name: str | None = None
    friendly_names: list[str] = field(default_factory=list)
    power_on_state: int | None = None
    led_state: int | None = None
    sleep: int | None = None
    button_retain: bool | None = None
    switch_retain: bool | None = None
    sensor_retain: bool | None = None
    power_retain: bool | None = None


@dataclass
class MQTTConfig:
    """MQTT broker configuration.

    Attributes:
        host: Broker host name or IP address.
        port: Broker port (1-65535).
        user: Broker user name.
        password: Broker password.
        client: MQTT client id.
        topic: Device topic.
        full_topic: Full topic template, e.g. "%prefix%/%topic%/".
        group_topic: Group topic.
        prefix1: Command prefix (default "cmnd").
        prefix2: Status prefix (default "stat").
        prefix3: Telemetry prefix (default "tele").
        retain: Whether power messages are retained.
        tele_period: Telemetry period in seconds (10-3600).
    """

    host: str = ""
    port: int | None = None
    user: str = ""
    password: str = ""
    client: str = ""
    topic: str = ""
    full_topic: str = ""
    group_topic: str = ""
    prefix1: str = ""
    prefix2: str = ""
    prefix3: str = ""
    retain: bool = False
    tele_period: int | None = None


@dataclass
class NetworkConfig:
    """Network configuration settings.

    Attributes:
        hostname: Device host name (at most 32 characters).
        ip_address: Static IP address.
        gateway: Gateway address.
        subnet: Subnet mask.
        dns_server: DNS server address.
        ssid1: SSID for access point slot 1.
        password1: Password for access point slot 1.
        ssid2: SSID for access point slot 2.
        password2: Password for access point slot 2.
        use_dhcp: Whether to use DHCP instead of the static address.
    """

    hostname: str = ""
    ip_address: str = ""
    gateway: str = ""
    subnet: str = ""
    dns_server: str = ""
    ssid1: str = ""
    password1: str = ""
    ssid2: str = ""
    password2: str = ""
    use_dhcp: bool = False


# -------------------------------------------------------------------------
# Status responses
# -------------------------------------------------------------------------


@dataclass
class StatusInfo:
    """Basic device information (``Status`` object)."""

    module: int = 0
    device_name: str = ""
    friendly_names: list[str] = field(default_factory=list)
    topic: str = ""
    button_topic: str = ""
    power: int = 0
    power_on_state: int = 0
    led_state: int = 0
    led_mask: str = ""
    save_data: int = 0
    save_state: int = 0
    switch_topic: str = ""
    switch_mode: list[int] = field(default_factory=list)
    button_retain: int = 0
    switch_retain: int = 0
    sensor_retain: int = 0
    power_retain: int = 0


@dataclass
class EthernetInfo:
    """Ethernet interface information (ESP32 boards)."""

    hostname: str = ""
    ip_address: IPAddr = field(default_factory=IPAddr)
    gateway: IPAddr = field(default_factory=IPAddr)
    subnetmask: IPAddr = field(default_factory=IPAddr)
    dns_server: IPAddr = field(default_factory=IPAddr)
    mac: MACAddr = field(default_factory=MACAddr)


@dataclass
class StatusParam:
    """Device parameters (``StatusPRM``, Status 1)."""

    baudrate: int = 0
    serial_config: str = ""
    group_topic: str = ""
    ota_url: str = ""
    restart_reason: str = ""
    uptime: str = ""
    startup_utc: str = ""
    sleep: int = 0
    cfg_holder: int = 0
    boot_count: int = 0
    bc_reset_time: str = ""
    save_count: int = 0
    save_address: str = ""


@dataclass
class StatusFirmware:
    """Firmware information (``StatusFWR``, Status 2)."""

    version: str = ""
    build_date_time: str = ""
    boot: int = 0
    core: str = ""
    sdk: str = ""
    cpu_frequency: int = 0
    hardware: str = ""
    cr: str = ""


@dataclass
class StatusLog:
    """Logging information (``StatusLOG``, Status 3)."""

    serial_log: int = 0
    web_log: int = 0
    mqtt_log: int = 0
    sys_log: int = 0
    log_host: str = ""
    log_port: int = 0
    ssids: list[str] = field(default_factory=list)
    tele_period: int = 0
    resolution: str = ""
    set_option: list[str] = field(default_factory=list)


@dataclass
class StatusMemory:
    """Memory information (``StatusMEM``, Status 4)."""

    program_size: int = 0
    free: int = 0
    heap: int = 0
    program_flash_size: int = 0
    flash_size: int = 0
    flash_chip_id: str = ""
    flash_frequency: int = 0
    flash_mode: int | str = 0
    features: list[str] = field(default_factory=list)
    drivers: str = ""
    sensors: str = ""


@dataclass
class StatusNetwork:
    """Network information (``StatusNET``, Status 5)."""

    hostname: str = ""
    ip_address: IPAddr = field(default_factory=IPAddr)
    gateway: IPAddr = field(default_factory=IPAddr)
    subnetmask: IPAddr = field(default_factory=IPAddr)
    dns_server: IPAddr = field(default_factory=IPAddr)
    dns_server2: IPAddr = field(default_factory=IPAddr)
    mac: MACAddr = field(default_factory=MACAddr)
    ethernet: EthernetInfo | None = None
    webserver: int = 0
    http_api: int = 0
    wifi_config: int = 0
    wifi_power: float = 0.0


@dataclass
class StatusMQTT:
    """MQTT information (``StatusMQT``, Status 6)."""

    mqtt_host: str = ""
    mqtt_port: int = 0
    mqtt_client_mask: str = ""
    mqtt_client: str = ""
    mqtt_user: str = ""
    mqtt_count: int = 0
    max_packet_size: int = 0
    keepalive: int = 0
    socket_timeout: int = 0


@dataclass
class StatusTime:
    """Time information (``StatusTIM``, Status 7)."""

    utc: str = ""
    local: str = ""
    start_dst: str = ""
    end_dst: str = ""
    timezone: str | int = ""
    sunrise: str = ""
    sunset: str = ""


@dataclass
class EnergyData:
    """Power monitoring readings (``ENERGY`` sensor block)."""

    total_start_time: str = ""
    total: float = 0.0
    yesterday: float = 0.0
    today: float = 0.0
    period: float = 0.0
    power: float = 0.0
    apparent_power: float = 0.0
    reactive_power: float = 0.0
    factor: float = 0.0
    voltage: float = 0.0
    current: float = 0.0


@dataclass
class StatusSensor:
    """Sensor readings (``StatusSNS``, Status 8 and 10).

    Attributes:
        time: Reading timestamp.
        switches: Switch states, when the device reports them.
        energy: Power monitoring block, when present.
        raw: The complete sensor object, for sensors without a typed model.
    """

    time: str = ""
    switches: list[str] = field(default_factory=list)
    energy: EnergyData | None = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class WifiInfo:
    """Wi-Fi link information inside ``StatusSTS``."""

    ap: int = 0
    ssid: str = ""
    bssid: str = ""
    channel: int = 0
    mode: str = ""
    rssi: int = 0
    signal: int = 0
    link_count: int = 0
    downtime: str = ""


@dataclass
class StatusState:
    """Current device state (``StatusSTS``, Status 11)."""

    time: str = ""
    uptime: str = ""
    uptime_sec: int = 0
    heap: int = 0
    sleep_mode: str = ""
    sleep: int = 0
    load_avg: int = 0
    mqtt_count: int = 0
    power: PowerResponse = field(default_factory=PowerResponse)
    wifi: WifiInfo | None = None


@dataclass
class StatusPower:
    """Power thresholds (``StatusPTH``, Status 9)."""

    power_delta: list[int] = field(default_factory=list)
    power_low: int = 0
    power_high: int = 0
    voltage_low: int = 0
    voltage_high: int = 0
    current_low: int = 0
    current_high: int = 0


@dataclass
class StatusResponse:
    """Complete ``Status`` response. Categories the device did not return are None.

    Attributes:
        raw_data: Original response data for debugging.
    """

    status: StatusInfo | None = None
    status_prm: StatusParam | None = None
    status_fwr: StatusFirmware | None = None
    status_log: StatusLog | None = None
    status_mem: StatusMemory | None = None
    status_net: StatusNetwork | None = None
    status_mqt: StatusMQTT | None = None
    status_tim: StatusTime | None = None
    status_sns: StatusSensor | None = None
    status_sts: StatusState | None = None
    status_pth: StatusPower | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)
