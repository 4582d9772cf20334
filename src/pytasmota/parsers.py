"""Parsing utilities for Tasmota responses.

This module provides shared parsing functions used by the typed facades to
convert raw JSON objects returned by the device into data models.
"""

from __future__ import annotations

import re
from typing import Any

from pytasmota.addresses import IPAddr, MACAddr
from pytasmota.exceptions import ParseError
from pytasmota.models import (
    EnergyData,
    EthernetInfo,
    PowerResponse,
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
    WifiInfo,
)


__all__ = [
    "ensure_object",
    "parse_energy",
    "parse_power_response",
    "parse_status_firmware",
    "parse_status_info",
    "parse_status_log",
    "parse_status_memory",
    "parse_status_mqtt",
    "parse_status_network",
    "parse_status_param",
    "parse_status_power",
    "parse_status_response",
    "parse_status_sensor",
    "parse_status_state",
    "parse_status_time",
    "parse_wifi_info",
]

_POWER_KEY = re.compile(r"^POWER([1-8]?)$")


def _int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]


def _int_list(value: Any) -> list[int]:
    if value is None:
        return []
    if isinstance(value, list):
        return [_int(item) for item in value]
    return [_int(value)]


def _ip(value: Any) -> IPAddr:
    # Tasmota reports the station address as a list on some builds
    if isinstance(value, list):
        value = value[0] if value else ""
    try:
        return IPAddr.parse(None if value is None else str(value))
    except ValueError as err:
        msg = f"invalid IP address in response: {value!r}"
        raise ParseError(msg, err) from err


def _mac(value: Any) -> MACAddr:
    try:
        return MACAddr.parse(None if value is None else str(value))
    except ValueError as err:
        msg = f"invalid MAC address in response: {value!r}"
        raise ParseError(msg, err) from err


def _object(data: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        msg = f"expected object for {key}, got {type(value).__name__}"
        raise ParseError(msg)
    return value


def ensure_object(data: Any, command: str) -> dict[str, Any]:
    """Check that a command response is a JSON object.

    Args:
        data: Decoded response payload.
        command: Command that produced the payload, for the error message.

    Returns:
        The payload as a dict.

    Raises:
        ParseError: If the payload is not an object.
    """
    if not isinstance(data, dict):
        msg = f"expected JSON object in response to {command!r}, got {type(data).__name__}"
        raise ParseError(msg)
    return data


def parse_power_response(data: dict[str, Any]) -> PowerResponse:
    """Parse relay states from a ``Power`` response or ``StatusSTS`` object.

    Args:
        data: Raw response, e.g. {"POWER1": "ON", "POWER2": "OFF"}.

    Returns:
        PowerResponse with one entry per reported relay.
    """
    states: dict[int, str] = {}
    for key, value in data.items():
        match = _POWER_KEY.match(key)
        if match is None or not isinstance(value, str):
            continue
        states[int(match.group(1) or 0)] = value
    return PowerResponse(states=states)


def parse_status_info(data: dict[str, Any]) -> StatusInfo:
    """Parse the ``Status`` object."""
    return StatusInfo(
        module=_int(data.get("Module")),
        device_name=data.get("DeviceName", ""),
        friendly_names=_str_list(data.get("FriendlyName")),
        topic=data.get("Topic", ""),
        button_topic=data.get("ButtonTopic", ""),
        power=_int(data.get("Power")),
        power_on_state=_int(data.get("PowerOnState")),
        led_state=_int(data.get("LedState")),
        led_mask=str(data.get("LedMask", "")),
        save_data=_int(data.get("SaveData")),
        save_state=_int(data.get("SaveState")),
        switch_topic=data.get("SwitchTopic", ""),
        switch_mode=_int_list(data.get("SwitchMode")),
        button_retain=_int(data.get("ButtonRetain")),
        switch_retain=_int(data.get("SwitchRetain")),
        sensor_retain=_int(data.get("SensorRetain")),
        power_retain=_int(data.get("PowerRetain")),
    )


def parse_status_param(data: dict[str, Any]) -> StatusParam:
    """Parse the ``StatusPRM`` object."""
    return StatusParam(
        baudrate=_int(data.get("Baudrate")),
        serial_config=data.get("SerialConfig", ""),
        group_topic=data.get("GroupTopic", ""),
        ota_url=data.get("OtaUrl", ""),
        restart_reason=data.get("RestartReason", ""),
        uptime=data.get("Uptime", ""),
        startup_utc=data.get("StartupUTC", ""),
        sleep=_int(data.get("Sleep")),
        cfg_holder=_int(data.get("CfgHolder")),
        boot_count=_int(data.get("BootCount")),
        bc_reset_time=data.get("BCResetTime", ""),
        save_count=_int(data.get("SaveCount")),
        save_address=str(data.get("SaveAddress", "")),
    )


def parse_status_firmware(data: dict[str, Any]) -> StatusFirmware:
    """Parse the ``StatusFWR`` object."""
    return StatusFirmware(
        version=data.get("Version", ""),
        build_date_time=data.get("BuildDateTime", ""),
        boot=_int(data.get("Boot")),
        core=data.get("Core", ""),
        sdk=data.get("SDK", ""),
        cpu_frequency=_int(data.get("CpuFrequency")),
        hardware=data.get("Hardware", ""),
        cr=data.get("CR", ""),
    )


def parse_status_log(data: dict[str, Any]) -> StatusLog:
    """Parse the ``StatusLOG`` object."""
    return StatusLog(
        serial_log=_int(data.get("SerialLog")),
        web_log=_int(data.get("WebLog")),
        mqtt_log=_int(data.get("MqttLog")),
        sys_log=_int(data.get("SysLog")),
        log_host=data.get("LogHost", ""),
        log_port=_int(data.get("LogPort")),
        ssids=_str_list(data.get("SSId")),
        tele_period=_int(data.get("TelePeriod")),
        resolution=data.get("Resolution", ""),
        set_option=_str_list(data.get("SetOption")),
    )


def parse_status_memory(data: dict[str, Any]) -> StatusMemory:
    """Parse the ``StatusMEM`` object."""
    return StatusMemory(
        program_size=_int(data.get("ProgramSize")),
        free=_int(data.get("Free")),
        heap=_int(data.get("Heap")),
        program_flash_size=_int(data.get("ProgramFlashSize")),
        flash_size=_int(data.get("FlashSize")),
        flash_chip_id=str(data.get("FlashChipId", "")),
        flash_frequency=_int(data.get("FlashFrequency")),
        flash_mode=data.get("FlashMode", 0),
        features=_str_list(data.get("Features")),
        drivers=str(data.get("Drivers", "")),
        sensors=str(data.get("Sensors", "")),
    )


def parse_status_network(data: dict[str, Any]) -> StatusNetwork:
    """Parse the ``StatusNET`` object.

    Unset addresses ("0.0.0.0" or "") become unset IPAddr values.

    Raises:
        ParseError: If an address field is not a valid address.
    """
    ethernet_data = _object(data, "Ethernet")
    ethernet = None
    if ethernet_data is not None:
        ethernet = EthernetInfo(
            hostname=ethernet_data.get("Hostname", ""),
            ip_address=_ip(ethernet_data.get("IPAddress")),
            gateway=_ip(ethernet_data.get("Gateway")),
            subnetmask=_ip(ethernet_data.get("Subnetmask")),
            dns_server=_ip(ethernet_data.get("DNSServer1", ethernet_data.get("DNSServer"))),
            mac=_mac(ethernet_data.get("Mac")),
        )

    return StatusNetwork(
        hostname=data.get("Hostname", ""),
        ip_address=_ip(data.get("IPAddress")),
        gateway=_ip(data.get("Gateway")),
        subnetmask=_ip(data.get("Subnetmask")),
        # Tasmota 12+ renamed DNSServer to DNSServer1
        dns_server=_ip(data.get("DNSServer1", data.get("DNSServer"))),
        dns_server2=_ip(data.get("DNSServer2")),
        mac=_mac(data.get("Mac")),
        ethernet=ethernet,
        webserver=_int(data.get("Webserver")),
        http_api=_int(data.get("HTTP_API")),
        wifi_config=_int(data.get("WifiConfig")),
        wifi_power=_float(data.get("WifiPower")),
    )


def parse_status_mqtt(data: dict[str, Any]) -> StatusMQTT:
    """Parse the ``StatusMQT`` object."""
    return StatusMQTT(
        mqtt_host=data.get("MqttHost", ""),
        mqtt_port=_int(data.get("MqttPort")),
        mqtt_client_mask=data.get("MqttClientMask", ""),
        mqtt_client=data.get("MqttClient", ""),
        mqtt_user=data.get("MqttUser", ""),
        mqtt_count=_int(data.get("MqttCount")),
        max_packet_size=_int(data.get("MAX_PACKET_SIZE")),
        keepalive=_int(data.get("KEEPALIVE")),
        socket_timeout=_int(data.get("SOCKET_TIMEOUT")),
    )


def parse_status_time(data: dict[str, Any]) -> StatusTime:
    """Parse the ``StatusTIM`` object."""
    return StatusTime(
        utc=data.get("UTC", ""),
        local=data.get("Local", ""),
        start_dst=data.get("StartDST", ""),
        end_dst=data.get("EndDST", ""),
        timezone=data.get("Timezone", ""),
        sunrise=data.get("Sunrise", ""),
        sunset=data.get("Sunset", ""),
    )


def parse_energy(data: dict[str, Any]) -> EnergyData:
    """Parse an ``ENERGY`` sensor block.

    Multi-channel meters report lists; the first channel is used.
    """

    def first(key: str) -> float:
        value = data.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        return _float(value)

    return EnergyData(
        total_start_time=data.get("TotalStartTime", ""),
        total=first("Total"),
        yesterday=first("Yesterday"),
        today=first("Today"),
        period=first("Period"),
        power=first("Power"),
        apparent_power=first("ApparentPower"),
        reactive_power=first("ReactivePower"),
        factor=first("Factor"),
        voltage=first("Voltage"),
        current=first("Current"),
    )


def parse_status_sensor(data: dict[str, Any]) -> StatusSensor:
    """Parse the ``StatusSNS`` object, keeping the raw mapping for untyped sensors."""
    energy_data = _object(data, "ENERGY")
    switches = [str(value) for key, value in data.items() if key.startswith("Switch")]
    return StatusSensor(
        time=data.get("Time", ""),
        switches=switches,
        energy=parse_energy(energy_data) if energy_data is not None else None,
        raw=dict(data),
    )


def parse_wifi_info(data: dict[str, Any]) -> WifiInfo:
    """Parse the ``Wifi`` block of ``StatusSTS``."""
    return WifiInfo(
        ap=_int(data.get("AP")),
        ssid=data.get("SSId", ""),
        bssid=data.get("BSSId", ""),
        channel=_int(data.get("Channel")),
        mode=data.get("Mode", ""),
        rssi=_int(data.get("RSSI")),
        signal=_int(data.get("Signal")),
        link_count=_int(data.get("LinkCount")),
        downtime=data.get("Downtime", ""),
    )


def parse_status_state(data: dict[str, Any]) -> StatusState:
    """Parse the ``StatusSTS`` object."""
    wifi_data = _object(data, "Wifi")
    return StatusState(
        time=data.get("Time", ""),
        uptime=data.get("Uptime", ""),
        uptime_sec=_int(data.get("UptimeSec")),
        heap=_int(data.get("Heap")),
        sleep_mode=data.get("SleepMode", ""),
        sleep=_int(data.get("Sleep")),
        load_avg=_int(data.get("LoadAvg")),
        mqtt_count=_int(data.get("MqttCount")),
        power=parse_power_response(data),
        wifi=parse_wifi_info(wifi_data) if wifi_data is not None else None,
    )


def parse_status_power(data: dict[str, Any]) -> StatusPower:
    """Parse the ``StatusPTH`` object."""
    delta = data.get("PowerDelta", [])
    if not isinstance(delta, list):
        delta = [delta]
    return StatusPower(
        power_delta=[_int(value) for value in delta],
        power_low=_int(data.get("PowerLow")),
        power_high=_int(data.get("PowerHigh")),
        voltage_low=_int(data.get("VoltageLow")),
        voltage_high=_int(data.get("VoltageHigh")),
        current_low=_int(data.get("CurrentLow")),
        current_high=_int(data.get("CurrentHigh")),
    )


def parse_status_response(data: dict[str, Any]) -> StatusResponse:
    """Parse a complete ``Status`` response.

    This is a convenience function that applies every section parser to the
    sections present in the response. Absent sections stay None.

    Args:
        data: Raw response object.

    Returns:
        StatusResponse instance with all parsed sections.

    Raises:
        ParseError: If a section is not an object or holds invalid addresses.
    """
    data = ensure_object(data, "Status")

    def section(key: str, parser: Any) -> Any:
        value = _object(data, key)
        return parser(value) if value is not None else None

    return StatusResponse(
        status=section("Status", parse_status_info),
        status_prm=section("StatusPRM", parse_status_param),
        status_fwr=section("StatusFWR", parse_status_firmware),
        status_log=section("StatusLOG", parse_status_log),
        status_mem=section("StatusMEM", parse_status_memory),
        status_net=section("StatusNET", parse_status_network),
        status_mqt=section("StatusMQT", parse_status_mqtt),
        status_tim=section("StatusTIM", parse_status_time),
        status_sns=section("StatusSNS", parse_status_sensor),
        status_sts=section("StatusSTS", parse_status_state),
        status_pth=section("StatusPTH", parse_status_power),
        raw_data=data,
    )
