"""Tests for response parsers."""

from __future__ import annotations

from typing import Any

import pytest

from pytasmota.addresses import IPAddr, MACAddr
from pytasmota.exceptions import ParseError
from pytasmota.parsers import (
    ensure_object,
    parse_energy,
    parse_power_response,
    parse_status_network,
    parse_status_power,
    parse_status_response,
    parse_status_sensor,
    parse_status_state,
)


class TestParsePowerResponse:
    """Test parse_power_response function."""

    def test_bare_power_key(self) -> None:
        """Test that POWER maps to relay 0."""
        assert parse_power_response({"POWER": "ON"}).states == {0: "ON"}

    def test_numbered_keys(self) -> None:
        """Test that POWER1-POWER8 map to their relay numbers."""
        resp = parse_power_response({"POWER1": "ON", "POWER3": "OFF", "POWER8": "ON"})
        assert resp.states == {1: "ON", 3: "OFF", 8: "ON"}

    def test_ignores_other_keys(self) -> None:
        """Test that unrelated and out-of-range keys are skipped."""
        resp = parse_power_response({"POWER9": "ON", "PowerOnState": 3, "Time": "x", "POWER2": 1})
        assert resp.states == {}


class TestParseStatusResponse:
    """Test parse_status_response function."""

    def test_full_status(self, status_0_response: dict[str, Any]) -> None:
        """Test parsing every section of a Status 0 answer."""
        resp = parse_status_response(status_0_response)

        assert resp.status is not None
        assert resp.status.device_name == "Kitchen Plug"
        assert resp.status.friendly_names == ["Kitchen", "Kettle"]
        assert resp.status.power_on_state == 3
        assert resp.status.power_retain == 1

        assert resp.status_prm is not None
        assert resp.status_prm.sleep == 50
        assert resp.status_prm.group_topic == "tasmotas"

        assert resp.status_fwr is not None
        assert resp.status_fwr.version == "13.4.0(tasmota)"
        assert resp.status_fwr.cpu_frequency == 80

        assert resp.status_net is not None
        assert resp.status_net.ip_address == IPAddr.parse("192.168.1.100")
        assert resp.status_net.mac == MACAddr.parse("a4:cf:12:ab:cd:ef")
        assert resp.status_net.wifi_power == 17.0

        assert resp.status_mqt is not None
        assert resp.status_mqt.mqtt_host == "broker.local"
        assert resp.status_mqt.mqtt_count == 1

        assert resp.status_sts is not None
        assert resp.status_sts.power.is_on(0)
        assert resp.status_sts.wifi is not None
        assert resp.status_sts.wifi.rssi == 72

        assert resp.status_log is None
        assert resp.status_sns is None
        assert resp.raw_data is status_0_response

    def test_single_section(self) -> None:
        """Test that categories other than 0 fill only their section."""
        resp = parse_status_response({"StatusFWR": {"Version": "14.1.0"}})
        assert resp.status is None
        assert resp.status_fwr is not None
        assert resp.status_fwr.version == "14.1.0"

    def test_single_friendly_name_string(self) -> None:
        """Test that a plain string FriendlyName becomes a one-item list."""
        resp = parse_status_response({"Status": {"FriendlyName": "Lamp"}})
        assert resp.status is not None
        assert resp.status.friendly_names == ["Lamp"]

    @pytest.mark.parametrize(("reported", "expected"), [(0, [0]), ("2", [2]), ([1, "x", 3], [1, 0, 3]), (None, [])])
    def test_switch_mode_shapes(self, reported: Any, expected: list[int]) -> None:
        """Test that a scalar SwitchMode becomes a one-item list."""
        resp = parse_status_response({"Status": {"SwitchMode": reported}})
        assert resp.status is not None
        assert resp.status.switch_mode == expected

    def test_not_an_object(self) -> None:
        """Test that a non-object payload is a parse error."""
        with pytest.raises(ParseError, match="expected JSON object"):
            parse_status_response(["Status"])  # type: ignore[arg-type]

    def test_section_not_an_object(self) -> None:
        """Test that a section with the wrong shape is a parse error."""
        with pytest.raises(ParseError, match="expected object for StatusNET"):
            parse_status_response({"StatusNET": "offline"})


class TestParseStatusNetwork:
    """Test parse_status_network function."""

    def test_unset_addresses(self) -> None:
        """Test that zero addresses become unset values."""
        net = parse_status_network({"IPAddress": "0.0.0.0", "Gateway": "", "Mac": ""})
        assert net.ip_address.is_unset
        assert net.gateway.is_unset
        assert net.mac.is_unset

    def test_legacy_dns_key(self) -> None:
        """Test that older firmware's DNSServer key is read."""
        net = parse_status_network({"DNSServer": "8.8.8.8"})
        assert str(net.dns_server) == "8.8.8.8"

    def test_ethernet_block(self) -> None:
        """Test that an Ethernet block on ESP32 boards is parsed."""
        net = parse_status_network(
            {"Ethernet": {"Hostname": "eth-plug", "IPAddress": "10.0.0.5", "Mac": "00:11:22:33:44:55"}}
        )
        assert net.ethernet is not None
        assert net.ethernet.hostname == "eth-plug"
        assert str(net.ethernet.ip_address) == "10.0.0.5"

    def test_invalid_address(self) -> None:
        """Test that a malformed address is a parse error."""
        with pytest.raises(ParseError, match="invalid IP address"):
            parse_status_network({"IPAddress": "not-an-ip"})

    def test_invalid_mac(self) -> None:
        """Test that a malformed MAC is a parse error."""
        with pytest.raises(ParseError, match="invalid MAC address"):
            parse_status_network({"Mac": "12:34"})


class TestParseSensors:
    """Test sensor, energy and state parsing."""

    def test_energy(self) -> None:
        """Test parsing an ENERGY block."""
        energy = parse_energy({"Power": 45, "Voltage": 230, "Current": 0.196, "Today": 0.31})
        assert energy.power == 45.0
        assert energy.voltage == 230.0
        assert energy.current == pytest.approx(0.196)

    def test_energy_multi_channel(self) -> None:
        """Test that multi-channel readings use the first channel."""
        energy = parse_energy({"Power": [12, 30]})
        assert energy.power == 12.0

    def test_sensor_keeps_raw_mapping(self) -> None:
        """Test that untyped sensors stay available."""
        data = {"Time": "2024-05-01T12:00:00", "Switch1": "ON", "AM2301": {"Temperature": 21.5}}
        sensor = parse_status_sensor(data)
        assert sensor.switches == ["ON"]
        assert sensor.energy is None
        assert sensor.raw["AM2301"] == {"Temperature": 21.5}

    def test_state_without_wifi(self) -> None:
        """Test that StatusSTS without a Wifi block has no WifiInfo."""
        state = parse_status_state({"UptimeSec": 10, "POWER1": "OFF"})
        assert state.wifi is None
        assert state.uptime_sec == 10
        assert state.power.states == {1: "OFF"}

    def test_power_thresholds(self) -> None:
        """Test parsing StatusPTH with a scalar PowerDelta."""
        thresholds = parse_status_power({"PowerDelta": 0, "PowerLow": 0, "PowerHigh": 2000, "VoltageLow": 180})
        assert thresholds.power_delta == [0]
        assert thresholds.power_high == 2000
        assert thresholds.voltage_low == 180


class TestEnsureObject:
    """Test ensure_object function."""

    def test_object(self) -> None:
        """Test that objects pass through."""
        data = {"POWER": "ON"}
        assert ensure_object(data, "Power") is data

    @pytest.mark.parametrize("data", [[1, 2], "ON", 5, None])
    def test_other_values(self, data: object) -> None:
        """Test that other JSON values are parse errors."""
        with pytest.raises(ParseError, match="'Power'"):
            ensure_object(data, "Power")
