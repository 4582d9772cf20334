"""Tests for JSON rendering of typed results."""

from __future__ import annotations

import json
from typing import Any

from pytasmota.models import DeviceConfig, PowerResponse, PowerState, StatusResponse
from pytasmota.parsers import parse_status_response
from pytasmota.serializers import serialize, serialize_power_response, serialize_status_response, to_json


class TestSerializePowerResponse:
    """Test serialize_power_response function."""

    def test_device_key_names(self) -> None:
        """Test that relays are rendered with the device's key names."""
        resp = PowerResponse({2: "OFF", 0: "ON"})
        assert serialize_power_response(resp) == {"POWER": "ON", "POWER2": "OFF"}


class TestSerializeStatusResponse:
    """Test serialize_status_response function."""

    def test_absent_sections_dropped(self) -> None:
        """Test that sections the device did not return are omitted."""
        resp = parse_status_response({"StatusFWR": {"Version": "13.4.0"}})
        data = serialize_status_response(resp)
        assert set(data) == {"status_fwr"}
        assert data["status_fwr"]["version"] == "13.4.0"

    def test_addresses_rendered_as_text(self, status_0_response: dict[str, Any]) -> None:
        """Test that address values become strings and unset ones empty strings."""
        data = serialize_status_response(parse_status_response(status_0_response))
        assert data["status_net"]["ip_address"] == "192.168.1.100"
        assert data["status_net"]["mac"] == "a4:cf:12:ab:cd:ef"
        assert data["status_net"]["dns_server2"] == ""
        assert data["status_sts"]["power"] == {"POWER": "ON"}

    def test_raw_data_not_rendered(self) -> None:
        """Test that the debug copy of the payload is skipped."""
        resp = StatusResponse(raw_data={"Status": {}})
        assert serialize_status_response(resp) == {}


class TestSerialize:
    """Test the generic serialize and to_json functions."""

    def test_enum_and_none_fields(self) -> None:
        """Test enum values and dropping of None fields."""
        assert serialize(PowerState.ON) == "ON"
        assert serialize(DeviceConfig(device_name="Kitchen")) == {"device_name": "Kitchen", "friendly_names": []}

    def test_to_json_round_trips_through_json(self, status_0_response: dict[str, Any]) -> None:
        """Test that the rendered text is valid JSON."""
        text = to_json(parse_status_response(status_0_response))
        assert json.loads(text)["status"]["device_name"] == "Kitchen Plug"
