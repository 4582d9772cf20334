"""Tests for relay power control."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from pytasmota.exceptions import InvalidCommandError, ParseError, is_command_error
from pytasmota.models import PowerState


if TYPE_CHECKING:
    from unittest.mock import AsyncMock

    from conftest import FakeDevice

    from pytasmota.client import TasmotaClient


class TestSetPower:
    """Test switching relays."""

    async def test_turn_on_relay(self, tasmota: TasmotaClient, fake_device: FakeDevice) -> None:
        """Test that turning on a relay sends one command and reports the state."""
        fake_device.reply("Power3 ON", {"POWER3": "ON"})

        resp = await tasmota.power.turn_on(3)

        assert resp.is_on(3)
        assert len(fake_device.queries) == 1
        assert "Power3" in fake_device.commands[0]
        assert "ON" in fake_device.commands[0]

    @pytest.mark.parametrize(
        ("method", "command"),
        [
            ("turn_on", "Power2 ON"),
            ("turn_off", "Power2 OFF"),
            ("toggle", "Power2 TOGGLE"),
            ("blink", "Power2 BLINK"),
        ],
    )
    async def test_command_words(
        self,
        tasmota: TasmotaClient,
        fake_device: FakeDevice,
        method: str,
        command: str,
    ) -> None:
        """Test the command sent by each shortcut."""
        await getattr(tasmota.power, method)(2)
        assert fake_device.commands == [command]

    async def test_relay_zero_uses_bare_command(self, tasmota: TasmotaClient, fake_device: FakeDevice) -> None:
        """Test that relay 0 addresses the device without a number."""
        fake_device.reply("Power", {"POWER": "OFF"})

        resp = await tasmota.power.turn_off()

        assert fake_device.commands == ["Power OFF"]
        assert resp.state(0) == "OFF"
        assert resp.state(1) == "OFF"

    async def test_highest_relay(self, tasmota: TasmotaClient, fake_device: FakeDevice) -> None:
        """Test that relay 8 is accepted."""
        fake_device.reply("Power8", {"POWER8": "ON"})

        resp = await tasmota.power.set_power("on", 8)

        assert fake_device.commands == ["Power8 ON"]
        assert resp.is_on(8)

    async def test_string_state(self, tasmota: TasmotaClient, fake_device: FakeDevice) -> None:
        """Test that state names are accepted in any case."""
        await tasmota.power.set_power("toggle", 1)
        await tasmota.power.set_power(PowerState.BLINK, 1)
        assert fake_device.commands == ["Power1 TOGGLE", "Power1 BLINK"]

    @pytest.mark.parametrize("relay", [-1, 9, 100])
    async def test_relay_out_of_range(
        self,
        offline_client: TasmotaClient,
        mock_session: AsyncMock,
        relay: int,
    ) -> None:
        """Test that invalid relays fail before any HTTP call."""
        with pytest.raises(InvalidCommandError, match="relay number must be between 1 and 8") as exc_info:
            await offline_client.power.turn_on(relay)

        assert is_command_error(exc_info.value)
        assert exc_info.value.parameter_name == "relay"
        mock_session.get.assert_not_called()

    @pytest.mark.parametrize("relay", [True, False, 2.5, None, "2"])
    async def test_relay_not_an_integer(
        self,
        offline_client: TasmotaClient,
        mock_session: AsyncMock,
        relay: Any,
    ) -> None:
        """Test that non-integer relays fail before any HTTP call."""
        with pytest.raises(InvalidCommandError, match="relay must be an integer") as exc_info:
            await offline_client.power.turn_on(relay)

        assert exc_info.value.parameter_name == "relay"
        mock_session.get.assert_not_called()

    async def test_invalid_state(self, offline_client: TasmotaClient, mock_session: AsyncMock) -> None:
        """Test that an unknown state is rejected."""
        with pytest.raises(InvalidCommandError, match="invalid power state: DIM"):
            await offline_client.power.set_power("DIM", 1)

        mock_session.get.assert_not_called()


class TestGetPower:
    """Test reading relay state."""

    async def test_get_power(self, tasmota: TasmotaClient, fake_device: FakeDevice) -> None:
        """Test querying a relay without changing it."""
        fake_device.reply("Power2", {"POWER2": "OFF"})

        resp = await tasmota.power.get_power(2)

        assert fake_device.commands == ["Power2"]
        assert resp.states == {2: "OFF"}

    async def test_is_on(self, tasmota: TasmotaClient, fake_device: FakeDevice) -> None:
        """Test the is_on shortcut, including the single-relay fallback."""
        fake_device.reply("Power1", {"POWER": "ON"})
        assert await tasmota.power.is_on(1)

    async def test_non_object_answer(self, tasmota: TasmotaClient, fake_device: FakeDevice) -> None:
        """Test that an unexpected answer shape is a parse error."""
        fake_device.reply("Power1", ["ON"])

        with pytest.raises(ParseError):
            await tasmota.power.get_power(1)


class TestGetCurrentPower:
    """Test reading power consumption."""

    @pytest.mark.parametrize(
        ("reading", "expected"),
        [(45, 45.0), (12.5, 12.5), ("7.25", 7.25), ([10, 5.5], 15.5)],
    )
    async def test_reading(
        self,
        tasmota: TasmotaClient,
        fake_device: FakeDevice,
        reading: Any,
        expected: float,
    ) -> None:
        """Test the accepted shapes of ENERGY.Power."""
        fake_device.reply("Status 10", {"StatusSNS": {"ENERGY": {"Power": reading, "Voltage": 230}}})

        assert await tasmota.power.get_current_power() == expected
        assert fake_device.commands == ["Status 10"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"StatusSNS": {"Time": "2024-05-01T12:00:00"}},
            {"StatusSNS": {"ENERGY": {"Voltage": 230}}},
            {},
        ],
    )
    async def test_missing_reading(self, tasmota: TasmotaClient, fake_device: FakeDevice, payload: Any) -> None:
        """Test that devices without power monitoring give a parse error."""
        fake_device.reply("Status 10", payload)

        with pytest.raises(ParseError, match="missing StatusSNS.ENERGY.Power"):
            await tasmota.power.get_current_power()

    @pytest.mark.parametrize("reading", ["n/a", True, None])
    async def test_bad_reading(self, tasmota: TasmotaClient, fake_device: FakeDevice, reading: Any) -> None:
        """Test that non-numeric readings give a parse error."""
        fake_device.reply("Status 10", {"StatusSNS": {"ENERGY": {"Power": reading}}})

        with pytest.raises(ParseError, match="power value"):
            await tasmota.power.get_current_power()
