"""Relay power control for Tasmota devices."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pytasmota.const import RELAY_MAX, RELAY_MIN
from pytasmota.exceptions import InvalidCommandError, ParseError
from pytasmota.models import PowerResponse, PowerState
from pytasmota.parsers import ensure_object, parse_power_response
from pytasmota.validation import require_int


if TYPE_CHECKING:
    from pytasmota.api import TasmotaAPI

__all__ = ["PowerControl"]


def _power_command(relay: int) -> str:
    """Build the command name for a relay (0 addresses all/default)."""
    require_int("relay", relay)
    if relay == 0:
        return "Power"
    if not RELAY_MIN <= relay <= RELAY_MAX:
        msg = f"relay number must be between {RELAY_MIN} and {RELAY_MAX}, got {relay}"
        raise InvalidCommandError(msg, parameter_name="relay", value=relay)
    return f"Power{relay}"


class PowerControl:
    """Control power relays on a Tasmota device.

    Relay 0 sends the bare ``Power`` command (all relays, or the only relay on
    single-relay devices). Relays 1-8 send ``Power1``-``Power8``.

    Example:
        ```python
        async with TasmotaClient("192.168.1.100") as client:
            resp = await client.power.turn_on(2)
            if resp.is_on(2):
                print("relay 2 is on")
        ```
    """

    def __init__(self, api: TasmotaAPI) -> None:
        """Initialize power control.

        Args:
            api: TasmotaAPI instance for HTTP communication.
        """
        self._api = api

    async def set_power(self, state: PowerState | str, relay: int = 0) -> PowerResponse:
        """Set a relay to the given state.

        Args:
            state: ON, OFF, TOGGLE or BLINK.
            relay: Relay number (0 for all/default, 1-8).

        Returns:
            PowerResponse with the reported relay states.

        Raises:
            InvalidCommandError: If the relay or state is invalid.
        """
        command = _power_command(relay)
        try:
            power_state = PowerState(str(state).upper())
        except ValueError as err:
            msg = f"invalid power state: {state}"
            raise InvalidCommandError(msg, parameter_name="state", value=state, cause=err) from err
        return await self._execute(f"{command} {power_state}")

    async def get_power(self, relay: int = 0) -> PowerResponse:
        """Query the state of a relay.

        Args:
            relay: Relay number (0 for all/default, 1-8).

        Returns:
            PowerResponse with the reported relay states.
        """
        return await self._execute(_power_command(relay))

    async def turn_on(self, relay: int = 0) -> PowerResponse:
        """Turn a relay on."""
        return await self.set_power(PowerState.ON, relay)

    async def turn_off(self, relay: int = 0) -> PowerResponse:
        """Turn a relay off."""
        return await self.set_power(PowerState.OFF, relay)

    async def toggle(self, relay: int = 0) -> PowerResponse:
        """Toggle a relay."""
        return await self.set_power(PowerState.TOGGLE, relay)

    async def blink(self, relay: int = 0) -> PowerResponse:
        """Blink a relay."""
        return await self.set_power(PowerState.BLINK, relay)

    async def is_on(self, relay: int = 0) -> bool:
        """Check if a relay is currently on."""
        resp = await self.get_power(relay)
        return resp.is_on(relay)

    async def get_current_power(self) -> float:
        """Get the current power consumption in watts.

        Requires a device with power monitoring. Uses ``Status 10``.

        Returns:
            Active power in watts.

        Raises:
            ParseError: If the device reports no numeric ``ENERGY.Power`` value.
        """
        data = ensure_object(await self._api.execute_command("Status 10"), "Status 10")
        sensor = data.get("StatusSNS") or {}
        energy = sensor.get("ENERGY") if isinstance(sensor, dict) else None
        if not isinstance(energy, dict) or "Power" not in energy:
            msg = "status response missing StatusSNS.ENERGY.Power field"
            raise ParseError(msg)
        return _to_watts(energy["Power"])

    async def _execute(self, command: str) -> PowerResponse:
        data = await self._api.execute_command(command)
        return parse_power_response(ensure_object(data, command))


def _to_watts(value: Any) -> float:
    # Multi-channel meters report one reading per channel
    if isinstance(value, list):
        return float(sum(_to_watts(item) for item in value))
    if isinstance(value, bool):
        msg = "power value has unexpected type"
        raise ParseError(msg)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as err:
            msg = "power value is not a number"
            raise ParseError(msg, err) from err
    msg = "power value has unexpected type"
    raise ParseError(msg)
