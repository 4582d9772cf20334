"""Device configuration for Tasmota devices.

Single settings are sent as one command each. ``apply_config`` validates a
whole ``DeviceConfig`` up front and sends it as one ``Backlog`` request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pytasmota.const import (
    FRIENDLY_NAME_MAX,
    FRIENDLY_NAME_MIN,
    LED_STATE_MAX,
    LED_STATE_MIN,
    POWER_ON_STATE_MAX,
    POWER_ON_STATE_MIN,
    RESET_LEVELS,
    RESTART_REASONS,
    SLEEP_MAX,
    SLEEP_MIN,
    TELE_PERIOD_MAX,
    TELE_PERIOD_MIN,
)
from pytasmota.exceptions import InvalidCommandError, ParseError
from pytasmota.models import DeviceConfig, OptionValue
from pytasmota.parsers import ensure_object
from pytasmota.status import StatusQueries
from pytasmota.validation import check_range, require_int, require_text


if TYPE_CHECKING:
    from pytasmota.api import TasmotaAPI

_LOGGER = logging.getLogger(__name__)

__all__ = ["DeviceSettings"]


def _flag(value: bool) -> int:
    return 1 if value else 0


class DeviceSettings:
    """Read and change general device settings.

    Example:
        ```python
        async with TasmotaClient("192.168.1.100") as client:
            await client.settings.apply_config(
                DeviceConfig(device_name="Kitchen", power_on_state=3, led_state=1)
            )
        ```
    """

    def __init__(self, api: TasmotaAPI) -> None:
        """Initialize device settings.

        Args:
            api: TasmotaAPI instance for HTTP communication.
        """
        self._api = api
        self._status = StatusQueries(api)

    async def _send(self, command: str) -> Any:
        return await self._api.execute_command(command)

    async def get_config(self) -> DeviceConfig:
        """Read the current device configuration.

        Uses a single ``Status 0`` request; ``Sleep`` comes from StatusPRM.
        """
        resp = await self._status.status(0)
        if resp.status is None:
            msg = "status response missing Status field"
            raise ParseError(msg)
        info = resp.status

        return DeviceConfig(
            device_name=info.device_name,
            friendly_names=list(info.friendly_names),
            power_on_state=info.power_on_state,
            led_state=info.led_state,
            sleep=resp.status_prm.sleep if resp.status_prm is not None else None,
            button_retain=bool(info.button_retain),
            switch_retain=bool(info.switch_retain),
            sensor_retain=bool(info.sensor_retain),
            power_retain=bool(info.power_retain),
        )

    async def set_device_name(self, name: str) -> None:
        """Set the device name."""
        require_text("device name", name)
        await self._send(f"DeviceName {name}")

    async def set_friendly_name(self, name: str, index: int = 1) -> None:
        """Set a friendly name (index 1-8)."""
        check_range("friendly name index", index, FRIENDLY_NAME_MIN, FRIENDLY_NAME_MAX)
        require_text("friendly name", name)
        await self._send(f"FriendlyName{index} {name}")

    async def set_power_on_state(self, state: int) -> None:
        """Set the relay state applied after power up.

        Values:
            0: keep relay off, 1: turn relay on, 2: toggle relay,
            3: restore last saved state (default), 4: turn on and lock relay
            control, 5: turn on after a PulseTime period.
        """
        check_range("power on state", state, POWER_ON_STATE_MIN, POWER_ON_STATE_MAX)
        await self._send(f"PowerOnState {state}")

    async def set_led_state(self, state: int) -> None:
        """Set the LED behaviour.

        Values:
            0: LED disabled, 1: show power state (default),
            2-7: blink on MQTT subscriptions/publications, combined with power
            state on odd values, 8: LED on while Wi-Fi and MQTT are connected.
        """
        check_range("LED state", state, LED_STATE_MIN, LED_STATE_MAX)
        await self._send(f"LedState {state}")

    async def set_sleep(self, duration: int) -> None:
        """Set dynamic sleep in milliseconds (0 disables, 1-250)."""
        check_range("sleep duration", duration, SLEEP_MIN, SLEEP_MAX)
        await self._send(f"Sleep {duration}")

    async def set_button_retain(self, retain: bool) -> None:
        """Set the MQTT retain flag for button messages."""
        await self._send(f"ButtonRetain {_flag(retain)}")

    async def set_switch_retain(self, retain: bool) -> None:
        """Set the MQTT retain flag for switch messages."""
        await self._send(f"SwitchRetain {_flag(retain)}")

    async def set_sensor_retain(self, retain: bool) -> None:
        """Set the MQTT retain flag for sensor messages."""
        await self._send(f"SensorRetain {_flag(retain)}")

    async def set_power_retain(self, retain: bool) -> None:
        """Set the MQTT retain flag for power messages."""
        await self._send(f"PowerRetain {_flag(retain)}")

    async def get_tele_period(self) -> int:
        """Get the telemetry period in seconds."""
        data = ensure_object(await self._send("TelePeriod"), "TelePeriod")
        return int(data.get("TelePeriod", 0))

    async def set_tele_period(self, seconds: int) -> None:
        """Set the telemetry period in seconds (10-3600)."""
        check_range("telemetry period", seconds, TELE_PERIOD_MIN, TELE_PERIOD_MAX)
        await self._send(f"TelePeriod {seconds}")

    async def set_template(self, template: str) -> None:
        """Apply a device template.

        Args:
            template: Template JSON text defining GPIO assignments, sent as is.
        """
        require_text("template", template)
        await self._send(f"Template {template}")

    async def set_option(self, option: int, value: OptionValue | bool | int | str) -> None:
        """Set a ``SetOption<N>`` flag.

        Args:
            option: Option number (>= 0).
            value: Boolean (sent as 0/1), integer or text.

        Raises:
            InvalidCommandError: If the option is negative or the value has an
                unsupported type.
        """
        require_int("option number", option)
        if option < 0:
            msg = f"option number cannot be negative, got {option}"
            raise InvalidCommandError(msg, parameter_name="option", value=option)
        option_value = OptionValue.of(value)
        await self._send(f"SetOption{option} {option_value.format()}")

    async def get_module(self) -> int:
        """Get the configured module type."""
        info = await self._status.get_device_info()
        return info.module

    async def restart(self, reason: int = 1) -> None:
        """Restart the device.

        Args:
            reason: 1 for a normal restart, 99 to force a restart.
        """
        require_int("restart reason", reason)
        if reason not in RESTART_REASONS:
            msg = f"restart reason must be 1 (normal) or 99 (force), got {reason}"
            raise InvalidCommandError(msg, parameter_name="reason", value=reason)
        _LOGGER.info("Restarting %s (reason %d)", self._api.base_url, reason)
        await self._send(f"Restart {reason}")

    async def reset(self, level: int) -> None:
        """Reset device settings to defaults.

        Args:
            level: 1 relay settings, 2 all except Wi-Fi, 3 all except Wi-Fi and
                MQTT, 4 Wi-Fi settings, 5 erase flash keeping Wi-Fi, 6 erase
                flash, 99 reset boot count and restart.
        """
        require_int("reset level", level)
        if level not in RESET_LEVELS:
            msg = f"invalid reset level: {level}"
            raise InvalidCommandError(msg, parameter_name="level", value=level)
        _LOGGER.info("Resetting %s (level %d)", self._api.base_url, level)
        await self._send(f"Reset {level}")

    @staticmethod
    def build_commands(cfg: DeviceConfig) -> list[str]:
        """Validate a DeviceConfig and turn it into commands.

        Commands are produced in a fixed order: DeviceName, FriendlyName1-8,
        PowerOnState, LedState, Sleep, then the retain flags.

        Raises:
            InvalidCommandError: If any present field is out of range.
        """
        commands: list[str] = []

        if cfg.device_name:
            commands.append(f"DeviceName {cfg.device_name}")

        if len(cfg.friendly_names) > FRIENDLY_NAME_MAX:
            msg = f"at most {FRIENDLY_NAME_MAX} friendly names are supported, got {len(cfg.friendly_names)}"
            raise InvalidCommandError(msg, parameter_name="friendly_names", value=cfg.friendly_names)
        for index, name in enumerate(cfg.friendly_names, start=1):
            if name:
                commands.append(f"FriendlyName{index} {name}")

        if cfg.power_on_state is not None:
            check_range("power on state", cfg.power_on_state, POWER_ON_STATE_MIN, POWER_ON_STATE_MAX)
            commands.append(f"PowerOnState {cfg.power_on_state}")

        if cfg.led_state is not None:
            check_range("LED state", cfg.led_state, LED_STATE_MIN, LED_STATE_MAX)
            commands.append(f"LedState {cfg.led_state}")

        if cfg.sleep is not None:
            check_range("sleep duration", cfg.sleep, SLEEP_MIN, SLEEP_MAX)
            commands.append(f"Sleep {cfg.sleep}")

        retain_flags = (
            ("ButtonRetain", cfg.button_retain),
            ("SwitchRetain", cfg.switch_retain),
            ("SensorRetain", cfg.sensor_retain),
            ("PowerRetain", cfg.power_retain),
        )
        commands.extend(f"{name} {_flag(value)}" for name, value in retain_flags if value is not None)

        return commands

    async def apply_config(self, cfg: DeviceConfig) -> None:
        """Apply several settings in one ``Backlog`` request.

        Every field is validated before anything is sent.

        Raises:
            InvalidCommandError: If a field is invalid or nothing would change.
        """
        if cfg is None:
            msg = "config cannot be None"
            raise InvalidCommandError(msg, parameter_name="cfg")

        commands = self.build_commands(cfg)
        if not commands:
            msg = "no valid configuration changes to apply"
            raise InvalidCommandError(msg, parameter_name="cfg", value=cfg)

        _LOGGER.debug("Applying %d settings to %s", len(commands), self._api.base_url)
        await self._api.execute_backlog(commands)
