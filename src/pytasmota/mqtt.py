"""MQTT broker configuration for Tasmota devices.

The library never talks MQTT itself; it only changes the device's MQTT
settings through the HTTP command interface.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pytasmota.const import (
    MQTT_PORT_MAX,
    MQTT_PORT_MIN,
    MQTT_PREFIX_MAX,
    MQTT_PREFIX_MIN,
    MQTT_RETRY_MAX,
    MQTT_RETRY_MIN,
    TELE_PERIOD_MAX,
    TELE_PERIOD_MIN,
)
from pytasmota.exceptions import DeviceError, InvalidCommandError
from pytasmota.models import MQTTConfig
from pytasmota.parsers import ensure_object
from pytasmota.status import StatusQueries
from pytasmota.validation import check_range, require_text


if TYPE_CHECKING:
    from pytasmota.api import TasmotaAPI

_LOGGER = logging.getLogger(__name__)

__all__ = ["MQTTSettings"]

# SetOption3 is inverted: 0 enables MQTT, 1 disables it
_ENABLE_MQTT = "SetOption3 0"
_DISABLE_MQTT = "SetOption3 1"


class MQTTSettings:
    """Configure the device's MQTT client."""

    def __init__(self, api: TasmotaAPI) -> None:
        """Initialize MQTT settings.

        Args:
            api: TasmotaAPI instance for HTTP communication.
        """
        self._api = api
        self._status = StatusQueries(api)

    async def get_config(self) -> MQTTConfig:
        """Read the broker settings (Status 6) and the device topic (Status 0)."""
        info = await self._status.get_mqtt_info()
        device = await self._status.get_device_info()
        return MQTTConfig(
            host=info.mqtt_host,
            port=info.mqtt_port or None,
            user=info.mqtt_user,
            client=info.mqtt_client,
            topic=device.topic,
            retain=bool(device.power_retain),
        )

    async def set_host(self, host: str) -> None:
        """Set the broker host name or IP address."""
        require_text("MQTT host", host)
        await self._api.execute_command(f"MqttHost {host}")

    async def set_port(self, port: int) -> None:
        """Set the broker port (1-65535)."""
        check_range("MQTT port", port, MQTT_PORT_MIN, MQTT_PORT_MAX)
        await self._api.execute_command(f"MqttPort {port}")

    async def set_user(self, user: str) -> None:
        """Set the broker user name."""
        await self._api.execute_command(f"MqttUser {user}")

    async def set_password(self, password: str) -> None:
        """Set the broker password."""
        await self._api.execute_command(f"MqttPassword {password}")

    async def set_client(self, client: str) -> None:
        """Set the MQTT client id."""
        require_text("MQTT client name", client)
        await self._api.execute_command(f"MqttClient {client}")

    async def set_topic(self, topic: str) -> None:
        """Set the device topic."""
        require_text("MQTT topic", topic)
        await self._api.execute_command(f"Topic {topic}")

    async def set_full_topic(self, full_topic: str) -> None:
        """Set the full topic template.

        Args:
            full_topic: Template using the %prefix%, %topic%, %hostname% and
                %id% tokens, e.g. "%prefix%/%topic%/".
        """
        require_text("MQTT full topic", full_topic)
        await self._api.execute_command(f"FullTopic {full_topic}")

    async def set_group_topic(self, group_topic: str) -> None:
        """Set the group topic shared by several devices."""
        require_text("MQTT group topic", group_topic)
        await self._api.execute_command(f"GroupTopic {group_topic}")

    async def set_prefix(self, number: int, prefix: str) -> None:
        """Set a topic prefix.

        Args:
            number: 1 command prefix, 2 status prefix, 3 telemetry prefix.
            prefix: New prefix text.
        """
        check_range("prefix number", number, MQTT_PREFIX_MIN, MQTT_PREFIX_MAX)
        require_text("prefix", prefix)
        await self._api.execute_command(f"Prefix{number} {prefix}")

    async def set_retain(self, retain: bool) -> None:
        """Set whether power messages are retained."""
        await self._api.execute_command(f"PowerRetain {1 if retain else 0}")

    async def enable(self, enable: bool = True) -> None:
        """Enable or disable MQTT."""
        await self._api.execute_command(_ENABLE_MQTT if enable else _DISABLE_MQTT)

    async def get_fingerprint(self) -> str:
        """Get the broker TLS fingerprint."""
        data = ensure_object(await self._api.execute_command("MqttFingerprint"), "MqttFingerprint")
        return str(data.get("MqttFingerprint", ""))

    async def set_fingerprint(self, fingerprint: str) -> None:
        """Set the broker TLS fingerprint ("00 00 ..." disables validation)."""
        require_text("MQTT fingerprint", fingerprint)
        await self._api.execute_command(f"MqttFingerprint {fingerprint}")

    async def get_retry(self) -> int:
        """Get the reconnect retry time in seconds."""
        data = ensure_object(await self._api.execute_command("MqttRetry"), "MqttRetry")
        return int(data.get("MqttRetry", 0))

    async def set_retry(self, seconds: int) -> None:
        """Set the reconnect retry time in seconds (10-32000)."""
        check_range("MQTT retry", seconds, MQTT_RETRY_MIN, MQTT_RETRY_MAX)
        await self._api.execute_command(f"MqttRetry {seconds}")

    @staticmethod
    def build_commands(cfg: MQTTConfig) -> list[str]:
        """Validate an MQTTConfig and turn it into commands.

        The list always starts with the command enabling MQTT. Empty text
        fields and unset numbers are skipped.

        Raises:
            InvalidCommandError: If the port or telemetry period is out of range.
        """
        commands = [_ENABLE_MQTT]

        if cfg.host:
            commands.append(f"MqttHost {cfg.host}")
        if cfg.port is not None:
            check_range("MQTT port", cfg.port, MQTT_PORT_MIN, MQTT_PORT_MAX)
            commands.append(f"MqttPort {cfg.port}")
        if cfg.user:
            commands.append(f"MqttUser {cfg.user}")
        if cfg.password:
            commands.append(f"MqttPassword {cfg.password}")
        if cfg.client:
            commands.append(f"MqttClient {cfg.client}")

        topics = (("Topic", cfg.topic), ("FullTopic", cfg.full_topic), ("GroupTopic", cfg.group_topic))
        commands.extend(f"{name} {value}" for name, value in topics if value)

        prefixes = (cfg.prefix1, cfg.prefix2, cfg.prefix3)
        commands.extend(f"Prefix{number} {prefix}" for number, prefix in enumerate(prefixes, start=1) if prefix)

        if cfg.retain:
            commands.append("PowerRetain 1")
        if cfg.tele_period is not None:
            check_range("telemetry period", cfg.tele_period, TELE_PERIOD_MIN, TELE_PERIOD_MAX)
            commands.append(f"TelePeriod {cfg.tele_period}")

        return commands

    async def apply_config(self, cfg: MQTTConfig) -> None:
        """Enable MQTT and apply broker settings in one ``Backlog`` request.

        Raises:
            InvalidCommandError: If a field is invalid or nothing would change
                besides enabling MQTT.
        """
        if cfg is None:
            msg = "MQTT config cannot be None"
            raise InvalidCommandError(msg, parameter_name="cfg")

        commands = self.build_commands(cfg)
        if len(commands) <= 1:
            msg = "no valid MQTT configuration changes to apply"
            raise InvalidCommandError(msg, parameter_name="cfg", value=cfg)

        _LOGGER.debug("Applying %d MQTT settings to %s", len(commands) - 1, self._api.base_url)
        await self._api.execute_backlog(commands)

    async def test_connection(self) -> None:
        """Check that the device has a broker configured and has connected to it.

        Raises:
            DeviceError: If no host is configured or the connection count is zero.
        """
        info = await self._status.get_mqtt_info()
        if not info.mqtt_host:
            msg = "MQTT host not configured"
            raise DeviceError(msg)
        if info.mqtt_count == 0:
            msg = "MQTT not connected"
            raise DeviceError(msg)
