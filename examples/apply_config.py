"""Example of configuring a device with Backlog batches."""

import asyncio
import logging

from pytasmota import (
    ClientConfig,
    DeviceConfig,
    MQTTConfig,
    TasmotaClient,
    TasmotaError,
    is_command_error,
)


async def main() -> None:
    """Configure device, MQTT and telemetry settings."""
    logging.basicConfig(level=logging.DEBUG)

    # debug=True logs every request URL and response body
    async with TasmotaClient("192.168.1.100", ClientConfig(debug=True)) as client:
        # One request: DeviceName, FriendlyName1-2, PowerOnState, LedState
        await client.settings.apply_config(
            DeviceConfig(
                device_name="Kitchen Plug",
                friendly_names=["Kettle", "Toaster"],
                power_on_state=3,
                led_state=1,
            )
        )

        # One request: SetOption3 0 followed by the broker settings
        await client.mqtt.apply_config(
            MQTTConfig(
                host="broker.local",
                port=1883,
                topic="kitchen_plug",
                full_topic="%prefix%/%topic%/",
                tele_period=60,
            )
        )

        # Values are validated before anything is sent
        try:
            await client.settings.set_sleep(500)
        except TasmotaError as err:
            if not is_command_error(err):
                raise
            print(f"Rejected: {err}")

        print(await client.settings.get_config())


if __name__ == "__main__":
    asyncio.run(main())
