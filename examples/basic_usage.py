"""Basic usage example for pytasmota library."""

import asyncio

from pytasmota import TasmotaClient


async def main() -> None:
    """Demonstrate basic usage of pytasmota."""
    async with TasmotaClient("192.168.1.100") as client:
        info = await client.status.get_device_info()
        print(f"Device: {info.device_name}")
        print(f"  Topic: {info.topic}")
        print(f"  Module: {info.module}")

        firmware = await client.status.get_firmware_info()
        print(f"  Firmware: {firmware.version}")

        network = await client.network.get_config()
        print(f"  IP: {network.ip_address or 'DHCP'}")
        print(f"  Hostname: {network.hostname}")

        # Relay control
        print("\nTurning relay 1 on...")
        resp = await client.power.turn_on(1)
        print(f"Relay 1 is {'on' if resp.is_on(1) else 'off'}")

        print("Toggling relay 1...")
        resp = await client.power.toggle(1)
        print(f"Relay 1 is now {resp.state(1)}")

        uptime = await client.status.get_uptime()
        signal = await client.status.get_wifi_signal()
        print(f"\nUptime: {uptime}")
        print(f"WiFi signal: {signal}%")


if __name__ == "__main__":
    asyncio.run(main())
