"""Example of sharing one aiohttp session between several devices."""

import asyncio

from aiohttp import ClientSession

from pytasmota import ClientConfig, Credentials, TasmotaClient, TasmotaError


HOSTS = ["192.168.1.100", "192.168.1.101", "tasmota-garage.local"]


async def report(host: str, config: ClientConfig) -> None:
    """Print the relay state of one device."""
    async with TasmotaClient(host, config) as client:
        try:
            resp = await client.power.get_power()
        except TasmotaError as err:
            print(f"{host}: {err}")
            return
        print(f"{host}: {resp.state(0) or 'unknown'}")


async def main() -> None:
    """Query several devices concurrently over one session."""
    # The session is owned by this function; the clients never close it
    async with ClientSession() as session:
        config = ClientConfig(
            timeout=5,
            credentials=Credentials("admin", "your_password"),
            session=session,
        )
        await asyncio.gather(*(report(host, config) for host in HOSTS))

        print(f"\nSession still open: {not session.closed}")


if __name__ == "__main__":
    asyncio.run(main())
