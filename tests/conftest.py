"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import copy
import inspect
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock

import pytest
from aiohttp import ClientSession, web

from pytasmota.client import TasmotaClient
from pytasmota.models import ClientConfig


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from aiohttp.test_utils import TestClient


STATUS_0_RESPONSE: dict[str, Any] = {
    "Status": {
        "Module": 1,
        "DeviceName": "Kitchen Plug",
        "FriendlyName": ["Kitchen", "Kettle"],
        "Topic": "tasmota_A1B2C3",
        "ButtonTopic": "0",
        "Power": 1,
        "PowerOnState": 3,
        "LedState": 1,
        "LedMask": "FFFF",
        "SaveData": 1,
        "SaveState": 1,
        "SwitchTopic": "0",
        "SwitchMode": [0, 0, 0, 0, 0, 0, 0, 0],
        "ButtonRetain": 0,
        "SwitchRetain": 0,
        "SensorRetain": 0,
        "PowerRetain": 1,
    },
    "StatusPRM": {
        "Baudrate": 115200,
        "SerialConfig": "8N1",
        "GroupTopic": "tasmotas",
        "OtaUrl": "http://ota.tasmota.com/tasmota/release/tasmota.bin.gz",
        "RestartReason": "Software/System restart",
        "Uptime": "0T02:13:45",
        "StartupUTC": "2024-05-01T10:00:00",
        "Sleep": 50,
        "CfgHolder": 4617,
        "BootCount": 12,
        "BCResetTime": "2024-01-01T00:00:00",
        "SaveCount": 88,
        "SaveAddress": "F9000",
    },
    "StatusFWR": {
        "Version": "13.4.0(tasmota)",
        "BuildDateTime": "2024-02-16T12:00:00",
        "Boot": 31,
        "Core": "2_7_6",
        "SDK": "2.2.2-dev(38a443e)",
        "CpuFrequency": 80,
        "Hardware": "ESP8266EX",
        "CR": "378/699",
    },
    "StatusNET": {
        "Hostname": "kitchen-plug",
        "IPAddress": "192.168.1.100",
        "Gateway": "192.168.1.1",
        "Subnetmask": "255.255.255.0",
        "DNSServer1": "192.168.1.1",
        "DNSServer2": "0.0.0.0",
        "Mac": "A4:CF:12:AB:CD:EF",
        "Webserver": 2,
        "HTTP_API": 1,
        "WifiConfig": 4,
        "WifiPower": 17.0,
    },
    "StatusMQT": {
        "MqttHost": "broker.local",
        "MqttPort": 1883,
        "MqttClientMask": "DVES_%06X",
        "MqttClient": "DVES_ABCDEF",
        "MqttUser": "DVES_USER",
        "MqttCount": 1,
        "MAX_PACKET_SIZE": 1200,
        "KEEPALIVE": 30,
        "SOCKET_TIMEOUT": 4,
    },
    "StatusSTS": {
        "Time": "2024-05-01T12:13:45",
        "Uptime": "0T02:13:45",
        "UptimeSec": 8025,
        "Heap": 25,
        "SleepMode": "Dynamic",
        "Sleep": 50,
        "LoadAvg": 19,
        "MqttCount": 1,
        "POWER": "ON",
        "Wifi": {
            "AP": 1,
            "SSId": "HomeNet",
            "BSSId": "11:22:33:44:55:66",
            "Channel": 6,
            "Mode": "11n",
            "RSSI": 72,
            "Signal": -64,
            "LinkCount": 1,
            "Downtime": "0T00:00:03",
        },
    },
}


class FakeDevice:
    """In-process stand-in for a Tasmota ``/cm`` endpoint.

    Every request's query is recorded. Responses are looked up by the exact
    ``cmnd`` value first, then by its first word. A response is either JSON
    data or a callable returning an aiohttp response.
    """

    def __init__(self) -> None:
        """Initialize with no canned responses."""
        self.queries: list[dict[str, str]] = []
        self.responses: dict[str, Any] = {}
        self.default: Any = {}

    @property
    def commands(self) -> list[str]:
        """Get the ``cmnd`` values received so far, in order."""
        return [query.get("cmnd", "") for query in self.queries]

    def reply(self, command: str, response: Any) -> None:
        """Register a response for a command or command word."""
        self.responses[command] = response

    def app(self) -> web.Application:
        """Build the aiohttp application serving ``/cm``."""
        app = web.Application()
        app.router.add_get("/cm", self._handle)
        return app

    async def _handle(self, request: web.Request) -> web.StreamResponse:
        self.queries.append(dict(request.query))
        command = request.query.get("cmnd", "")
        word = command.split(" ", 1)[0]
        response = self.responses.get(command, self.responses.get(word, self.default))

        if callable(response):
            handler: Callable[[web.Request], web.StreamResponse | Awaitable[web.StreamResponse]] = response
            result = handler(request)
            if inspect.isawaitable(result):
                result = await result
            return result
        return web.json_response(copy.deepcopy(response))


@pytest.fixture
async def mock_session() -> AsyncGenerator[ClientSession]:
    """Create a mock aiohttp ClientSession.

    Yields:
        Mock ClientSession for testing.
    """
    session = AsyncMock(spec=ClientSession)
    session.closed = False

    async def mock_close() -> None:
        session.closed = True

    session.close = mock_close

    yield session

    if not session.closed:
        await session.close()


@pytest.fixture
def offline_client(mock_session: ClientSession) -> TasmotaClient:
    """Create a client whose session must never be used."""
    return TasmotaClient("192.168.1.100", ClientConfig(session=mock_session))


@pytest.fixture
def status_0_response() -> dict[str, Any]:
    """Get a copy of a realistic ``Status 0`` answer."""
    return copy.deepcopy(STATUS_0_RESPONSE)


@pytest.fixture
def fake_device() -> FakeDevice:
    """Create a fake device with the Status 0 payload preloaded."""
    device = FakeDevice()
    device.reply("Status 0", STATUS_0_RESPONSE)
    return device


@pytest.fixture
async def device_server(aiohttp_client: Any, fake_device: FakeDevice) -> TestClient:
    """Serve the fake device on a local test server."""
    return await aiohttp_client(fake_device.app())


@pytest.fixture
async def tasmota(device_server: TestClient) -> AsyncGenerator[TasmotaClient]:
    """Create a TasmotaClient talking to the fake device."""
    config = ClientConfig(timeout=5, session=device_server.session)
    async with TasmotaClient(str(device_server.make_url("")), config) as client:
        yield client
