"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from pytasmota import ClientConfig, Credentials, TasmotaClient


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


# Load .env file from project root
env_path = Path(__file__).parents[2] / ".env"
load_dotenv(env_path)


@pytest.fixture(scope="session")
def integration_config() -> dict[str, str]:
    """Load integration test configuration from environment.

    Returns:
        Dictionary with the device host and optional credentials.
    """
    host = os.getenv("TASMOTA_TEST_HOST")
    if not host:
        pytest.skip("TASMOTA_TEST_HOST not set; add it to .env to run integration tests")

    return {
        "host": host,
        "username": os.getenv("TASMOTA_TEST_USERNAME", ""),
        "password": os.getenv("TASMOTA_TEST_PASSWORD", ""),
    }


@pytest.fixture(scope="session")
def write_enabled() -> bool:
    """Check whether tests may change device state."""
    return os.getenv("TASMOTA_TEST_WRITE", "").strip() == "1"


@pytest.fixture
async def client(integration_config: dict[str, str]) -> AsyncGenerator[TasmotaClient]:
    """Create a client for the configured device."""
    credentials = None
    if integration_config["username"] or integration_config["password"]:
        credentials = Credentials(integration_config["username"], integration_config["password"])

    config = ClientConfig(timeout=10, credentials=credentials)
    async with TasmotaClient(integration_config["host"], config) as tasmota:
        yield tasmota


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for integration tests."""
    config.addinivalue_line("markers", "integration: Integration tests requiring a real Tasmota device")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")


@pytest.fixture(autouse=True)
async def command_delay(request: pytest.FixtureRequest) -> AsyncGenerator[None]:
    """Pause between integration tests so small devices are not overloaded."""
    yield
    if "integration" in request.keywords:
        await asyncio.sleep(0.5)
