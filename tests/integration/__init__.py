"""Integration tests for pytasmota library.

These tests talk to a real Tasmota device and are marked with
@pytest.mark.integration. They are skipped when no device is configured.

To run integration tests:
    pytest tests/integration -v -m integration

Environment variables (may be placed in .env):
    TASMOTA_TEST_HOST: Device host or IP address
    TASMOTA_TEST_USERNAME: Web UI user name (optional)
    TASMOTA_TEST_PASSWORD: Web UI password (optional)
    TASMOTA_TEST_WRITE: Set to 1 to also run tests that toggle a relay
"""
