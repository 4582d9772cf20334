"""Constants for pytasmota library."""

from __future__ import annotations


VERSION = "0.1.0"
USER_AGENT = f"pytasmota/{VERSION}"

# HTTP Configuration
COMMAND_ENDPOINT = "/cm"
DEFAULT_TIMEOUT = 20.0  # seconds, full response
DEFAULT_CONNECT_TIMEOUT = 10.0  # seconds

# Backlog
BACKLOG_PREFIX = "Backlog"
BACKLOG_SEPARATOR = "; "
BACKLOG_MAX_COMMANDS = 30

# Parameter Validation
RELAY_MIN = 1
RELAY_MAX = 8
FRIENDLY_NAME_MIN = 1
FRIENDLY_NAME_MAX = 8
POWER_ON_STATE_MIN = 0
POWER_ON_STATE_MAX = 5
LED_STATE_MIN = 0
LED_STATE_MAX = 8
SLEEP_MIN = 0
SLEEP_MAX = 250
TELE_PERIOD_MIN = 10
TELE_PERIOD_MAX = 3600
STATUS_CATEGORY_MIN = 0
STATUS_CATEGORY_MAX = 11
RESTART_REASONS = (1, 99)
RESET_LEVELS = (1, 2, 3, 4, 5, 6, 99)

MQTT_PORT_MIN = 1
MQTT_PORT_MAX = 65535
MQTT_PREFIX_MIN = 1
MQTT_PREFIX_MAX = 3
MQTT_RETRY_MIN = 10
MQTT_RETRY_MAX = 32000

HOSTNAME_MAX_LENGTH = 32
WIFI_SLOT_MIN = 1
WIFI_SLOT_MAX = 2
AP_MODE_MIN = 0
AP_MODE_MAX = 2
WIFI_POWER_MIN = 0.0
WIFI_POWER_MAX = 20.5
WIFI_CONFIG_MIN = 0
WIFI_CONFIG_MAX = 5

# Tasmota treats an all-zero IP address as "not set" (DHCP for IPAddress1)
UNSET_IP_ADDRESS = "0.0.0.0"  # noqa: S104
