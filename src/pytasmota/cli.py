"""Command-line client for Tasmota devices.

Connection options default from ``TASMOTA_*`` environment variables, which
may also be placed in a ``.env`` file in the working directory.

Examples:
    tasmota --host 192.168.1.100 power on --relay 2
    tasmota --host plug.local status --category 5 --json
    tasmota backlog "DeviceName Kitchen" "LedState 1"
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import TYPE_CHECKING, Any

from dotenv import find_dotenv, load_dotenv

from pytasmota.client import TasmotaClient
from pytasmota.const import DEFAULT_TIMEOUT, STATUS_CATEGORY_MAX, STATUS_CATEGORY_MIN
from pytasmota.exceptions import TasmotaError
from pytasmota.models import ClientConfig, Credentials
from pytasmota.serializers import to_json


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from pytasmota.models import PowerResponse, StatusResponse

    Handler = Callable[[TasmotaClient, argparse.Namespace], Awaitable[None]]

_LOGGER = logging.getLogger(__name__)

__all__ = ["build_parser", "main", "run"]

ENV_PREFIX = "TASMOTA_"
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _env(name: str, default: str | None = None) -> str | None:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str) -> bool:
    return (_env(name) or "").strip().lower() in _TRUE_VALUES


def _env_timeout() -> float:
    value = _env("TIMEOUT")
    if not value:
        return DEFAULT_TIMEOUT
    try:
        return float(value)
    except ValueError:
        _LOGGER.warning("Ignoring invalid %sTIMEOUT value %r", ENV_PREFIX, value)
        return DEFAULT_TIMEOUT


# -------------------------------------------------------------------------
# Output helpers
# -------------------------------------------------------------------------


def _print_section(title: str, rows: Sequence[tuple[str, Any]]) -> None:
    print(f"{title}:")
    for label, value in rows:
        print(f"  {label}: {value}")


def _print_power(resp: PowerResponse) -> None:
    if not resp.states:
        print("Power: unknown")
        return
    for relay, state in sorted(resp.states.items()):
        label = "Power" if relay == 0 else f"Power{relay}"
        print(f"{label}: {state}")


def _print_status(resp: StatusResponse) -> None:
    printed = False

    def gap() -> None:
        if printed:
            print()

    if resp.status is not None:
        info = resp.status
        rows: list[tuple[str, Any]] = [("Device Name", info.device_name)]
        if info.friendly_names:
            rows.append(("Friendly Name", info.friendly_names[0]))
        rows.extend([("Module", info.module), ("Topic", info.topic)])
        _print_section("Device", rows)
        printed = True

    if resp.status_fwr is not None:
        gap()
        fwr = resp.status_fwr
        _print_section("Firmware", [("Version", fwr.version), ("Core", fwr.core), ("SDK", fwr.sdk)])
        printed = True

    if resp.status_net is not None:
        gap()
        net = resp.status_net
        _print_section(
            "Network",
            [
                ("Hostname", net.hostname),
                ("IP Address", net.ip_address),
                ("Gateway", net.gateway),
                ("MAC", net.mac),
                ("WiFi Power", f"{net.wifi_power:.1f} dBm"),
            ],
        )
        printed = True

    if resp.status_mqt is not None:
        gap()
        mqt = resp.status_mqt
        _print_section("MQTT", [("Host", f"{mqt.mqtt_host}:{mqt.mqtt_port}"), ("Client", mqt.mqtt_client)])
        printed = True

    if resp.status_sts is not None:
        gap()
        sts = resp.status_sts
        rows = [("Uptime", sts.uptime), ("Heap", f"{sts.heap} KB")]
        rows.extend((("Power" if r == 0 else f"Power{r}"), s) for r, s in sorted(sts.power.states.items()))
        if sts.wifi is not None:
            rows.extend([("SSID", sts.wifi.ssid), ("RSSI", sts.wifi.rssi), ("Signal", f"{sts.wifi.signal}%")])
        _print_section("State", rows)
        printed = True

    if not printed:
        print(json.dumps(resp.raw_data, indent=2))


# -------------------------------------------------------------------------
# Command handlers
# -------------------------------------------------------------------------


async def _cmd_status(client: TasmotaClient, args: argparse.Namespace) -> None:
    resp = await client.status.status(args.category)
    if args.json:
        print(to_json(resp))
    else:
        _print_status(resp)


async def _cmd_power(client: TasmotaClient, args: argparse.Namespace) -> None:
    actions = {
        "on": client.power.turn_on,
        "off": client.power.turn_off,
        "toggle": client.power.toggle,
        "get": client.power.get_power,
    }
    resp = await actions[args.action](args.relay)
    _print_power(resp)


async def _cmd_info(client: TasmotaClient, args: argparse.Namespace) -> None:
    device = await client.status.get_device_info()
    firmware = await client.status.get_firmware_info()
    network = await client.status.get_network_info()
    state = await client.status.get_state()

    rows: list[tuple[str, Any]] = [("Device Name", device.device_name)]
    rows.extend((f"Friendly Name {i}", name) for i, name in enumerate(device.friendly_names, start=1) if name)
    rows.extend([("Module", device.module), ("Topic", device.topic)])
    _print_section("Device Information", rows)
    print()
    _print_section(
        "Firmware",
        [
            ("Version", firmware.version),
            ("Build Date", firmware.build_date_time),
            ("Core", firmware.core),
            ("SDK", firmware.sdk),
            ("CPU Frequency", f"{firmware.cpu_frequency} MHz"),
            ("Hardware", firmware.hardware),
        ],
    )
    print()
    _print_section(
        "Network",
        [
            ("Hostname", network.hostname),
            ("IP Address", network.ip_address),
            ("Gateway", network.gateway),
            ("Subnet", network.subnetmask),
            ("DNS", network.dns_server),
            ("MAC Address", network.mac),
            ("WiFi Power", f"{network.wifi_power:.1f} dBm"),
        ],
    )
    print()
    _print_section(
        "State",
        [
            ("Uptime", f"{state.uptime} ({state.uptime_sec} seconds)"),
            ("Heap", f"{state.heap} KB"),
            ("Sleep Mode", state.sleep_mode),
            ("Load Average", f"{state.load_avg}%"),
        ],
    )
    if state.wifi is not None:
        print()
        _print_section(
            "WiFi",
            [
                ("SSID", state.wifi.ssid),
                ("Channel", state.wifi.channel),
                ("RSSI", state.wifi.rssi),
                ("Signal", f"{state.wifi.signal}%"),
            ],
        )


async def _cmd_network(client: TasmotaClient, args: argparse.Namespace) -> None:
    network = client.network
    if args.action == "get":
        cfg = await network.get_config()
        _print_section(
            "Network",
            [
                ("Hostname", cfg.hostname),
                ("IP Address", cfg.ip_address),
                ("Gateway", cfg.gateway),
                ("Subnet", cfg.subnet),
                ("DNS", cfg.dns_server),
                ("DHCP", "yes" if cfg.use_dhcp else "no"),
            ],
        )
    elif args.action == "set-hostname":
        await network.set_hostname(args.hostname)
        print(f"Hostname set to {args.hostname}")
    elif args.action == "set-static-ip":
        await network.set_static_ip(args.ip, args.gateway, args.subnet)
        print(f"Static IP set to {args.ip} (restart required)")
    elif args.action == "set-dhcp":
        await network.enable_dhcp()
        print("DHCP enabled (restart required)")
    elif args.action == "ping":
        reachable = await network.ping(args.target)
        print(f"{args.target}: {'reachable' if reachable else 'unreachable'}")


async def _cmd_mqtt(client: TasmotaClient, args: argparse.Namespace) -> None:
    mqtt = client.mqtt
    if args.action == "get":
        cfg = await mqtt.get_config()
        port = f":{cfg.port}" if cfg.port else ""
        _print_section(
            "MQTT",
            [("Host", f"{cfg.host}{port}"), ("User", cfg.user), ("Client", cfg.client), ("Topic", cfg.topic)],
        )
    elif args.action == "set-host":
        await mqtt.set_host(args.host_name)
        if args.port is not None:
            await mqtt.set_port(args.port)
        print(f"MQTT host set to {args.host_name}")
    elif args.action == "set-user":
        await mqtt.set_user(args.user)
        print(f"MQTT user set to {args.user}")
    elif args.action == "set-password":
        await mqtt.set_password(args.mqtt_password)
        print("MQTT password updated")
    elif args.action == "enable":
        await mqtt.enable(True)
        print("MQTT enabled")
    elif args.action == "disable":
        await mqtt.enable(False)
        print("MQTT disabled")
    elif args.action == "test":
        await mqtt.test_connection()
        print("MQTT connected")


async def _cmd_config(client: TasmotaClient, args: argparse.Namespace) -> None:
    settings = client.settings
    if args.action == "get":
        cfg = await settings.get_config()
        rows: list[tuple[str, Any]] = [("Device Name", cfg.device_name)]
        rows.extend((f"Friendly Name {i}", name) for i, name in enumerate(cfg.friendly_names, start=1) if name)
        rows.extend(
            [
                ("Power On State", cfg.power_on_state),
                ("LED State", cfg.led_state),
                ("Sleep", cfg.sleep),
                ("Power Retain", cfg.power_retain),
            ]
        )
        _print_section("Configuration", rows)
    elif args.action == "set-name":
        await settings.set_device_name(args.name)
        print(f"Device name set to {args.name}")
    elif args.action == "set-led":
        await settings.set_led_state(args.value)
        print(f"LED state set to {args.value}")
    elif args.action == "set-poweronstate":
        await settings.set_power_on_state(args.value)
        print(f"Power on state set to {args.value}")
    elif args.action == "set-sleep":
        await settings.set_sleep(args.value)
        print(f"Sleep set to {args.value} ms")


async def _cmd_command(client: TasmotaClient, args: argparse.Namespace) -> None:
    result = await client.execute_command(" ".join(args.raw))
    print(json.dumps(result, indent=2))


async def _cmd_backlog(client: TasmotaClient, args: argparse.Namespace) -> None:
    result = await client.execute_backlog(args.commands)
    print(json.dumps(result, indent=2))


# -------------------------------------------------------------------------
# Parser
# -------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Defaults are read from the environment when this is called.
    """
    parser = argparse.ArgumentParser(
        prog="tasmota",
        description=f"Control Tasmota devices over HTTP. Uses {ENV_PREFIX}* env vars for defaults.",
    )
    parser.add_argument(
        "--host",
        default=_env("HOST"),
        help=f"Device host or IP address (env: {ENV_PREFIX}HOST)",
    )
    parser.add_argument(
        "--username",
        default=_env("USERNAME", ""),
        help=f"Web UI user name (env: {ENV_PREFIX}USERNAME)",
    )
    parser.add_argument(
        "--password",
        default=_env("PASSWORD", ""),
        help=f"Web UI password (env: {ENV_PREFIX}PASSWORD)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=_env_timeout(),
        help=f"Request timeout in seconds (env: {ENV_PREFIX}TIMEOUT, default {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=_env_flag("DEBUG"),
        help=f"Log requests and responses to stderr (env: {ENV_PREFIX}DEBUG)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser("status", help="Query device status")
    status.add_argument(
        "--category",
        type=int,
        default=0,
        choices=range(STATUS_CATEGORY_MIN, STATUS_CATEGORY_MAX + 1),
        metavar="N",
        help=f"Status category {STATUS_CATEGORY_MIN}-{STATUS_CATEGORY_MAX} (default 0, all)",
    )
    status.add_argument("--json", action="store_true", help="Print the typed status as JSON")
    status.set_defaults(func=_cmd_status)

    power = subparsers.add_parser("power", help="Control relays")
    power.add_argument("action", choices=["on", "off", "toggle", "get"])
    power.add_argument("--relay", type=int, default=0, help="Relay number 1-8 (default 0, all)")
    power.set_defaults(func=_cmd_power)

    info = subparsers.add_parser("info", help="Show device, firmware, network and state information")
    info.set_defaults(func=_cmd_info)

    _add_network_commands(subparsers)
    _add_mqtt_commands(subparsers)
    _add_config_commands(subparsers)

    command = subparsers.add_parser("command", help="Send a raw command and print the JSON answer")
    command.add_argument("raw", nargs="+", help='Command text, e.g. "Status 5"')
    command.set_defaults(func=_cmd_command)

    backlog = subparsers.add_parser("backlog", help="Send up to 30 commands in one Backlog request")
    backlog.add_argument("commands", nargs="+", help='One argument per command, e.g. "Power1 ON"')
    backlog.set_defaults(func=_cmd_backlog)

    return parser


def _add_network_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    network = subparsers.add_parser("network", help="Network configuration")
    network.set_defaults(func=_cmd_network)
    actions = network.add_subparsers(dest="action", required=True)

    actions.add_parser("get", help="Show network configuration")
    hostname = actions.add_parser("set-hostname", help="Set the host name")
    hostname.add_argument("hostname")
    static = actions.add_parser("set-static-ip", help="Configure a static address")
    static.add_argument("ip")
    static.add_argument("gateway")
    static.add_argument("subnet")
    actions.add_parser("set-dhcp", help="Switch to DHCP")
    ping = actions.add_parser("ping", help="Ping a host from the device")
    ping.add_argument("target")


def _add_mqtt_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    mqtt = subparsers.add_parser("mqtt", help="MQTT configuration")
    mqtt.set_defaults(func=_cmd_mqtt)
    actions = mqtt.add_subparsers(dest="action", required=True)

    actions.add_parser("get", help="Show MQTT configuration")
    host = actions.add_parser("set-host", help="Set the broker host")
    host.add_argument("host_name", metavar="host")
    host.add_argument("--port", type=int, help="Broker port 1-65535")
    user = actions.add_parser("set-user", help="Set the broker user name")
    user.add_argument("user")
    password = actions.add_parser("set-password", help="Set the broker password")
    password.add_argument("mqtt_password", metavar="password")
    actions.add_parser("enable", help="Enable MQTT")
    actions.add_parser("disable", help="Disable MQTT")
    actions.add_parser("test", help="Check that the device is connected to its broker")


def _add_config_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    config = subparsers.add_parser("config", help="Device configuration")
    config.set_defaults(func=_cmd_config)
    actions = config.add_subparsers(dest="action", required=True)

    actions.add_parser("get", help="Show device configuration")
    name = actions.add_parser("set-name", help="Set the device name")
    name.add_argument("name")
    led = actions.add_parser("set-led", help="Set the LED state 0-8")
    led.add_argument("value", type=int)
    power_on = actions.add_parser("set-poweronstate", help="Set the power on state 0-5")
    power_on.add_argument("value", type=int)
    sleep = actions.add_parser("set-sleep", help="Set dynamic sleep 0-250 ms")
    sleep.add_argument("value", type=int)


# -------------------------------------------------------------------------
# Entry points
# -------------------------------------------------------------------------


def _client_config(args: argparse.Namespace) -> ClientConfig:
    credentials = None
    if args.username or args.password:
        credentials = Credentials(args.username, args.password)
    return ClientConfig(timeout=args.timeout, credentials=credentials, debug=args.debug)


async def run(args: argparse.Namespace) -> int:
    """Run a parsed command line against the device.

    Returns:
        Process exit code: 0 on success, 1 on any library error.
    """
    handler: Handler = args.func
    try:
        async with TasmotaClient(args.host, _client_config(args)) as client:
            await handler(client, args)
    except TasmotaError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Console script entry point."""
    load_dotenv(find_dotenv(usecwd=True))
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.host:
        parser.error(f"--host is required (env: {ENV_PREFIX}HOST)")

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
