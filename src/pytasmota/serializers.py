"""Rendering of typed results as JSON-ready data.

Stateless functions that turn the dataclasses returned by the client into
plain dicts, lists and scalars, e.g. for ``tasmota status --json``.
"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from pytasmota.addresses import IPAddr, MACAddr
from pytasmota.models import PowerResponse, StatusResponse


__all__ = ["serialize", "serialize_power_response", "serialize_status_response", "to_json"]

# Debug copies of the device payload are not rendered
_SKIPPED_FIELDS = frozenset({"raw_data"})


def serialize_power_response(resp: PowerResponse) -> dict[str, str]:
    """Render relay states with the device's own key names.

    Example:
        >>> serialize_power_response(PowerResponse({0: "ON", 2: "OFF"}))
        {'POWER': 'ON', 'POWER2': 'OFF'}
    """
    return {("POWER" if relay == 0 else f"POWER{relay}"): state for relay, state in sorted(resp.states.items())}


def serialize_status_response(resp: StatusResponse) -> dict[str, Any]:
    """Render a status response, keeping only the sections the device returned."""
    return serialize(resp)


def serialize(value: Any) -> Any:
    """Convert a typed result into JSON-ready data.

    Dataclass fields that are None are dropped. Addresses become their text
    form (empty when unset) and enums their value.

    Args:
        value: Any model instance, container or scalar.

    Returns:
        Dicts, lists and scalars only.
    """
    if isinstance(value, (IPAddr, MACAddr)):
        return str(value)
    if isinstance(value, PowerResponse):
        return serialize_power_response(value)
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        result: dict[str, Any] = {}
        for item in fields(value):
            if item.name in _SKIPPED_FIELDS:
                continue
            field_value = getattr(value, item.name)
            if field_value is None:
                continue
            result[item.name] = serialize(field_value)
        return result
    if isinstance(value, dict):
        return {str(key): serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    return value


def to_json(value: Any, *, indent: int | None = 2) -> str:
    """Serialize a typed result to a JSON string."""
    return json.dumps(serialize(value), indent=indent)
