"""IP and MAC address value types as reported by Tasmota.

Tasmota reports unset addresses as ``"0.0.0.0"`` (IP) or ``""`` (both). These
types map that sentinel text to an absent value and back, so equality and
emptiness checks work on the parsed address instead of on strings.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass

from pytasmota.const import UNSET_IP_ADDRESS


__all__ = ["IPAddr", "MACAddr"]

_MAC_PATTERN = re.compile(r"^[0-9a-f]{2}([:-]?)[0-9a-f]{2}(?:\1[0-9a-f]{2}){4}$", re.IGNORECASE)


@dataclass(frozen=True)
class IPAddr:
    """An optional IP address.

    Attributes:
        address: Parsed address, or None when unset.
    """

    address: ipaddress.IPv4Address | ipaddress.IPv6Address | None = None

    @classmethod
    def parse(cls, text: str | None) -> IPAddr:
        """Parse an address as reported by the device.

        Args:
            text: Address text. Empty, None and "0.0.0.0" yield an unset address.

        Returns:
            IPAddr instance.

        Raises:
            ValueError: If the text is not a valid IP address.
        """
        text = (text or "").strip()
        if not text or text == UNSET_IP_ADDRESS:
            return cls()
        return cls(ipaddress.ip_address(text))

    @property
    def is_unset(self) -> bool:
        """Check if the address is unset."""
        return self.address is None

    def __str__(self) -> str:
        """Return the address text, empty when unset."""
        return "" if self.address is None else str(self.address)

    def __bool__(self) -> bool:
        """Return True when an address is set."""
        return self.address is not None


@dataclass(frozen=True)
class MACAddr:
    """An optional hardware (MAC) address.

    Attributes:
        address: Normalized lower-case colon separated address, or None when unset.
    """

    address: str | None = None

    @classmethod
    def parse(cls, text: str | None) -> MACAddr:
        """Parse a MAC address.

        Accepts colon, dash or no separators in any case.

        Args:
            text: Address text. Empty and None yield an unset address.

        Returns:
            MACAddr instance.

        Raises:
            ValueError: If the text is not a 6-byte MAC address.
        """
        if not text:
            return cls()
        text = text.strip()
        if not _MAC_PATTERN.match(text):
            msg = f"invalid MAC address: {text!r}"
            raise ValueError(msg)
        digits = re.sub(r"[:-]", "", text).lower()
        return cls(":".join(digits[i : i + 2] for i in range(0, 12, 2)))

    @property
    def is_unset(self) -> bool:
        """Check if the address is unset."""
        return self.address is None

    def __str__(self) -> str:
        """Return the address text, empty when unset."""
        return self.address or ""

    def __bool__(self) -> bool:
        """Return True when an address is set."""
        return self.address is not None
