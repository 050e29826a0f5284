"""Value objects describing the persisted access point configuration."""
from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping

from .bands import Band, format_band, is_single_band, parse_band


class SecurityType(IntEnum):
    """Authentication offered by the access point."""

    OPEN = 0
    WPA2_PSK = 1
    WPA3_SAE_TRANSITION = 2
    WPA3_SAE = 3

    @property
    def requires_passphrase(self) -> bool:
        return self is not SecurityType.OPEN

    @property
    def is_sae(self) -> bool:
        return self in (SecurityType.WPA3_SAE, SecurityType.WPA3_SAE_TRANSITION)

    @classmethod
    def parse(cls, value: Any) -> "SecurityType":
        if isinstance(value, SecurityType):
            return value
        if isinstance(value, bool):
            raise ValueError("Security type must be a name or integer")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError as exc:
                raise ValueError(f"Unknown security type: {value}") from exc
        if isinstance(value, str):
            text = value.strip().upper().replace("-", "_")
            if text in cls.__members__:
                return cls[text]
        raise ValueError(f"Unknown security type: {value!r}")


_MAC_PATTERN = re.compile(r"^[0-9a-f]{2}([:-]?)[0-9a-f]{2}(\1[0-9a-f]{2}){4}$")


@dataclass(frozen=True, slots=True)
class MacAddress:
    """Six byte IEEE 802 MAC address."""

    octets: bytes

    def __post_init__(self) -> None:
        octets = bytes(self.octets)
        if len(octets) != 6:
            raise ValueError("MAC address must contain exactly six bytes")
        object.__setattr__(self, "octets", octets)

    @classmethod
    def parse(cls, value: Any) -> "MacAddress":
        if isinstance(value, MacAddress):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(bytes(value))
        if not isinstance(value, str):
            raise ValueError("MAC address must be a string")
        text = value.strip().lower()
        if not _MAC_PATTERN.match(text):
            raise ValueError(f"Invalid MAC address: {value!r}")
        return cls(bytes.fromhex(text.replace(":", "").replace("-", "")))

    @property
    def is_locally_administered(self) -> bool:
        return bool(self.octets[0] & 0x02)

    @property
    def is_multicast(self) -> bool:
        return bool(self.octets[0] & 0x01)

    def __str__(self) -> str:
        return ":".join(f"{octet:02x}" for octet in self.octets)


@dataclass(frozen=True, slots=True)
class SoftApConfiguration:
    """Immutable snapshot of the hotspot configuration.

    Instances are never shared mutably; use :meth:`replace` to derive an
    updated copy. The SSID is kept as text and measured in UTF-8 bytes by the
    validator.
    """

    ssid: str | None = None
    bssid: MacAddress | None = None
    security_type: SecurityType = SecurityType.OPEN
    passphrase: str | None = None
    band: Band = Band.BAND_2GHZ
    channel: int = 0
    hidden_ssid: bool = False
    max_number_of_clients: int = 0
    client_control_by_user_enabled: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "security_type", SecurityType(self.security_type))
        object.__setattr__(self, "band", Band(self.band))
        if self.channel < 0:
            raise ValueError("Channel must not be negative")
        if self.channel and not is_single_band(self.band):
            raise ValueError("An explicit channel requires a single band")
        if self.max_number_of_clients < 0:
            raise ValueError("Maximum number of clients must not be negative")

    @property
    def ssid_bytes(self) -> bytes | None:
        return None if self.ssid is None else self.ssid.encode("utf-8")

    def replace(self, **changes: Any) -> "SoftApConfiguration":
        return dataclasses.replace(self, **changes)

    def to_dict(self, *, include_passphrase: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "ssid": self.ssid,
            "bssid": str(self.bssid) if self.bssid is not None else None,
            "security_type": self.security_type.name,
            "band": int(self.band),
            "bands": format_band(self.band),
            "channel": int(self.channel),
            "hidden_ssid": bool(self.hidden_ssid),
            "max_number_of_clients": int(self.max_number_of_clients),
            "client_control_by_user_enabled": bool(self.client_control_by_user_enabled),
        }
        if include_passphrase:
            payload["passphrase"] = self.passphrase
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SoftApConfiguration":
        """Build a configuration from a persisted or user supplied mapping."""

        if not isinstance(payload, Mapping):
            raise ValueError("Access point configuration must be a mapping")
        ssid = payload.get("ssid")
        if ssid is not None and not isinstance(ssid, str):
            raise ValueError("SSID must be a string")
        passphrase = payload.get("passphrase")
        if passphrase is not None and not isinstance(passphrase, str):
            raise ValueError("Passphrase must be a string")
        bssid_raw = payload.get("bssid")
        bssid = MacAddress.parse(bssid_raw) if bssid_raw not in (None, "") else None
        security_type = SecurityType.parse(payload.get("security_type", SecurityType.OPEN))
        band = parse_band(payload.get("band", Band.BAND_2GHZ))
        return cls(
            ssid=ssid,
            bssid=bssid,
            security_type=security_type,
            passphrase=passphrase,
            band=band,
            channel=_parse_non_negative_int(payload.get("channel", 0), "Channel"),
            hidden_ssid=parse_flag(payload.get("hidden_ssid"), default=False),
            max_number_of_clients=_parse_non_negative_int(
                payload.get("max_number_of_clients", 0), "Maximum number of clients"
            ),
            client_control_by_user_enabled=parse_flag(
                payload.get("client_control_by_user_enabled"), default=False
            ),
        )


def _parse_non_negative_int(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{label} must be an integer")
    # Rejects NaN and the infinities as well as fractional values.
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{label} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"{label} must be an integer") from exc
    if number < 0:
        raise ValueError(f"{label} must not be negative")
    return number


def parse_flag(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if not text:
            return default
        if text in {"true", "1", "yes", "on", "enabled"}:
            return True
        if text in {"false", "0", "no", "off", "disabled"}:
            return False
    raise ValueError("Flags must be boolean values")


__all__ = ["MacAddress", "SecurityType", "SoftApConfiguration", "parse_flag"]
