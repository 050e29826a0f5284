"""Device capability flags and naming templates for the hotspot."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .models import parse_flag
from .validation import SSID_MAX_LEN

DEFAULT_TETHER_SSID_TEMPLATE = "AndroidAP"
DEFAULT_LOCAL_ONLY_SSID_TEMPLATE = "AndroidShare"
DEFAULT_2GHZ_CHANNELS: tuple[int, ...] = (1, 6, 11)

_MIN_2GHZ_CHANNEL = 1
_MAX_2GHZ_CHANNEL = 14
# Room for the "_NNNN" suffix appended to generated SSIDs.
_MAX_TEMPLATE_BYTES = SSID_MAX_LEN - 5


@dataclass(frozen=True, slots=True)
class DeviceCapabilities:
    """Read-only capability inputs supplied by the platform."""

    converts_5ghz_to_any: bool = False
    sae_supported: bool = False
    mac_randomization_supported: bool = False
    client_force_disconnect_supported: bool = False
    tether_ssid_template: str = DEFAULT_TETHER_SSID_TEMPLATE
    local_only_ssid_template: str = DEFAULT_LOCAL_ONLY_SSID_TEMPLATE
    allowed_2ghz_channels: tuple[int, ...] = DEFAULT_2GHZ_CHANNELS

    def __post_init__(self) -> None:
        for label, template in (
            ("Tethering SSID template", self.tether_ssid_template),
            ("Local-only SSID template", self.local_only_ssid_template),
        ):
            if not isinstance(template, str) or not template.strip():
                raise ValueError(f"{label} must be a non-empty string")
            if len(template.encode("utf-8")) > _MAX_TEMPLATE_BYTES:
                raise ValueError(f"{label} must not exceed {_MAX_TEMPLATE_BYTES} bytes")
        channels = tuple(int(channel) for channel in self.allowed_2ghz_channels)
        for channel in channels:
            if not _MIN_2GHZ_CHANNEL <= channel <= _MAX_2GHZ_CHANNEL:
                raise ValueError(f"2.4 GHz channel {channel} is out of range")
        object.__setattr__(self, "allowed_2ghz_channels", channels)

    def to_dict(self) -> dict[str, object]:
        return {
            "converts_5ghz_to_any": self.converts_5ghz_to_any,
            "sae_supported": self.sae_supported,
            "mac_randomization_supported": self.mac_randomization_supported,
            "client_force_disconnect_supported": self.client_force_disconnect_supported,
            "tether_ssid_template": self.tether_ssid_template,
            "local_only_ssid_template": self.local_only_ssid_template,
            "allowed_2ghz_channels": list(self.allowed_2ghz_channels),
        }


def parse_channel_list(value: Any, *, default: tuple[int, ...]) -> tuple[int, ...]:
    """Parse a comma separated channel list such as ``"1,6,11"``."""

    if value is None:
        return default
    if isinstance(value, str):
        parts = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        raise ValueError("Channel list must be a string or a list")
    channels: list[int] = []
    for part in parts:
        if isinstance(part, bool):
            raise ValueError("Channel values must be integers")
        try:
            channel = int(part)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid channel value: {part!r}") from exc
        if not _MIN_2GHZ_CHANNEL <= channel <= _MAX_2GHZ_CHANNEL:
            raise ValueError(f"2.4 GHz channel {channel} is out of range")
        channels.append(channel)
    return tuple(channels)


def _parse_template(value: Any, *, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError("SSID templates must be non-empty strings")
    return value.strip()


def capabilities_from_mapping(data: Mapping[str, Any]) -> DeviceCapabilities:
    if not isinstance(data, Mapping):
        raise ValueError("Capability resources must be a JSON object")
    return DeviceCapabilities(
        converts_5ghz_to_any=parse_flag(data.get("convert_apband_5ghz_to_any"), default=False),
        sae_supported=parse_flag(data.get("softap_sae_supported"), default=False),
        mac_randomization_supported=parse_flag(
            data.get("ap_mac_randomization_supported"), default=False
        ),
        client_force_disconnect_supported=parse_flag(
            data.get("softap_client_force_disconnect_supported"), default=False
        ),
        tether_ssid_template=_parse_template(
            data.get("tether_ssid_default"), default=DEFAULT_TETHER_SSID_TEMPLATE
        ),
        local_only_ssid_template=_parse_template(
            data.get("localhotspot_ssid_default"), default=DEFAULT_LOCAL_ONLY_SSID_TEMPLATE
        ),
        allowed_2ghz_channels=parse_channel_list(
            data.get("softap_2g_channel_list"), default=DEFAULT_2GHZ_CHANNELS
        ),
    )


def load_capabilities(path: Path | str | None) -> DeviceCapabilities:
    """Load capabilities from a JSON resource file, using defaults when absent."""

    if path is None:
        return DeviceCapabilities()
    path = Path(path)
    if not path.exists():
        return DeviceCapabilities()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ValueError(f"Failed to load capability resources: {exc}") from exc
    return capabilities_from_mapping(payload)


__all__ = [
    "DEFAULT_2GHZ_CHANNELS",
    "DEFAULT_LOCAL_ONLY_SSID_TEMPLATE",
    "DEFAULT_TETHER_SSID_TEMPLATE",
    "DeviceCapabilities",
    "capabilities_from_mapping",
    "load_capabilities",
    "parse_channel_list",
]
