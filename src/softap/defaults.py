"""Secure default configurations for tethering and local-only hotspots."""
from __future__ import annotations

import random
import secrets
import string

from .bands import Band
from .capabilities import DeviceCapabilities
from .models import SecurityType, SoftApConfiguration
from .validation import SSID_MAX_LEN

RAND_SSID_INT_MIN = 1000
RAND_SSID_INT_MAX = 9999
PASSPHRASE_LENGTH = 15
PASSPHRASE_ALPHABET = string.ascii_letters + string.digits
# Leaves room for the "_NNNN" suffix.
MAX_SSID_PREFIX_BYTES = SSID_MAX_LEN - len(f"_{RAND_SSID_INT_MAX}")


def _random_source(rng: random.Random | None) -> random.Random:
    return rng if rng is not None else secrets.SystemRandom()


def generate_passphrase(rng: random.Random | None = None, length: int = PASSPHRASE_LENGTH) -> str:
    source = _random_source(rng)
    return "".join(source.choice(PASSPHRASE_ALPHABET) for _ in range(length))


def generate_ssid(name_prefix: str, rng: random.Random | None = None) -> str:
    if len(name_prefix.encode("utf-8")) > MAX_SSID_PREFIX_BYTES:
        raise ValueError(f"SSID prefix must not exceed {MAX_SSID_PREFIX_BYTES} bytes")
    source = _random_source(rng)
    return f"{name_prefix}_{source.randint(RAND_SSID_INT_MIN, RAND_SSID_INT_MAX)}"


def default_security_type(capabilities: DeviceCapabilities) -> SecurityType:
    if capabilities.sae_supported:
        return SecurityType.WPA3_SAE_TRANSITION
    return SecurityType.WPA2_PSK


def generate_default_configuration(
    capabilities: DeviceCapabilities,
    name_prefix: str,
    band: Band = Band.BAND_2GHZ,
    rng: random.Random | None = None,
) -> SoftApConfiguration:
    """Return a freshly randomised configuration that always passes validation.

    The band is taken as given; normalisation happens on the store's read and
    write paths.
    """

    source = _random_source(rng)
    return SoftApConfiguration(
        ssid=generate_ssid(name_prefix, source),
        security_type=default_security_type(capabilities),
        passphrase=generate_passphrase(source),
        band=band,
        channel=0,
        hidden_ssid=False,
        max_number_of_clients=0,
        client_control_by_user_enabled=False,
    )


def generate_tethering_config(
    capabilities: DeviceCapabilities, rng: random.Random | None = None
) -> SoftApConfiguration:
    return generate_default_configuration(
        capabilities, capabilities.tether_ssid_template, Band.BAND_2GHZ, rng
    )


def generate_local_only_hotspot_config(
    capabilities: DeviceCapabilities,
    band: Band,
    custom_config: SoftApConfiguration | None = None,
    rng: random.Random | None = None,
) -> SoftApConfiguration:
    """Build a local-only hotspot default, keeping a BSSID requested by the caller."""

    config = generate_default_configuration(
        capabilities, capabilities.local_only_ssid_template, band, rng
    )
    if custom_config is not None and custom_config.bssid is not None:
        config = config.replace(bssid=custom_config.bssid)
    return config


__all__ = [
    "MAX_SSID_PREFIX_BYTES",
    "PASSPHRASE_ALPHABET",
    "PASSPHRASE_LENGTH",
    "RAND_SSID_INT_MAX",
    "RAND_SSID_INT_MIN",
    "default_security_type",
    "generate_default_configuration",
    "generate_local_only_hotspot_config",
    "generate_passphrase",
    "generate_ssid",
    "generate_tethering_config",
]
