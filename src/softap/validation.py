"""Field level validation of access point configurations."""
from __future__ import annotations

import logging

from .models import SecurityType, SoftApConfiguration

SSID_MIN_LEN = 1
SSID_MAX_LEN = 32
PSK_MIN_LEN = 8
PSK_MAX_LEN = 63


def validation_error(config: SoftApConfiguration | None) -> str | None:
    """Return the reason ``config`` is unacceptable, or ``None`` if it is valid.

    Lengths are measured on the UTF-8 encoding, so multi-byte SSIDs reach the
    32 byte ceiling with fewer characters.
    """

    if config is None:
        return "configuration is missing"
    ssid = config.ssid_bytes
    if ssid is None:
        return "SSID is missing"
    if not SSID_MIN_LEN <= len(ssid) <= SSID_MAX_LEN:
        return f"SSID must be between {SSID_MIN_LEN} and {SSID_MAX_LEN} bytes"

    passphrase = config.passphrase
    if config.security_type is SecurityType.OPEN:
        if passphrase is not None:
            return "open networks must not set a passphrase"
        return None
    if config.security_type.requires_passphrase:
        if passphrase is None:
            return f"{config.security_type.name} requires a passphrase"
        if not PSK_MIN_LEN <= len(passphrase.encode("utf-8")) <= PSK_MAX_LEN:
            return f"passphrase must be between {PSK_MIN_LEN} and {PSK_MAX_LEN} bytes"
        return None
    return f"unsupported security type {config.security_type!r}"  # pragma: no cover


def validate_configuration(config: SoftApConfiguration | None) -> bool:
    reason = validation_error(config)
    if reason is not None:
        logging.getLogger(__name__).debug("Rejected access point configuration: %s", reason)
        return False
    return True


__all__ = [
    "PSK_MAX_LEN",
    "PSK_MIN_LEN",
    "SSID_MAX_LEN",
    "SSID_MIN_LEN",
    "validate_configuration",
    "validation_error",
]
