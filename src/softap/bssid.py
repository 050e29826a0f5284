"""BSSID selection for the access point interface."""
from __future__ import annotations

import hashlib
import hmac
from abc import ABC, abstractmethod

from .models import MacAddress, SoftApConfiguration

DEFAULT_INTERFACE_IDENTITY = "softap"
DEFAULT_MAC_SALT = "softap_persistent_bssid"


class PersistentMacProvider(ABC):
    """Derives a stable MAC address decorrelated from the factory address."""

    @abstractmethod
    def derive(self, interface_identity: str, salt: str) -> MacAddress:  # pragma: no cover - interface only
        raise NotImplementedError


class HmacPersistentMacProvider(PersistentMacProvider):
    """Keyed derivation: the same identity and salt always map to the same MAC.

    The result has the locally administered bit set and the multicast bit
    cleared so it is usable as a unicast BSSID.
    """

    def __init__(self, secret: bytes) -> None:
        if not secret:
            raise ValueError("MAC derivation secret must not be empty")
        self._secret = bytes(secret)

    def derive(self, interface_identity: str, salt: str) -> MacAddress:
        message = f"{interface_identity}|{salt}".encode("utf-8")
        digest = hmac.new(self._secret, message, hashlib.sha256).digest()
        octets = bytearray(digest[:6])
        octets[0] = (octets[0] & 0xFC) | 0x02
        return MacAddress(bytes(octets))


def resolve_bssid(
    candidate: SoftApConfiguration,
    mac_randomization_supported: bool,
    provider: PersistentMacProvider | None,
    *,
    interface_identity: str = DEFAULT_INTERFACE_IDENTITY,
    salt: str = DEFAULT_MAC_SALT,
) -> MacAddress | None:
    """Pick the BSSID the access point should use.

    An explicit BSSID always wins. Without one, a persistent randomised MAC is
    derived when the device supports it; otherwise ``None`` leaves the factory
    address in place. Provider failures propagate to the caller.
    """

    if candidate.bssid is not None:
        return candidate.bssid
    if not mac_randomization_supported:
        return None
    if provider is None:
        raise ValueError("MAC randomization requires a persistent MAC provider")
    return provider.derive(interface_identity, salt)


def randomize_bssid_if_unset(
    config: SoftApConfiguration,
    mac_randomization_supported: bool,
    provider: PersistentMacProvider | None,
    *,
    interface_identity: str = DEFAULT_INTERFACE_IDENTITY,
    salt: str = DEFAULT_MAC_SALT,
) -> SoftApConfiguration:
    bssid = resolve_bssid(
        config,
        mac_randomization_supported,
        provider,
        interface_identity=interface_identity,
        salt=salt,
    )
    if bssid == config.bssid:
        return config
    return config.replace(bssid=bssid)


__all__ = [
    "DEFAULT_INTERFACE_IDENTITY",
    "DEFAULT_MAC_SALT",
    "HmacPersistentMacProvider",
    "PersistentMacProvider",
    "randomize_bssid_if_unset",
    "resolve_bssid",
]
