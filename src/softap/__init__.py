"""Hotspot (SoftAP) configuration management: validation, migration and defaults."""

from typing import Any

from .bands import Band, normalize_band
from .capabilities import DeviceCapabilities, load_capabilities
from .models import MacAddress, SecurityType, SoftApConfiguration
from .store import SoftApConfigStore
from .validation import validate_configuration
from .version import APP_VERSION


def create_app(*args: Any, **kwargs: Any):
    from .app import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "APP_VERSION",
    "Band",
    "DeviceCapabilities",
    "MacAddress",
    "SecurityType",
    "SoftApConfigStore",
    "SoftApConfiguration",
    "create_app",
    "load_capabilities",
    "normalize_band",
    "validate_configuration",
]
