"""FastAPI application exposing the hotspot configuration store."""
from __future__ import annotations

import asyncio
import logging
import os
import secrets
from pathlib import Path

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .bands import Band, parse_band
from .bssid import HmacPersistentMacProvider, PersistentMacProvider
from .capabilities import DeviceCapabilities, load_capabilities
from .models import SoftApConfiguration
from .persistence import JsonFileConfigStore, LoggingBackupNotifier
from .store import SoftApConfigStore
from .validation import validation_error
from .version import APP_VERSION

DEFAULT_CONFIG_PATH = "data/softap.json"
MAC_SECRET_BYTES = 32


class SoftApConfigPayload(BaseModel):
    ssid: str
    passphrase: str | None = None
    security_type: str = "WPA2_PSK"
    band: int | str | list[str] = "2ghz"
    channel: int = Field(default=0, ge=0)
    hidden_ssid: bool = False
    bssid: str | None = None
    max_number_of_clients: int = Field(default=0, ge=0)
    client_control_by_user_enabled: bool = False


class LocalOnlyHotspotPayload(BaseModel):
    band: int | str | list[str] = "2ghz"
    bssid: str | None = None


def _load_mac_secret(path: Path) -> bytes:
    """Return the device secret used for persistent BSSIDs, creating it once."""

    if path.exists():
        try:
            secret = bytes.fromhex(path.read_text(encoding="utf-8").strip())
        except (OSError, ValueError) as exc:
            logging.getLogger(__name__).warning("Regenerating unreadable MAC secret: %s", exc)
        else:
            if secret:
                return secret
    secret = secrets.token_bytes(MAC_SECRET_BYTES)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(secret.hex(), encoding="utf-8")
    return secret


def create_app(
    config_path: Path | str | None = None,
    *,
    capabilities: DeviceCapabilities | None = None,
    legacy_path: Path | str | None = None,
    mac_provider: PersistentMacProvider | None = None,
) -> FastAPI:
    app = FastAPI(title="SoftAP configuration", version=APP_VERSION)

    logger = logging.getLogger(__name__)

    if config_path is None:
        config_path = os.getenv("SOFTAP_CONFIG_PATH", DEFAULT_CONFIG_PATH)
    config_path = Path(config_path)
    if capabilities is None:
        capabilities = load_capabilities(os.getenv("SOFTAP_CAPABILITIES_PATH"))
    if legacy_path is None:
        legacy_path = os.getenv("SOFTAP_LEGACY_PATH") or None
    if mac_provider is None and capabilities.mac_randomization_supported:
        secret_path = config_path.with_name("softap_mac_secret")
        mac_provider = HmacPersistentMacProvider(_load_mac_secret(secret_path))

    backend = JsonFileConfigStore(config_path)
    backup_notifier = LoggingBackupNotifier()
    store = SoftApConfigStore(
        capabilities,
        backend,
        backup_notifier,
        legacy_path=legacy_path,
        mac_provider=mac_provider,
    )
    # Every store operation runs on one sequencing context.
    store_lock = asyncio.Lock()

    app.state.softap_store = store
    app.state.softap_backend = backend
    app.state.softap_backup_notifier = backup_notifier

    def _build_configuration(payload: SoftApConfigPayload) -> SoftApConfiguration:
        try:
            config = SoftApConfiguration.from_dict(payload.model_dump())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        reason = validation_error(config)
        if reason is not None:
            raise HTTPException(status_code=400, detail=f"Invalid configuration: {reason}")
        return config

    @app.on_event("startup")
    async def load_persisted_configuration() -> None:
        async with store_lock:
            backend.load()
        logger.info("Hotspot configuration store ready at %s", backend.path)

    @app.get("/api/softap/config")
    async def get_softap_config(include_passphrase: bool = False) -> dict[str, object]:
        async with store_lock:
            config = store.get_configuration()
        return config.to_dict(include_passphrase=include_passphrase)

    @app.put("/api/softap/config")
    async def update_softap_config(payload: SoftApConfigPayload) -> dict[str, object]:
        config = _build_configuration(payload)
        async with store_lock:
            stored = store.set_configuration(config)
        return stored.to_dict(include_passphrase=False)

    @app.post("/api/softap/config/reset")
    async def reset_softap_config() -> dict[str, object]:
        async with store_lock:
            stored = store.set_configuration(None)
        return stored.to_dict(include_passphrase=True)

    @app.post("/api/softap/local-only")
    async def generate_local_only_config(payload: LocalOnlyHotspotPayload) -> dict[str, object]:
        try:
            band = parse_band(payload.band)
            custom = (
                SoftApConfiguration.from_dict({"bssid": payload.bssid})
                if payload.bssid
                else None
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if band == Band.BAND_ANY:
            raise HTTPException(status_code=400, detail="Local-only hotspots need a concrete band")
        async with store_lock:
            config = store.generate_local_only_hotspot_config(band, custom)
            config = store.randomize_bssid_if_unset(config)
        return config.to_dict(include_passphrase=True)

    @app.get("/api/softap/capabilities")
    async def get_capabilities() -> dict[str, object]:
        return store.capabilities.to_dict()

    return app


__all__ = ["create_app"]
