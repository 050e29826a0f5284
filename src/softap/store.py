"""Ownership and persistence protocol of the single hotspot configuration."""
from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Callable

from .bands import Band, normalize_band
from .bssid import PersistentMacProvider, randomize_bssid_if_unset
from .capabilities import DeviceCapabilities
from .defaults import generate_local_only_hotspot_config, generate_tethering_config
from .legacy import migrate_legacy_file
from .models import SecurityType, SoftApConfiguration

Task = Callable[[], None]


class ConfigStoreBackend(ABC):
    """Durable storage engine the store hands its data source to."""

    @abstractmethod
    def register_data_source(self, source: "SoftApDataSource") -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abstractmethod
    def request_persist(self, dirty: bool) -> None:  # pragma: no cover - interface only
        raise NotImplementedError


class BackupNotifier(ABC):
    """Receives a signal whenever backed-up state changes."""

    @abstractmethod
    def notify_backup_changed(self) -> None:  # pragma: no cover - interface only
        raise NotImplementedError


class MigrationState(Enum):
    """Progress of the legacy migration's deferred replay write."""

    NONE = "none"
    PENDING_REPLAY = "pending_replay"
    REPLAY_COMPLETE = "replay_complete"


def _run_immediately(task: Task) -> None:
    task()


def normalize_configuration(
    config: SoftApConfiguration, converts_5ghz_to_any: bool
) -> tuple[SoftApConfiguration, bool]:
    """Apply band normalisation to ``config``.

    A converted band drops any explicit channel, which was only valid for the
    original single band.
    """

    result = normalize_band(config.band, converts_5ghz_to_any)
    if not result.changed:
        return config, False
    return config.replace(band=result.band, channel=0), True


class SoftApDataSource:
    """Bridge between the store and the durable storage engine."""

    def __init__(self, store: "SoftApConfigStore") -> None:
        self._store = store

    def serialize(self) -> SoftApConfiguration | None:
        return self._store._serialize()

    def adopt(self, config: SoftApConfiguration | None) -> None:
        self._store._adopt(config)

    def on_replay_ready(self) -> None:
        self._store._on_replay_ready()

    def has_new_data_to_serialize(self) -> bool:
        return self._store._has_new_data_to_serialize


class SoftApConfigStore:
    """Owns the device's single access point configuration.

    All calls are expected on one sequencing context; ``post`` schedules work
    onto that context and defaults to running it inline.
    """

    def __init__(
        self,
        capabilities: DeviceCapabilities,
        config_store: ConfigStoreBackend,
        backup_notifier: BackupNotifier,
        *,
        legacy_path: Path | str | None = None,
        mac_provider: PersistentMacProvider | None = None,
        post: Callable[[Task], None] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._capabilities = capabilities
        self._config_store = config_store
        self._backup_notifier = backup_notifier
        self._mac_provider = mac_provider
        self._post = post or _run_immediately
        self._rng = rng
        self._config: SoftApConfiguration | None = None
        self._has_new_data_to_serialize = False
        self._migration_state = MigrationState.NONE
        self._data_source = SoftApDataSource(self)
        self._config_store.register_data_source(self._data_source)

        if legacy_path is not None and Path(legacy_path).exists():
            migrated = migrate_legacy_file(legacy_path)
            if migrated is not None:
                self.set_configuration(migrated)
                # The new store may not be loaded yet; write again once it is.
                self._migration_state = MigrationState.PENDING_REPLAY

    @property
    def capabilities(self) -> DeviceCapabilities:
        return self._capabilities

    @property
    def data_source(self) -> SoftApDataSource:
        return self._data_source

    @property
    def migration_state(self) -> MigrationState:
        return self._migration_state

    def get_configuration(self) -> SoftApConfiguration:
        logger = logging.getLogger(__name__)
        if self._config is None:
            logger.info("No hotspot configuration stored, generating default")
            self._config = generate_tethering_config(self._capabilities, self._rng)
            self._persist_and_notify_backup()
        normalized, changed = normalize_configuration(
            self._config, self._capabilities.converts_5ghz_to_any
        )
        if changed:
            logger.info(
                "Persisted hotspot band %s converted to %s", self._config.band, normalized.band
            )
            self._config = normalized
            self._persist_and_notify_backup()
        return self._config

    def set_configuration(self, config: SoftApConfiguration | None) -> SoftApConfiguration:
        """Store ``config`` (or a fresh default when ``None``) and persist it.

        The candidate is expected to have passed validation already; only
        unsupported features are reset and the band normalised here.
        """

        if config is None:
            updated = generate_tethering_config(self._capabilities, self._rng)
        else:
            updated = self.reset_to_default_for_unsupported_config(config)
            updated, _ = normalize_configuration(
                updated, self._capabilities.converts_5ghz_to_any
            )
        self._config = updated
        self._persist_and_notify_backup()
        return updated

    def reset_to_default_for_unsupported_config(
        self, config: SoftApConfiguration
    ) -> SoftApConfiguration:
        capabilities = self._capabilities
        changes: dict[str, object] = {}
        if not capabilities.sae_supported and config.security_type.is_sae:
            changes["security_type"] = SecurityType.WPA2_PSK
        if not capabilities.client_force_disconnect_supported:
            if config.max_number_of_clients != 0:
                changes["max_number_of_clients"] = 0
            if config.client_control_by_user_enabled:
                changes["client_control_by_user_enabled"] = False
        if (
            config.band == Band.BAND_2GHZ
            and config.channel
            and config.channel not in capabilities.allowed_2ghz_channels
        ):
            changes["channel"] = 0
        if not changes:
            return config
        logging.getLogger(__name__).info(
            "Reset unsupported hotspot settings to defaults: %s", sorted(changes)
        )
        return config.replace(**changes)

    def generate_local_only_hotspot_config(
        self, band: Band, custom_config: SoftApConfiguration | None = None
    ) -> SoftApConfiguration:
        return generate_local_only_hotspot_config(
            self._capabilities, band, custom_config, self._rng
        )

    def randomize_bssid_if_unset(self, config: SoftApConfiguration) -> SoftApConfiguration:
        return randomize_bssid_if_unset(
            config, self._capabilities.mac_randomization_supported, self._mac_provider
        )

    def _persist_and_notify_backup(self) -> None:
        self._has_new_data_to_serialize = True
        self._config_store.request_persist(True)
        self._backup_notifier.notify_backup_changed()

    def _serialize(self) -> SoftApConfiguration | None:
        self._has_new_data_to_serialize = False
        return self._config

    def _adopt(self, config: SoftApConfiguration | None) -> None:
        self._config = config

    def _on_replay_ready(self) -> None:
        if self._migration_state is not MigrationState.PENDING_REPLAY:
            return
        self._migration_state = MigrationState.REPLAY_COMPLETE
        if self._config is None:
            return
        self._has_new_data_to_serialize = True
        logging.getLogger(__name__).debug("Replaying migrated hotspot configuration write")
        self._post(lambda: self._config_store.request_persist(True))


__all__ = [
    "BackupNotifier",
    "ConfigStoreBackend",
    "MigrationState",
    "SoftApConfigStore",
    "SoftApDataSource",
    "normalize_configuration",
]
