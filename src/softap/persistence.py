"""JSON file backend and backup notifier used by the hotspot service."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any

from .models import SoftApConfiguration
from .store import BackupNotifier, ConfigStoreBackend, SoftApDataSource


class JsonFileConfigStore(ConfigStoreBackend):
    """Persists the registered data source as a JSON document."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = Lock()
        self._source: SoftApDataSource | None = None
        self._loaded = False
        self.persist_count = 0
        self._ensure_parent()

    def _ensure_parent(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def register_data_source(self, source: SoftApDataSource) -> None:
        self._source = source

    def load(self) -> None:
        """Read the stored document and hand it to the data source.

        A missing document signals readiness through ``on_replay_ready``; a
        malformed one is logged and treated as empty.
        """

        source = self._require_source()
        self._loaded = True
        if not self._path.exists():
            source.on_replay_ready()
            return
        config: SoftApConfiguration | None
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            section = payload.get("softap") if isinstance(payload, dict) else None
            config = SoftApConfiguration.from_dict(section) if section is not None else None
        except (OSError, ValueError) as exc:
            logging.getLogger(__name__).warning(
                "Ignoring unreadable hotspot configuration %s: %s", self._path, exc
            )
            config = None
        if config is None:
            source.on_replay_ready()
            return
        source.adopt(config)

    def request_persist(self, dirty: bool) -> None:
        if not dirty:
            return
        if not self._loaded:
            # Writes before the first load would clobber data not read yet.
            logging.getLogger(__name__).debug("Dropping persist request before store load")
            return
        source = self._require_source()
        config = source.serialize()
        payload: dict[str, Any] = {"softap": config.to_dict() if config is not None else None}
        with self._lock:
            try:
                self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            except OSError as exc:
                logging.getLogger(__name__).warning(
                    "Unable to persist hotspot configuration: %s", exc
                )
                return
            self.persist_count += 1

    def _require_source(self) -> SoftApDataSource:
        if self._source is None:
            raise RuntimeError("No data source registered with the configuration store")
        return self._source


class LoggingBackupNotifier(BackupNotifier):
    """Records backup change notifications and mirrors them to the logger."""

    def __init__(self) -> None:
        self.change_count = 0

    def notify_backup_changed(self) -> None:
        self.change_count += 1
        logging.getLogger(__name__).debug("Hotspot configuration backup data changed")


__all__ = ["JsonFileConfigStore", "LoggingBackupNotifier"]
