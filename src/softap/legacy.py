"""One-shot migration of the legacy binary hotspot configuration file.

The legacy file is a big-endian record::

    version:int32
    ssid:string
    band:int32            (version >= 2)
    channel:int32         (version >= 2)
    hidden:bool           (version >= 3)
    auth_type:int32
    passphrase:string     (only when auth_type != NONE)

Strings carry an unsigned 16-bit length prefix followed by modified UTF-8
(NUL encoded as ``C0 80`` and supplementary characters as surrogate pairs).
"""
from __future__ import annotations

import io
import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .bands import Band, is_single_band
from .models import SecurityType, SoftApConfiguration

LEGACY_FILE_VERSION = 3

LEGACY_BAND_2GHZ = 0
LEGACY_BAND_5GHZ = 1
LEGACY_BAND_ANY = -1

AUTH_NONE = 0
AUTH_WPA_PSK = 1
AUTH_WPA2_PSK = 4

_LEGACY_BANDS: dict[int, Band] = {
    LEGACY_BAND_2GHZ: Band.BAND_2GHZ,
    LEGACY_BAND_5GHZ: Band.BAND_5GHZ,
    LEGACY_BAND_ANY: Band.BAND_ANY,
}

_LEGACY_AUTH: dict[int, SecurityType] = {
    AUTH_NONE: SecurityType.OPEN,
    AUTH_WPA_PSK: SecurityType.WPA2_PSK,
    AUTH_WPA2_PSK: SecurityType.WPA2_PSK,
}

_INT32 = struct.Struct(">i")
_UINT16 = struct.Struct(">H")


class LegacyConfigError(RuntimeError):
    """Raised when the legacy configuration file cannot be read or parsed."""


@dataclass(frozen=True, slots=True)
class LegacyRecord:
    """Raw contents of a legacy configuration file."""

    version: int
    ssid: str
    band: int = LEGACY_BAND_2GHZ
    channel: int = 0
    hidden: bool = False
    auth_type: int = AUTH_NONE
    passphrase: str | None = None

    def to_configuration(self) -> SoftApConfiguration:
        try:
            band = _LEGACY_BANDS[self.band]
        except KeyError as exc:
            raise LegacyConfigError(f"Unknown legacy band {self.band}") from exc
        try:
            security_type = _LEGACY_AUTH[self.auth_type]
        except KeyError as exc:
            raise LegacyConfigError(f"Unsupported legacy auth type {self.auth_type}") from exc
        if self.channel < 0:
            raise LegacyConfigError(f"Invalid legacy channel {self.channel}")
        # A fixed channel only makes sense together with a single band.
        channel = self.channel if is_single_band(band) else 0
        return SoftApConfiguration(
            ssid=self.ssid,
            security_type=security_type,
            passphrase=self.passphrase if security_type is not SecurityType.OPEN else None,
            band=band,
            channel=channel,
            hidden_ssid=self.hidden,
        )


def _decode_modified_utf8(raw: bytes) -> str:
    text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors="surrogatepass")
    # Re-join surrogate pairs written as two three-byte sequences.
    return text.encode("utf-16-be", errors="surrogatepass").decode("utf-16-be")


def _encode_modified_utf8(text: str) -> bytes:
    units = text.encode("utf-16-be", errors="surrogatepass")
    encoded = bytearray()
    for index in range(0, len(units), 2):
        unit = (units[index] << 8) | units[index + 1]
        if unit == 0:
            encoded += b"\xc0\x80"
        else:
            encoded += chr(unit).encode("utf-8", errors="surrogatepass")
    return bytes(encoded)


class _RecordReader:
    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def _read_exact(self, size: int) -> bytes:
        data = self._stream.read(size)
        if len(data) != size:
            raise LegacyConfigError("Unexpected end of legacy configuration file")
        return data

    def read_int(self) -> int:
        return _INT32.unpack(self._read_exact(_INT32.size))[0]

    def read_bool(self) -> bool:
        return self._read_exact(1) != b"\x00"

    def read_utf(self) -> str:
        (length,) = _UINT16.unpack(self._read_exact(_UINT16.size))
        raw = self._read_exact(length)
        try:
            return _decode_modified_utf8(raw)
        except UnicodeError as exc:
            raise LegacyConfigError("Legacy configuration contains malformed text") from exc


def parse_legacy_record(stream: BinaryIO) -> LegacyRecord:
    reader = _RecordReader(stream)
    version = reader.read_int()
    if version < 1 or version > LEGACY_FILE_VERSION:
        raise LegacyConfigError(f"Bad legacy configuration version {version}")
    ssid = reader.read_utf()
    band = LEGACY_BAND_2GHZ
    channel = 0
    hidden = False
    if version >= 2:
        band = reader.read_int()
        channel = reader.read_int()
    if version >= 3:
        hidden = reader.read_bool()
    auth_type = reader.read_int()
    passphrase = reader.read_utf() if auth_type != AUTH_NONE else None
    return LegacyRecord(
        version=version,
        ssid=ssid,
        band=band,
        channel=channel,
        hidden=hidden,
        auth_type=auth_type,
        passphrase=passphrase,
    )


def read_legacy_record(path: Path | str) -> LegacyRecord:
    try:
        with Path(path).open("rb") as stream:
            return parse_legacy_record(stream)
    except OSError as exc:
        raise LegacyConfigError(f"Unable to read legacy configuration: {exc}") from exc


def encode_legacy_record(record: LegacyRecord) -> bytes:
    """Serialise ``record`` in the legacy layout for its version."""

    buffer = io.BytesIO()

    def write_utf(text: str) -> None:
        encoded = _encode_modified_utf8(text)
        if len(encoded) > 0xFFFF:
            raise ValueError("Legacy strings are limited to 65535 encoded bytes")
        buffer.write(_UINT16.pack(len(encoded)))
        buffer.write(encoded)

    buffer.write(_INT32.pack(record.version))
    write_utf(record.ssid)
    if record.version >= 2:
        buffer.write(_INT32.pack(record.band))
        buffer.write(_INT32.pack(record.channel))
    if record.version >= 3:
        buffer.write(b"\x01" if record.hidden else b"\x00")
    buffer.write(_INT32.pack(record.auth_type))
    if record.auth_type != AUTH_NONE:
        write_utf(record.passphrase or "")
    return buffer.getvalue()


def migrate_legacy_file(path: Path | str) -> SoftApConfiguration | None:
    """Convert the legacy file at ``path`` and remove it.

    Returns ``None`` when the file is missing, unreadable or malformed; a file
    that fails to parse is left on disk.
    """

    logger = logging.getLogger(__name__)
    path = Path(path)
    if not path.exists():
        return None
    try:
        config = read_legacy_record(path).to_configuration()
    except (LegacyConfigError, ValueError) as exc:
        logger.warning("Abandoning legacy hotspot configuration migration: %s", exc)
        return None
    try:
        path.unlink()
    except OSError as exc:
        logger.warning("Unable to remove legacy hotspot configuration %s: %s", path, exc)
    else:
        logger.info("Migrated legacy hotspot configuration from %s", path)
    return config


__all__ = [
    "AUTH_NONE",
    "AUTH_WPA2_PSK",
    "AUTH_WPA_PSK",
    "LEGACY_BAND_2GHZ",
    "LEGACY_BAND_5GHZ",
    "LEGACY_BAND_ANY",
    "LEGACY_FILE_VERSION",
    "LegacyConfigError",
    "LegacyRecord",
    "encode_legacy_record",
    "migrate_legacy_file",
    "parse_legacy_record",
    "read_legacy_record",
]
