import io
import struct
from pathlib import Path

import pytest

from softap.bands import Band
from softap.legacy import (
    AUTH_NONE,
    AUTH_WPA2_PSK,
    AUTH_WPA_PSK,
    LEGACY_BAND_5GHZ,
    LEGACY_BAND_ANY,
    LegacyConfigError,
    LegacyRecord,
    encode_legacy_record,
    migrate_legacy_file,
    parse_legacy_record,
    read_legacy_record,
)
from softap.models import SecurityType


def _write(path: Path, record: LegacyRecord) -> Path:
    path.write_bytes(encode_legacy_record(record))
    return path


def test_encoded_layout_matches_java_data_output() -> None:
    record = LegacyRecord(
        version=3,
        ssid="AP",
        band=LEGACY_BAND_5GHZ,
        channel=40,
        hidden=True,
        auth_type=AUTH_WPA2_PSK,
        passphrase="key",
    )
    expected = (
        struct.pack(">i", 3)
        + b"\x00\x02AP"
        + struct.pack(">ii", 1, 40)
        + b"\x01"
        + struct.pack(">i", 4)
        + b"\x00\x03key"
    )
    assert encode_legacy_record(record) == expected


def test_migrates_psk_record_and_removes_file(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "softap.conf",
        LegacyRecord(
            version=3,
            ssid="ConfiguredAP",
            band=LEGACY_BAND_5GHZ,
            channel=40,
            hidden=True,
            auth_type=AUTH_WPA2_PSK,
            passphrase="randomKey",
        ),
    )
    config = migrate_legacy_file(path)
    assert config is not None
    assert config.ssid == "ConfiguredAP"
    assert config.passphrase == "randomKey"
    assert config.security_type is SecurityType.WPA2_PSK
    assert config.band == Band.BAND_5GHZ
    assert config.channel == 40
    assert config.hidden_ssid
    assert config.bssid is None
    assert not path.exists()


def test_open_record_has_no_passphrase(tmp_path: Path) -> None:
    path = _write(tmp_path / "softap.conf", LegacyRecord(version=3, ssid="Open", auth_type=AUTH_NONE))
    config = migrate_legacy_file(path)
    assert config is not None
    assert config.security_type is SecurityType.OPEN
    assert config.passphrase is None
    assert config.band == Band.BAND_2GHZ


def test_wpa_psk_maps_to_wpa2(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "softap.conf",
        LegacyRecord(version=3, ssid="Old", auth_type=AUTH_WPA_PSK, passphrase="password1"),
    )
    config = migrate_legacy_file(path)
    assert config is not None
    assert config.security_type is SecurityType.WPA2_PSK


def test_any_band_drops_explicit_channel() -> None:
    record = LegacyRecord(version=3, ssid="AP", band=LEGACY_BAND_ANY, channel=6)
    config = record.to_configuration()
    assert config.band == Band.BAND_ANY
    assert config.channel == 0


def test_older_versions_use_defaults_for_missing_fields() -> None:
    version_one = parse_legacy_record(
        io.BytesIO(encode_legacy_record(LegacyRecord(version=1, ssid="V1", band=1, channel=40)))
    )
    assert version_one.band == 0
    assert version_one.channel == 0
    assert not version_one.hidden

    version_two = parse_legacy_record(
        io.BytesIO(
            encode_legacy_record(
                LegacyRecord(version=2, ssid="V2", band=1, channel=36, hidden=True)
            )
        )
    )
    assert version_two.band == 1
    assert version_two.channel == 36
    assert not version_two.hidden


def test_modified_utf8_strings_round_trip() -> None:
    ssid = "Café\x00\U0001F600"
    encoded = encode_legacy_record(LegacyRecord(version=3, ssid=ssid))
    assert b"\xc0\x80" in encoded
    assert parse_legacy_record(io.BytesIO(encoded)).ssid == ssid


@pytest.mark.parametrize("version", [0, 4, -1])
def test_bad_version_rejected(version: int) -> None:
    with pytest.raises(LegacyConfigError):
        parse_legacy_record(io.BytesIO(struct.pack(">i", version)))


def test_truncated_file_rejected(tmp_path: Path) -> None:
    data = encode_legacy_record(
        LegacyRecord(version=3, ssid="AP", auth_type=AUTH_WPA2_PSK, passphrase="randomKey")
    )
    path = tmp_path / "softap.conf"
    path.write_bytes(data[:-4])
    with pytest.raises(LegacyConfigError):
        read_legacy_record(path)
    assert migrate_legacy_file(path) is None
    assert path.exists()


@pytest.mark.parametrize(
    "record",
    [
        LegacyRecord(version=3, ssid="AP", band=7),
        LegacyRecord(version=3, ssid="AP", auth_type=2, passphrase="password1"),
    ],
)
def test_unknown_codes_abandon_migration(tmp_path: Path, record: LegacyRecord) -> None:
    path = _write(tmp_path / "softap.conf", record)
    assert migrate_legacy_file(path) is None
    assert path.exists()


def test_missing_file_is_not_migrated(tmp_path: Path) -> None:
    assert migrate_legacy_file(tmp_path / "absent.conf") is None


def test_unreadable_file_reports_error(tmp_path: Path) -> None:
    with pytest.raises(LegacyConfigError):
        read_legacy_record(tmp_path / "absent.conf")
