import pytest

from softap.bands import (
    Band,
    ConcurrentRadioPolicy,
    RestrictedRadioPolicy,
    format_band,
    normalize_band,
    parse_band,
    select_band_policy,
)

ALL_MASKS = [Band(value) for value in range(1, int(Band.BAND_ANY) + 1)]


def test_restricted_mode_converts_any_to_5ghz() -> None:
    result = normalize_band(Band.BAND_ANY, False)
    assert result.band == Band.BAND_5GHZ
    assert result.changed


def test_restricted_mode_converts_multiband_without_5ghz_to_2ghz() -> None:
    result = normalize_band(Band.BAND_2GHZ | Band.BAND_6GHZ, False)
    assert result.band == Band.BAND_2GHZ
    assert result.changed


def test_restricted_mode_keeps_5ghz() -> None:
    result = normalize_band(Band.BAND_5GHZ, False)
    assert result.band == Band.BAND_5GHZ
    assert not result.changed


def test_restricted_mode_keeps_2ghz() -> None:
    result = normalize_band(Band.BAND_2GHZ, False)
    assert result.band == Band.BAND_2GHZ
    assert not result.changed


def test_concurrent_mode_widens_5ghz() -> None:
    result = normalize_band(Band.BAND_5GHZ, True)
    assert result.band == Band.BAND_2GHZ | Band.BAND_5GHZ
    assert result.changed


def test_concurrent_mode_keeps_any() -> None:
    result = normalize_band(Band.BAND_ANY, True)
    assert result.band == Band.BAND_ANY
    assert not result.changed


@pytest.mark.parametrize("mode", [False, True])
def test_normalisation_is_idempotent(mode: bool) -> None:
    for band in ALL_MASKS:
        once = normalize_band(band, mode)
        twice = normalize_band(once.band, mode)
        assert twice.band == once.band
        assert not twice.changed


def test_restricted_mode_never_leaves_multiband() -> None:
    for band in ALL_MASKS:
        result = normalize_band(band, False)
        assert result.band in (Band.BAND_2GHZ, Band.BAND_5GHZ)


def test_select_band_policy() -> None:
    assert isinstance(select_band_policy(False), RestrictedRadioPolicy)
    assert isinstance(select_band_policy(True), ConcurrentRadioPolicy)


def test_parse_band_accepts_names_and_masks() -> None:
    assert parse_band("5ghz") == Band.BAND_5GHZ
    assert parse_band("2.4GHz|5GHz") == Band.BAND_2GHZ | Band.BAND_5GHZ
    assert parse_band(["2ghz", "6ghz"]) == Band.BAND_2GHZ | Band.BAND_6GHZ
    assert parse_band("any") == Band.BAND_ANY
    assert parse_band(2) == Band.BAND_5GHZ


@pytest.mark.parametrize("value", [0, 8, -1, "", "7ghz", True, 1.5, []])
def test_parse_band_rejects_invalid_values(value: object) -> None:
    with pytest.raises(ValueError):
        parse_band(value)


def test_format_band_lists_individual_bands() -> None:
    assert format_band(Band.BAND_ANY) == ["2ghz", "5ghz", "6ghz"]
    assert format_band(Band.BAND_5GHZ) == ["5ghz"]
