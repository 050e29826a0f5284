import random

import pytest

from softap.bands import Band
from softap.capabilities import DeviceCapabilities
from softap.defaults import (
    MAX_SSID_PREFIX_BYTES,
    PASSPHRASE_ALPHABET,
    PASSPHRASE_LENGTH,
    RAND_SSID_INT_MAX,
    RAND_SSID_INT_MIN,
    generate_default_configuration,
    generate_local_only_hotspot_config,
    generate_tethering_config,
)
from softap.models import MacAddress, SecurityType, SoftApConfiguration
from softap.validation import validate_configuration

CAPABILITIES = DeviceCapabilities(
    tether_ssid_template="TestAP", local_only_ssid_template="TestShare"
)


def _assert_default(
    config: SoftApConfiguration, prefix: str, band: Band, security: SecurityType
) -> None:
    parts = config.ssid.split("_")
    assert len(parts) == 2
    assert parts[0] == prefix
    assert RAND_SSID_INT_MIN <= int(parts[1]) <= RAND_SSID_INT_MAX
    assert config.band == band
    assert config.channel == 0
    assert not config.hidden_ssid
    assert config.max_number_of_clients == 0
    assert not config.client_control_by_user_enabled
    assert config.security_type is security
    assert len(config.passphrase) == PASSPHRASE_LENGTH
    assert set(config.passphrase) <= set(PASSPHRASE_ALPHABET)
    assert validate_configuration(config)


def test_tethering_default_uses_wpa2_without_sae() -> None:
    config = generate_tethering_config(CAPABILITIES)
    _assert_default(config, "TestAP", Band.BAND_2GHZ, SecurityType.WPA2_PSK)


def test_tethering_default_uses_sae_transition_when_supported() -> None:
    capabilities = DeviceCapabilities(sae_supported=True, tether_ssid_template="TestAP")
    config = generate_tethering_config(capabilities)
    _assert_default(config, "TestAP", Band.BAND_2GHZ, SecurityType.WPA3_SAE_TRANSITION)


@pytest.mark.parametrize("band", [Band.BAND_2GHZ, Band.BAND_5GHZ])
def test_local_only_default_uses_requested_band(band: Band) -> None:
    config = generate_local_only_hotspot_config(CAPABILITIES, band)
    _assert_default(config, "TestShare", band, SecurityType.WPA2_PSK)


def test_local_only_default_with_sae_support() -> None:
    capabilities = DeviceCapabilities(sae_supported=True, local_only_ssid_template="TestShare")
    config = generate_local_only_hotspot_config(capabilities, Band.BAND_5GHZ)
    _assert_default(config, "TestShare", Band.BAND_5GHZ, SecurityType.WPA3_SAE_TRANSITION)


def test_local_only_default_forwards_custom_bssid() -> None:
    custom = SoftApConfiguration(bssid=MacAddress.parse("11:22:33:44:55:66"))
    config = generate_local_only_hotspot_config(CAPABILITIES, Band.BAND_2GHZ, custom)
    assert str(config.bssid) == "11:22:33:44:55:66"


def test_longest_prefix_still_validates() -> None:
    prefix = "A" * MAX_SSID_PREFIX_BYTES
    config = generate_default_configuration(CAPABILITIES, prefix)
    assert len(config.ssid_bytes) == 32
    assert validate_configuration(config)


@pytest.mark.parametrize("prefix", ["A" * 28, "\u667a" * 10])
def test_prefix_too_long_for_ssid_is_rejected(prefix: str) -> None:
    with pytest.raises(ValueError):
        generate_default_configuration(CAPABILITIES, prefix)


def test_generated_band_is_not_normalised() -> None:
    config = generate_default_configuration(CAPABILITIES, "Prefix", Band.BAND_ANY)
    assert config.band == Band.BAND_ANY


def test_defaults_always_validate_across_many_draws() -> None:
    rng = random.Random(1234)
    seen: set[str] = set()
    for _ in range(200):
        config = generate_default_configuration(CAPABILITIES, "TestAP", Band.BAND_2GHZ, rng)
        assert validate_configuration(config)
        seen.update(config.passphrase)
        assert RAND_SSID_INT_MIN <= int(config.ssid.split("_")[1]) <= RAND_SSID_INT_MAX
    assert any(char.isupper() for char in seen)
    assert any(char.islower() for char in seen)
    assert any(char.isdigit() for char in seen)


def test_seeded_source_is_reproducible() -> None:
    first = generate_default_configuration(CAPABILITIES, "TestAP", rng=random.Random(5))
    second = generate_default_configuration(CAPABILITIES, "TestAP", rng=random.Random(5))
    assert first == second
