"""Radio band selection and capability driven band normalisation."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntFlag


class Band(IntFlag):
    """Bit mask of the radio bands an access point may operate on."""

    BAND_2GHZ = 1
    BAND_5GHZ = 2
    BAND_6GHZ = 4
    BAND_ANY = BAND_2GHZ | BAND_5GHZ | BAND_6GHZ


ALL_BANDS: tuple[Band, ...] = (Band.BAND_2GHZ, Band.BAND_5GHZ, Band.BAND_6GHZ)

_BAND_NAMES: dict[str, Band] = {
    "2ghz": Band.BAND_2GHZ,
    "2.4ghz": Band.BAND_2GHZ,
    "5ghz": Band.BAND_5GHZ,
    "6ghz": Band.BAND_6GHZ,
    "any": Band.BAND_ANY,
}


def band_count(band: Band) -> int:
    """Return how many individual bands are set in ``band``."""

    return sum(1 for item in ALL_BANDS if band & item)


def is_single_band(band: Band) -> bool:
    return band_count(band) == 1


def parse_band(value: object) -> Band:
    """Parse a band from an integer mask, a name or a list of names."""

    if isinstance(value, Band):
        return value
    if isinstance(value, bool):
        raise ValueError("Band must be an integer mask or band name")
    if isinstance(value, int):
        if value <= 0 or value & ~int(Band.BAND_ANY):
            raise ValueError(f"Unsupported band mask: {value}")
        return Band(value)
    if isinstance(value, str):
        text = value.strip().lower().replace(" ", "")
        if not text:
            raise ValueError("Band must not be empty")
        band = Band(0)
        for part in text.replace("+", "|").split("|"):
            if part not in _BAND_NAMES:
                raise ValueError(f"Unknown band: {part}")
            band |= _BAND_NAMES[part]
        return band
    if isinstance(value, (list, tuple, set, frozenset)):
        band = Band(0)
        for item in value:
            band |= parse_band(item)
        if not band:
            raise ValueError("Band list must not be empty")
        return band
    raise ValueError("Unsupported band value")


def format_band(band: Band) -> list[str]:
    names = {Band.BAND_2GHZ: "2ghz", Band.BAND_5GHZ: "5ghz", Band.BAND_6GHZ: "6ghz"}
    return [names[item] for item in ALL_BANDS if band & item]


@dataclass(frozen=True, slots=True)
class BandNormalization:
    """Outcome of a normalisation pass."""

    band: Band
    changed: bool


class BandPolicy(ABC):
    """Rule table mapping a requested band to one the radio can honour."""

    name: str = "base"

    @abstractmethod
    def convert(self, band: Band) -> Band:  # pragma: no cover - interface only
        raise NotImplementedError

    def normalize(self, band: Band) -> BandNormalization:
        band = Band(band)
        converted = self.convert(band)
        return BandNormalization(converted, converted != band)


class RestrictedRadioPolicy(BandPolicy):
    """Devices that can only run one band at a time.

    A 5 GHz request is kept. Anything else that includes 5 GHz collapses to
    5 GHz; everything without 5 GHz falls back to 2.4 GHz.
    """

    name = "restricted"

    def convert(self, band: Band) -> Band:
        if band == Band.BAND_5GHZ:
            return band
        if band & Band.BAND_5GHZ:
            return Band.BAND_5GHZ
        return Band.BAND_2GHZ


class ConcurrentRadioPolicy(BandPolicy):
    """Devices that run 2.4 GHz and 5 GHz together widen 5 GHz only requests."""

    name = "concurrent"

    def convert(self, band: Band) -> Band:
        if band == Band.BAND_5GHZ:
            return Band.BAND_2GHZ | Band.BAND_5GHZ
        return band


RESTRICTED_RADIO_POLICY = RestrictedRadioPolicy()
CONCURRENT_RADIO_POLICY = ConcurrentRadioPolicy()


def select_band_policy(converts_5ghz_to_any: bool) -> BandPolicy:
    return CONCURRENT_RADIO_POLICY if converts_5ghz_to_any else RESTRICTED_RADIO_POLICY


def normalize_band(band: Band, converts_5ghz_to_any: bool) -> BandNormalization:
    """Normalise ``band`` for the radio mode selected by ``converts_5ghz_to_any``."""

    result = select_band_policy(converts_5ghz_to_any).normalize(band)
    if result.changed:
        logging.getLogger(__name__).debug(
            "Converted access point band %s to %s", format_band(Band(band)), format_band(result.band)
        )
    return result


__all__ = [
    "ALL_BANDS",
    "Band",
    "BandNormalization",
    "BandPolicy",
    "CONCURRENT_RADIO_POLICY",
    "ConcurrentRadioPolicy",
    "RESTRICTED_RADIO_POLICY",
    "RestrictedRadioPolicy",
    "band_count",
    "format_band",
    "is_single_band",
    "normalize_band",
    "parse_band",
    "select_band_policy",
]
