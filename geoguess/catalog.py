"""
Country catalog construction.

Joins the political reference dataset (one record per country: codes,
names, membership flags) with the boundary dataset (one feature per shape,
keyed by ISO numeric code) into the ordered, immutable list of playable
countries.

Design:
  - Eligibility: UN member, or independent, or whitelisted below.
  - Join key: ISO 3166-1 numeric code with leading zeros dropped.
  - Features whose centroid is not finite are skipped; a later feature for
    the same country may still supply it.
  - First feature wins per country.
  - Aliases come from the reference names plus a hand-maintained table.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from geoguess.geo import is_finite_point, spherical_centroid
from geoguess.models import Country
from geoguess.normalize import strip_diacritics

logger = logging.getLogger(__name__)


# Contested or partially recognized entities that stay playable
EXTRA_COUNTRIES: frozenset[str] = frozenset({"KOS", "UNK", "PSE", "TWN", "VAT"})

# Well-known alternate names not covered by the reference dataset
CUSTOM_ALIASES: dict[str, tuple[str, ...]] = {
    "ARE": ("UAE", "Emirates"),
    "BIH": ("Bosnia",),
    "BRN": ("Brunei Darussalam",),
    "CIV": ("Ivory Coast",),
    "COD": ("DR Congo", "DRC", "Democratic Republic of the Congo", "Zaire"),
    "COG": ("Republic of the Congo", "Congo Republic", "Congo-Brazzaville"),
    "CPV": ("Cabo Verde",),
    "CZE": ("Czech Republic",),
    "GBR": ("UK", "U.K.", "Britain", "Great Britain", "England"),
    "IRN": ("Persia",),
    "KHM": ("Kampuchea",),
    "KOR": ("Republic of Korea",),
    "LKA": ("Ceylon",),
    "MKD": ("Macedonia",),
    "MMR": ("Burma",),
    "NLD": ("Holland",),
    "PRK": ("DPRK", "Democratic People's Republic of Korea"),
    "RUS": ("Russian Federation",),
    "SWZ": ("Swaziland",),
    "THA": ("Siam",),
    "TLS": ("East Timor",),
    "TUR": ("Turkiye",),
    "TZA": ("United Republic of Tanzania",),
    "USA": ("United States", "USA", "US", "U.S.", "America"),
    "VAT": ("Holy See", "Vatican"),
    "VEN": ("Venezuela",),
    "VNM": ("Viet Nam",),
    "ZWE": ("Rhodesia",),
}

MIN_ALT_SPELLING_LENGTH = 3


class Catalog:
    """Ordered, read-only sequence of playable countries with id lookup."""

    def __init__(self, countries: Iterable[Country]):
        self._countries: tuple[Country, ...] = tuple(countries)
        self._by_id: dict[str, Country] = {}
        for country in self._countries:
            if country.id in self._by_id:
                raise ValueError(f"Duplicate country id in catalog: {country.id}")
            self._by_id[country.id] = country

    def __iter__(self) -> Iterator[Country]:
        return iter(self._countries)

    def __len__(self) -> int:
        return len(self._countries)

    def __getitem__(self, index: int) -> Country:
        return self._countries[index]

    def __contains__(self, country_id: object) -> bool:
        return country_id in self._by_id

    def get(self, country_id: str) -> Optional[Country]:
        return self._by_id.get(country_id)

    @property
    def names(self) -> list[str]:
        return [c.name for c in self._countries]


def numeric_key(code) -> Optional[str]:
    """'004' -> '4'; None for missing or non-numeric codes."""
    if code is None:
        return None
    try:
        return str(int(str(code).strip()))
    except ValueError:
        return None


def is_eligible(meta: dict) -> bool:
    return bool(meta.get("unMember") or meta.get("independent") or meta.get("cca3") in EXTRA_COUNTRIES)


def eligible_by_numeric_code(reference_countries: Iterable[dict]) -> dict[str, dict]:
    by_code: dict[str, dict] = {}
    for meta in reference_countries:
        key = numeric_key(meta.get("ccn3"))
        if key is None or not is_eligible(meta):
            continue
        if not meta.get("cca3") or not (meta.get("name") or {}).get("common"):
            logger.debug("Skipping reference row without cca3 or common name: %r", meta)
            continue
        by_code[key] = meta
    return by_code


def assemble_aliases(meta: dict, feature_name: Optional[str]) -> tuple[str, ...]:
    names = meta.get("name") or {}
    common = names.get("common", "")
    aliases: dict[str, None] = {}

    for alias in (common, names.get("official")):
        if alias:
            aliases[alias] = None
    if feature_name and feature_name != common:
        aliases[feature_name] = None
    for alt in meta.get("altSpellings") or []:
        if len(alt) >= MIN_ALT_SPELLING_LENGTH:
            aliases[alt] = None
    for custom in CUSTOM_ALIASES.get(meta.get("cca3", ""), ()):
        aliases[custom] = None

    return tuple(aliases)


def sort_key(name: str) -> tuple[str, str]:
    """Accent- and case-insensitive ordering, ties broken by the raw name."""
    return (strip_diacritics(name).casefold(), name)


def build_catalog(reference_countries: Iterable[dict], boundary_features: Iterable[dict]) -> Catalog:
    eligible = eligible_by_numeric_code(reference_countries)
    seen: set[str] = set()
    countries: list[Country] = []
    stats = {"features": 0, "unmatched": 0, "duplicate": 0, "degenerate": 0}

    for feature in boundary_features:
        stats["features"] += 1
        key = numeric_key(feature.get("id"))
        meta = eligible.get(key) if key is not None else None
        if meta is None:
            stats["unmatched"] += 1
            continue
        if meta["cca3"] in seen:
            stats["duplicate"] += 1
            continue

        centroid = spherical_centroid(feature.get("geometry"))
        if not is_finite_point(centroid):
            stats["degenerate"] += 1
            logger.debug("Skipping %s: no finite centroid", meta["cca3"])
            continue

        seen.add(meta["cca3"])
        properties = feature.get("properties") or {}
        countries.append(Country(
            id=meta["cca3"],
            name=meta["name"]["common"],
            aliases=assemble_aliases(meta, properties.get("name")),
            centroid=centroid,
            geometry=feature.get("geometry") or {},
        ))

    countries.sort(key=lambda c: sort_key(c.name))
    logger.info("Catalog built: %d countries (%s)", len(countries), stats)
    return Catalog(countries)
