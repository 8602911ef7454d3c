"""Shared fixtures: tiny synthetic catalogs, no network or files."""

from __future__ import annotations

import pytest

from geoguess.aliases import AliasIndex
from geoguess.catalog import Catalog
from geoguess.models import Country


def square(lon: float, lat: float, half: float = 1.0) -> dict:
    """Counter-clockwise square polygon centered on (lon, lat)."""
    ring = [
        [lon - half, lat - half],
        [lon + half, lat - half],
        [lon + half, lat + half],
        [lon - half, lat + half],
        [lon - half, lat - half],
    ]
    return {"type": "Polygon", "coordinates": [ring]}


def make_country(cid: str, name: str, lon: float, lat: float, aliases=()) -> Country:
    return Country(id=cid, name=name, aliases=tuple(aliases), centroid=(lon, lat), geometry=square(lon, lat))


@pytest.fixture
def catalog() -> Catalog:
    return Catalog([
        make_country("FRA", "France", 2.5, 46.5, ["French Republic", "République française"]),
        make_country("DEU", "Germany", 10.4, 51.1, ["Deutschland", "Federal Republic of Germany"]),
        make_country("ESP", "Spain", -3.6, 40.2, ["Kingdom of Spain", "España"]),
        make_country("USA", "United States", -98.6, 39.8, ["USA", "US", "America"]),
    ])


@pytest.fixture
def index(catalog) -> AliasIndex:
    return AliasIndex.build(catalog)
