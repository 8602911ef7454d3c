"""
Tests for the silhouette projection.
"""

from __future__ import annotations

import re

import pytest

from geoguess.models import Country
from geoguess.silhouette import fit_extent, silhouette_path

from conftest import make_country, square

EXTENT = ((0.0, 0.0), (100.0, 50.0))


def _coords(path: str) -> list[tuple[float, float]]:
    return [(float(x), float(y)) for x, y in re.findall(r"(-?\d+\.\d+),(-?\d+\.\d+)", path)]


class TestSilhouettePath:
    def test_path_fits_extent(self):
        path = silhouette_path(make_country("AAA", "Alpha", 20, 10), EXTENT)
        assert path.startswith("M") and path.endswith("Z")
        for x, y in _coords(path):
            assert -0.01 <= x <= 100.01
            assert -0.01 <= y <= 50.01

    def test_shape_is_centered(self):
        coords = _coords(silhouette_path(make_country("AAA", "Alpha", 20, 10), EXTENT))
        xs = [x for x, _ in coords]
        assert (min(xs) + max(xs)) / 2 == pytest.approx(50, abs=0.05)

    def test_north_is_up(self):
        coords = _coords(silhouette_path(make_country("AAA", "Alpha", 0, 0), EXTENT))
        # Ring starts at the south-west corner, third point is north-east
        assert coords[2][1] < coords[0][1]

    def test_one_subpath_per_ring(self):
        geom = {"type": "MultiPolygon",
                "coordinates": [square(0, 0)["coordinates"], square(5, 0)["coordinates"]]}
        country = Country(id="AAA", name="Alpha", centroid=(2.5, 0), geometry=geom)
        assert silhouette_path(country, EXTENT).count("M") == 2

    def test_point_geometry_has_no_path(self):
        ring = [[3, 3]] * 4
        country = Country(id="AAA", name="Alpha", centroid=(3, 3),
                          geometry={"type": "Polygon", "coordinates": [ring]})
        assert silhouette_path(country, EXTENT) == ""


class TestFitExtent:
    def test_antimeridian_stays_compact(self):
        ring = [[178, -1], [-178, -1], [-178, 1], [178, 1], [178, -1]]
        geom = {"type": "Polygon", "coordinates": [ring]}
        rotated = fit_extent(geom, EXTENT, center_lon=180)
        naive = fit_extent(geom, EXTENT, center_lon=0)
        assert rotated.scale > naive.scale * 10

    def test_empty_geometry(self):
        assert fit_extent({}, EXTENT) is None
