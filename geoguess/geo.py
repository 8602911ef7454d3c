"""
Great-circle geometry for guess feedback.

Points are (longitude, latitude) pairs in degrees throughout, matching the
GeoJSON coordinate order used by the boundary dataset.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from geoguess.models import Comparison

if TYPE_CHECKING:
    from geoguess.models import Country

Point = tuple[float, float]

EARTH_RADIUS_KM = 6371.0
SAME_POINT_EPSILON = 1e-8

DIRECTION_LABELS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")
DIRECTION_ARROWS = {
    "N": "↑",
    "NE": "↗",
    "E": "→",
    "SE": "↘",
    "S": "↓",
    "SW": "↙",
    "W": "←",
    "NW": "↖",
    "HERE": "•",
}


@dataclass(frozen=True)
class Direction:
    label: str
    arrow: str
    bearing: float


# ── Distance / bearing ────────────────────────────────────────────────

def haversine_km(origin: Point, destination: Point) -> float:
    """Great-circle distance in km between two (lon, lat) points."""
    lon1, lat1 = origin
    lon2, lat2 = destination

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def initial_bearing(origin: Point, destination: Point) -> float:
    """Initial great-circle bearing in degrees, normalized to [0, 360)."""
    lon1, lat1 = origin
    lon2, lat2 = destination

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)

    y = math.sin(delta_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)
    return math.degrees(math.atan2(y, x)) % 360.0


def direction_from_to(origin: Point, destination: Point) -> Direction:
    """Compass octant pointing from origin towards destination."""
    if (abs(origin[0] - destination[0]) < SAME_POINT_EPSILON
            and abs(origin[1] - destination[1]) < SAME_POINT_EPSILON):
        return Direction("HERE", DIRECTION_ARROWS["HERE"], 0.0)

    bearing = initial_bearing(origin, destination)
    # Half-up rounding so an exact octant boundary goes clockwise
    index = math.floor(bearing / 45.0 + 0.5) % 8
    label = DIRECTION_LABELS[index]
    return Direction(label, DIRECTION_ARROWS[label], bearing)


def format_distance(km: float) -> str:
    """1234.4 -> '1,234 km'."""
    return f"{math.floor(km + 0.5):,} km"


def compare_guess(guess: Country, target: Country) -> Comparison:
    distance_km = haversine_km(guess.centroid, target.centroid)
    direction = direction_from_to(guess.centroid, target.centroid)
    return Comparison(
        distance_km=distance_km,
        distance_text=format_distance(distance_km),
        direction_label=direction.label,
        direction_arrow=direction.arrow,
    )


# ── Centroid ──────────────────────────────────────────────────────────

_EPSILON = 1e-6
_EPSILON2 = 1e-12


def _to_cartesian(ring) -> np.ndarray:
    arr = np.asarray(ring, dtype=float)
    if arr.ndim != 2 or arr.shape[0] == 0:
        return np.zeros((0, 3))
    lam = np.radians(arr[:, 0])
    phi = np.radians(arr[:, 1])
    cos_phi = np.cos(phi)
    return np.column_stack((cos_phi * np.cos(lam), cos_phi * np.sin(lam), np.sin(phi)))


class _CentroidAccumulator:
    """
    Spherical centroid moments, weighted by area first, then by edge
    length, then by plain point count when the geometry is degenerate.
    """

    def __init__(self):
        self.area = np.zeros(3)
        self.line = np.zeros(3)
        self.line_weight = 0.0
        self.points = np.zeros(3)
        self.point_count = 0

    def add_polygon(self, rings) -> None:
        polygon_area = np.zeros(3)
        exterior_line = None
        for ring in rings:
            pts = _to_cartesian(ring)
            if len(pts) == 0:
                continue
            a = pts
            b = np.roll(pts, -1, axis=0)
            cross = np.cross(a, b)
            m = np.linalg.norm(cross, axis=1)
            w = np.arcsin(np.clip(m, 0.0, 1.0))
            v = np.divide(-w, m, out=np.zeros_like(m), where=m > 0)

            polygon_area += (v[:, None] * cross).sum(axis=0)
            ring_line = (w[:, None] * (a + b)).sum(axis=0)
            if exterior_line is None:
                exterior_line = ring_line
            self.line += ring_line
            self.line_weight += float(w.sum())
            self.points += pts.sum(axis=0)
            self.point_count += len(pts)

        # Winding differs between datasets; orient each polygon's area
        # vector towards its own outline. Polygons span less than a hemisphere.
        if exterior_line is not None and float(np.dot(polygon_area, exterior_line)) < 0:
            polygon_area = -polygon_area
        self.area += polygon_area

    def result(self) -> Point:
        vec = self.area
        if np.linalg.norm(vec) < _EPSILON2:
            vec = self.line
            if self.line_weight < _EPSILON:
                vec = self.points / self.point_count if self.point_count else np.zeros(3)
            if np.linalg.norm(vec) < _EPSILON2:
                return (math.nan, math.nan)
        x, y, z = (float(c) for c in vec)
        m = math.sqrt(x * x + y * y + z * z)
        return (math.degrees(math.atan2(y, x)), math.degrees(math.asin(max(-1.0, min(1.0, z / m)))))


def spherical_centroid(geometry: dict | None) -> Point:
    """
    Centroid of a GeoJSON Polygon / MultiPolygon / GeometryCollection on
    the unit sphere. Returns (nan, nan) when the geometry is empty or of an
    unsupported type.
    """
    acc = _CentroidAccumulator()
    _accumulate(geometry or {}, acc)
    return acc.result()


def _accumulate(geometry: dict, acc: _CentroidAccumulator) -> None:
    geom_type = geometry.get("type")
    if geom_type == "Polygon":
        acc.add_polygon(geometry.get("coordinates") or [])
    elif geom_type == "MultiPolygon":
        for polygon in geometry.get("coordinates") or []:
            acc.add_polygon(polygon)
    elif geom_type == "GeometryCollection":
        for child in geometry.get("geometries") or []:
            _accumulate(child, acc)


def is_finite_point(point: Point) -> bool:
    return len(point) == 2 and all(math.isfinite(c) for c in point)
