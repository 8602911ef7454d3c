"""
Silhouette projection: fit a country outline into a drawing viewport.

Mercator, rotated so the country's centroid longitude sits on the central
meridian. Countries that straddle the antimeridian (Russia, Fiji, Kiribati)
therefore stay in one piece. Output is SVG path data; drawing it is the
caller's business.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from geoguess.config import get_settings
from geoguess.models import Country

Extent = tuple[tuple[float, float], tuple[float, float]]

MAX_LATITUDE = 85.05112878


def _rings(geometry: dict) -> Iterator[list]:
    geom_type = geometry.get("type")
    if geom_type == "Polygon":
        yield from geometry.get("coordinates") or []
    elif geom_type == "MultiPolygon":
        for polygon in geometry.get("coordinates") or []:
            yield from polygon
    elif geom_type == "GeometryCollection":
        for child in geometry.get("geometries") or []:
            yield from _rings(child)


def mercator(points: np.ndarray, center_lon: float = 0.0) -> np.ndarray:
    """(lon, lat) degrees -> unit Mercator (x right, y down)."""
    lon = (points[:, 0] - center_lon + 180.0) % 360.0 - 180.0
    lat = np.clip(points[:, 1], -MAX_LATITUDE, MAX_LATITUDE)
    x = np.radians(lon)
    y = -np.log(np.tan(np.pi / 4 + np.radians(lat) / 2))
    return np.column_stack((x, y))


@dataclass(frozen=True)
class ProjectionFit:
    center_lon: float
    scale: float
    translate: tuple[float, float]

    def project(self, points) -> np.ndarray:
        arr = np.asarray(points, dtype=float)[:, :2]
        return mercator(arr, self.center_lon) * self.scale + np.asarray(self.translate)


def fit_extent(geometry: dict, extent: Extent, center_lon: float = 0.0) -> Optional[ProjectionFit]:
    """Scale and translate so the geometry's bounds fill the extent, centered."""
    rings = [np.asarray(r, dtype=float)[:, :2] for r in _rings(geometry) if len(r)]
    if not rings:
        return None
    projected = mercator(np.vstack(rings), center_lon)
    (bx0, by0), (bx1, by1) = projected.min(axis=0), projected.max(axis=0)

    (x0, y0), (x1, y1) = extent
    width, height = x1 - x0, y1 - y0
    dx, dy = float(bx1 - bx0), float(by1 - by0)
    if dx <= 0 and dy <= 0:
        # A single point has no shape to fit
        return None
    scale = min(width / dx if dx > 0 else math.inf, height / dy if dy > 0 else math.inf)
    tx = x0 + (width - scale * (bx1 + bx0)) / 2
    ty = y0 + (height - scale * (by1 + by0)) / 2
    return ProjectionFit(center_lon=center_lon, scale=float(scale), translate=(float(tx), float(ty)))


def path_data(geometry: dict, fit: ProjectionFit, precision: int = 2) -> str:
    parts: list[str] = []
    for ring in _rings(geometry):
        if not len(ring):
            continue
        pts = fit.project(ring)
        coords = [f"{x:.{precision}f},{y:.{precision}f}" for x, y in pts]
        parts.append("M" + "L".join(coords) + "Z")
    return "".join(parts)


def silhouette_path(country: Country, extent: Optional[Extent] = None) -> str:
    """SVG path for the country's outline; empty when it cannot be fitted."""
    extent = extent or get_settings().silhouette.extent
    fit = fit_extent(country.geometry, extent, center_lon=country.centroid[0])
    if fit is None:
        return ""
    return path_data(country.geometry, fit)
