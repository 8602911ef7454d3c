"""
TopoJSON decoding.

The boundary dataset ships as a TopoJSON topology: shared arcs, quantized
and delta-encoded, referenced by index from each geometry (a negative index
~i means arc i walked backwards). This module turns one named object of
such a topology into plain GeoJSON-like features.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

logger = logging.getLogger(__name__)


class Topology:
    def __init__(self, data: dict):
        if data.get("type") != "Topology":
            raise ValueError(f"Not a TopoJSON topology (type={data.get('type')!r})")
        self._data = data
        self._arcs = self._decode_arcs(data.get("arcs") or [], data.get("transform"))

    @staticmethod
    def _decode_arcs(raw_arcs: list, transform: Optional[dict]) -> list[np.ndarray]:
        decoded: list[np.ndarray] = []
        if transform:
            scale = np.asarray(transform["scale"], dtype=float)
            translate = np.asarray(transform["translate"], dtype=float)
        for arc in raw_arcs:
            if not arc:
                decoded.append(np.zeros((0, 2)))
                continue
            arr = np.asarray(arc, dtype=float)[:, :2]
            if transform:
                arr = np.cumsum(arr, axis=0) * scale + translate
            decoded.append(arr)
        return decoded

    @property
    def object_names(self) -> list[str]:
        return list((self._data.get("objects") or {}).keys())

    # ── Geometry stitching ───────────────────────────────────────────

    def _ring(self, arc_indexes: list[int]) -> list[list[float]]:
        points: list[list[float]] = []
        for index in arc_indexes:
            arc = self._arcs[~index] if index < 0 else self._arcs[index]
            if index < 0:
                arc = arc[::-1]
            if points:
                # Consecutive arcs share their junction point
                points.pop()
            points.extend(arc.tolist())
        # Degenerate rings still need a closed, four-point shape
        while points and len(points) < 4:
            points.append(list(points[0]))
        return points

    def _geometry(self, obj: dict) -> Optional[dict]:
        geom_type = obj.get("type")
        if geom_type == "Polygon":
            return {"type": "Polygon", "coordinates": [self._ring(r) for r in obj.get("arcs") or []]}
        if geom_type == "MultiPolygon":
            return {
                "type": "MultiPolygon",
                "coordinates": [[self._ring(r) for r in polygon] for polygon in obj.get("arcs") or []],
            }
        if geom_type == "GeometryCollection":
            return {
                "type": "GeometryCollection",
                "geometries": [g for g in (self._geometry(o) for o in obj.get("geometries") or []) if g],
            }
        if geom_type is not None:
            logger.debug("Skipping unsupported TopoJSON geometry type %s", geom_type)
        return None

    def features(self, object_name: str) -> list[dict[str, Any]]:
        """
        Decode a named object into a list of features
        {"id", "properties", "geometry"}; a GeometryCollection object yields
        one feature per member.
        """
        objects = self._data.get("objects") or {}
        if object_name not in objects:
            raise KeyError(f"Topology has no object named {object_name!r}")

        obj = objects[object_name]
        members = obj.get("geometries", []) if obj.get("type") == "GeometryCollection" else [obj]
        return [
            {
                "type": "Feature",
                "id": member.get("id"),
                "properties": member.get("properties") or {},
                "geometry": self._geometry(member),
            }
            for member in members
        ]


def topology_features(data: dict, object_name: str = "countries") -> list[dict[str, Any]]:
    return Topology(data).features(object_name)
