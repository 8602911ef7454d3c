"""
Tests for TopoJSON decoding.
"""

from __future__ import annotations

import pytest

from geoguess.topology import Topology, topology_features


def _topology(transform=None) -> dict:
    data = {
        "type": "Topology",
        # Delta-encoded when a transform is present
        "arcs": [
            [[0, 0], [1, 0], [0, 1]],
            [[1, 1], [-1, 0], [0, -1]],
        ],
        "objects": {
            "countries": {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "Polygon", "id": "004", "arcs": [[0, 1]], "properties": {"name": "Square"}},
                    {"type": "MultiPolygon", "id": "008", "arcs": [[[-2, -1]]]},
                    {"type": None, "id": "010"},
                ],
            }
        },
    }
    if transform is not None:
        data["transform"] = transform
    return data


class TestTopologyFeatures:
    def test_stitches_arcs(self):
        features = topology_features(_topology({"scale": [1, 1], "translate": [0, 0]}))
        ring = features[0]["geometry"]["coordinates"][0]
        assert ring == [[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]
        assert features[0]["id"] == "004"
        assert features[0]["properties"] == {"name": "Square"}

    def test_reversed_arcs(self):
        features = topology_features(_topology({"scale": [1, 1], "translate": [0, 0]}))
        geom = features[1]["geometry"]
        assert geom["type"] == "MultiPolygon"
        assert geom["coordinates"][0][0] == [[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]
        assert features[1]["properties"] == {}

    def test_transform_applied(self):
        features = topology_features(_topology({"scale": [2, 3], "translate": [10, 20]}))
        ring = features[0]["geometry"]["coordinates"][0]
        assert ring[:3] == [[10, 20], [12, 20], [12, 23]]

    def test_unquantized_arcs_used_as_is(self):
        features = topology_features(_topology())
        ring = features[0]["geometry"]["coordinates"][0]
        assert ring == [[0, 0], [1, 0], [1, 1], [-1, 0], [0, -1]]

    def test_null_geometry(self):
        features = topology_features(_topology({"scale": [1, 1], "translate": [0, 0]}))
        assert features[2]["id"] == "010"
        assert features[2]["geometry"] is None

    def test_object_names(self):
        assert Topology(_topology()).object_names == ["countries"]


class TestTopologyErrors:
    def test_not_a_topology(self):
        with pytest.raises(ValueError):
            Topology({"type": "FeatureCollection", "features": []})

    def test_missing_object(self):
        with pytest.raises(KeyError):
            topology_features(_topology(), "land")
