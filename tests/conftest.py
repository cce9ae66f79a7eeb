"""Shared fixtures for info layer tests."""

from __future__ import annotations

import pytest

# Montreal, Plateau (the default map center in config)
CENTER_LNG = -73.5681
CENTER_LAT = 45.5186


def make_feature(
    lng: float,
    lat: float,
    layer: str = "poi_label",
    distance: float = 100.0,
    **properties,
) -> dict:
    """A tile query GeoJSON feature dict."""
    props = dict(properties)
    props["tilequery"] = {"layer": layer, "distance": distance, "geometry": "point"}
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lng, lat]},
        "properties": props,
    }


@pytest.fixture
def montreal_payload() -> dict:
    """Two POIs: a cafe and a school."""
    return {
        "type": "FeatureCollection",
        "features": [
            make_feature(-73.5690, 45.5190, distance=87.6, name="Cafe Olimpico",
                         **{"class": "food_and_drink"}),
            make_feature(-73.5660, 45.5170, distance=243.2, name="Ecole Laurier",
                         **{"class": "education"}),
        ],
    }


@pytest.fixture
def mixed_payload() -> dict:
    """POIs and transit stops from two source layers."""
    return {
        "type": "FeatureCollection",
        "features": [
            make_feature(-73.5690, 45.5190, name="Cafe", **{"class": "food_and_drink"}),
            make_feature(-73.5700, 45.5200, layer="transit_stop_label", name="Mont-Royal",
                         stop_type="station"),
            make_feature(-73.5660, 45.5170, name="Park", **{"class": "park_like"}),
            make_feature(-73.5710, 45.5210, layer="transit_stop_label", name="Bus 97",
                         stop_type="stop"),
            make_feature(-73.5650, 45.5160, name="School", **{"class": "education"}),
        ],
    }
