"""Tests for infolayer.models — query parameters, features, filter rules."""

from __future__ import annotations

import dataclasses

import pytest

from infolayer.models import (
    MAX_RESULTS,
    AppEvent,
    FeatureCollection,
    LayerFilterRule,
    QueryParameters,
    RawFeature,
    RouteGeometry,
    feature_property,
)
from tests.conftest import make_feature


pytestmark = pytest.mark.unit


class TestQueryParameters:

    def test_limit_clamped_to_ceiling(self):
        params = QueryParameters(max_results=200)
        assert params.limit == MAX_RESULTS == 50

    def test_limit_below_ceiling_kept(self):
        assert QueryParameters(max_results=12).limit == 12

    def test_blank_coordinates_mean_unset(self):
        params = QueryParameters(center_longitude="", center_latitude="  ")
        assert params.center_longitude is None
        assert params.center_latitude is None

    def test_numeric_strings_converted(self):
        params = QueryParameters(center_longitude="-73.5681", center_latitude="45.5186")
        assert params.center == (pytest.approx(-73.5681), pytest.approx(45.5186))

    def test_zero_is_a_coordinate(self):
        params = QueryParameters(center_longitude=0.0, center_latitude=0.0)
        resolved = params.with_default_center((10.0, 20.0))
        assert resolved.center == (0.0, 0.0)

    def test_default_center_fills_missing(self):
        params = QueryParameters(center_latitude=45.0, layer_names=["poi_label"])
        resolved = params.with_default_center((-73.0, 46.0))
        assert resolved.center == (-73.0, 45.0)
        assert resolved.layer_names == ["poi_label"]
        # original is untouched
        assert params.center_longitude is None

    def test_unresolved_center_raises(self):
        with pytest.raises(ValueError):
            QueryParameters().center


class TestRawFeature:

    def test_from_geojson(self):
        f = RawFeature.from_geojson(make_feature(1.5, 2.5, distance=42.9, name="A"))
        assert f.coordinates == (1.5, 2.5)
        assert f.source_layer == "poi_label"
        assert f.distance == pytest.approx(42.9)
        assert f.name == "A"

    def test_frozen(self):
        f = RawFeature.from_geojson(make_feature(1.0, 2.0))
        with pytest.raises(dataclasses.FrozenInstanceError):
            f.coordinates = (0.0, 0.0)
        with pytest.raises(TypeError):
            f.properties["name"] = "changed"

    def test_missing_tilequery(self):
        f = RawFeature((0.0, 0.0), {"name": "x"})
        assert f.source_layer is None
        assert f.distance == 0.0

    def test_feature_property(self):
        f = RawFeature.from_geojson(make_feature(0, 0, **{"class": "education"}))
        assert feature_property(f, "class") == "education"
        assert feature_property(f, "stop_type") is None
        assert feature_property(f, None) is None

    def test_collection_rejects_non_list(self):
        with pytest.raises(TypeError):
            FeatureCollection.from_geojson({"features": {"a": 1}})

    def test_collection_missing_features(self):
        with pytest.raises(KeyError):
            FeatureCollection.from_geojson({"type": "FeatureCollection"})


class TestLayerFilterRule:

    def test_from_icons_mapping(self):
        rule = LayerFilterRule.from_config({
            "layer": "poi_label",
            "selectionKey": "class",
            "icons": {"education": "education.png"},
        })
        assert rule.source_layer == "poi_label"
        assert rule.selection_key == "class"
        assert dict(rule.icons_by_selection_value) == {"education": "education.png"}
        assert rule.has_icon_mapping

    def test_from_selection_list(self):
        rule = LayerFilterRule.from_config({
            "layer": "transit_stop_label",
            "selectionKey": "stop_type",
            "selection": [
                {"group": "station", "icon": "metro.png"},
                {"group": "stop"},
            ],
        })
        assert dict(rule.icons_by_selection_value) == {
            "station": "metro.png",
            "stop": "stop.png",
        }

    def test_plain_layer(self):
        rule = LayerFilterRule.from_config({"layer": "building"})
        assert rule.selection_key is None
        assert rule.icons_by_selection_value is None
        assert not rule.has_icon_mapping

    def test_empty_mapping_is_no_mapping(self):
        rule = LayerFilterRule("poi_label", "class", {})
        assert not rule.has_icon_mapping


class TestGeometryAndEvents:

    def test_route_to_geojson(self):
        route = RouteGeometry(((1.0, 2.0), (3.0, 4.0)))
        gj = route.to_geojson()
        assert gj["geometry"]["type"] == "LineString"
        assert gj["geometry"]["coordinates"] == [[1.0, 2.0], [3.0, 4.0]]

    def test_app_event_to_dict(self):
        event = AppEvent("user", "click", "clicked on A (distance: 3m)", {"name": "A"})
        assert event.to_dict() == {
            "type": "user",
            "value": "click",
            "message": "clicked on A (distance: 3m)",
            "data": {"name": "A"},
        }
