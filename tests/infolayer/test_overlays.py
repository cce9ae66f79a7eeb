"""Tests for OverlayMap — markers, line layers, visibility, GeoJSON export."""

import pytest

from infolayer.overlays import OverlayMap


@pytest.fixture
def overlay_map():
    return OverlayMap(center=(-73.5681, 45.5186))


class TestOverlayMap:
    """Test OverlayMap operations."""

    def test_center(self, overlay_map):
        assert overlay_map.get_center() == (-73.5681, 45.5186)
        overlay_map.set_center(2.35, 48.85)
        assert overlay_map.get_center() == (2.35, 48.85)

    def test_add_marker(self, overlay_map):
        """Adding a marker stores it and returns the handle."""
        m = overlay_map.add_marker((1.0, 2.0), "/i/a.png", properties={"name": "A"})
        assert overlay_map.get_marker(m.marker_id) is m
        assert m.css_class == "marker"
        assert m.draggable is False
        assert m.properties == {"name": "A"}

    def test_marker_ids_unique(self, overlay_map):
        ids = {overlay_map.add_marker((0, 0), "x.png").marker_id for _ in range(20)}
        assert len(ids) == 20

    def test_remove_marker(self, overlay_map):
        """Removing returns True; removing again returns False."""
        m = overlay_map.add_marker((1.0, 2.0), "a.png")
        assert overlay_map.remove_marker(m.marker_id) is True
        assert overlay_map.get_marker(m.marker_id) is None
        assert overlay_map.remove_marker(m.marker_id) is False

    def test_click_invokes_handler(self, overlay_map):
        clicked = []
        m = overlay_map.add_marker((1.0, 2.0), "a.png", on_click=lambda mk: clicked.append(mk) or "ok")
        assert overlay_map.click(m.marker_id) == "ok"
        assert clicked == [m]

    def test_click_without_handler(self, overlay_map):
        m = overlay_map.add_marker((1.0, 2.0), "center.png", css_class="center")
        assert overlay_map.click(m.marker_id) is None

    def test_click_unknown_raises(self, overlay_map):
        with pytest.raises(KeyError):
            overlay_map.click("nope")

    def test_line_layer_lifecycle(self, overlay_map):
        assert not overlay_map.has_layer("route")
        overlay_map.add_line_layer("route", [(0, 0), (1, 1)], {"line-width": 5})
        assert overlay_map.has_layer("route")
        layer = overlay_map.get_line_layer("route")
        assert layer.coordinates == [[0, 0], [1, 1]]
        assert layer.visible is True

        overlay_map.set_line_data("route", [(2, 2), (3, 3), (4, 4)])
        assert overlay_map.get_line_layer("route") is layer
        assert layer.coordinates == [[2, 2], [3, 3], [4, 4]]

        overlay_map.set_visibility("route", False)
        assert layer.visible is False

    def test_add_duplicate_line_layer_raises(self, overlay_map):
        overlay_map.add_line_layer("route", [(0, 0), (1, 1)], {})
        with pytest.raises(ValueError):
            overlay_map.add_line_layer("route", [(0, 0)], {})

    def test_missing_line_layer_raises(self, overlay_map):
        with pytest.raises(KeyError):
            overlay_map.set_visibility("route", True)
        with pytest.raises(KeyError):
            overlay_map.set_line_data("route", [])

    def test_remove_all(self, overlay_map):
        overlay_map.add_marker((0, 0), "a.png")
        overlay_map.add_line_layer("route", [(0, 0), (1, 1)], {})
        overlay_map.remove_all()
        assert overlay_map.markers == []
        assert not overlay_map.has_layer("route")


class TestGeoJSONExport:

    def test_export(self, overlay_map):
        m = overlay_map.add_marker((1.0, 2.0), "/i/cafe.png", properties={"name": "Cafe"})
        overlay_map.add_line_layer("route", [(0, 0), (1, 2)], {"line-color": "#1c86a7"})
        overlay_map.set_visibility("route", False)

        gj = overlay_map.to_geojson()
        assert gj["type"] == "FeatureCollection"
        assert gj["center"] == [-73.5681, 45.5186]
        point, line = gj["features"]

        assert point["id"] == m.marker_id
        assert point["geometry"] == {"type": "Point", "coordinates": [1.0, 2.0]}
        assert point["properties"]["name"] == "Cafe"
        assert point["properties"]["marker"] == {
            "icon": "/i/cafe.png", "className": "marker", "draggable": False,
        }

        assert line["id"] == "route"
        assert line["geometry"]["type"] == "LineString"
        assert line["properties"]["line-color"] == "#1c86a7"
        assert line["properties"]["visibility"] == "none"

    def test_empty_export(self, overlay_map):
        assert overlay_map.to_geojson()["features"] == []

    def test_feature_properties_keep_their_names(self, overlay_map):
        overlay_map.add_marker(
            (1.0, 2.0), "/i/cafe.png", css_class="center",
            properties={"icon": "coffee", "className": "food", "draggable": "no"},
        )
        props = overlay_map.to_geojson()["features"][0]["properties"]
        assert props["icon"] == "coffee"
        assert props["className"] == "food"
        assert props["draggable"] == "no"
        assert props["marker"]["icon"] == "/i/cafe.png"
        assert props["marker"]["className"] == "center"
