"""Map overlay abstraction — point markers and named line layers.

The core only talks to a map through ``MapHandle``. ``OverlayMap`` is the
in-memory implementation used by the HTTP API: it keeps the live overlay
set and serializes it to GeoJSON for the browser to draw.

All coordinates are stored in GeoJSON convention: [lng, lat].
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, Sequence

ClickHandler = Callable[["Marker"], Any]


@dataclass
class Marker:
    """A point overlay anchored to a geographic coordinate.

    Attributes:
        marker_id: Unique identifier for this marker.
        coordinates: [lng, lat].
        icon: Image URL drawn as the marker's background.
        css_class: "marker" for features, "center" for the query center.
        draggable: Whether the user may move it.
        properties: Feature properties shown on hover / export.
        on_click: Handler invoked on activation.
    """

    marker_id: str
    coordinates: tuple[float, float]
    icon: str
    css_class: str = "marker"
    draggable: bool = False
    properties: dict = field(default_factory=dict)
    on_click: Optional[ClickHandler] = field(default=None, repr=False, compare=False)


@dataclass
class LineLayer:
    """A named line overlay (one LineString source + paint style)."""

    layer_id: str
    coordinates: list[list[float]]
    style: dict = field(default_factory=dict)
    visible: bool = True


class MapHandle(Protocol):
    """The narrow map interface the info layer depends on."""

    def get_center(self) -> tuple[float, float]: ...

    def add_marker(
        self,
        coordinates: tuple[float, float],
        icon: str,
        css_class: str = "marker",
        draggable: bool = False,
        on_click: Optional[ClickHandler] = None,
        properties: Optional[dict] = None,
    ) -> Marker: ...

    def remove_marker(self, marker_id: str) -> bool: ...

    def has_layer(self, layer_id: str) -> bool: ...

    def add_line_layer(
        self, layer_id: str, coordinates: Sequence[Sequence[float]], style: dict,
    ) -> None: ...

    def set_line_data(self, layer_id: str, coordinates: Sequence[Sequence[float]]) -> None: ...

    def set_visibility(self, layer_id: str, visible: bool) -> None: ...


class OverlayMap:
    """In-memory map: viewport center, markers and line layers."""

    def __init__(self, center: tuple[float, float] = (0.0, 0.0)) -> None:
        self._center = (float(center[0]), float(center[1]))
        self._markers: dict[str, Marker] = {}
        self._lines: dict[str, LineLayer] = {}

    # -- viewport -----------------------------------------------------------

    def get_center(self) -> tuple[float, float]:
        return self._center

    def set_center(self, lng: float, lat: float) -> None:
        self._center = (float(lng), float(lat))

    # -- markers ------------------------------------------------------------

    def add_marker(
        self,
        coordinates: tuple[float, float],
        icon: str,
        css_class: str = "marker",
        draggable: bool = False,
        on_click: Optional[ClickHandler] = None,
        properties: Optional[dict] = None,
    ) -> Marker:
        """Add a point overlay and return its handle."""
        marker = Marker(
            marker_id=f"{css_class}-{uuid.uuid4().hex[:8]}",
            coordinates=(float(coordinates[0]), float(coordinates[1])),
            icon=icon,
            css_class=css_class,
            draggable=draggable,
            properties=dict(properties or {}),
            on_click=on_click,
        )
        self._markers[marker.marker_id] = marker
        return marker

    def remove_marker(self, marker_id: str) -> bool:
        """Remove a marker. Returns False if it didn't exist."""
        return self._markers.pop(marker_id, None) is not None

    def get_marker(self, marker_id: str) -> Optional[Marker]:
        return self._markers.get(marker_id)

    @property
    def markers(self) -> list[Marker]:
        return list(self._markers.values())

    def click(self, marker_id: str) -> Any:
        """Activate a marker the way a user click would.

        Returns whatever the marker's handler returns. Feature markers
        start a route task, so they must be clicked from a running event loop.

        Raises:
            KeyError: If the marker_id is not found.
        """
        marker = self._markers.get(marker_id)
        if marker is None:
            raise KeyError(f"Marker not found: {marker_id}")
        if marker.on_click is None:
            return None
        return marker.on_click(marker)

    # -- line layers --------------------------------------------------------

    def has_layer(self, layer_id: str) -> bool:
        return layer_id in self._lines

    def get_line_layer(self, layer_id: str) -> Optional[LineLayer]:
        return self._lines.get(layer_id)

    def add_line_layer(
        self, layer_id: str, coordinates: Sequence[Sequence[float]], style: dict,
    ) -> None:
        """Add a new line layer.

        Raises:
            ValueError: If a layer with this id already exists.
        """
        if layer_id in self._lines:
            raise ValueError(f"Layer already exists: {layer_id}")
        self._lines[layer_id] = LineLayer(
            layer_id=layer_id,
            coordinates=[list(c) for c in coordinates],
            style=dict(style),
        )

    def set_line_data(self, layer_id: str, coordinates: Sequence[Sequence[float]]) -> None:
        """Replace a line layer's geometry in place.

        Raises:
            KeyError: If the layer_id is not found.
        """
        layer = self._lines.get(layer_id)
        if layer is None:
            raise KeyError(f"Layer not found: {layer_id}")
        layer.coordinates = [list(c) for c in coordinates]

    def set_visibility(self, layer_id: str, visible: bool) -> None:
        """Set the visibility of a line layer.

        Raises:
            KeyError: If the layer_id is not found.
        """
        layer = self._lines.get(layer_id)
        if layer is None:
            raise KeyError(f"Layer not found: {layer_id}")
        layer.visible = visible

    def remove_all(self) -> None:
        """Drop every overlay (map teardown)."""
        self._markers.clear()
        self._lines.clear()

    # -- export -------------------------------------------------------------

    def to_geojson(self) -> dict:
        """Export markers and line layers as a GeoJSON FeatureCollection dict."""
        features = [_marker_to_geojson(m) for m in self._markers.values()]
        features.extend(_line_to_geojson(layer) for layer in self._lines.values())
        return {
            "type": "FeatureCollection",
            "center": list(self._center),
            "features": features,
        }


def _marker_to_geojson(marker: Marker) -> dict:
    return {
        "type": "Feature",
        "id": marker.marker_id,
        "geometry": {
            "type": "Point",
            "coordinates": list(marker.coordinates),
        },
        "properties": {
            **marker.properties,
            # display attributes kept apart so POI properties never clash
            "marker": {
                "icon": marker.icon,
                "className": marker.css_class,
                "draggable": marker.draggable,
            },
        },
    }


def _line_to_geojson(layer: LineLayer) -> dict:
    return {
        "type": "Feature",
        "id": layer.layer_id,
        "geometry": {
            "type": "LineString",
            "coordinates": layer.coordinates,
        },
        "properties": {
            **layer.style,
            "visibility": "visible" if layer.visible else "none",
        },
    }
