"""Data model for the info layer: query parameters, features, filter rules.

All coordinates use the GeoJSON convention: (lng, lat).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

# Hard ceiling imposed by the tile query service.
MAX_RESULTS = 50


def _coerce_coordinate(value: Any) -> Optional[float]:
    """Turn a GUI value into a float; None and "" mean "not set"."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    return float(value)


@dataclass
class QueryParameters:
    """Parameters for one tile query.

    Attributes:
        center_longitude: Query center longitude, or None to use the map center.
        center_latitude: Query center latitude, or None to use the map center.
        radius: Search radius in meters.
        max_results: Requested number of features (clamped to MAX_RESULTS).
        layer_names: Source layers to query, in order.
    """

    center_longitude: Optional[float] = None
    center_latitude: Optional[float] = None
    radius: float = 1000.0
    max_results: int = MAX_RESULTS
    layer_names: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.center_longitude = _coerce_coordinate(self.center_longitude)
        self.center_latitude = _coerce_coordinate(self.center_latitude)

    @property
    def limit(self) -> int:
        return min(int(self.max_results), MAX_RESULTS)

    def with_default_center(self, center: tuple[float, float]) -> "QueryParameters":
        """Return a copy whose missing coordinates are filled from ``center``."""
        lng, lat = center
        return QueryParameters(
            center_longitude=lng if self.center_longitude is None else self.center_longitude,
            center_latitude=lat if self.center_latitude is None else self.center_latitude,
            radius=self.radius,
            max_results=self.max_results,
            layer_names=list(self.layer_names),
        )

    @property
    def center(self) -> tuple[float, float]:
        if self.center_longitude is None or self.center_latitude is None:
            raise ValueError("Query center is not resolved")
        return (self.center_longitude, self.center_latitude)


@dataclass(frozen=True)
class RawFeature:
    """One point feature returned by the tile query service."""

    coordinates: tuple[float, float]
    properties: Mapping[str, Any]

    @classmethod
    def from_geojson(cls, raw: dict) -> "RawFeature":
        """Build a feature from a GeoJSON Feature dict.

        Raises:
            KeyError / TypeError / ValueError on a malformed feature.
        """
        coords = raw["geometry"]["coordinates"]
        return cls(
            coordinates=(float(coords[0]), float(coords[1])),
            properties=MappingProxyType(dict(raw.get("properties") or {})),
        )

    @property
    def tilequery(self) -> Mapping[str, Any]:
        value = self.properties.get("tilequery")
        return value if isinstance(value, Mapping) else {}

    @property
    def source_layer(self) -> Optional[str]:
        return self.tilequery.get("layer")

    @property
    def distance(self) -> float:
        return float(self.tilequery.get("distance", 0.0))

    @property
    def name(self) -> Optional[str]:
        return self.properties.get("name")


def feature_property(feature: RawFeature, key: Optional[str]) -> Optional[Any]:
    """Look up ``key`` in a feature's properties; None when absent."""
    if key is None:
        return None
    return feature.properties.get(key)


@dataclass(frozen=True)
class FeatureCollection:
    """Ordered result of one tile query."""

    features: tuple[RawFeature, ...] = ()

    @classmethod
    def from_geojson(cls, data: dict) -> "FeatureCollection":
        raw_features = data["features"]
        if not isinstance(raw_features, list):
            raise TypeError("'features' is not a list")
        return cls(tuple(RawFeature.from_geojson(raw) for raw in raw_features))

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self):
        return iter(self.features)


@dataclass(frozen=True)
class LayerFilterRule:
    """One configured sub-layer to extract from a tile query result.

    Attributes:
        source_layer: Tile layer name, e.g. "poi_label".
        selection_key: Feature property used for sub-category selection.
        icons_by_selection_value: Selection value -> icon filename.
    """

    source_layer: str
    selection_key: Optional[str] = None
    icons_by_selection_value: Optional[Mapping[str, str]] = None

    @property
    def has_icon_mapping(self) -> bool:
        return bool(self.icons_by_selection_value)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "LayerFilterRule":
        """Build a rule from a visible-layer config entry.

        Accepts the icon mapping either as ``icons: {value: file}`` or as
        ``selection: [{group, icon}, ...]``.
        """
        icons = config.get("icons")
        if icons is None and config.get("selection") is not None:
            icons = {entry["group"]: entry.get("icon", f"{entry['group']}.png")
                     for entry in config["selection"]}
        return cls(
            source_layer=config["layer"],
            selection_key=config.get("selectionKey", config.get("selection_key")),
            icons_by_selection_value=MappingProxyType(dict(icons)) if icons is not None else None,
        )


@dataclass(frozen=True)
class ClassifiedFeature:
    """A raw feature with its resolved icon path."""

    feature: RawFeature
    icon: str

    @property
    def coordinates(self) -> tuple[float, float]:
        return self.feature.coordinates

    @property
    def properties(self) -> Mapping[str, Any]:
        return self.feature.properties


@dataclass(frozen=True)
class RouteGeometry:
    """Walking path as ordered [lng, lat] pairs."""

    coordinates: tuple[tuple[float, float], ...]

    def to_geojson(self) -> dict:
        return {
            "type": "Feature",
            "properties": {},
            "geometry": {
                "type": "LineString",
                "coordinates": [list(c) for c in self.coordinates],
            },
        }


@dataclass(frozen=True)
class AppEvent:
    """Application-level event emitted on marker interaction."""

    type: str
    value: str
    message: str
    data: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "value": self.value,
            "message": self.message,
            "data": dict(self.data),
        }
