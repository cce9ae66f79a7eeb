"""Info layer — points of interest from a tile query, drawn as map markers.

Fetches features around a point, sorts them into configured sub-layers,
draws clickable markers and a walking route to the clicked feature.
"""

from infolayer.classifier import classify
from infolayer.errors import InfoLayerError, NetworkFailure, NoRouteFound
from infolayer.event_bus import EventBus
from infolayer.fetcher import FeatureFetcher
from infolayer.info_layer import InfoLayer
from infolayer.models import (
    AppEvent,
    ClassifiedFeature,
    FeatureCollection,
    LayerFilterRule,
    QueryParameters,
    RawFeature,
    RouteGeometry,
)
from infolayer.overlays import LineLayer, MapHandle, Marker, OverlayMap
from infolayer.presenter import MarkerPresenter
from infolayer.routing import RouteRenderer

__all__ = [
    "AppEvent",
    "ClassifiedFeature",
    "EventBus",
    "FeatureCollection",
    "FeatureFetcher",
    "InfoLayer",
    "InfoLayerError",
    "LayerFilterRule",
    "LineLayer",
    "MapHandle",
    "Marker",
    "MarkerPresenter",
    "NetworkFailure",
    "NoRouteFound",
    "OverlayMap",
    "QueryParameters",
    "RawFeature",
    "RouteGeometry",
    "RouteRenderer",
    "classify",
]
