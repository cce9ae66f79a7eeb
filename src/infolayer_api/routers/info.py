"""Info layer API — run tile queries, list overlays, click markers.

The browser draws whatever ``/api/info/overlays`` returns; clicking a
marker posts back here, which fetches the walking route server-side.
"""

from __future__ import annotations

import queue
from typing import Optional, Union

from fastapi import APIRouter, HTTPException
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from infolayer import (
    EventBus,
    InfoLayer,
    LayerFilterRule,
    NetworkFailure,
    NoRouteFound,
    OverlayMap,
    QueryParameters,
)
from infolayer.event_bus import drain
from infolayer_api.config import settings

router = APIRouter(prefix="/api/info", tags=["info"])

_info_layer: Optional[InfoLayer] = None
_event_bus: Optional[EventBus] = None
_event_queue: Optional[queue.Queue] = None


def get_event_bus() -> EventBus:
    """Get or create the event bus and the log panel's subscription."""
    global _event_bus, _event_queue
    if _event_bus is None:
        _event_bus = EventBus()
        _event_queue = _event_bus.subscribe()
    return _event_bus


def get_info_layer() -> InfoLayer:
    """Get or create the info layer singleton (and its map)."""
    global _info_layer
    if _info_layer is None:
        bus = get_event_bus()
        _info_layer = InfoLayer(
            OverlayMap(center=(settings.map_center_lng, settings.map_center_lat)),
            settings.mapbox_api,
            icon_path=settings.info_icon_path,
            on_event=bus.publish_app_event,
            host=settings.mapbox_host,
            tileset=settings.tileset,
            timeout=settings.http_timeout,
            route_style=settings.route_style,
        )
    return _info_layer


def shutdown() -> None:
    """Tear down the map overlays and drop the log panel's subscription."""
    global _info_layer, _event_bus, _event_queue
    if _info_layer is not None:
        _info_layer.remove()
        if isinstance(_info_layer.map, OverlayMap):
            _info_layer.map.remove_all()
    if _event_bus is not None and _event_queue is not None:
        _event_bus.unsubscribe(_event_queue)
    _info_layer = None
    _event_bus = None
    _event_queue = None


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class SelectionEntry(BaseModel):
    """One sub-category of a layer and its icon."""
    group: str
    icon: Optional[str] = None


class VisibleLayer(BaseModel):
    """A sub-layer to extract from the tile query result."""
    layer: str
    selectionKey: Optional[str] = None
    icons: Optional[dict[str, str]] = None
    selection: Optional[list[SelectionEntry]] = None

    def to_rule(self) -> LayerFilterRule:
        return LayerFilterRule.from_config(self.model_dump(exclude_none=True))


class InfoLayerRequest(BaseModel):
    """Parameters of one info layer draw."""
    longitude: Optional[float] = None
    latitude: Optional[float] = None
    radius: float = Field(1000.0, gt=0)
    max_items: int = Field(50, ge=1)
    visible_layers: list[VisibleLayer]

    @field_validator("longitude", "latitude", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Union[str, float, None]):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    def to_params(self) -> QueryParameters:
        return QueryParameters(
            center_longitude=self.longitude,
            center_latitude=self.latitude,
            radius=self.radius,
            max_results=self.max_items,
        )


class CenterRequest(BaseModel):
    """Move the viewport center."""
    lng: float
    lat: float


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/layer")
async def create_layer(request: InfoLayerRequest):
    """Query points of interest and replace the drawn markers.

    Returns the resulting overlays as GeoJSON.
    """
    layer = get_info_layer()
    rules = [v.to_rule() for v in request.visible_layers]
    try:
        markers = await layer.create(request.to_params(), rules)
    except NetworkFailure as e:
        logger.warning(f"Tile query failed: {e}")
        raise HTTPException(status_code=502, detail="Tile query service unavailable")

    result = layer.map.to_geojson()
    result["stale"] = markers is None
    return result


@router.delete("/layer")
async def remove_layer():
    """Remove all markers and hide the route."""
    get_info_layer().remove()
    return {"status": "removed"}


@router.get("/overlays")
async def get_overlays():
    """Current markers and route as a GeoJSON FeatureCollection."""
    return get_info_layer().map.to_geojson()


@router.post("/center")
async def set_center(body: CenterRequest):
    """Set the viewport center used when a query has no coordinates."""
    layer = get_info_layer()
    layer.map.set_center(body.lng, body.lat)
    return {"lng": body.lng, "lat": body.lat}


@router.post("/markers/{marker_id}/click")
async def click_marker(marker_id: str):
    """Activate a marker: log the click and fetch a walking route to it."""
    layer = get_info_layer()
    try:
        task = layer.map.click(marker_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Marker not found")

    if task is None:
        return {"route": None, "stale": False}

    try:
        geometry = await task
    except NoRouteFound:
        raise HTTPException(status_code=404, detail="No walking route found")
    except NetworkFailure:
        # already logged by the presenter when the route task finished
        raise HTTPException(status_code=502, detail="Directions service unavailable")

    if geometry is None:
        return {"route": None, "stale": True}
    return {"route": geometry.to_geojson(), "stale": False}


@router.get("/events")
async def get_events():
    """Drain queued application events (newest last)."""
    get_event_bus()
    return {"events": [msg.get("data", {}) for msg in drain(_event_queue)]}
