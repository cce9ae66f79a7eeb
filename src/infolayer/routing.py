"""Walking route between the query center and a clicked feature.

Queries the Mapbox Directions API and keeps exactly one line overlay,
``route``, whose geometry is replaced on every successful query.
"""

from __future__ import annotations

from typing import Optional, Sequence

import httpx
from loguru import logger

from infolayer.errors import NoRouteFound
from infolayer.fetcher import DEFAULT_HOST, DEFAULT_TIMEOUT, get_json
from infolayer.models import RouteGeometry
from infolayer.overlays import MapHandle

ROUTE_LAYER_ID = "route"

DEFAULT_ROUTE_STYLE = {
    "line-join": "round",
    "line-cap": "round",
    "line-color": "#1c86a7",
    "line-width": 5,
    "line-opacity": 0.75,
}


def parse_route(data: object) -> RouteGeometry:
    """Extract the first route's geometry from a directions response.

    Raises:
        NoRouteFound: If there is no route or it has no coordinates.
    """
    routes = data.get("routes") if isinstance(data, dict) else None
    if not routes:
        raise NoRouteFound("Directions service returned no routes")
    try:
        coords = routes[0]["geometry"]["coordinates"]
        geometry = RouteGeometry(tuple((float(c[0]), float(c[1])) for c in coords))
    except (KeyError, TypeError, ValueError, IndexError) as e:
        raise NoRouteFound(f"First route has no usable geometry: {e}") from e
    if not geometry.coordinates:
        raise NoRouteFound("First route has an empty geometry")
    return geometry


class RouteRenderer:
    """Fetches walking routes and draws them on the route overlay.

    Only the most recently requested route is drawn: a response that
    arrives after a newer request was issued is discarded.
    """

    def __init__(
        self,
        map_handle: MapHandle,
        api_key: str,
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        style: Optional[dict] = None,
        client: Optional[httpx.AsyncClient] = None,
        layer_id: str = ROUTE_LAYER_ID,
    ) -> None:
        self.map = map_handle
        self.api_key = api_key
        self.host = host.rstrip("/")
        self.timeout = timeout
        self.style = dict(style or DEFAULT_ROUTE_STYLE)
        self.layer_id = layer_id
        self._client = client
        self._generation = 0

    def build_url(
        self, origin: Sequence[float], destination: Sequence[float],
    ) -> str:
        return (
            f"{self.host}/directions/v5/mapbox/walking/"
            f"{origin[0]},{origin[1]};{destination[0]},{destination[1]}"
        )

    async def fetch_route(
        self, origin: Sequence[float], destination: Sequence[float],
    ) -> RouteGeometry:
        """Query the directions service.

        Raises:
            NetworkFailure: transport, status or JSON failure.
            NoRouteFound: the service found no route.
        """
        url = self.build_url(origin, destination)
        data = await get_json(
            self._client,
            url,
            {"geometries": "geojson", "access_token": self.api_key},
            timeout=self.timeout,
        )
        return parse_route(data)

    def render(self, geometry: RouteGeometry) -> None:
        """Put ``geometry`` on the route overlay and make it visible."""
        coordinates = [list(c) for c in geometry.coordinates]
        if self.map.has_layer(self.layer_id):
            self.map.set_line_data(self.layer_id, coordinates)
        else:
            self.map.add_line_layer(self.layer_id, coordinates, self.style)
        self.map.set_visibility(self.layer_id, True)

    def hide(self) -> None:
        """Hide the route overlay and drop routes still in flight."""
        self.begin()
        if self.map.has_layer(self.layer_id):
            self.map.set_visibility(self.layer_id, False)

    def begin(self) -> int:
        """Claim the generation of a new request, superseding older ones."""
        self._generation += 1
        return self._generation

    async def route_and_render(
        self,
        origin: Sequence[float],
        destination: Sequence[float],
        generation: Optional[int] = None,
    ) -> Optional[RouteGeometry]:
        """Fetch a walking route and draw it.

        ``generation`` comes from ``begin()`` when the request was issued
        before this coroutine runs; otherwise a new one is claimed here.

        Returns:
            The drawn geometry, or None if a newer request superseded this one.

        Raises:
            NetworkFailure / NoRouteFound: the overlay is left untouched.
        """
        if generation is None:
            generation = self.begin()

        geometry = await self.fetch_route(origin, destination)

        if generation != self._generation:
            logger.debug(
                f"Discarding stale route #{generation} (latest is #{self._generation})"
            )
            return None

        self.render(geometry)
        logger.info(f"Route updated: {len(geometry.coordinates)} points to {tuple(destination)}")
        return geometry
