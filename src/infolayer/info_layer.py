"""InfoLayer — tile query → classification → markers, with on-click routes.

Wires the fetcher, classifier, presenter and route renderer around one
map. Only the most recent ``create`` call may draw: if an older query
resolves after a newer one was issued, its result is dropped.
"""

from __future__ import annotations

from typing import Optional, Sequence

import httpx
from loguru import logger

from infolayer.classifier import classify, layer_names
from infolayer.fetcher import DEFAULT_HOST, DEFAULT_TILESET, DEFAULT_TIMEOUT, FeatureFetcher
from infolayer.models import LayerFilterRule, QueryParameters
from infolayer.overlays import MapHandle, Marker
from infolayer.presenter import EventSink, MarkerPresenter
from infolayer.routing import RouteRenderer


class InfoLayer:
    """Points of interest around a center point, drawn on a map.

    Usage:
        layer = InfoLayer(map_handle, api_key, icon_path="/assets/icons/")
        await layer.create(params, rules)
        task = map_handle.click(marker_id)   # starts a walking route
    """

    def __init__(
        self,
        map_handle: MapHandle,
        api_key: str,
        icon_path: str = "",
        on_event: Optional[EventSink] = None,
        host: str = DEFAULT_HOST,
        tileset: str = DEFAULT_TILESET,
        timeout: float = DEFAULT_TIMEOUT,
        route_style: Optional[dict] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.map = map_handle
        self.api_key = api_key
        self.icon_path = icon_path
        self.fetcher = FeatureFetcher(host=host, tileset=tileset, timeout=timeout, client=client)
        self.router = RouteRenderer(
            map_handle, api_key, host=host, timeout=timeout, style=route_style, client=client,
        )
        self.presenter = MarkerPresenter(map_handle, icon_path, on_event, self.router)
        self._generation = 0

    def resolve_center(self, params: QueryParameters) -> QueryParameters:
        """Fill missing query coordinates from the map's viewport center."""
        return params.with_default_center(self.map.get_center())

    async def create(
        self,
        params: QueryParameters,
        rules: Sequence[LayerFilterRule],
    ) -> Optional[list[Marker]]:
        """Query, classify and draw.

        Args:
            params: Query parameters; missing center coordinates default
                to the map center. Empty ``layer_names`` are taken from ``rules``.
            rules: Sub-layer filter rules, in display order.

        Returns:
            The drawn markers (features then center), or None when a newer
            ``create`` call superseded this one.

        Raises:
            NetworkFailure: the tile query failed; nothing is redrawn.
        """
        self._generation += 1
        generation = self._generation

        params = self.resolve_center(params)
        if not params.layer_names:
            params.layer_names = layer_names(rules)

        collection = await self.fetcher.fetch(params, self.api_key)

        if generation != self._generation:
            logger.debug(
                f"Discarding stale tile query #{generation} (latest is #{self._generation})"
            )
            return None

        features = classify(collection, rules, self.icon_path)
        return self.presenter.present(features, params.center)

    def remove(self) -> None:
        """Remove all markers and hide the route."""
        self.presenter.clear()
