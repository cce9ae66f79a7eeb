"""Marker presenter — draw classified features as clickable map markers."""

from __future__ import annotations

import asyncio
import math
from typing import Callable, Optional, Sequence

from loguru import logger

from infolayer.models import AppEvent, ClassifiedFeature
from infolayer.overlays import MapHandle, Marker
from infolayer.routing import RouteRenderer

EventSink = Callable[[AppEvent], None]


def click_message(feature: ClassifiedFeature) -> str:
    raw = feature.feature
    return f"clicked on {raw.name} (distance: {math.floor(raw.distance)}m)"


class MarkerPresenter:
    """Owns the markers of one info layer and replaces them wholesale.

    Usage:
        presenter = MarkerPresenter(map_handle, "/assets/icons/", bus.publish_app_event, router)
        presenter.present(features, center=(lng, lat))
    """

    def __init__(
        self,
        map_handle: MapHandle,
        icon_path: str,
        on_event: Optional[EventSink],
        route_renderer: RouteRenderer,
    ) -> None:
        self.map = map_handle
        self.icon_path = icon_path
        self.on_event = on_event
        self.route_renderer = route_renderer
        self._marker_ids: list[str] = []
        self._route_tasks: set[asyncio.Task] = set()

    def clear(self) -> None:
        """Remove every marker this presenter drew and hide the route."""
        for marker_id in self._marker_ids:
            self.map.remove_marker(marker_id)
        self._marker_ids = []
        self.route_renderer.hide()

    def present(
        self,
        features: Sequence[ClassifiedFeature],
        center: tuple[float, float],
    ) -> list[Marker]:
        """Replace the current markers with ``features`` plus a center marker.

        The center marker is added last.
        """
        self.clear()

        markers = [
            self.map.add_marker(
                feature.coordinates,
                feature.icon,
                css_class="marker",
                on_click=self._make_click_handler(feature, center),
                properties=dict(feature.properties),
            )
            for feature in features
        ]
        markers.append(
            self.map.add_marker(
                center,
                f"{self.icon_path}center.png",
                css_class="center",
                draggable=False,
            )
        )

        self._marker_ids = [m.marker_id for m in markers]
        logger.info(f"Drew {len(features)} feature markers around {center}")
        return markers

    def _make_click_handler(
        self, feature: ClassifiedFeature, center: tuple[float, float],
    ) -> Callable[[Marker], asyncio.Task]:
        def on_click(marker: Marker) -> asyncio.Task:
            # Raises RuntimeError before any side effect when no loop is running
            asyncio.get_running_loop()
            event = AppEvent(
                type="user",
                value="click",
                message=click_message(feature),
                data=dict(feature.properties),
            )
            if self.on_event is not None:
                self.on_event(event)
            return self._start_route(center, feature.coordinates)

        return on_click

    def _start_route(
        self, origin: tuple[float, float], destination: tuple[float, float],
    ) -> asyncio.Task:
        generation = self.route_renderer.begin()
        task = asyncio.create_task(
            self.route_renderer.route_and_render(origin, destination, generation)
        )
        self._route_tasks.add(task)
        task.add_done_callback(self._route_done)
        return task

    def _route_done(self, task: asyncio.Task) -> None:
        self._route_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"Route request failed: {task.exception()}")
