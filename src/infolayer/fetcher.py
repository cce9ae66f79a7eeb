"""Tile query client — fetch vector features around a point.

One GET per call against the Mapbox Tilequery API:

    {host}/v4/{tileset}/tilequery/{lng},{lat}.json
        ?radius=..&limit=..&layers=..&access_token=..

No retries and no fallback: any failure raises NetworkFailure.
"""

from __future__ import annotations

from typing import Optional

import httpx
from loguru import logger

from infolayer.errors import NetworkFailure
from infolayer.models import FeatureCollection, QueryParameters

DEFAULT_HOST = "https://api.mapbox.com"
DEFAULT_TILESET = "mapbox.mapbox-streets-v8"
DEFAULT_TIMEOUT = 10.0


async def get_json(
    client: Optional[httpx.AsyncClient],
    url: str,
    params: dict,
    timeout: float = DEFAULT_TIMEOUT,
) -> object:
    """GET ``url`` and decode the JSON body.

    Uses ``client`` when given, otherwise opens a short-lived one.

    Raises:
        NetworkFailure: transport error, HTTP error status or invalid JSON.
    """
    try:
        if client is not None:
            resp = await client.get(url, params=params, timeout=timeout)
            resp.raise_for_status()
        else:
            async with httpx.AsyncClient() as own_client:
                resp = await own_client.get(url, params=params, timeout=timeout)
                resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise NetworkFailure(
            f"{url} returned HTTP {e.response.status_code}",
            url=url,
            status_code=e.response.status_code,
        ) from e
    except httpx.HTTPError as e:
        raise NetworkFailure(f"Request to {url} failed: {e}", url=url) from e

    try:
        return resp.json()
    except ValueError as e:
        raise NetworkFailure(f"Malformed JSON from {url}", url=url) from e


class FeatureFetcher:
    """Fetches a FeatureCollection from the tile query service.

    Usage:
        fetcher = FeatureFetcher()
        collection = await fetcher.fetch(params, api_key)
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        tileset: str = DEFAULT_TILESET,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.host = host.rstrip("/")
        self.tileset = tileset
        self.timeout = timeout
        self._client = client

    def build_url(self, params: QueryParameters) -> str:
        lng, lat = params.center
        return f"{self.host}/v4/{self.tileset}/tilequery/{lng},{lat}.json"

    def build_params(self, params: QueryParameters, api_key: str) -> dict:
        return {
            "radius": params.radius,
            "limit": params.limit,
            "layers": ",".join(params.layer_names),
            "access_token": api_key,
        }

    async def fetch(self, params: QueryParameters, api_key: str) -> FeatureCollection:
        """Run one tile query.

        Args:
            params: Query parameters with a resolved center.
            api_key: Opaque access token, passed through.

        Returns:
            The features in service order.

        Raises:
            NetworkFailure: on any transport, status or payload problem.
        """
        url = self.build_url(params)
        data = await get_json(
            self._client, url, self.build_params(params, api_key), timeout=self.timeout,
        )

        try:
            collection = FeatureCollection.from_geojson(data)
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise NetworkFailure(f"Unexpected tile query payload from {url}: {e}", url=url) from e

        for i, feature in enumerate(collection):
            logger.debug(f"tilequery[{i}] {dict(feature.properties)}")
        logger.info(
            f"Tile query: {len(collection)} features within {params.radius}m "
            f"(layers={params.layer_names}, limit={params.limit})"
        )
        return collection
