"""Routing service client (openrouteservice directions API)."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import RecomputationFailure
from .models import RouteResult
from .request_builder import RouteRequest

log = logging.getLogger(__name__)


class RoutingClient(Protocol):
    async def route(self, request: RouteRequest) -> RouteResult: ...


class OpenRouteServiceClient:
    """POSTs requests to ``/v2/directions/{profile}/geojson``.

    Every failure (transport error, non-2xx status, unexpected body) is
    raised as :class:`RecomputationFailure`.
    """

    def __init__(self, settings: Settings, http: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self.url = f"{settings.ors_base_url.rstrip('/')}/v2/directions/{settings.ors_profile}/geojson"
        self._http = http or httpx.AsyncClient(timeout=settings.http_timeout)

    async def route(self, request: RouteRequest) -> RouteResult:
        headers = {"Authorization": self.settings.ors_api_key, "Content-Type": "application/json"}
        try:
            resp = await self._http.post(self.url, json=request.payload(), headers=headers)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise RecomputationFailure(f"Routing request failed: {e}") from e
        except ValueError as e:
            raise RecomputationFailure(f"Routing response is not JSON: {e}") from e
        return parse_directions(data)

    async def aclose(self) -> None:
        await self._http.aclose()


def parse_directions(data: dict) -> RouteResult:
    """Extract path and stats from a directions GeoJSON FeatureCollection."""
    try:
        feature = data["features"][0]
        coords = [(float(c[0]), float(c[1])) for c in feature["geometry"]["coordinates"]]
        props = feature["properties"]
        stats = props["segments"][0] if props.get("segments") else props["summary"]
        result = RouteResult(
            path=coords,
            distance_m=stats.get("distance", 0.0),
            duration_s=stats.get("duration", 0.0),
        )
    except (AttributeError, KeyError, IndexError, TypeError, ValueError, ValidationError) as e:
        raise RecomputationFailure(f"Malformed routing response: {e!r}") from e
    if len(result.path) < 2:
        raise RecomputationFailure("Routing response has fewer than 2 path points")
    return result
