"""Routing request payloads in the openrouteservice directions format."""

from collections.abc import Sequence
from typing import Any, Literal

from pydantic import BaseModel

from .models import Point, Polygon


class AvoidPolygons(BaseModel):
    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: list[list[list[Point]]]


class RouteOptions(BaseModel):
    avoid_polygons: AvoidPolygons


class RouteRequest(BaseModel):
    coordinates: list[Point]
    options: RouteOptions | None = None

    @property
    def origin(self) -> Point:
        return self.coordinates[0]

    @property
    def destination(self) -> Point:
        return self.coordinates[-1]

    def payload(self) -> dict[str, Any]:
        """JSON body for the directions endpoint. No ``options`` key without avoid areas."""
        return self.model_dump(mode="json", exclude_none=True)


def build_route_request(origin: Point, destination: Point, avoidance: Sequence[Polygon]) -> RouteRequest:
    """Build a request from the endpoints and the accumulated avoid polygons.

    An empty ``avoidance`` leaves ``options`` out so the service routes
    unconstrained; otherwise the polygons become one MultiPolygon, in order.
    """
    if not avoidance:
        return RouteRequest(coordinates=[origin, destination])
    return RouteRequest(
        coordinates=[origin, destination],
        options=RouteOptions(
            avoid_polygons=AvoidPolygons(coordinates=[p.coordinates for p in avoidance]),
        ),
    )
