"""Pydantic data models for routes, closures and their UI projections."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

Point = tuple[float, float]  # (lon, lat)
VisualHandle = str


class Polygon(BaseModel):
    """A GeoJSON polygon with a single closed ring."""

    model_config = ConfigDict(frozen=True)

    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[Point]]

    @property
    def ring(self) -> list[Point]:
        return self.coordinates[0]


class ClosureRecord(BaseModel):
    """A road segment the user declared closed."""

    model_config = ConfigDict(frozen=True)

    id: int
    coordinates: tuple[Point, Point]
    avoidance_polygon: Polygon
    distance_km: float
    visual_handle: VisualHandle | None = None


class RouteRecord(BaseModel):
    """One recomputation result, kept as route history."""

    id: int
    color: str
    distance_km: float
    duration_min: float
    visual_handle: VisualHandle
    visible: bool = True


class RouteResult(BaseModel):
    """What the routing service returns for one request."""

    path: list[Point]
    distance_m: float
    duration_s: float


class RouteSummary(BaseModel):
    id: int
    label: str
    color: str
    distance_km: float
    duration_min: float
    visible: bool


class ClosureSummary(BaseModel):
    id: int
    coordinates: tuple[Point, Point]
    distance_km: float


class Place(BaseModel):
    """A geocoding candidate."""

    display_name: str
    lon: float
    lat: float


class Notice(BaseModel):
    """A non-fatal message surfaced to the UI."""

    level: Literal["info", "warning"] = "warning"
    message: str
