"""Closure geometry: avoidance polygons, distances and bounding boxes."""

from collections.abc import Iterable

from pyproj import Geod

from .models import Point, Polygon

BUFFER_DEG = 0.0007

_GEOD = Geod(ellps="WGS84")


def buffer_segment(p1: Point, p2: Point, margin: float = BUFFER_DEG) -> Polygon:
    """Buffer a clicked segment into the quadrilateral sent as an avoid area.

    The corners are offset diagonally from each endpoint (``-/-`` and ``+/+``),
    not perpendicular to the segment. The ring is closed.
    """
    lng1, lat1 = p1
    lng2, lat2 = p2
    ring = [
        (lng1 - margin, lat1 - margin),
        (lng1 + margin, lat1 + margin),
        (lng2 + margin, lat2 + margin),
        (lng2 - margin, lat2 - margin),
        (lng1 - margin, lat1 - margin),
    ]
    return Polygon(coordinates=[ring])


def distance_km(p1: Point, p2: Point) -> float:
    """Geodesic distance between two (lon, lat) points on WGS84, in km."""
    _, _, meters = _GEOD.inv(p1[0], p1[1], p2[0], p2[1])
    return meters / 1000


def bounds(points: Iterable[Point]) -> tuple[float, float, float, float]:
    """Return (min_lon, min_lat, max_lon, max_lat) of the given points."""
    points = list(points)
    if not points:
        raise ValueError("Cannot compute bounds of an empty path")
    lons = [p[0] for p in points]
    lats = [p[1] for p in points]
    return min(lons), min(lats), max(lons), max(lats)
