"""Interactive route recomputation around user-declared road closures."""

from .closures import ClosureRegistry
from .controller import PALETTE, ClosureInteractionController, SessionState
from .errors import (
    GeocodingError,
    IndexOutOfRange,
    RecomputationFailure,
    UnknownBasemap,
    VisualHandleError,
)
from .geometry import BUFFER_DEG, bounds, buffer_segment, distance_km
from .models import ClosureRecord, Polygon, RouteRecord, RouteResult
from .request_builder import RouteRequest, build_route_request
from .routes import RouteRegistry
from .surface import MapSurface

__all__ = [
    "BUFFER_DEG",
    "ClosureInteractionController",
    "ClosureRecord",
    "ClosureRegistry",
    "GeocodingError",
    "IndexOutOfRange",
    "MapSurface",
    "PALETTE",
    "Polygon",
    "RecomputationFailure",
    "RouteRecord",
    "RouteRegistry",
    "RouteRequest",
    "RouteResult",
    "SessionState",
    "UnknownBasemap",
    "VisualHandleError",
    "bounds",
    "buffer_segment",
    "build_route_request",
    "distance_km",
]
