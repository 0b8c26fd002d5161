"""In-memory map surface: the single rendering target shared by a session.

Layers are lines identified by an opaque handle. A layer can be detached
(hidden, still owned) or removed (released). Clicks on the map are
published on ``events`` as ``"click"`` with a (lon, lat) payload.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from .errors import VisualHandleError
from .events import EventEmitter
from .geometry import bounds
from .models import Point, VisualHandle


@dataclass
class LineLayer:
    handle: VisualHandle
    color: str
    weight: int
    kind: str
    points: list[Point] = field(default_factory=list)
    attached: bool = True


@dataclass
class Viewport:
    bounds: tuple[float, float, float, float] | None = None
    padding: tuple[int, int] = (0, 0)


class MapSurface:
    def __init__(self) -> None:
        self.events = EventEmitter()
        self.viewport = Viewport()
        self._layers: dict[VisualHandle, LineLayer] = {}
        self._ids = itertools.count(1)

    def __contains__(self, handle: VisualHandle) -> bool:
        return handle in self._layers

    def add_line(
        self,
        points: list[Point],
        color: str,
        *,
        weight: int = 5,
        kind: str = "route",
    ) -> VisualHandle:
        """Create a line layer and attach it. Returns its handle."""
        handle = f"layer-{next(self._ids)}"
        self._layers[handle] = LineLayer(handle=handle, color=color, weight=weight, kind=kind, points=list(points))
        return handle

    def extend_line(self, handle: VisualHandle, point: Point) -> None:
        self._layer(handle).points.append(point)

    def attach(self, handle: VisualHandle) -> None:
        self._layer(handle).attached = True

    def detach(self, handle: VisualHandle) -> None:
        self._layer(handle).attached = False

    def is_attached(self, handle: VisualHandle) -> bool:
        layer = self._layers.get(handle)
        return layer is not None and layer.attached

    def remove(self, handle: VisualHandle) -> None:
        """Release a layer entirely."""
        self._layer(handle)
        del self._layers[handle]

    def layer(self, handle: VisualHandle) -> LineLayer:
        return self._layer(handle)

    def layers(self, *, attached_only: bool = True) -> list[LineLayer]:
        return [layer for layer in self._layers.values() if layer.attached or not attached_only]

    def fit_bounds(self, points: list[Point], padding: tuple[int, int] = (50, 50)) -> None:
        self.viewport = Viewport(bounds=bounds(points), padding=padding)

    async def click(self, point: Point) -> None:
        """Simulate a user click at (lon, lat)."""
        await self.events.emit("click", point)

    def to_geojson(self) -> dict:
        """Attached layers as a GeoJSON FeatureCollection."""
        features = [
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": [list(p) for p in layer.points]},
                "properties": {
                    "handle": layer.handle,
                    "kind": layer.kind,
                    "color": layer.color,
                    "weight": layer.weight,
                },
            }
            for layer in self.layers()
        ]
        return {"type": "FeatureCollection", "features": features}

    def _layer(self, handle: VisualHandle) -> LineLayer:
        try:
            return self._layers[handle]
        except KeyError:
            raise VisualHandleError(f"Unknown layer handle: {handle}") from None
