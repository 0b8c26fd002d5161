"""Ordered registry of route records and their visibility on the map."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator

from .errors import IndexOutOfRange, VisualHandleError
from .models import RouteRecord, RouteSummary, VisualHandle
from .surface import MapSurface

log = logging.getLogger(__name__)


class RouteRegistry:
    def __init__(self, surface: MapSurface) -> None:
        self.surface = surface
        self._records: list[RouteRecord] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RouteRecord]:
        return iter(list(self._records))

    def __getitem__(self, index: int) -> RouteRecord:
        return self._records[self._check(index)]

    def add(
        self,
        color: str,
        distance_km: float,
        duration_min: float,
        visual_handle: VisualHandle,
    ) -> RouteRecord:
        record = RouteRecord(
            id=next(self._ids),
            color=color,
            distance_km=distance_km,
            duration_min=duration_min,
            visual_handle=visual_handle,
            visible=self.surface.is_attached(visual_handle),
        )
        self._records.append(record)
        log.info("Route %d added: %s, %.2f km / %.1f min", record.id, color, distance_km, duration_min)
        return record

    def toggle_visibility(self, index: int) -> RouteRecord:
        """Hide a visible route or show a hidden one."""
        record = self._records[self._check(index)]
        handle = record.visual_handle
        if record.visible:
            if not self.surface.is_attached(handle):
                raise VisualHandleError(f"Route {record.id} is marked visible but {handle} is not attached")
            self.surface.detach(handle)
        else:
            if self.surface.is_attached(handle):
                raise VisualHandleError(f"Route {record.id} is marked hidden but {handle} is attached")
            self.surface.attach(handle)
        record.visible = not record.visible
        return record

    def remove(self, index: int) -> RouteRecord:
        """Release the route's layer, whatever its visibility, then drop it."""
        record = self._records[self._check(index)]
        if record.visual_handle in self.surface:
            self.surface.remove(record.visual_handle)
        del self._records[index]
        log.info("Route %d removed", record.id)
        return record

    def summaries(self) -> list[RouteSummary]:
        return [
            RouteSummary(
                id=r.id,
                label=f"Route {i + 1}",
                color=r.color,
                distance_km=round(r.distance_km, 2),
                duration_min=round(r.duration_min, 1),
                visible=r.visible,
            )
            for i, r in enumerate(self._records)
        ]

    def _check(self, index: int) -> int:
        if not 0 <= index < len(self._records):
            raise IndexOutOfRange(f"Route index {index} out of range (have {len(self._records)})")
        return index
