"""Ordered registry of closure records."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator

from .errors import IndexOutOfRange
from .geometry import BUFFER_DEG, buffer_segment, distance_km
from .models import ClosureRecord, Point, Polygon, VisualHandle

log = logging.getLogger(__name__)


class ClosureRegistry:
    """Closures in insertion order, addressed by position.

    Ids are monotonic and never reused, so a record can still be found after
    earlier entries were removed.
    """

    def __init__(self, margin: float = BUFFER_DEG) -> None:
        self.margin = margin
        self._records: list[ClosureRecord] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ClosureRecord]:
        return iter(list(self._records))

    def __getitem__(self, index: int) -> ClosureRecord:
        return self._records[self._check(index)]

    def add(self, p1: Point, p2: Point, visual_handle: VisualHandle | None = None) -> ClosureRecord:
        record = ClosureRecord(
            id=next(self._ids),
            coordinates=(p1, p2),
            avoidance_polygon=buffer_segment(p1, p2, self.margin),
            distance_km=distance_km(p1, p2),
            visual_handle=visual_handle,
        )
        self._records.append(record)
        log.info("Closure %d added (%.3f km)", record.id, record.distance_km)
        return record

    def remove(self, index: int) -> ClosureRecord:
        """Drop the record at ``index``. The caller releases its layer."""
        record = self._records.pop(self._check(index))
        log.info("Closure %d removed", record.id)
        return record

    def index_of(self, closure_id: int) -> int:
        for i, record in enumerate(self._records):
            if record.id == closure_id:
                return i
        raise KeyError(closure_id)

    def accumulated_avoidance(self) -> list[Polygon]:
        """Every live avoidance polygon, oldest first."""
        return [r.avoidance_polygon for r in self._records]

    def _check(self, index: int) -> int:
        if not 0 <= index < len(self._records):
            raise IndexOutOfRange(f"Closure index {index} out of range (have {len(self._records)})")
        return index
