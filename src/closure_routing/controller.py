"""Closure interaction state machine.

One controller owns one interactive map session: the endpoint pair, the
pending closure click, the colour cursor, both registries and every layer
they reference. All attach/detach calls on the surface go through here.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from .animator import RouteAnimator
from .closures import ClosureRegistry
from .config import BASEMAPS
from .errors import RecomputationFailure, UnknownBasemap
from .geometry import BUFFER_DEG
from .models import ClosureRecord, ClosureSummary, Notice, Point, RouteRecord, RouteSummary
from .request_builder import build_route_request
from .routes import RouteRegistry
from .routing_client import RoutingClient
from .surface import MapSurface

log = logging.getLogger(__name__)

PALETTE = ("blue", "green", "purple", "orange", "brown", "darkcyan")
CLOSURE_COLOR = "red"


class SessionState(str, Enum):
    IDLE = "idle"
    READY = "ready"
    AWAITING_SECOND_CLICK = "awaiting_second_click"


class ClosureInteractionController:
    def __init__(
        self,
        surface: MapSurface,
        routing: RoutingClient,
        *,
        animator: RouteAnimator | None = None,
        margin: float = BUFFER_DEG,
        animation_interval: float = 0.03,
        basemap: str = "OpenStreetMap",
    ) -> None:
        self.surface = surface
        self.routing = routing
        self.animator = animator or RouteAnimator(surface, interval=animation_interval)
        self.closures = ClosureRegistry(margin)
        self.routes = RouteRegistry(surface)
        self.notices: list[Notice] = []
        self.basemap = basemap

        self._origin: Point | None = None
        self._destination: Point | None = None
        self._pending_click: Point | None = None
        self._color_index = 0
        self._epoch = 0
        self._issued = 0
        self._lock = asyncio.Lock()
        self._subscriptions: list[int] = []
        self._closed = False

    # -- state ---------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        if self._origin is None or self._destination is None:
            return SessionState.IDLE
        if self._pending_click is not None:
            return SessionState.AWAITING_SECOND_CLICK
        return SessionState.READY

    @property
    def origin(self) -> Point | None:
        return self._origin

    @property
    def destination(self) -> Point | None:
        return self._destination

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Subscribe to map clicks on the surface."""
        if not self._subscriptions:
            self._subscriptions.append(self.surface.events.subscribe("click", self.map_clicked))

    def close(self) -> None:
        """Tear down the session: drop subscriptions and stop animations.

        Results that arrive afterwards are discarded.
        """
        self._closed = True
        for token in self._subscriptions:
            self.surface.events.unsubscribe(token)
        self._subscriptions.clear()
        self.animator.cancel_all()
        self._pending_click = None
        log.info("Session closed")

    # -- intents -------------------------------------------------------------

    async def set_origin(self, point: Point) -> RouteRecord | None:
        return await self._set_endpoints(origin=point)

    async def set_destination(self, point: Point) -> RouteRecord | None:
        return await self._set_endpoints(destination=point)

    async def map_clicked(self, point: Point) -> ClosureRecord | None:
        """Buffer a closure endpoint; the second click completes the closure."""
        if self._closed:
            log.debug("Click at %s after teardown ignored", point)
            return None
        if self.state is SessionState.IDLE:
            log.debug("Click at %s ignored, no route yet", point)
            return None
        if self._pending_click is None:
            self._pending_click = point
            return None

        p1, p2 = self._pending_click, point
        self._pending_click = None
        handle = self.surface.add_line([p1, p2], CLOSURE_COLOR, kind="closure")
        record = self.closures.add(p1, p2, handle)
        self._color_index += 1
        await self._recompute(PALETTE[self._color_index % len(PALETTE)])
        return record

    def toggle_route(self, index: int) -> RouteRecord:
        return self.routes.toggle_visibility(index)

    def delete_route(self, index: int) -> RouteRecord:
        record = self.routes[index]
        self.animator.cancel(record.visual_handle)
        return self.routes.remove(index)

    def delete_closure(self, index: int) -> ClosureRecord:
        """Release the closure's line, then drop the record.

        Existing routes are left as they are; later recomputations no
        longer avoid this segment.
        """
        record = self.closures[index]
        if record.visual_handle is not None and record.visual_handle in self.surface:
            self.surface.remove(record.visual_handle)
        return self.closures.remove(index)

    def select_basemap(self, name: str) -> str:
        if name not in BASEMAPS:
            raise UnknownBasemap(f"Unknown basemap: {name!r}")
        self.basemap = name
        return name

    # -- projections ---------------------------------------------------------

    def route_summaries(self) -> list[RouteSummary]:
        return self.routes.summaries()

    def closure_summaries(self) -> list[ClosureSummary]:
        return [
            ClosureSummary(id=c.id, coordinates=c.coordinates, distance_km=round(c.distance_km, 3))
            for c in self.closures
        ]

    # -- internals -----------------------------------------------------------

    async def _set_endpoints(self, origin: Point | None = None, destination: Point | None = None) -> RouteRecord | None:
        if self._closed:
            log.debug("Endpoint change after teardown ignored")
            return None
        if origin is not None:
            self._origin = origin
        if destination is not None:
            self._destination = destination
        if self._pending_click is not None:
            log.info("Endpoints changed, pending closure click discarded")
            self._pending_click = None
        if self.state is SessionState.IDLE:
            return None
        self._epoch += 1
        return await self._recompute(PALETTE[self._color_index % len(PALETTE)])

    async def _recompute(self, color: str) -> RouteRecord | None:
        """Request a route with every live closure and append it on success.

        Requests run one at a time, in the order they were issued. A result
        issued before the latest endpoint change is dropped.
        """
        request = build_route_request(self._origin, self._destination, self.closures.accumulated_avoidance())
        epoch = self._epoch
        self._issued += 1
        seq = self._issued

        async with self._lock:
            if self._closed or epoch != self._epoch:
                log.debug("Recomputation #%d skipped (stale)", seq)
                return None
            try:
                result = await self.routing.route(request)
            except RecomputationFailure as e:
                log.warning("Recomputation #%d failed: %s", seq, e)
                self.notices.append(Notice(message=f"Could not compute a new route: {e}"))
                return None
            if self._closed or epoch != self._epoch:
                log.debug("Recomputation #%d result discarded (stale)", seq)
                return None

            handle = self.animator.animate(result.path, color)
            return self.routes.add(
                color=color,
                distance_km=result.distance_m / 1000,
                duration_min=result.duration_s / 60,
                visual_handle=handle,
            )
