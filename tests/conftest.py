import asyncio
import math

import pytest

from closure_routing import ClosureInteractionController, MapSurface, RecomputationFailure
from closure_routing.models import RouteResult

ORIGIN = (-73.95, 40.70)
DESTINATION = (-73.93, 40.71)


class FakeRoutingClient:
    """Routing service double: records requests, can fail or block on demand."""

    def __init__(self):
        self.requests = []
        self.fail_on: set[int] = set()
        self.gates: dict[int, asyncio.Event] = {}

    async def route(self, request):
        self.requests.append(request)
        n = len(self.requests)
        if n in self.gates:
            await self.gates[n].wait()
        if n in self.fail_on:
            raise RecomputationFailure(f"simulated failure #{n}")
        origin, destination = request.origin, request.destination
        mid = ((origin[0] + destination[0]) / 2, (origin[1] + destination[1]) / 2 + 0.001)
        return RouteResult(path=[origin, mid, destination], distance_m=1000.0 * n, duration_s=120.0 * n)


def haversine_km(p1, p2):
    r = 6371.0
    phi1, phi2 = math.radians(p1[1]), math.radians(p2[1])
    dphi = math.radians(p2[1] - p1[1])
    dlmb = math.radians(p2[0] - p1[0])
    s = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * r * math.asin(math.sqrt(s))


@pytest.fixture
def surface():
    return MapSurface()


@pytest.fixture
def routing():
    return FakeRoutingClient()


@pytest.fixture
def controller(surface, routing):
    ctrl = ClosureInteractionController(surface, routing, animation_interval=0)
    ctrl.start()
    yield ctrl
    ctrl.close()
