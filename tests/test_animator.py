"""Tests for progressive route drawing."""

import asyncio

import pytest

from closure_routing import MapSurface
from closure_routing.animator import RouteAnimator

PATH = [(-73.95, 40.70), (-73.94, 40.705), (-73.935, 40.72), (-73.93, 40.71)]


@pytest.mark.asyncio
class TestRouteAnimator:
    async def test_reveals_all_points(self):
        surface = MapSurface()
        animator = RouteAnimator(surface, interval=0)
        handle = animator.animate(PATH, "blue")
        await animator.wait(handle)
        assert surface.layer(handle).points == PATH
        assert not animator.is_animating(handle)

    async def test_starts_empty_and_fits_view_immediately(self):
        surface = MapSurface()
        animator = RouteAnimator(surface, interval=0.05)
        handle = animator.animate(PATH, "green")
        assert surface.layer(handle).points == []
        assert surface.layer(handle).color == "green"
        assert surface.viewport.bounds == (-73.95, 40.70, -73.93, 40.72)
        assert surface.viewport.padding == (50, 50)
        animator.cancel(handle)

    async def test_cancel_stops_writes(self):
        surface = MapSurface()
        animator = RouteAnimator(surface, interval=0.01)
        handle = animator.animate(PATH * 10, "blue")
        await asyncio.sleep(0.025)
        animator.cancel(handle)
        drawn = len(surface.layer(handle).points)
        await asyncio.sleep(0.05)
        assert len(surface.layer(handle).points) == drawn < len(PATH * 10)
        assert not animator.is_animating(handle)

    async def test_removed_layer_stops_animation(self):
        surface = MapSurface()
        animator = RouteAnimator(surface, interval=0.01)
        handle = animator.animate(PATH * 10, "blue")
        surface.remove(handle)
        await animator.wait(handle)
        assert handle not in surface

    async def test_cancel_all(self):
        surface = MapSurface()
        animator = RouteAnimator(surface, interval=0.01)
        handles = [animator.animate(PATH, c) for c in ("blue", "green")]
        animator.cancel_all()
        await asyncio.sleep(0.05)
        assert all(not animator.is_animating(h) for h in handles)
        assert all(surface.layer(h).points == [] for h in handles)
