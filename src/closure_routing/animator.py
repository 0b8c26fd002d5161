"""Progressive route drawing on the map surface."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from .models import Point, VisualHandle
from .surface import MapSurface

log = logging.getLogger(__name__)

FIT_PADDING = (50, 50)


@dataclass
class Animation:
    handle: VisualHandle
    points: Iterator[Point]
    cancelled: bool = False
    task: asyncio.Task | None = field(default=None, repr=False)


class RouteAnimator:
    """Reveals a path one point per tick on an asyncio task.

    The view is fitted to the whole path as soon as drawing starts. A tick
    that finds its animation cancelled or its layer released stops quietly.
    """

    def __init__(self, surface: MapSurface, interval: float = 0.03, padding: tuple[int, int] = FIT_PADDING) -> None:
        self.surface = surface
        self.interval = interval
        self.padding = padding
        self._animations: dict[VisualHandle, Animation] = {}

    def animate(self, path: list[Point], color: str) -> VisualHandle:
        handle = self.surface.add_line([], color)
        self.surface.fit_bounds(path, self.padding)
        animation = Animation(handle=handle, points=iter(list(path)))
        animation.task = asyncio.get_running_loop().create_task(self._run(animation))
        self._animations[handle] = animation
        return handle

    def is_animating(self, handle: VisualHandle) -> bool:
        animation = self._animations.get(handle)
        return animation is not None and not animation.task.done()

    def cancel(self, handle: VisualHandle) -> None:
        animation = self._animations.pop(handle, None)
        if animation is None:
            return
        animation.cancelled = True
        animation.task.cancel()

    def cancel_all(self) -> None:
        for handle in list(self._animations):
            self.cancel(handle)

    async def wait(self, handle: VisualHandle) -> None:
        """Wait until the animation for ``handle`` has finished or stopped."""
        animation = self._animations.get(handle)
        if animation is None:
            return
        await asyncio.gather(animation.task, return_exceptions=True)

    async def _run(self, animation: Animation) -> None:
        try:
            for point in animation.points:
                await asyncio.sleep(self.interval)
                if animation.cancelled or animation.handle not in self.surface:
                    log.debug("Animation of %s stopped early", animation.handle)
                    return
                self.surface.extend_line(animation.handle, point)
        finally:
            if self._animations.get(animation.handle) is animation:
                del self._animations[animation.handle]
