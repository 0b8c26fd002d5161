"""Minimal event subscription used for map and session events."""

from __future__ import annotations

import inspect
import itertools
from collections.abc import Awaitable, Callable
from typing import Any

Handler = Callable[[Any], Awaitable[None] | None]


class EventEmitter:
    """Named-event dispatcher with token-based unsubscription.

    ``subscribe`` returns a token; passing it back to ``unsubscribe`` detaches
    exactly that handler, so owners can unwind their subscriptions on teardown.
    """

    def __init__(self) -> None:
        self._handlers: dict[int, tuple[str, Handler]] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, kind: str, handler: Handler) -> int:
        token = next(self._tokens)
        self._handlers[token] = (kind, handler)
        return token

    def unsubscribe(self, token: int) -> None:
        self._handlers.pop(token, None)

    def handler_count(self, kind: str | None = None) -> int:
        return sum(1 for k, _ in self._handlers.values() if kind is None or k == kind)

    async def emit(self, kind: str, payload: Any = None) -> None:
        """Call every handler for ``kind`` in subscription order."""
        for k, handler in list(self._handlers.values()):
            if k != kind:
                continue
            result = handler(payload)
            if inspect.isawaitable(result):
                await result
