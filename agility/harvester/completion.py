"""Drain detection for the lane pool.

``CompletionDetector`` is the only state shared between lanes: the backlog
cursor and the in-flight count. Both are changed by plain synchronous methods,
so on a single event loop no lane can observe a half-finished claim or
release. Finalisation fires exactly once, when the cursor has passed the end
of the backlog and nothing is in flight, and never after a lane failed.
"""
from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from .logging_utils import _harvest_event

FinalizeCallback = Callable[[], Union[None, Awaitable[None]]]


class CompletionDetector:
    def __init__(self, total: int, on_finalize: Optional[FinalizeCallback] = None) -> None:
        if total < 0:
            raise ValueError("total must be non-negative")
        self.total = total
        self._on_finalize = on_finalize
        self._cursor = 0
        self._in_flight = 0
        self._peak_in_flight = 0
        self._finalized = False
        self._failure: Optional[BaseException] = None
        self._drained = asyncio.Event()

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        return self._peak_in_flight

    @property
    def exhausted(self) -> bool:
        return self._cursor >= self.total

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def failure(self) -> Optional[BaseException]:
        return self._failure

    def claim(self) -> Optional[int]:
        """Take the next backlog position and count it as in flight.

        Returns ``None`` once the backlog is exhausted (or the run failed).
        """

        if self.exhausted or self._failure is not None:
            return None
        index = self._cursor
        self._cursor += 1
        self._in_flight += 1
        self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
        return index

    def fail(self, exc: BaseException) -> None:
        """Record the first failure; finalisation is suppressed from now on."""

        if self._failure is None:
            self._failure = exc
            _harvest_event(
                "state",
                phase="completion",
                kind="failed",
                cursor=self._cursor,
                in_flight=self._in_flight,
                error=repr(exc)[:200],
            )

    async def release(self) -> None:
        """Mark one claimed entry as finished, successfully or not."""

        if self._in_flight <= 0:
            raise RuntimeError("release() called without a matching claim()")
        self._in_flight -= 1
        await self.check()

    async def check(self) -> bool:
        """Finalise if the backlog has drained. Returns ``True`` on the call that fires."""

        if self._finalized or self._failure is not None:
            return False
        if not self.exhausted or self._in_flight > 0:
            return False

        self._finalized = True
        _harvest_event(
            "finalize",
            total=self.total,
            cursor=self._cursor,
            peak_in_flight=self._peak_in_flight,
        )
        try:
            if self._on_finalize is not None:
                result: Any = self._on_finalize()
                if inspect.isawaitable(result):
                    await result
        finally:
            self._drained.set()
        return True

    async def wait(self) -> None:
        """Block until finalisation has run."""

        await self._drained.wait()


__all__ = ["CompletionDetector", "FinalizeCallback"]
