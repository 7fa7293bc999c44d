from __future__ import annotations

import asyncio
from contextvars import ContextVar, Token
from types import TracebackType

from azprovider.core.exceptions import OperationCancelledError, OperationTimeoutError

# stop events already watched by an enclosing Deadline in this task
_watched: ContextVar[frozenset[int]] = ContextVar("azprovider_watched_stops", default=frozenset())


class Deadline:
    """Scope a lifecycle operation to a timeout and the provider's stop signal.

    On exit the stop watcher is always released. An expired timeout surfaces as
    ``OperationTimeoutError``; a stop signal surfaces as ``OperationCancelledError``.
    """

    def __init__(self, operation: str, seconds: float, stop: asyncio.Event | None = None) -> None:
        self.operation = operation
        self.seconds = seconds
        self._stop = stop
        self._task: asyncio.Task[object] | None = None
        self._timeout: asyncio.Timeout | None = None
        self._watcher: asyncio.Task[None] | None = None
        self._watch_token: Token[frozenset[int]] | None = None
        self._stopped = False

    async def __aenter__(self) -> Deadline:
        if self._stop is not None and self._stop.is_set():
            raise OperationCancelledError(self.operation)
        self._task = asyncio.current_task()
        self._timeout = asyncio.timeout(self.seconds)
        await self._timeout.__aenter__()
        if self._stop is not None and self._task is not None:
            watched = _watched.get()
            if id(self._stop) not in watched:
                self._watch_token = _watched.set(watched | {id(self._stop)})
                self._watcher = asyncio.create_task(self._watch(self._stop, self._task))
        return self

    async def _watch(self, stop: asyncio.Event, task: asyncio.Task[object]) -> None:
        await stop.wait()
        if not task.done():
            self._stopped = True
            task.cancel()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if self._watcher is not None:
            self._watcher.cancel()
            self._watcher = None
        if self._watch_token is not None:
            _watched.reset(self._watch_token)
            self._watch_token = None
        assert self._timeout is not None
        try:
            await self._timeout.__aexit__(exc_type, exc, tb)
        except TimeoutError as err:
            raise OperationTimeoutError(self.operation, self.seconds) from err
        if self._stopped:
            assert self._task is not None
            self._task.uncancel()
            if exc_type is asyncio.CancelledError:
                raise OperationCancelledError(self.operation) from exc
        return False
