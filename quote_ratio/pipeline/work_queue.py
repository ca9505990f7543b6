from __future__ import annotations

import asyncio
from typing import AsyncIterator, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")

_CLOSED = object()


class QueueClosed(RuntimeError):
    pass


class WorkQueue(Generic[T]):
    """Unbounded FIFO with a producer-closed signal.

    ``get`` blocks until an item arrives or the queue is closed and drained,
    in which case it returns ``None``.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: T) -> None:
        if self.closed:
            raise QueueClosed("work queue is closed")
        self._queue.put_nowait(item)

    def put_batch(self, items: Iterable[T]) -> None:
        for item in items:
            self.put(item)

    def close(self) -> None:
        if self.closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def get(self) -> Optional[T]:
        item = await self._queue.get()
        if item is _CLOSED:
            # leave the marker for any other reader
            self._queue.put_nowait(_CLOSED)
            return None
        return item

    async def __aiter__(self) -> AsyncIterator[T]:
        while True:
            item = await self.get()
            if item is None:
                return
            yield item


__all__ = ["QueueClosed", "WorkQueue"]
