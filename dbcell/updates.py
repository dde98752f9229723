"""Serial consumer feeding field edits from an event channel into a session."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .session import ConnectionSession

LOG = logging.getLogger(__name__)


class FieldUpdateQueue:
    """Apply queued field edits to a session strictly in arrival order."""

    def __init__(self, session: ConnectionSession) -> None:
        self._session = session
        self._queue: asyncio.Queue[tuple[str, Any] | None] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None

    @property
    def session(self) -> ConnectionSession:
        return self._session

    def submit(self, field: str, value: Any) -> None:
        """Enqueue an edit without waiting for it to be applied."""

        self._queue.put_nowait((field, value))

    def start(self) -> asyncio.Task[None]:
        """Run the consumer as a task on the running loop."""

        if self._task is None or self._task.done():
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self.run())
        return self._task

    async def run(self) -> None:
        """Consume edits until ``stop()`` is called."""

        while True:
            item = await self._queue.get()
            try:
                if item is None:
                    return
                field, value = item
                try:
                    self._session.update_field(field, value)
                except ValueError as error:
                    LOG.debug("Rejected field update", extra={"field": field, "error": str(error)})
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every submitted edit has been applied."""

        await self._queue.join()

    async def stop(self) -> None:
        """Drain pending edits, then stop the consumer."""

        self._queue.put_nowait(None)
        if self._task is not None:
            await self._task
            self._task = None


__all__ = ["FieldUpdateQueue"]
