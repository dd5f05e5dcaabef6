"""
Progress reporting for music engineer module.

ProgressChannel records every notification, forwards it to an optional
callback and exposes it to consumers through an asyncio queue.
"""
import asyncio
import inspect
from typing import Any, Callable, List, Optional
from uuid import UUID

from shared.logging import get_logger
from shared.models.assembly import ProgressEvent

logger = get_logger("music_engineer.progress")

ProgressCallback = Callable[[float, str], Any]


class ProgressChannel:
    """Monotonic progress channel for one assembly run."""

    def __init__(self, callback: Optional[ProgressCallback] = None, job_id: Optional[UUID] = None):
        self._callback = callback
        self._job_id = job_id
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self.events: List[ProgressEvent] = []

    @property
    def fraction(self) -> float:
        """Last reported fraction (0.0 before any report)."""
        return self.events[-1].fraction if self.events else 0.0

    @property
    def closed(self) -> bool:
        return self._closed

    async def report(self, fraction: float, stage: str) -> ProgressEvent:
        """
        Publish a progress notification.

        Fractions below the last reported value are raised to it so the stream
        never goes backwards.

        Raises:
            ValueError: If fraction is outside [0, 1]
            RuntimeError: If the channel is closed
        """
        if self._closed:
            raise RuntimeError("Progress channel is closed")
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"Progress fraction must be within [0, 1], got {fraction}")

        event = ProgressEvent(fraction=max(fraction, self.fraction), stage=stage)
        self.events.append(event)
        await self._queue.put(event)

        logger.info(
            stage,
            extra={"job_id": str(self._job_id) if self._job_id else None, "progress": event.fraction}
        )

        if self._callback is not None:
            result = self._callback(event.fraction, event.stage)
            if inspect.isawaitable(result):
                await result

        return event

    async def close(self) -> None:
        """Signal consumers that no more events will follow."""
        if not self._closed:
            self._closed = True
            await self._queue.put(None)

    async def stream(self):
        """Yield events in publication order until the channel is closed."""
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event
