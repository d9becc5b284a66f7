"""Single-consumer queue serializing voice events into the event processor."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from vc_attendance.domain.errors import InvalidEvent
from vc_attendance.domain.ports import (
    EventProcessor,  # noqa: TC001 - Runtime dependency: used in __init__ signature
)

if TYPE_CHECKING:
    from vc_attendance.domain.models import AttendanceState

logger = logging.getLogger(__name__)


@dataclass
class QueuedEvent:
    """An event waiting to be processed, with the future its submitter awaits."""

    event_type: str | None
    user: str | None
    channel: str | None
    result: asyncio.Future[AttendanceState] = field(repr=False)


class EventQueueWorker:
    """Feeds submitted events to the processor one at a time.

    Events may be submitted concurrently from any number of request handlers;
    a single background task drains the queue, so state mutations never
    interleave.
    """

    def __init__(self, processor: EventProcessor) -> None:
        """Initialize the worker.

        Args:
            processor: The single writer of the attendance state.
        """
        self.processor = processor
        self._queue: asyncio.Queue[QueuedEvent] = asyncio.Queue()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        """Whether the consumer task is alive."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the consumer task."""
        if self.running:
            logger.warning("Event queue worker already running")
            return
        self._task = asyncio.create_task(self._consume_loop())
        logger.info("Started event queue worker")

    async def stop(self) -> None:
        """Stop the consumer task, failing events still waiting in the queue."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.info("Event queue worker cancelled")
        self._task = None
        while not self._queue.empty():
            pending = self._queue.get_nowait()
            if not pending.result.done():
                pending.result.cancel()
            self._queue.task_done()
        logger.info("Stopped event queue worker")

    async def submit(
        self, event_type: str | None, user: str | None, channel: str | None = None
    ) -> AttendanceState:
        """Queue an event and wait until it has been processed.

        Returns:
            The state after the event was applied.

        Raises:
            InvalidEvent: If the processor rejected the event.
            RuntimeError: If the worker is not running.
        """
        if not self.running:
            raise RuntimeError("event queue worker is not running")
        result: asyncio.Future[AttendanceState] = asyncio.get_running_loop().create_future()
        await self._queue.put(QueuedEvent(event_type, user, channel, result))
        return await result

    async def _consume_loop(self) -> None:
        """Process queued events sequentially."""
        while True:
            queued = await self._queue.get()
            try:
                state = await self.processor.process(
                    queued.event_type, queued.user, queued.channel
                )
            except asyncio.CancelledError:
                if not queued.result.done():
                    queued.result.cancel()
                raise
            except InvalidEvent as e:
                logger.warning(f"Rejected invalid event: {e}")
                if not queued.result.done():
                    queued.result.set_exception(e)
            except Exception as e:
                logger.error(f"Failed to process event for {queued.user}: {e}", exc_info=True)
                if not queued.result.done():
                    queued.result.set_exception(e)
            else:
                if not queued.result.done():
                    queued.result.set_result(state)
            finally:
                self._queue.task_done()
