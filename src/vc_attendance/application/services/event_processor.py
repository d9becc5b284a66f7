"""Event processor turning voice join/leave events into attendance state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from vc_attendance.domain.duration import elapsed_seconds
from vc_attendance.domain.errors import InvalidEvent, PersistenceFailure
from vc_attendance.domain.models import AttendanceEvent, AttendanceState, EventType, Session
from vc_attendance.domain.ports import EventProcessor

if TYPE_CHECKING:
    from vc_attendance.domain.contracts import StateBroadcasterProtocol
    from vc_attendance.domain.ports import SnapshotRepository

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_NAME = "VC"


def utc_now() -> datetime:
    """Return the current UTC time at millisecond precision."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class AttendanceEventProcessor(EventProcessor):
    """Single writer of the attendance state.

    Every processed event is recorded in the history, persisted through the
    snapshot repository and pushed to observers through the broadcaster.
    """

    def __init__(
        self,
        state: AttendanceState,
        repository: SnapshotRepository,
        broadcaster: StateBroadcasterProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the processor.

        Args:
            state: The state loaded at startup; owned by this processor from now on.
            repository: Where the state is saved after every mutation.
            broadcaster: Pushes the state to connected observers.
            clock: Source of server-assigned event timestamps.
        """
        self._state = state
        self._repository = repository
        self._broadcaster = broadcaster
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def state(self) -> AttendanceState:
        """The live state. Use snapshot() for reads that may outlive an await."""
        return self._state

    def now(self) -> datetime:
        """Current time according to the processor clock."""
        return self._clock()

    def snapshot(self) -> AttendanceState:
        """Return a consistent copy of the current state."""
        return self._state.copy()

    async def process(
        self, event_type: str | None, user: str | None, channel: str | None = None
    ) -> AttendanceState:
        """Apply a join or leave event and return the updated state.

        Args:
            event_type: "join" or "leave" (case-insensitive).
            user: Username the event belongs to.
            channel: Voice channel name; defaults to "VC".

        Returns:
            The updated state. Unknown event types leave it untouched.

        Raises:
            InvalidEvent: If the user is missing or not a non-empty string.
        """
        if not isinstance(user, str) or not user.strip():
            raise InvalidEvent("event is missing a user")
        if channel is not None and not isinstance(channel, str):
            raise InvalidEvent("event channel must be a string")

        try:
            kind = EventType(str(event_type).lower())
        except ValueError:
            logger.warning(f"Ignoring event with unknown type {event_type!r} for user {user}")
            return self._state

        async with self._lock:
            event = AttendanceEvent(
                type=kind,
                user=user,
                channel=channel or DEFAULT_CHANNEL_NAME,
                time=self._clock(),
            )
            self._apply(event)
            self._persist()
            await self._broadcaster.broadcast_state(self._state)
            return self._state

    def _apply(self, event: AttendanceEvent) -> None:
        """Mutate the state for one event. Must not await."""
        state = self._state
        if event.type is EventType.JOIN:
            if event.user in state.active:
                logger.info(f"{event.user} joined again without leaving; dropping open session")
            state.active[event.user] = Session(channel=event.channel, joined_at=event.time)
            logger.info(f"{event.user} joined {event.channel}")
        else:
            session = state.active.pop(event.user, None)
            if session is not None:
                duration = elapsed_seconds(session.joined_at, event.time)
                if duration < 0:
                    # stats never decrease; a clock step backwards credits nothing
                    logger.warning(f"Negative session duration {duration}s for {event.user}")
                    duration = 0
                state.stats[event.user] = state.stats.get(event.user, 0) + duration
                logger.info(f"{event.user} left {event.channel} after {duration}s")
            else:
                logger.info(f"{event.user} left {event.channel} without an open session")
        state.record(event)

    def _persist(self) -> None:
        """Save the state, keeping the in-memory copy on failure."""
        try:
            self._repository.save(self._state)
        except PersistenceFailure as e:
            logger.error(f"Failed to persist attendance state, serving from memory: {e}")

    async def flush(self) -> None:
        """Persist the current state, e.g. on shutdown."""
        async with self._lock:
            self._persist()
            logger.info("Flushed attendance state")
