"""Event processor port."""

from typing import Protocol

from vc_attendance.domain.models.attendance_state import AttendanceState


class EventProcessor(Protocol):
    """Port for the single writer of the attendance state."""

    async def process(
        self, event_type: str | None, user: str | None, channel: str | None = None
    ) -> AttendanceState:
        """Apply a join or leave event and return the updated state."""
        ...

    def snapshot(self) -> AttendanceState:
        """Return a consistent copy of the current state."""
        ...

    async def flush(self) -> None:
        """Persist the current state."""
        ...
