"""Attendance state aggregate."""

from dataclasses import dataclass, field

from vc_attendance.domain.models.attendance_event import AttendanceEvent
from vc_attendance.domain.models.session import Session

DEFAULT_HISTORY_LIMIT = 100


@dataclass
class AttendanceState:
    """Live presence, bounded event history and cumulative totals.

    ``history`` is ordered most-recent-first and never grows beyond
    ``history_limit`` entries. ``active`` holds users whose latest processed
    event was a join. ``stats`` maps users to cumulative seconds present.
    """

    history: list[AttendanceEvent] = field(default_factory=list)
    active: dict[str, Session] = field(default_factory=dict)
    stats: dict[str, int] = field(default_factory=dict)
    history_limit: int = DEFAULT_HISTORY_LIMIT

    def record(self, event: AttendanceEvent) -> None:
        """Prepend an event to the history, evicting the oldest beyond the limit."""
        self.history.insert(0, event)
        del self.history[self.history_limit :]

    def copy(self) -> "AttendanceState":
        """Return an independent copy (events and sessions are immutable)."""
        return AttendanceState(
            history=list(self.history),
            active=dict(self.active),
            stats=dict(self.stats),
            history_limit=self.history_limit,
        )
