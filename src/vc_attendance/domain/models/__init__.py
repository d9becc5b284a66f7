"""Domain models for voice channel attendance."""

from vc_attendance.domain.models.attendance_event import AttendanceEvent, EventType
from vc_attendance.domain.models.attendance_state import DEFAULT_HISTORY_LIMIT, AttendanceState
from vc_attendance.domain.models.leaderboard import ExportTable, LeaderboardEntry, LeaderboardWindow
from vc_attendance.domain.models.session import Session

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "AttendanceEvent",
    "AttendanceState",
    "EventType",
    "ExportTable",
    "LeaderboardEntry",
    "LeaderboardWindow",
    "Session",
]
