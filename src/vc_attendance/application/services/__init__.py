"""Application services (use cases) for attendance tracking."""

from vc_attendance.application.services.event_processor import AttendanceEventProcessor
from vc_attendance.application.services.export_formatter import to_table
from vc_attendance.application.services.leaderboard_service import (
    LeaderboardAggregator,
    LeaderboardService,
    window_predicate,
    window_start,
)

__all__ = [
    "AttendanceEventProcessor",
    "LeaderboardAggregator",
    "LeaderboardService",
    "to_table",
    "window_predicate",
    "window_start",
]
