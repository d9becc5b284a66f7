"""Domain layer - attendance models, duration rules and ports."""

from vc_attendance.domain.errors import (
    AttendanceError,
    DeliveryFailure,
    InvalidEvent,
    PersistenceFailure,
    SnapshotCorrupt,
)
from vc_attendance.domain.models import (
    AttendanceEvent,
    AttendanceState,
    EventType,
    LeaderboardEntry,
    LeaderboardWindow,
    Session,
)
from vc_attendance.domain.ports import EventProcessor, LeaderboardProvider, SnapshotRepository

__all__ = [
    "AttendanceError",
    "AttendanceEvent",
    "AttendanceState",
    "DeliveryFailure",
    "EventProcessor",
    "EventType",
    "InvalidEvent",
    "LeaderboardEntry",
    "LeaderboardProvider",
    "LeaderboardWindow",
    "PersistenceFailure",
    "Session",
    "SnapshotCorrupt",
    "SnapshotRepository",
]
