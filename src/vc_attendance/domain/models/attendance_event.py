"""Attendance event domain model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class EventType(str, Enum):
    """Kind of voice channel transition."""

    JOIN = "join"
    LEAVE = "leave"


@dataclass(frozen=True)
class AttendanceEvent:
    """A timestamped join or leave of a user in the monitored channel."""

    type: EventType
    user: str
    channel: str
    time: datetime
