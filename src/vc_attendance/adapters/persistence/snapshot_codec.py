"""JSON layout of the attendance snapshot.

The layout is shared by the snapshot file and the broadcast payload::

    {
      "history": [{"type": "join", "user": "...", "channel": "...", "time": "...Z"}],
      "active": {"<user>": {"channel": "...", "joinedAt": "...Z"}},
      "stats": {"<user>": 123}
    }
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from vc_attendance.domain.errors import SnapshotCorrupt
from vc_attendance.domain.models import (
    DEFAULT_HISTORY_LIMIT,
    AttendanceEvent,
    AttendanceState,
    EventType,
    Session,
)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class EventRecord(BaseModel):
    """Serialized history entry."""

    type: EventType
    user: str
    channel: str
    time: datetime

    @field_validator("time")
    @classmethod
    def normalize_time(cls, v: datetime) -> datetime:
        """Store all times in UTC."""
        return _as_utc(v)

    @field_serializer("time")
    def serialize_time(self, v: datetime) -> str:
        """Serialize the time with a Z suffix."""
        return format_timestamp(v)


class SessionRecord(BaseModel):
    """Serialized active session."""

    model_config = ConfigDict(populate_by_name=True)

    channel: str
    joined_at: datetime = Field(alias="joinedAt")

    @field_validator("joined_at")
    @classmethod
    def normalize_joined_at(cls, v: datetime) -> datetime:
        """Store all times in UTC."""
        return _as_utc(v)

    @field_serializer("joined_at")
    def serialize_joined_at(self, v: datetime) -> str:
        """Serialize the join time with a Z suffix."""
        return format_timestamp(v)


class SnapshotRecord(BaseModel):
    """Serialized attendance state."""

    history: list[EventRecord] = Field(default_factory=list)
    active: dict[str, SessionRecord] = Field(default_factory=dict)
    stats: dict[str, int] = Field(default_factory=dict)


def state_to_payload(state: AttendanceState) -> dict[str, Any]:
    """Convert the state into its JSON-ready layout."""
    record = SnapshotRecord(
        history=[
            EventRecord(type=e.type, user=e.user, channel=e.channel, time=e.time)
            for e in state.history
        ],
        active={
            user: SessionRecord(channel=s.channel, joined_at=s.joined_at)
            for user, s in state.active.items()
        },
        stats=dict(state.stats),
    )
    return record.model_dump(mode="json", by_alias=True)


def state_from_payload(
    payload: Any, history_limit: int = DEFAULT_HISTORY_LIMIT
) -> AttendanceState:
    """Build a state from its JSON layout.

    Raises:
        SnapshotCorrupt: If the payload does not match the layout.
    """
    try:
        record = SnapshotRecord.model_validate(payload)
    except ValidationError as e:
        raise SnapshotCorrupt(f"snapshot does not match the expected layout: {e}") from e

    return AttendanceState(
        history=[
            AttendanceEvent(type=r.type, user=r.user, channel=r.channel, time=r.time)
            for r in record.history[:history_limit]
        ],
        active={
            user: Session(channel=r.channel, joined_at=r.joined_at)
            for user, r in record.active.items()
        },
        stats=dict(record.stats),
        history_limit=history_limit,
    )
