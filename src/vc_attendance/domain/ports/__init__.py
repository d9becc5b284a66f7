"""Ports (interfaces) for the ports-and-adapters architecture."""

from vc_attendance.domain.ports.event_processor import EventProcessor
from vc_attendance.domain.ports.leaderboard_provider import LeaderboardProvider
from vc_attendance.domain.ports.snapshot_repository import SnapshotRepository

__all__ = ["EventProcessor", "LeaderboardProvider", "SnapshotRepository"]
