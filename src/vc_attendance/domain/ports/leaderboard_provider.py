"""Leaderboard provider port."""

from typing import Protocol

from vc_attendance.domain.models.leaderboard import (
    ExportTable,
    LeaderboardEntry,
    LeaderboardWindow,
)


class LeaderboardProvider(Protocol):
    """Port for computing windowed leaderboards."""

    def for_window(self, window: LeaderboardWindow) -> list[LeaderboardEntry]:
        """Compute the ranked leaderboard for a window."""
        ...

    def export_table(self, window: LeaderboardWindow) -> ExportTable:
        """Compute the leaderboard for a window shaped as an export table."""
        ...
