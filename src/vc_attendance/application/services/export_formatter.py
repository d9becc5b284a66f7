"""Shapes leaderboards into exportable tables."""

from vc_attendance.domain.models import ExportTable, LeaderboardEntry

EXPORT_HEADERS = ("User", "VC Time")


def to_table(entries: list[LeaderboardEntry]) -> ExportTable:
    """Convert a ranked leaderboard into ``User`` / ``VC Time`` rows, keeping the order."""
    return ExportTable(
        headers=EXPORT_HEADERS,
        rows=[(entry.user, entry.time) for entry in entries],
    )
