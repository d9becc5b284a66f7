"""Leaderboard derivation from the attendance history."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, tzinfo

from vc_attendance.application.services.export_formatter import to_table
from vc_attendance.domain.duration import elapsed_seconds, format_duration
from vc_attendance.domain.models import (
    AttendanceEvent,
    AttendanceState,
    EventType,
    ExportTable,
    LeaderboardEntry,
    LeaderboardWindow,
)
from vc_attendance.domain.ports import LeaderboardProvider

logger = logging.getLogger(__name__)

EventPredicate = Callable[[AttendanceEvent], bool]


def window_start(window: LeaderboardWindow, now: datetime, tz: tzinfo) -> datetime | None:
    """Return the inclusive start of a window in local time, or None for all-time.

    Daily windows start at local midnight, weekly windows at the most recent
    Monday 00:00.
    """
    if window is LeaderboardWindow.ALL:
        return None
    local_midnight = now.astimezone(tz).replace(hour=0, minute=0, second=0, microsecond=0)
    if window is LeaderboardWindow.DAILY:
        return local_midnight
    # Wall-clock arithmetic: zoneinfo recomputes the offset, so DST changes stay at 00:00
    return local_midnight - timedelta(days=local_midnight.weekday())


def window_predicate(
    window: LeaderboardWindow, now: datetime, tz: tzinfo
) -> EventPredicate | None:
    """Build a predicate keeping events at or after the window start."""
    start = window_start(window, now, tz)
    if start is None:
        return None
    return lambda event: event.time >= start


class LeaderboardAggregator:
    """Ranks users by time spent, re-derived from the event history.

    Totals are accumulated fresh from join/leave pairs and never read from the
    cumulative ``stats``, so they only cover what the bounded history still holds.
    """

    def leaderboard(
        self,
        history: Iterable[AttendanceEvent],
        window_predicate: EventPredicate | None = None,
    ) -> list[LeaderboardEntry]:
        """Compute a ranked leaderboard.

        Args:
            history: Events, in any order.
            window_predicate: Selects which leave events count; all when None.

        Returns:
            Entries ordered by descending seconds, then by user name.
        """
        events = list(history)
        joins_by_user: dict[str, list[AttendanceEvent]] = {}
        for event in events:
            if event.type is EventType.JOIN:
                joins_by_user.setdefault(event.user, []).append(event)

        totals: dict[str, int] = {}
        for leave in events:
            if leave.type is not EventType.LEAVE:
                continue
            if window_predicate is not None and not window_predicate(leave):
                continue
            join = self._nearest_join(joins_by_user.get(leave.user, []), leave)
            if join is None:
                logger.debug(f"No join found for leave of {leave.user} at {leave.time}")
                continue
            totals[leave.user] = totals.get(leave.user, 0) + elapsed_seconds(join.time, leave.time)

        ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
        return [
            LeaderboardEntry(user=user, seconds=seconds, time=format_duration(seconds))
            for user, seconds in ranked
        ]

    @staticmethod
    def _nearest_join(
        joins: list[AttendanceEvent], leave: AttendanceEvent
    ) -> AttendanceEvent | None:
        """Return the latest join at or before the leave, if any."""
        nearest: AttendanceEvent | None = None
        for join in joins:
            if join.time <= leave.time and (nearest is None or join.time > nearest.time):
                nearest = join
        return nearest


class LeaderboardService(LeaderboardProvider):
    """Computes windowed leaderboards over a consistent state snapshot."""

    def __init__(
        self,
        snapshot: Callable[[], AttendanceState],
        clock: Callable[[], datetime],
        tz: tzinfo,
        aggregator: LeaderboardAggregator | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            snapshot: Returns a copy of the current state.
            clock: Current time, used to place the window.
            tz: Local time zone defining calendar days and weeks.
            aggregator: Aggregator to use; a default one when omitted.
        """
        self._snapshot = snapshot
        self._clock = clock
        self._tz = tz
        self._aggregator = aggregator or LeaderboardAggregator()

    def for_window(self, window: LeaderboardWindow) -> list[LeaderboardEntry]:
        """Compute the leaderboard for a window."""
        state = self._snapshot()
        predicate = window_predicate(window, self._clock(), self._tz)
        return self._aggregator.leaderboard(state.history, predicate)

    def export_table(self, window: LeaderboardWindow) -> ExportTable:
        """Compute the leaderboard for a window shaped as an export table."""
        return to_table(self.for_window(window))
