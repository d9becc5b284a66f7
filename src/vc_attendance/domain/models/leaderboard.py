"""Leaderboard domain models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class LeaderboardWindow(str, Enum):
    """Time window a leaderboard is computed over."""

    DAILY = "daily"
    WEEKLY = "weekly"
    ALL = "all"


class LeaderboardEntry(BaseModel):
    """A ranked user total.

    ``time`` is the ``HH:MM:SS`` rendering of ``seconds``.
    """

    model_config = ConfigDict(frozen=True)

    user: str
    seconds: int
    time: str


class ExportTable(BaseModel):
    """Two-column tabular rendering of a leaderboard."""

    model_config = ConfigDict(frozen=True)

    headers: tuple[str, str] = ("User", "VC Time")
    rows: list[tuple[str, str]]
