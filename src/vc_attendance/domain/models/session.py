"""Open presence session domain model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Session:
    """A user currently present in the channel, since ``joined_at``."""

    channel: str
    joined_at: datetime
