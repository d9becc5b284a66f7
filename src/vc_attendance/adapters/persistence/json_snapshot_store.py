"""JSON file snapshot store for the attendance state."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from vc_attendance.adapters.persistence.snapshot_codec import state_from_payload, state_to_payload
from vc_attendance.domain.errors import PersistenceFailure, SnapshotCorrupt
from vc_attendance.domain.models import DEFAULT_HISTORY_LIMIT, AttendanceState
from vc_attendance.domain.ports import SnapshotRepository

logger = logging.getLogger(__name__)


class JsonSnapshotStore(SnapshotRepository):
    """Keeps the whole attendance state in a single JSON file.

    Every save overwrites the file. Loading never fails: a missing, empty or
    unreadable file yields an empty state.
    """

    def __init__(self, path: str | Path, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        """Initialize the store.

        Args:
            path: Location of the snapshot file; parent directories are created on save.
            history_limit: History cap applied to loaded states.
        """
        self.path = Path(path)
        self.history_limit = history_limit

    def _empty_state(self) -> AttendanceState:
        return AttendanceState(history_limit=self.history_limit)

    def load(self) -> AttendanceState:
        """Load the snapshot, falling back to an empty state."""
        if not self.path.exists():
            logger.info(f"No snapshot at {self.path}, starting with empty attendance state")
            return self._empty_state()

        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Error reading {self.path}: {e}")
            return self._empty_state()

        if not content.strip():
            return self._empty_state()

        try:
            try:
                payload = json.loads(content)
            except json.JSONDecodeError as e:
                raise SnapshotCorrupt(f"invalid JSON: {e}") from e
            state = state_from_payload(payload, self.history_limit)
        except SnapshotCorrupt as e:
            logger.error(f"Error reading {self.path}, starting with empty state: {e}")
            return self._empty_state()

        logger.info(
            f"Loaded snapshot from {self.path}: {len(state.history)} events, "
            f"{len(state.active)} active, {len(state.stats)} users with stats"
        )
        return state

    def save(self, state: AttendanceState) -> None:
        """Overwrite the snapshot with the given state.

        The file is written next to the target and moved into place, so a
        failed write never truncates the previous snapshot.

        Raises:
            PersistenceFailure: If the file could not be written.
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(state_to_payload(state), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceFailure(f"could not write {self.path}: {e}") from e
        logger.debug(f"Saved snapshot to {self.path}")
