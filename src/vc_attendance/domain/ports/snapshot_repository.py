"""Snapshot repository port."""

from typing import Protocol

from vc_attendance.domain.models.attendance_state import AttendanceState


class SnapshotRepository(Protocol):
    """Port for loading and saving the whole attendance state."""

    def load(self) -> AttendanceState:
        """Load the stored state, or an empty state when none is usable."""
        ...

    def save(self, state: AttendanceState) -> None:
        """Overwrite the stored state.

        Raises:
            PersistenceFailure: If the snapshot could not be written.
        """
        ...
