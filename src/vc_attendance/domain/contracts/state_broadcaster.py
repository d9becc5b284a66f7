"""Protocol for broadcasting attendance state."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from vc_attendance.domain.models.attendance_state import AttendanceState


class StateBroadcasterProtocol(Protocol):
    """Protocol for pushing the full state to every connected observer."""

    async def broadcast_state(self, state: "AttendanceState") -> None:
        """Send the whole state to all observers.

        Args:
            state: The state to push. Implementations must not raise.
        """
        ...
