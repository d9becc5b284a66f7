"""Error kinds raised by the attendance engine and its adapters."""


class AttendanceError(Exception):
    """Base class for attendance tracking errors."""


class InvalidEvent(AttendanceError):
    """An incoming event is missing or has malformed fields."""


class PersistenceFailure(AttendanceError):
    """Writing the attendance snapshot failed."""


class SnapshotCorrupt(AttendanceError):
    """A stored snapshot could not be parsed."""


class DeliveryFailure(AttendanceError):
    """A voice event could not be delivered to the event processor."""
