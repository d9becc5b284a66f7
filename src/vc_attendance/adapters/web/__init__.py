"""Web adapters for ingesting events and serving attendance data."""

from vc_attendance.adapters.web.starlette_app import AttendanceWebAdapter

__all__ = ["AttendanceWebAdapter"]
