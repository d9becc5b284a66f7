"""Broadcasters for web adapter."""

from vc_attendance.adapters.web.broadcasters.state_broadcaster import StateBroadcaster

__all__ = ["StateBroadcaster"]
