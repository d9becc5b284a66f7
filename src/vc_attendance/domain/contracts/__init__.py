"""Contracts (protocols) shared between layers."""

from vc_attendance.domain.contracts.event_sender import EventSenderProtocol
from vc_attendance.domain.contracts.state_broadcaster import StateBroadcasterProtocol

__all__ = ["EventSenderProtocol", "StateBroadcasterProtocol"]
