"""Persistence adapters for the attendance snapshot."""

from vc_attendance.adapters.persistence.json_snapshot_store import JsonSnapshotStore
from vc_attendance.adapters.persistence.snapshot_codec import state_from_payload, state_to_payload

__all__ = ["JsonSnapshotStore", "state_from_payload", "state_to_payload"]
