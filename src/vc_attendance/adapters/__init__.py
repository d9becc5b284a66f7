"""Adapters layer - external system integrations."""

from vc_attendance.adapters.config import AppConfig
from vc_attendance.adapters.persistence import JsonSnapshotStore

__all__ = ["AppConfig", "JsonSnapshotStore"]
