"""Configuration adapters."""

from vc_attendance.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
