"""Logging of outgoing event deliveries when VCA_LOG_REQUESTS is enabled."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)


def should_log_requests() -> bool:
    """Check if request logging is enabled via VCA_LOG_REQUESTS environment variable."""
    return os.getenv("VCA_LOG_REQUESTS", "").lower() == "true"


def _format_payload(payload: Any) -> str:
    """Format payload for logging."""
    try:
        return json.dumps(payload, indent=2) if isinstance(payload, dict) else str(payload)
    except (TypeError, ValueError):
        return str(payload)


def log_event_request(method: str, url: str, payload: Any = None) -> None:
    """Log an outgoing request if VCA_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Request URL.
        payload: Request body (optional).
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {url}"]
    if payload is not None:
        log_parts.append(f"Payload: {_format_payload(payload)}")
    logger.info("Event request:\n" + "\n".join(log_parts))
