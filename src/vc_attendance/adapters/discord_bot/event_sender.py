"""HTTP delivery of detected voice events to the attendance server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiohttp

from vc_attendance.domain.contracts.event_sender import EventSenderProtocol
from vc_attendance.domain.errors import DeliveryFailure

from .request_logger import log_event_request

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)


class VoiceEventSender(EventSenderProtocol):
    """Posts voice events as JSON to ``<base_url>/voice-event``."""

    def __init__(self, session: ClientSession, base_url: str, timeout_seconds: int = 10) -> None:
        """Initialize the sender.

        Args:
            session: Shared aiohttp session.
            base_url: Base URL of the attendance server.
            timeout_seconds: Total timeout per delivery.
        """
        self.session = session
        self.url = base_url.rstrip("/") + "/voice-event"
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def send_event(self, event_type: str, user: str, channel: str) -> None:
        """Deliver one event.

        Raises:
            DeliveryFailure: On a non-2xx response or a transport error.
        """
        payload = {"type": event_type, "user": user, "channel": channel}
        log_event_request("POST", self.url, payload)
        try:
            async with self.session.post(self.url, json=payload, timeout=self.timeout) as response:
                if response.status >= 300:
                    raise DeliveryFailure(f"Failed to send event: {response.status}")
        except (aiohttp.ClientError, TimeoutError) as e:
            raise DeliveryFailure(f"Failed to send event: {e}") from e
        logger.debug(f"Delivered {event_type} event for {user}")
