"""Broadcaster pushing the full attendance state to WebSocket observers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from vc_attendance.adapters.persistence.snapshot_codec import state_to_payload
from vc_attendance.domain.contracts.state_broadcaster import StateBroadcasterProtocol

if TYPE_CHECKING:
    from starlette.websockets import WebSocket

    from vc_attendance.domain.models import AttendanceState

logger = logging.getLogger(__name__)

DEFAULT_SEND_TIMEOUT_SECONDS = 5.0


class StateBroadcaster(StateBroadcasterProtocol):
    """Fans the whole state out to every connected observer."""

    def __init__(self, send_timeout: float = DEFAULT_SEND_TIMEOUT_SECONDS) -> None:
        """Initialize with no observers.

        Args:
            send_timeout: Seconds a single observer may take to receive a push.
        """
        self.connected_sockets: set[WebSocket] = set()
        self.send_timeout = send_timeout

    async def connect(self, socket: WebSocket, snapshot: Callable[[], AttendanceState]) -> bool:
        """Accept an observer and send it the current state as initial snapshot.

        The observer is registered and the snapshot taken without awaiting in
        between, so any event processed afterwards is pushed to it as well.

        Args:
            socket: The observer connection.
            snapshot: Returns a copy of the current state.

        Returns:
            True if the observer was registered, False if the initial send failed.
        """
        await socket.accept()
        self.register_socket(socket)
        payload = state_to_payload(snapshot())
        if await self._send(socket, payload):
            return True

        logger.warning("Failed to send initial snapshot, dropping observer")
        self.unregister_socket(socket)
        try:
            await socket.close()
        except Exception as e:
            logger.debug(f"Closing dropped observer failed: {e}")
        return False

    def register_socket(self, socket: WebSocket) -> None:
        """Register an observer for updates."""
        self.connected_sockets.add(socket)
        logger.info(f"Registered observer, total connected: {len(self.connected_sockets)}")

    def unregister_socket(self, socket: WebSocket) -> None:
        """Unregister an observer. Idempotent."""
        if socket in self.connected_sockets:
            self.connected_sockets.discard(socket)
            logger.info(f"Unregistered observer, total connected: {len(self.connected_sockets)}")

    async def _send(self, socket: WebSocket, payload: dict[str, Any]) -> bool:
        """Send one payload, bounded by the send timeout."""
        try:
            await asyncio.wait_for(socket.send_json(payload), timeout=self.send_timeout)
        except Exception as e:
            logger.warning(f"Failed to push state to observer: {e!r}")
            return False
        return True

    async def broadcast_state(self, state: AttendanceState) -> None:
        """Send the whole state to all observers concurrently, dropping those that fail."""
        if not self.connected_sockets:
            return
        payload = state_to_payload(state)
        sockets = list(self.connected_sockets)
        results = await asyncio.gather(*(self._send(socket, payload) for socket in sockets))
        for socket, delivered in zip(sockets, results, strict=True):
            if not delivered:
                self.unregister_socket(socket)
        logger.debug(f"Broadcasted state to {len(self.connected_sockets)} observer(s)")
