"""Protocol for delivering voice events to the event processor."""

from typing import Protocol


class EventSenderProtocol(Protocol):
    """Protocol for forwarding detected voice events."""

    async def send_event(self, event_type: str, user: str, channel: str) -> None:
        """Deliver a voice event.

        Args:
            event_type: "join" or "leave".
            user: Username of the member.
            channel: Name of the voice channel.

        Raises:
            DeliveryFailure: If the event could not be delivered.
        """
        ...
