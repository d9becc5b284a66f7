"""Discord listener turning voice state updates into join/leave events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from vc_attendance.domain.errors import DeliveryFailure
from vc_attendance.domain.models import EventType

if TYPE_CHECKING:
    from vc_attendance.domain.contracts import EventSenderProtocol

logger = logging.getLogger(__name__)

FALLBACK_CHANNEL_NAME = "VC"


def detect_transition(
    before_channel_id: int | None, after_channel_id: int | None, tracked_channel_id: int
) -> EventType | None:
    """Classify a voice state change relative to the tracked channel.

    Moving into the tracked channel from anywhere else is a join, moving out
    of it is a leave. Mute, deafen and similar updates are ignored.
    """
    if after_channel_id == tracked_channel_id and before_channel_id != tracked_channel_id:
        return EventType.JOIN
    if before_channel_id == tracked_channel_id and after_channel_id != tracked_channel_id:
        return EventType.LEAVE
    return None


def _channel_id(state: discord.VoiceState) -> int | None:
    return state.channel.id if state.channel is not None else None


class VoiceChannelListener(discord.Client):
    """Watches one voice channel of one guild and forwards joins and leaves."""

    def __init__(self, guild_id: int, voice_channel_id: int, sender: EventSenderProtocol) -> None:
        """Initialize the listener.

        Args:
            guild_id: Guild to watch; updates from other guilds are ignored.
            voice_channel_id: The tracked voice channel.
            sender: Delivers detected events to the attendance server.
        """
        intents = discord.Intents.default()
        intents.guilds = True
        intents.voice_states = True
        intents.members = True
        super().__init__(intents=intents)
        self.guild_id = guild_id
        self.voice_channel_id = voice_channel_id
        self.sender = sender

    async def on_ready(self) -> None:
        """Log the bot identity once connected."""
        logger.info(f"Logged in as {self.user}")
        logger.info(f"Tracking voice channel ID: {self.voice_channel_id}")

    async def on_voice_state_update(
        self, member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
    ) -> None:
        """Forward joins and leaves of the tracked channel."""
        user = member.name
        if not user or member.guild.id != self.guild_id:
            return

        transition = detect_transition(
            _channel_id(before), _channel_id(after), self.voice_channel_id
        )
        if transition is None:
            return

        channel = after.channel if transition is EventType.JOIN else before.channel
        channel_name = getattr(channel, "name", None) or FALLBACK_CHANNEL_NAME
        try:
            await self.sender.send_event(transition.value, user, channel_name)
        except DeliveryFailure as e:
            logger.error(f"Dropping {transition.value} event for {user}: {e}")
            return
        logger.info(f"{user} {'joined' if transition is EventType.JOIN else 'left'} VC")
