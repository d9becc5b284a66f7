"""Discord adapters detecting voice channel joins and leaves."""

from vc_attendance.adapters.discord_bot.event_sender import VoiceEventSender
from vc_attendance.adapters.discord_bot.voice_listener import VoiceChannelListener, detect_transition

__all__ = ["VoiceChannelListener", "VoiceEventSender", "detect_transition"]
