"""Main entry point for the voice channel attendance tracker."""

import asyncio
import logging
import sys

import aiohttp

from vc_attendance.adapters.config import AppConfig
from vc_attendance.adapters.discord_bot import VoiceChannelListener, VoiceEventSender
from vc_attendance.adapters.persistence import JsonSnapshotStore
from vc_attendance.adapters.web import AttendanceWebAdapter
from vc_attendance.adapters.web.broadcasters import StateBroadcaster
from vc_attendance.application.services import AttendanceEventProcessor, LeaderboardService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def build_web_adapter(config: AppConfig) -> AttendanceWebAdapter:
    """Load the stored state and wire the engine into the web adapter."""
    store = JsonSnapshotStore(config.data_file, history_limit=config.history_limit)
    state = store.load()
    broadcaster = StateBroadcaster()
    processor = AttendanceEventProcessor(state, store, broadcaster)
    leaderboards = LeaderboardService(processor.snapshot, processor.now, config.tz)
    return AttendanceWebAdapter(processor, leaderboards, broadcaster, config)


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    web_adapter = build_web_adapter(config)

    if not config.voice_listener_enabled:
        logger.info("Discord voice listener disabled (BOT_TOKEN, GUILD_ID or VOICE_CHANNEL_ID unset)")
        try:
            await web_adapter.start()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
            await web_adapter.stop()
        return

    # Create aiohttp session shared by all event deliveries
    async with aiohttp.ClientSession() as session:
        sender = VoiceEventSender(
            session, config.web_api_url, timeout_seconds=config.event_delivery_timeout
        )
        listener = VoiceChannelListener(config.guild_id, config.voice_channel_id, sender)
        try:
            await asyncio.gather(web_adapter.start(), listener.start(config.bot_token))
        except KeyboardInterrupt:
            logger.info("Shutting down...")
            await web_adapter.stop()
        finally:
            await listener.close()


def run() -> None:
    """Synchronous entry point for the server command."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
