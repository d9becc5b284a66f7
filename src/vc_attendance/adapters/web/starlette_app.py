"""Starlette web adapter exposing ingestion, leaderboards, exports and live state."""

from __future__ import annotations

import contextlib
import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route, WebSocketRoute
from starlette.websockets import WebSocket, WebSocketDisconnect

from vc_attendance.adapters.config import AppConfig
from vc_attendance.adapters.export import XLSX_MEDIA_TYPE, export_filename, render_xlsx
from vc_attendance.adapters.persistence.snapshot_codec import state_to_payload
from vc_attendance.domain.errors import InvalidEvent
from vc_attendance.domain.models import EventType, LeaderboardWindow
from vc_attendance.domain.ports import EventProcessor, LeaderboardProvider

from .broadcasters import StateBroadcaster
from .rate_limit_middleware import RateLimitMiddleware
from .workers import EventQueueWorker

logger = logging.getLogger(__name__)

KNOWN_EVENT_TYPES = frozenset(t.value for t in EventType)


def parse_window(value: str) -> LeaderboardWindow | None:
    """Map a path parameter to a leaderboard window, None when unknown."""
    try:
        return LeaderboardWindow(value.lower())
    except ValueError:
        return None


class AttendanceWebAdapter:
    """HTTP and WebSocket surface of the attendance tracker."""

    def __init__(
        self,
        processor: EventProcessor,
        leaderboards: LeaderboardProvider,
        broadcaster: StateBroadcaster,
        config: AppConfig,
    ) -> None:
        """Initialize the web adapter.

        Args:
            processor: Single writer of the attendance state.
            leaderboards: Computes windowed leaderboards.
            broadcaster: Gateway holding the connected observers.
            config: Application configuration.
        """
        if not isinstance(config, AppConfig):
            raise TypeError("config must be an AppConfig instance")

        self.processor = processor
        self.leaderboards = leaderboards
        self.broadcaster = broadcaster
        self.config = config
        self.worker = EventQueueWorker(processor)
        self._server: Any | None = None

    @contextlib.asynccontextmanager
    async def lifespan(self, _app: Starlette) -> AsyncIterator[None]:
        """Run the event queue worker for the lifetime of the app."""
        await self.worker.start()
        try:
            yield
        finally:
            await self.worker.stop()
            await self.processor.flush()

    def build_app(self) -> Starlette:
        """Create the Starlette application."""
        routes = [
            Route("/voice-event", self.voice_event, methods=["POST"]),
            Route("/leaderboard/{window}", self.leaderboard, methods=["GET"]),
            Route("/export/xlsx/{window}", self.export_xlsx, methods=["GET"]),
            Route("/state", self.current_state, methods=["GET"]),
            Route("/healthz", self.healthz, methods=["GET"]),
            WebSocketRoute("/ws", self.observe),
        ]
        middleware = [
            Middleware(
                RateLimitMiddleware,
                requests_per_minute=self.config.rate_limit_per_minute,
            )
        ]
        return Starlette(routes=routes, middleware=middleware, lifespan=self.lifespan)

    async def voice_event(self, request: Request) -> Response:
        """Ingest a join or leave event; the server assigns the timestamp."""
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse({"error": "request body must be JSON"}, status_code=400)
        if not isinstance(body, dict):
            return JSONResponse({"error": "request body must be a JSON object"}, status_code=400)

        event_type = body.get("type")
        try:
            await self.worker.submit(event_type, body.get("user"), body.get("channel"))
        except InvalidEvent as e:
            return JSONResponse({"error": str(e)}, status_code=400)

        if str(event_type).lower() not in KNOWN_EVENT_TYPES:
            return JSONResponse({"status": "ignored"}, status_code=202)
        return JSONResponse({"status": "ok"})

    async def leaderboard(self, request: Request) -> Response:
        """Return the ranked leaderboard for a window."""
        window = parse_window(request.path_params["window"])
        if window is None:
            return JSONResponse({"error": "unknown leaderboard window"}, status_code=404)
        entries = self.leaderboards.for_window(window)
        return JSONResponse([{"user": e.user, "time": e.time} for e in entries])

    async def export_xlsx(self, request: Request) -> Response:
        """Return the leaderboard for a window as a downloadable workbook."""
        window = parse_window(request.path_params["window"])
        if window is None:
            return JSONResponse({"error": "unknown leaderboard window"}, status_code=404)
        try:
            content = render_xlsx(
                self.leaderboards.export_table(window), creator=self.config.export_creator
            )
        except Exception as e:
            logger.error(f"XLSX export failed: {e}", exc_info=True)
            return Response("Failed to export XLSX", status_code=500, media_type="text/plain")

        return Response(
            content=content,
            media_type=XLSX_MEDIA_TYPE,
            headers={
                "Content-Disposition": f'attachment; filename="{export_filename(window.value)}"'
            },
        )

    async def current_state(self, _request: Request) -> Response:
        """Return the full attendance state."""
        return JSONResponse(state_to_payload(self.processor.snapshot()))

    async def healthz(self, _request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")

    async def observe(self, websocket: WebSocket) -> None:
        """Stream the full state to an observer until it disconnects."""
        if not await self.broadcaster.connect(websocket, self.processor.snapshot):
            return
        try:
            while True:
                # Observers only listen; inbound messages are ignored
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            self.broadcaster.unregister_socket(websocket)

    async def start(self) -> None:
        """Start the web server."""
        import uvicorn

        config = uvicorn.Config(
            self.build_app(),
            host=self.config.host,
            port=self.config.port,
            log_level="info",
        )
        self._server = uvicorn.Server(config)
        logger.info(f"Serving attendance tracker on {self.config.host}:{self.config.port}")
        await self._server.serve()

    async def stop(self) -> None:
        """Stop the web server."""
        if self._server:
            self._server.should_exit = True
