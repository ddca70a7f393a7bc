"""WebSocket endpoint hosting one dream recording session per connection.

The client streams raw PCM audio bytes (16-bit, 16 kHz, mono) and sends
JSON text commands; the server answers with JSON ``WebSocketMessage``
objects.

Client -> server:
    ``{"type": "start", "sample_rate": 16000}``, ``{"type": "stop"}``,
    ``{"type": "reset"}``, or binary PCM frames while recording.

Server -> client:
    ``connected``, ``state`` (capture transitions), ``emoji`` (one per
    transcribed chunk), ``stage`` (pipeline progress), ``dream`` (the
    archived record) and ``error``.

Pipeline: PCM -> Capture Controller -> chunks -> Chunk Uploader -> emoji
                                   -> full WAV -> Pipeline Orchestrator -> Archive
"""

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from dreamscape.core.exceptions import DreamscapeError
from dreamscape.core.models import WebSocketMessage, WebSocketMessageType
from dreamscape.services.session import RecordingSession

logger = logging.getLogger(__name__)

router = APIRouter()


async def _pump(websocket: WebSocket, outbox: asyncio.Queue[WebSocketMessage]) -> None:
    """Forward queued session messages to the client in order."""
    while True:
        message = await outbox.get()
        try:
            await websocket.send_json(message.model_dump(mode="json"))
        except (WebSocketDisconnect, RuntimeError):
            logger.debug("Client gone, dropping %s message", message.type.value)
            return


async def _handle_command(session: RecordingSession, raw: str) -> None:
    try:
        command = json.loads(raw)
    except json.JSONDecodeError:
        session.send(WebSocketMessageType.error, message="Malformed command")
        return
    kind = command.get("type") if isinstance(command, dict) else None

    try:
        if kind == "start":
            await session.start(command.get("sample_rate"))
        elif kind == "stop":
            await session.stop()
        elif kind == "reset":
            await session.reset()
        else:
            session.send(WebSocketMessageType.error, message=f"Unknown command: {kind}")
    except DreamscapeError as exc:
        logger.warning("Command %s rejected: %s", kind, exc.detail)
        session.send(WebSocketMessageType.error, message=exc.detail, code=exc.code)


@router.websocket("/ws/record")
async def record_ws(websocket: WebSocket) -> None:
    """Host a capture session, its chunk uploads and its pipeline run."""
    await websocket.accept()
    state = websocket.app.state
    settings = state.settings

    profile = await state.profiles.get()
    session = RecordingSession(
        state.services, state.archive, state.thumbnails, settings, profile=profile
    )
    sender = asyncio.create_task(_pump(websocket, session.outbox))
    session.send(
        WebSocketMessageType.connected,
        sample_rate=settings.sample_rate,
        chunk_interval_ms=settings.chunk_interval_ms,
        max_recording_ms=settings.max_recording_ms,
    )
    logger.info("Recording WebSocket connected")

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message.get("bytes"):
                session.feed(message["bytes"])
            elif message.get("text"):
                await _handle_command(session, message["text"])
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("Recording WebSocket failed")
        session.send(WebSocketMessageType.error, message="Recording error occurred")
    finally:
        logger.info("Recording WebSocket disconnected")
        await session.close(wait=True)
        sender.cancel()
