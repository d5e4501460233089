import asyncio
import logging
import uuid
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from flowscroll.analytics.client import get_analytics_client
from flowscroll.config import get_settings
from flowscroll.storage.profile_store import get_profile_store
from flowscroll.tasks.factory import create_task_batch
from flowscroll.tasks.models import TaskResult
from flowscroll.tasks.regulator import LevelUpdate
from flowscroll.tasks.session import FeedSession
from flowscroll.websocket.messages import (
    ClientMessage,
    ConnectedMessage,
    DifficultyMessage,
    ErrorMessage,
    ResultMessage,
    SessionEndData,
    SessionEndedMessage,
    SessionMessage,
    SessionStartData,
    TaskMessage,
    TaskResultData,
)

logger = logging.getLogger(__name__)
router = APIRouter()


class SessionState:
    """Track state for a connection."""

    def __init__(self) -> None:
        self.feed: FeedSession | None = None
        self.sent_count = 0


class ConnectionManager:
    """Manage active WebSocket connections."""

    def __init__(self) -> None:
        self.active_connections: dict[str, WebSocket] = {}
        self.session_states: dict[str, SessionState] = {}

    async def connect(self, websocket: WebSocket) -> str:
        """Accept connection and return connection ID."""
        await websocket.accept()
        connection_id = str(uuid.uuid4())
        self.active_connections[connection_id] = websocket
        self.session_states[connection_id] = SessionState()
        logger.info(f"Client connected: {connection_id}")
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        """Remove connection and close any open feed session."""
        state = self.session_states.pop(connection_id, None)
        if state and state.feed:
            state.feed.end()
        self.active_connections.pop(connection_id, None)
        logger.info(f"Client disconnected: {connection_id}")

    async def send_message(self, connection_id: str, message: dict[str, Any]) -> None:
        """Send message to specific client."""
        if connection_id in self.active_connections:
            await self.active_connections[connection_id].send_json(message)

    def get_state(self, connection_id: str) -> SessionState | None:
        return self.session_states.get(connection_id)


manager = ConnectionManager()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Feed session transport: tasks out, renderer events in."""
    connection_id = await manager.connect(websocket)

    try:
        connected_msg = ConnectedMessage(session_id=connection_id)
        await manager.send_message(connection_id, connected_msg.model_dump())

        while True:
            data = await websocket.receive_json()

            try:
                message = ClientMessage.model_validate(data)
                await handle_message(connection_id, message)
            except Exception as e:
                logger.error(f"Error processing message: {e}")
                error_msg = ErrorMessage(code="INVALID_MESSAGE", message=str(e))
                await manager.send_message(connection_id, error_msg.model_dump())

    except WebSocketDisconnect:
        manager.disconnect(connection_id)
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
        manager.disconnect(connection_id)


async def handle_message(connection_id: str, message: ClientMessage) -> None:
    """Route and handle incoming messages."""
    logger.debug(f"Handling message: {message.type} for {connection_id}")
    state = manager.get_state(connection_id)
    if state is None:
        return

    if message.type == "session_start":
        await handle_session_start(connection_id, state, message.data)
        return

    if state.feed is None:
        await send_error(connection_id, "NO_SESSION", "Send session_start first")
        return

    if message.type == "task_result":
        await handle_task_result(connection_id, state, message.data)
    elif message.type == "advance":
        await handle_advance(connection_id, state)
    elif message.type == "pause":
        state.feed.pause()
    elif message.type == "resume":
        state.feed.resume()
    elif message.type == "session_end":
        await handle_session_end(connection_id, state, message.data)


async def send_error(connection_id: str, code: str, text: str) -> None:
    await manager.send_message(connection_id, ErrorMessage(code=code, message=text).model_dump())


async def send_pending_tasks(connection_id: str, state: SessionState) -> None:
    """Send every task the client has not seen yet."""
    feed = state.feed
    if feed is None:
        return
    for position in range(state.sent_count, len(feed.tasks)):
        msg = TaskMessage(position=position, task=feed.tasks[position].to_dict())
        await manager.send_message(connection_id, msg.model_dump())
    state.sent_count = len(feed.tasks)


async def send_outcome(connection_id: str, result: TaskResult, update: LevelUpdate | None) -> None:
    ack = ResultMessage(task_id=result.task_id, outcome=result.outcome.value, time_spent_ms=result.time_spent_ms)
    await manager.send_message(connection_id, ack.model_dump())
    if update is not None:
        msg = DifficultyMessage(
            task_type=update.task_type,
            previous_level=update.previous_level,
            level=update.level,
            decision=update.decision,
            confidence=update.confidence,
        )
        await manager.send_message(connection_id, msg.model_dump())


async def handle_session_start(connection_id: str, state: SessionState, data: dict[str, Any]) -> None:
    start = SessionStartData.model_validate(data)
    settings = get_settings()
    store = get_profile_store()

    if state.feed is not None:
        await asyncio.to_thread(state.feed.end)

    profile = await asyncio.to_thread(store.load, start.user_id)
    duel_tasks = None
    if start.duel:
        duel_tasks = create_task_batch(profile, start.duel_task_count or settings.duel_task_count)

    state.feed = FeedSession(
        profile,
        store=store,
        sink=get_analytics_client(),
        buffer_size=settings.buffer_size,
        duel_tasks=duel_tasks,
        free_mind_after_ms=settings.free_mind_after_ms,
        free_mind_cooldown_ms=settings.free_mind_cooldown_ms,
    )
    state.sent_count = 0
    if not start.duel:
        await asyncio.to_thread(store.save, profile)

    msg = SessionMessage(
        session_id=state.feed.session_id,
        user_id=profile.user_id,
        duel=start.duel,
        task_count=len(state.feed.tasks),
    )
    await manager.send_message(connection_id, msg.model_dump())
    await send_pending_tasks(connection_id, state)


async def handle_task_result(connection_id: str, state: SessionState, data: dict[str, Any]) -> None:
    reported = TaskResultData.model_validate(data)
    # Recording saves the profile, so file I/O stays off the event loop
    outcome = await asyncio.to_thread(state.feed.complete, reported.task_id, reported.success, reported.time_spent_ms)
    if outcome is None:
        await send_error(connection_id, "UNKNOWN_TASK", f"{reported.task_id} is not the active task")
        return
    await send_outcome(connection_id, *outcome)


async def handle_advance(connection_id: str, state: SessionState) -> None:
    skipped = await asyncio.to_thread(state.feed.advance)
    if skipped is not None:
        await send_outcome(connection_id, *skipped)
    await send_pending_tasks(connection_id, state)


async def handle_session_end(connection_id: str, state: SessionState, data: dict[str, Any]) -> None:
    end = SessionEndData.model_validate(data)
    feed = state.feed
    if end.session_id and end.session_id != feed.session_id:
        await send_error(connection_id, "UNKNOWN_SESSION", f"Session {end.session_id} is not open")
        return

    await asyncio.to_thread(feed.end)
    state.feed = None
    msg = SessionEndedMessage(session_id=feed.session_id, results=len(feed.completed))
    await manager.send_message(connection_id, msg.model_dump())
