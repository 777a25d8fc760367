"""
Chat assistant sessions backed by Redis.

Each widget mount gets a session id; its DialogState lives under
``chat:state:<id>`` and expires after 15 minutes of inactivity.
A per-session lock (``chat:lock:<id>``) serialises actions so only one
submission can ever be in flight for a conversation.
"""

import logging
import uuid

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import LockError

from app.chat.engine import DialogEngine, DialogError
from app.config import settings
from app.schemas.chat import DialogState

logger = logging.getLogger(__name__)

STATE_KEY_PREFIX = "chat:state:"
LOCK_KEY_PREFIX = "chat:lock:"
STATE_TTL_SECONDS = settings.CHAT_STATE_TTL_SECONDS
LOCK_TTL_SECONDS = 60


class ChatSessionNotFoundError(Exception):
    """No live conversation exists for the given session id."""
    pass


class ChatBusyError(DialogError):
    """Another action is already running for this conversation."""
    pass


class ChatBot:
    """Persists dialog state and routes widget actions to the engine."""

    def __init__(self, redis, engine: DialogEngine):
        self.redis = redis
        self.engine = engine

    # ── State management ─────────────────────────────────────────────

    async def get_state(self, session_id: str) -> DialogState:
        raw = await self.redis.get(f"{STATE_KEY_PREFIX}{session_id}")
        if raw is None:
            raise ChatSessionNotFoundError(session_id)
        try:
            return DialogState.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding unreadable chat state %s", session_id)
            await self.clear_state(session_id)
            raise ChatSessionNotFoundError(session_id) from exc

    async def set_state(self, session_id: str, state: DialogState) -> None:
        await self.redis.setex(
            f"{STATE_KEY_PREFIX}{session_id}",
            STATE_TTL_SECONDS,
            state.model_dump_json(),
        )

    async def clear_state(self, session_id: str) -> None:
        await self.redis.delete(f"{STATE_KEY_PREFIX}{session_id}")

    # ── Session lifecycle ────────────────────────────────────────────

    async def start(self) -> tuple[str, DialogState]:
        """Open a new conversation and return its id and first state."""
        session_id = uuid.uuid4().hex
        state = self.engine.start()
        await self.set_state(session_id, state)
        return session_id, state

    async def restart(self, session_id: str) -> DialogState:
        """Throw the conversation away and begin again under the same id."""
        await self.clear_state(session_id)
        state = self.engine.start()
        await self.set_state(session_id, state)
        return state

    # ── Actions ──────────────────────────────────────────────────────

    async def _acquire(self, session_id: str) -> "aioredis.lock.Lock":
        """
        Take the per-session lock without blocking.

        Uses redis-py's ``Lock`` (SET NX PX plus a token-checked release),
        so a request whose lock expired cannot free a lock taken since.
        """
        lock = self.redis.lock(
            f"{LOCK_KEY_PREFIX}{session_id}",
            timeout=LOCK_TTL_SECONDS,
            blocking=False,
        )
        if not await lock.acquire():
            raise ChatBusyError("Submission in progress")
        return lock

    async def _release(self, lock: "aioredis.lock.Lock") -> None:
        try:
            await lock.release()
        except LockError:
            # Lock expired and may now belong to another request
            logger.warning("Chat lock release failed (may have auto-expired)")

    async def _submit(self, session_id: str, state: DialogState) -> DialogState:
        logger.info("Submitting chat lead for session %s", session_id)
        try:
            return await self.engine.submit(state)
        except Exception as exc:
            logger.exception("Chat lead submission crashed for session %s", session_id)
            return self.engine.abort_submission(state, str(exc) or exc.__class__.__name__)

    async def handle_option(self, session_id: str, value: str) -> DialogState:
        """Route an option click; the confirm option triggers the submission."""
        lock = await self._acquire(session_id)
        try:
            state = await self.get_state(session_id)
            state = self.engine.select_option(state, value)
            await self.set_state(session_id, state)

            if state.submitting:
                state = await self._submit(session_id, state)
                await self.set_state(session_id, state)
            return state
        finally:
            await self._release(lock)

    async def handle_details(self, session_id: str, answers: dict[str, str]) -> DialogState:
        """Route a details form submission."""
        lock = await self._acquire(session_id)
        try:
            state = await self.get_state(session_id)
            state = self.engine.submit_details(state, answers)
            await self.set_state(session_id, state)
            return state
        finally:
            await self._release(lock)
