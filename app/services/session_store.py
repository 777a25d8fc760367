"""
Admin session persistence in Redis.

Each login gets an opaque session id; the backend token and user are
stored under ``admin:session:<id>``. A stored session is only restored
while its user is still an ADMIN; anything else is dropped on load.
"""

import logging
import secrets

from pydantic import ValidationError

from app.config import settings
from app.schemas.auth import AdminSession
from app.schemas.user import UserRole

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "admin:session:"


class SessionStore:
    """Explicit load / save / clear lifecycle for admin sessions."""

    def __init__(self, redis, ttl_seconds: int = settings.SESSION_TTL_SECONDS):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{SESSION_KEY_PREFIX}{session_id}"

    async def save(self, session: AdminSession) -> str:
        """Persist ``session`` and return its new session id."""
        session_id = secrets.token_urlsafe(32)
        await self.redis.setex(
            self._key(session_id),
            self.ttl_seconds,
            session.model_dump_json(by_alias=True),
        )
        return session_id

    async def load(self, session_id: str) -> AdminSession | None:
        """Return the stored session, or ``None`` if missing, corrupt or not an admin."""
        raw = await self.redis.get(self._key(session_id))
        if raw is None:
            return None

        try:
            session = AdminSession.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable session %s", session_id[:8])
            await self.clear(session_id)
            return None

        if session.user.role != UserRole.ADMIN:
            logger.warning("Discarding non-admin session for %s", session.user.email)
            await self.clear(session_id)
            return None
        return session

    async def clear(self, session_id: str) -> None:
        await self.redis.delete(self._key(session_id))
