"""
Reusable FastAPI dependencies for sessions, backend access and chat.

Dependencies:
  - get_session_id          — session id from ``Authorization: Bearer`` (401 if absent)
  - require_admin           — the stored admin session (401 if unknown/expired)
  - get_backend             — unauthenticated marketplace client
  - get_marketplace_client  — marketplace client carrying the admin's token
  - get_chat_bot            — Redis-backed chat assistant
"""

from fastapi import Depends, Header, HTTPException, status

from app.chat.bot import ChatBot
from app.chat.engine import DialogEngine
from app.chat.submitter import LeadSubmitter, get_lead_submitter
from app.redis_client import get_redis
from app.schemas.auth import AdminSession
from app.services.marketplace_client import MarketplaceClient, get_marketplace_client as _default_client
from app.services.session_store import SessionStore


def get_session_store(redis=Depends(get_redis)) -> SessionStore:
    return SessionStore(redis)


# ---------------------------------------------------------------------------
# Admin session
# ---------------------------------------------------------------------------


async def get_session_id(
    authorization: str | None = Header(None, description="Bearer <session_id>"),
) -> str:
    """Extract the session id from the ``Authorization`` header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    session_id = authorization[len("Bearer "):].strip()
    if not session_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return session_id


async def require_admin(
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> AdminSession:
    """
    Load the admin session for this request.

    Sessions whose user is no longer an ADMIN are discarded by the store
    and treated as missing.
    """
    session = await store.load(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired or invalid",
        )
    return session


# ---------------------------------------------------------------------------
# Marketplace backend
# ---------------------------------------------------------------------------


def get_backend() -> MarketplaceClient:
    """Unauthenticated client; overridden in tests."""
    return _default_client()


async def get_marketplace_client(
    session: AdminSession = Depends(require_admin),
    backend: MarketplaceClient = Depends(get_backend),
) -> MarketplaceClient:
    """Client that calls the backend with the admin's bearer token."""
    return backend.with_token(session.token)


# ---------------------------------------------------------------------------
# Chat assistant
# ---------------------------------------------------------------------------


def get_submitter() -> LeadSubmitter:
    """Chat lead submitter; overridden in tests."""
    return get_lead_submitter()


def get_chat_bot(
    redis=Depends(get_redis),
    submitter: LeadSubmitter = Depends(get_submitter),
) -> ChatBot:
    return ChatBot(redis, DialogEngine(submitter))
