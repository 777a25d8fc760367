"""
Admin authentication endpoints.

  1. POST /login   — check credentials with the backend, admins only
  2. POST /logout  — drop the stored session
  3. GET  /session — current administrator
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_backend, get_session_id, get_session_store, require_admin
from app.schemas.auth import AdminSession, LoginRequest, LoginResponse, SessionRead
from app.services.marketplace_client import (
    AuthenticationError,
    MarketplaceClient,
    MarketplaceError,
)
from app.services.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
async def login(
    payload: LoginRequest,
    backend: MarketplaceClient = Depends(get_backend),
    store: SessionStore = Depends(get_session_store),
):
    """
    Log an administrator in.

    1. Validate the form (email contains ``@``, password present)
    2. POST credentials to the backend as the admin front end
    3. Reject non-2xx responses and any role other than ADMIN
    4. Persist the session and return its id
    """
    try:
        session = await backend.login(payload.email, payload.password)
    except AuthenticationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password. Please try again.",
        )
    except MarketplaceError as exc:
        logger.error("Login error for %s: %s", payload.email, exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="An error occurred during login. Please try again.",
        )

    session_id = await store.save(session)
    logger.info("Admin %s logged in", session.user.email)
    return LoginResponse(session_id=session_id, user=session.user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    """Clear the stored session. Unknown sessions are ignored."""
    await store.clear(session_id)


@router.get("/session", response_model=SessionRead)
async def current_session(session: AdminSession = Depends(require_admin)):
    """Return the logged-in administrator."""
    return SessionRead(user=session.user)
