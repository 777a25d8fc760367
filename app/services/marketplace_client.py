"""
Marketplace backend client — users, products, and admin login.

All business data lives in the marketplace backend. This client is the
only place that speaks to it: every response is parsed into the typed
schemas in ``app.schemas`` so backend shape drift stops here.

Error taxonomy:
  - BackendUnavailableError  — transport failure (DNS, refused, timeout)
  - BackendResponseError     — non-2xx status or a malformed body
  - AuthenticationError      — login rejected, or a non-admin account
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from pydantic import TypeAdapter, ValidationError

from app.config import settings
from app.schemas.auth import AdminSession
from app.schemas.product import Product
from app.schemas.user import User, UserList, UserRole

logger = logging.getLogger(__name__)

_PRODUCT_LIST = TypeAdapter(list[Product])


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class MarketplaceError(Exception):
    """Base class for failures talking to the marketplace backend."""
    pass


class BackendUnavailableError(MarketplaceError):
    """The request never produced a response."""
    pass


class BackendResponseError(MarketplaceError):
    """The backend answered with an error status or an unreadable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(MarketplaceError):
    """Credentials rejected, or the account is not allowed in this portal."""
    pass


# ---------------------------------------------------------------------------
# Action result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an approve/reject call on a single record."""
    ok: bool
    record_id: str
    error: str | None = None


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


def _error_text(response: httpx.Response) -> str:
    """Best-effort error message from a backend error response."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or f"HTTP {response.status_code}")
    return f"HTTP {response.status_code}"


class MarketplaceClient:
    """Calls the marketplace backend on behalf of one admin session."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport

    def with_token(self, token: str) -> MarketplaceClient:
        """Return a client that authenticates as ``token``."""
        return MarketplaceClient(
            self._base_url, token=token, timeout=self._timeout, transport=self._transport,
        )

    # ── Transport ───────────────────────────────────────────────────

    def _headers(self, extra: dict | None = None) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        json: dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=json, headers=self._headers(headers))
        except httpx.RequestError as exc:
            logger.error("Marketplace request error %s %s: %s", method, path, exc)
            raise BackendUnavailableError(str(exc) or exc.__class__.__name__) from exc

        if response.is_error:
            message = _error_text(response)
            logger.warning(
                "Marketplace %s %s failed: %s %s", method, path, response.status_code, message,
            )
            raise BackendResponseError(message, status_code=response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response):
        try:
            return response.json()
        except ValueError as exc:
            raise BackendResponseError("Malformed response body", response.status_code) from exc

    # ── Authentication ──────────────────────────────────────────────

    async def login(self, email: str, password: str) -> AdminSession:
        """
        Authenticate against the backend as an administrator.

        Only ``ADMIN`` accounts are accepted; any other role is treated
        the same as bad credentials.
        """
        logger.info("Attempting admin login for %s", email)
        try:
            response = await self._request(
                "POST",
                "/auth/login",
                json={"email": email, "password": password},
                headers={"x-frontend-type": "admin"},
            )
        except BackendResponseError as exc:
            raise AuthenticationError(str(exc)) from exc

        try:
            session = AdminSession.model_validate(self._json(response))
        except ValidationError as exc:
            raise BackendResponseError("Malformed login response", response.status_code) from exc

        if session.user.role != UserRole.ADMIN:
            logger.warning("Non-admin user %s attempted to log in to the admin portal", email)
            raise AuthenticationError("Account is not an administrator")
        return session

    # ── Users ───────────────────────────────────────────────────────

    async def list_users(self) -> list[User]:
        response = await self._request("GET", "/users")
        try:
            return UserList.model_validate(self._json(response)).users
        except ValidationError as exc:
            raise BackendResponseError("Malformed user list", response.status_code) from exc

    async def approve_user(self, user_id: str) -> ActionResult:
        return await self._action(f"/users/{user_id}/approve", user_id)

    # ── Products ────────────────────────────────────────────────────

    async def list_products(self) -> list[Product]:
        return await self._products("/products")

    async def list_pending_products(self) -> list[Product]:
        """Listings awaiting review; the backend is the authority on what is pending."""
        return await self._products("/products/pending")

    async def approve_product(self, product_id: int | str) -> ActionResult:
        return await self._action(f"/products/{product_id}/approve", str(product_id))

    async def reject_product(self, product_id: int | str) -> ActionResult:
        return await self._action(f"/products/{product_id}/reject", str(product_id))

    async def _products(self, path: str) -> list[Product]:
        response = await self._request("GET", path)
        try:
            return _PRODUCT_LIST.validate_python(self._json(response))
        except ValidationError as exc:
            raise BackendResponseError("Malformed product list", response.status_code) from exc

    async def _action(self, path: str, record_id: str) -> ActionResult:
        try:
            await self._request("POST", path)
        except MarketplaceError as exc:
            logger.warning("Action %s failed for %s: %s", path, record_id, exc)
            return ActionResult(ok=False, record_id=record_id, error=str(exc))
        logger.info("Action %s succeeded", path)
        return ActionResult(ok=True, record_id=record_id)


def get_marketplace_client() -> MarketplaceClient:
    """Unauthenticated client for the configured backend."""
    return MarketplaceClient(settings.BACKEND_API_URL, timeout=settings.BACKEND_TIMEOUT_SECONDS)
