"""
Shared test fixtures for the admin console.

Provides an in-memory Redis double, a scriptable fake marketplace
backend (httpx.MockTransport), a chat lead sink double, and an async
test client with dependencies overridden.
"""

import json
import uuid
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from redis.exceptions import LockError, LockNotOwnedError

from app.api.deps import get_backend, get_submitter
from app.chat.submitter import LeadSubmitter
from app.redis_client import get_redis
from app.schemas.auth import AdminSession
from app.services.marketplace_client import MarketplaceClient
from app.services.session_store import SessionStore

BACKEND_URL = "http://backend.test/api"
CHATLEAD_URL = "http://console.test/api/chatlead"


# --- In-memory Redis ---


class InMemoryLock:
    """Token-checked lock mirroring redis-py's ``Lock`` acquire/release."""

    def __init__(self, redis, name, timeout=None, blocking=True):
        self.redis = redis
        self.name = name
        self.timeout = timeout
        self.token = None

    async def acquire(self):
        if self.name in self.redis.data:
            return False
        self.token = uuid.uuid4().hex
        self.redis.data[self.name] = self.token
        if self.timeout is not None:
            self.redis.ttls[self.name] = self.timeout
        return True

    async def release(self):
        if self.token is None:
            raise LockError("Cannot release an unlocked lock")
        if self.redis.data.get(self.name) != self.token:
            raise LockNotOwnedError("Cannot release a lock that's no longer owned")
        await self.redis.delete(self.name)
        self.token = None


class InMemoryRedis:
    """Dict-backed stand-in for the handful of Redis calls the app makes."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.data.get(key)

    def lock(self, name, timeout=None, blocking=True):
        return InMemoryLock(self, name, timeout=timeout, blocking=blocking)

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed


@pytest.fixture
def fake_redis():
    return InMemoryRedis()


# --- Sample records ---


_BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _make_user(**overrides) -> dict:
    """Backend-shaped (camelCase) user payload."""
    index = overrides.pop("index", 0)
    defaults = {
        "id": f"user-{index}",
        "name": f"User {index}",
        "email": f"user{index}@example.com",
        "role": "USER",
        "address": "12 Marina Road",
        "countryCode": "+234",
        "phoneNumber": "8012345678",
        "isEmailVerified": True,
        "isDocumentVerified": False,
        "createdAt": (_BASE_TIME + timedelta(days=index)).isoformat(),
        "businessType": "Recycling",
    }
    defaults.update(overrides)
    return defaults


def _make_product(**overrides) -> dict:
    """Backend-shaped (camelCase) product payload."""
    index = overrides.pop("index", 0)
    defaults = {
        "id": index + 1,
        "sellerUserId": f"user-{index}",
        "seller": {
            "user": {
                "name": f"Seller {index}",
                "email": f"seller{index}@example.com",
                "phoneNumber": None,
                "countryCode": None,
                "address": "Plot 4, Apapa",
                "isEmailVerified": True,
                "isDocumentVerified": True,
                "createdAt": _BASE_TIME.isoformat(),
            }
        },
        "name": f"PET Flakes {index}",
        "price": 100.0 + index,
        "currency": "NGN",
        "quantity": 10,
        "unit": "tonnes",
        "category": "PET",
        "description": "Washed PET flakes",
        "isApproved": False,
        "createdAt": (_BASE_TIME + timedelta(days=index)).isoformat(),
        "updatedAt": (_BASE_TIME + timedelta(days=index)).isoformat(),
        "images": [{"id": index + 1, "url": f"https://img.example.com/{index}.jpg"}],
    }
    defaults.update(overrides)
    return defaults


@pytest.fixture
def make_user():
    return _make_user


@pytest.fixture
def make_product():
    return _make_product


ADMIN_USER = {
    "id": "admin-1",
    "name": "Ada Admin",
    "email": "admin@example.com",
    "role": "ADMIN",
    "isEmailVerified": True,
    "isDocumentVerified": True,
}


@pytest.fixture
def admin_user():
    return dict(ADMIN_USER)


# --- Fake marketplace backend ---


class FakeBackend:
    """
    Routes requests to canned responses keyed by ``(method, path)``.

    A route value may be an ``httpx.Response``, a callable taking the
    request, or an exception instance to raise (transport failure).
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], object] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, response):
        self.routes[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return route

    def client(self) -> MarketplaceClient:
        return MarketplaceClient(BACKEND_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def backend():
    return FakeBackend()


# --- Chat lead sink double ---


class FakeLeadSink:
    """Answers chat lead submissions with a configurable response."""

    def __init__(self):
        self.response: object = httpx.Response(200, json={"success": True})
        self.payloads: list[dict] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.payloads.append(json.loads(request.content))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    def submitter(self) -> LeadSubmitter:
        return LeadSubmitter(CHATLEAD_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def lead_sink():
    return FakeLeadSink()


# --- Dependency Override Helpers ---


@pytest_asyncio.fixture
async def client(fake_redis, backend, lead_sink):
    """
    Async HTTP test client with Redis, the marketplace backend and the
    chat lead submitter overridden to use test doubles.
    """
    from app.main import app

    async def override_get_redis():
        return fake_redis

    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_backend] = backend.client
    app.dependency_overrides[get_submitter] = lead_sink.submitter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_headers(fake_redis):
    """Authorization header for a stored admin session."""
    session = AdminSession.model_validate({"token": "backend-token", "user": ADMIN_USER})
    session_id = await SessionStore(fake_redis).save(session)
    return {"Authorization": f"Bearer {session_id}"}
