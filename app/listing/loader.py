"""
Cancellable list loading.

A ``ListLoader`` wraps the single backend fetch that populates a list
screen. Once ``cancel()`` is called the fetch is abandoned and any result
that arrives afterwards is discarded instead of reaching the caller.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

from app.services.marketplace_client import MarketplaceError

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    LOADED = "loaded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class LoadResult:
    status: LoadStatus
    records: list = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == LoadStatus.LOADED


class ListLoader:
    """Runs one fetch; failures become a generic message, never a retry."""

    def __init__(self, fetch: Callable[[], Awaitable[list]], error_message: str = "Failed to load records"):
        self._fetch = fetch
        self._error_message = error_message
        self._task: asyncio.Task | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Abandon the fetch; a result arriving later is dropped."""
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def load(self) -> LoadResult:
        if self._cancelled:
            return LoadResult(LoadStatus.CANCELLED)

        self._task = asyncio.ensure_future(self._fetch())
        try:
            records = await self._task
        except asyncio.CancelledError:
            if self._cancelled:
                return LoadResult(LoadStatus.CANCELLED)
            raise
        except MarketplaceError as exc:
            if self._cancelled:
                return LoadResult(LoadStatus.CANCELLED)
            logger.warning("%s: %s", self._error_message, exc)
            return LoadResult(LoadStatus.FAILED, error=self._error_message)

        if self._cancelled:
            logger.debug("Discarding %d records loaded after cancel", len(records))
            return LoadResult(LoadStatus.CANCELLED)
        return LoadResult(LoadStatus.LOADED, records=list(records))
