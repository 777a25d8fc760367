"""
Chat lead submitter — posts collected answers to the chat lead sink.

Every outcome is reported as a SubmissionOutcome; nothing is raised to
the dialog engine.
"""

import logging
from dataclasses import dataclass

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionOutcome:
    ok: bool
    error: str | None = None
    transport_error: bool = False


class LeadSubmitter:
    """POSTs ``{companyName, userName, phoneNumber}`` as JSON."""

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def submit(self, answers: dict[str, str]) -> SubmissionOutcome:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(self._url, json=answers)
        except httpx.RequestError as exc:
            logger.error("Chat lead request error: %s", exc)
            return SubmissionOutcome(
                ok=False,
                error=str(exc) or exc.__class__.__name__,
                transport_error=True,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            logger.error("Chat lead response was not JSON (%s)", resp.status_code)
            return SubmissionOutcome(ok=False, error=str(exc), transport_error=True)

        if not isinstance(body, dict):
            body = {}

        if resp.is_success and body.get("success"):
            return SubmissionOutcome(ok=True)

        reason = body.get("error") or body.get("message") or f"HTTP {resp.status_code}"
        logger.warning("Chat lead submission rejected: %s", reason)
        return SubmissionOutcome(ok=False, error=str(reason))


def get_lead_submitter() -> LeadSubmitter:
    """Submitter for the configured chat lead URL."""
    return LeadSubmitter(settings.CHATLEAD_URL, timeout=settings.BACKEND_TIMEOUT_SECONDS)
