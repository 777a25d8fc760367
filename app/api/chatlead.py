"""
Chat lead sink — receives leads captured by the chat assistant.

Leads are only logged for now. Malformed bodies are answered with
HTTP 500 and ``{"success": false, "error": ...}`` so the assistant can
quote the reason back to the user.
"""

import json
import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.schemas.chat import ChatLead, ChatLeadResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chatlead", response_model=ChatLeadResponse, response_model_exclude_none=True)
async def receive_chat_lead(request: Request):
    try:
        body = await request.json()
        lead = ChatLead.model_validate(body)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
        logger.error("Error processing chat lead: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to process chat lead"},
        )

    logger.info(
        "Chat lead received: company=%s name=%s phone=%s",
        lead.company_name, lead.user_name, lead.phone_number,
    )
    return ChatLeadResponse(success=True)
