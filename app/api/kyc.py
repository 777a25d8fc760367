"""
KYC endpoints — user verification list and approval.
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_marketplace_client
from app.listing.config import KYC_DEFAULT_SORT, KYC_USERS
from app.listing.loader import ListLoader
from app.listing.processor import ALL, FilterState, InvalidConfigError
from app.listing.view import render_page
from app.schemas.listing import ActionResultRead, Page
from app.schemas.user import User
from app.services.marketplace_client import MarketplaceClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/users", response_model=Page[User])
async def list_users(
    search: str = "",
    role: str = ALL,
    verification: str = ALL,
    sort_field: str = KYC_DEFAULT_SORT[0],
    sort_direction: Literal["asc", "desc"] = KYC_DEFAULT_SORT[1],
    page: int = Query(1, ge=1),
    client: MarketplaceClient = Depends(get_marketplace_client),
):
    """
    Users for the verification dashboard.

    Search covers name, email and business type. ``role`` filters on
    ADMIN/USER/SELLER; ``verification`` is ``verified`` or ``pending``.
    """
    result = await ListLoader(client.list_users, "Failed to fetch users").load()
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)

    state = FilterState(
        search_term=search,
        equality_filters={"role": role, "verification": verification},
        sort_field=sort_field,
        sort_direction=sort_direction,
        current_page=page,
    )
    try:
        rendered = render_page(result.records, state, KYC_USERS)
    except InvalidConfigError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return Page[User].from_list_page(rendered)


@router.post("/users/{user_id}/approve", response_model=ActionResultRead)
async def approve_user(
    user_id: str,
    response: Response,
    client: MarketplaceClient = Depends(get_marketplace_client),
):
    """Approve a user's identity documents (the backend promotes them to SELLER)."""
    result = await client.approve_user(user_id)
    if not result.ok:
        logger.warning("Approving user %s failed: %s", user_id, result.error)
        response.status_code = status.HTTP_502_BAD_GATEWAY
    return ActionResultRead(ok=result.ok, record_id=result.record_id, error=result.error)
