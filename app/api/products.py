"""
Product review endpoints — pending listings, approve and reject.
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_marketplace_client
from app.listing.config import PENDING_PRODUCTS, PENDING_PRODUCTS_DEFAULT_SORT
from app.listing.loader import ListLoader
from app.listing.processor import ALL, FilterState, InvalidConfigError
from app.listing.view import render_page
from app.schemas.listing import ActionResultRead, Page
from app.schemas.product import Product
from app.services.marketplace_client import ActionResult, MarketplaceClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/pending", response_model=Page[Product])
async def list_pending_products(
    search: str = "",
    category: str = ALL,
    sort_field: str = PENDING_PRODUCTS_DEFAULT_SORT[0],
    sort_direction: Literal["asc", "desc"] = PENDING_PRODUCTS_DEFAULT_SORT[1],
    page: int = Query(1, ge=1),
    client: MarketplaceClient = Depends(get_marketplace_client),
):
    """Listings awaiting review, as reported by the backend."""
    result = await ListLoader(client.list_pending_products, "Failed to fetch products").load()
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)

    state = FilterState(
        search_term=search,
        equality_filters={"category": category},
        sort_field=sort_field,
        sort_direction=sort_direction,
        current_page=page,
    )
    try:
        rendered = render_page(result.records, state, PENDING_PRODUCTS)
    except InvalidConfigError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return Page[Product].from_list_page(rendered)


def _action_response(result: ActionResult, response: Response) -> ActionResultRead:
    if not result.ok:
        response.status_code = status.HTTP_502_BAD_GATEWAY
    return ActionResultRead(ok=result.ok, record_id=result.record_id, error=result.error)


@router.post("/{product_id}/approve", response_model=ActionResultRead)
async def approve_product(
    product_id: int,
    response: Response,
    client: MarketplaceClient = Depends(get_marketplace_client),
):
    """Approve a listing so it goes live on the marketplace."""
    return _action_response(await client.approve_product(product_id), response)


@router.post("/{product_id}/reject", response_model=ActionResultRead)
async def reject_product(
    product_id: int,
    response: Response,
    client: MarketplaceClient = Depends(get_marketplace_client),
):
    """Reject a listing."""
    return _action_response(await client.reject_product(product_id), response)
