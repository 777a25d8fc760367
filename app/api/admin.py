"""
Admin dashboard endpoint.

Platform-wide counts, the latest product listings, and a short
recent-activity feed for administrators.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_marketplace_client
from app.schemas.dashboard import DashboardRead
from app.services.dashboard_service import DashboardUnavailableError, build_dashboard
from app.services.marketplace_client import MarketplaceClient

router = APIRouter()


@router.get("/dashboard", response_model=DashboardRead)
async def get_dashboard(client: MarketplaceClient = Depends(get_marketplace_client)):
    """
    Get admin dashboard summary.

    Returns total users, sellers and products, pending and verified
    seller counts, email-verified users, five recent products and the
    five most recent activity items.
    """
    try:
        return await build_dashboard(client)
    except DashboardUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
