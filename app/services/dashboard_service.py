"""
Dashboard service — platform statistics and recent activity.

Users and products are fetched concurrently. If either fetch fails the
other one is cancelled and the dashboard reports the failure.
"""

import asyncio
import logging

from app.listing.loader import ListLoader, LoadResult
from app.schemas.dashboard import ActivityItem, ActivityType, DashboardRead, DashboardStats
from app.schemas.product import Product
from app.schemas.user import User, UserRole
from app.services.marketplace_client import MarketplaceClient

logger = logging.getLogger(__name__)

RECENT_PRODUCTS = 5
RECENT_ACTIVITY = 5
ACTIVITY_PER_SOURCE = 3


class DashboardUnavailableError(Exception):
    """Raised when the dashboard data could not be loaded."""
    pass


def compute_stats(users: list[User], products: list[Product]) -> DashboardStats:
    """Aggregate counts shown on the dashboard cards."""
    sellers = [u for u in users if u.role == UserRole.SELLER]
    verified = [s for s in sellers if s.is_document_verified]
    return DashboardStats(
        total_users=len(users),
        total_sellers=len(sellers),
        total_products=len(products),
        pending_verifications=len(sellers) - len(verified),
        verified_sellers=len(verified),
        active_users=sum(1 for u in users if u.is_email_verified),
    )


def recent_activity(users: list[User], products: list[Product]) -> list[ActivityItem]:
    """Newest-first feed built from the first few users and products."""
    items = [
        ActivityItem(
            id=user.id,
            type=ActivityType.USER_JOINED,
            message=f"New user {user.name} joined the platform",
            timestamp=user.created_at,
        )
        for user in users[:ACTIVITY_PER_SOURCE]
    ]
    items += [
        ActivityItem(
            id=str(product.id),
            type=ActivityType.PRODUCT_ADDED,
            message=f'New product "{product.name}" was added',
            timestamp=product.created_at,
        )
        for product in products[:ACTIVITY_PER_SOURCE]
    ]
    items.sort(key=lambda item: item.timestamp.timestamp(), reverse=True)
    return items[:RECENT_ACTIVITY]


async def _load_or_cancel(loader: ListLoader, sibling: ListLoader) -> LoadResult:
    result = await loader.load()
    if not result.ok:
        sibling.cancel()
    return result


async def build_dashboard(client: MarketplaceClient) -> DashboardRead:
    users_loader = ListLoader(client.list_users, "Failed to fetch users")
    products_loader = ListLoader(client.list_products, "Failed to fetch products")

    users_result, products_result = await asyncio.gather(
        _load_or_cancel(users_loader, products_loader),
        _load_or_cancel(products_loader, users_loader),
    )

    for result in (users_result, products_result):
        if result.error:
            raise DashboardUnavailableError(result.error)
    if not (users_result.ok and products_result.ok):
        raise DashboardUnavailableError("Dashboard data is unavailable")

    users, products = users_result.records, products_result.records
    return DashboardRead(
        stats=compute_stats(users, products),
        recent_products=products[:RECENT_PRODUCTS],
        recent_activity=recent_activity(users, products),
    )
