"""
Pydantic schemas for the admin dashboard overview.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from app.schemas.product import Product


class ActivityType(str, Enum):
    USER_JOINED = "USER_JOINED"
    SELLER_VERIFIED = "SELLER_VERIFIED"
    PRODUCT_ADDED = "PRODUCT_ADDED"
    VERIFICATION_REQUESTED = "VERIFICATION_REQUESTED"


class DashboardStats(BaseModel):
    total_users: int = 0
    total_sellers: int = 0
    total_products: int = 0
    pending_verifications: int = 0
    verified_sellers: int = 0
    active_users: int = 0


class ActivityItem(BaseModel):
    id: str
    type: ActivityType
    message: str
    timestamp: datetime


class DashboardRead(BaseModel):
    """Platform statistics, latest listings and recent activity."""
    stats: DashboardStats
    recent_products: list[Product]
    recent_activity: list[ActivityItem]
