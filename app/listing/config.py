"""
List configurations for the KYC and product-review screens.
"""

from app.config import settings
from app.listing.processor import FilterField, ListConfig

# KYC — users awaiting (or past) document verification
KYC_USERS = ListConfig(
    searchable_fields=("name", "email", "business_type"),
    filterable_fields=(
        FilterField("role"),
        FilterField(
            "verification",
            attribute="is_document_verified",
            value_map={"verified": True, "pending": False},
        ),
    ),
    sort_rules={
        "name": "string",
        "email": "string",
        "role": "string",
        "created_at": "date",
        "is_document_verified": "boolean",
    },
    page_size=settings.ROWS_PER_PAGE,
)
KYC_DEFAULT_SORT = ("name", "asc")

# Product review — listings awaiting approval
PENDING_PRODUCTS = ListConfig(
    searchable_fields=("name", "category", "seller_name"),
    filterable_fields=(FilterField("category"),),
    sort_rules={
        "name": "string",
        "category": "string",
        "price": "numeric",
        "created_at": "date",
    },
    page_size=settings.ROWS_PER_PAGE,
)
PENDING_PRODUCTS_DEFAULT_SORT = ("created_at", "desc")
