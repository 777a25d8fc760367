"""
Pydantic schemas for seller product listings.
"""

from datetime import datetime

from pydantic import Field

from app.schemas.user import BackendModel


class ProductImage(BackendModel):
    id: int
    url: str


class SellerUser(BackendModel):
    """Contact summary of the seller who listed a product."""
    name: str
    email: str | None = None
    phone_number: str | None = None
    country_code: str | None = None
    address: str | None = None
    is_email_verified: bool = False
    is_document_verified: bool = False
    created_at: datetime | None = None


class Seller(BackendModel):
    user: SellerUser | None = None


class Product(BackendModel):
    """A product listing awaiting (or past) admin review."""
    id: int
    seller_user_id: str
    seller: Seller | None = None
    name: str
    price: float
    currency: str
    quantity: float
    unit: str
    category: str
    description: str = ""
    additional_notes: str | None = None
    is_approved: bool = False
    created_at: datetime
    updated_at: datetime | None = None
    images: list[ProductImage] = Field(default_factory=list)

    @property
    def seller_name(self) -> str:
        """Seller display name, ``"Unknown"`` when the backend omits it."""
        if self.seller and self.seller.user:
            return self.seller.user.name
        return "Unknown"
