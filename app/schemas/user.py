"""
Pydantic schemas for marketplace users, as returned by the backend.

Backend payloads are camelCase; models accept either the camelCase
alias or the snake_case field name and ignore unknown keys.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserRole(str, Enum):
    USER = "USER"
    SELLER = "SELLER"
    ADMIN = "ADMIN"


class BackendModel(BaseModel):
    """Base for every model parsed from a backend payload."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class User(BackendModel):
    """A marketplace account as listed on the KYC screen."""
    id: str
    name: str
    email: str
    role: UserRole
    address: str | None = None
    country_code: str | None = None
    phone_number: str | None = None
    is_email_verified: bool = False
    is_document_verified: bool = False
    created_at: datetime
    business_desc: str | None = None
    business_type: str | None = None
    verification_doc_url: str | None = None


class SessionUser(BackendModel):
    """The user object returned alongside a login token."""
    id: str
    name: str
    email: str
    role: UserRole
    country_code: str | None = None
    phone_number: str | None = None
    address: str | None = None
    profile_image: str | None = None
    is_document_verified: bool = False
    is_email_verified: bool = False


class UserList(BackendModel):
    """``GET /users`` envelope."""
    users: list[User] = Field(default_factory=list)
