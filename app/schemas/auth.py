"""
Pydantic schemas for admin login and the stored session.
"""

from pydantic import BaseModel, Field, field_validator

from app.schemas.user import SessionUser


class LoginRequest(BaseModel):
    """Credentials posted to the admin login form."""
    email: str = Field(..., examples=["admin@example.com"])
    password: str

    @field_validator("email")
    @classmethod
    def _email_has_at(cls, value: str) -> str:
        if not value:
            raise ValueError("Please enter your email")
        if "@" not in value:
            raise ValueError("Please enter a valid email address")
        return value

    @field_validator("password")
    @classmethod
    def _password_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Please enter your password")
        return value


class AdminSession(BaseModel):
    """Token and user persisted for a logged-in administrator."""
    token: str
    user: SessionUser


class LoginResponse(BaseModel):
    """Response after a successful admin login."""
    session_id: str
    user: SessionUser


class SessionRead(BaseModel):
    """Current session as seen by the browser."""
    authenticated: bool = True
    user: SessionUser
