"""
Pydantic models for user data.

Passwords are accepted on sign‑up, login and password change but are
never returned by the API.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserCredentials(BaseModel):
    """Username and password, used for sign‑up and login."""

    username: str = Field(..., description="Unique, case‑sensitive username")
    password: str = Field(..., description="Plain text password")


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: int
    username: str
    created_at: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }


class UsernameUpdate(BaseModel):
    username: str


class PasswordUpdate(BaseModel):
    current_password: str = Field(..., alias="currentPassword")
    new_password: str = Field(..., alias="newPassword")

    # Accept both camelCase (web client) and snake_case bodies.
    model_config = {
        "populate_by_name": True,
    }


class SessionToken(BaseModel):
    msg: str
    access_token: str
    token_type: str = "bearer"
