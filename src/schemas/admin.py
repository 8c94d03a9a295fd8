"""Administrator schema definitions."""

import uuid
from datetime import datetime
from typing import Optional

import pytz
from pydantic import BaseModel, Field


class Admin(BaseModel):
    admin_id: str = Field(
        description="The unique identifier for the administrator.",
        default_factory=lambda: uuid.uuid4().hex,
        frozen=True,
    )
    username: str = Field(description="Login name, unique across administrators.")
    password_hash: str = Field(description="bcrypt hash of the password.")
    email: Optional[str] = Field(default=None, description="Contact email address.")
    created_at: str = Field(
        description="The time when the account was created.",
        default_factory=lambda: datetime.now(pytz.utc).isoformat(),
    )


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str
    username: str


class CurrentAdminResponse(BaseModel):
    username: str
    email: Optional[str] = None
