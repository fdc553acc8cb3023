# app/schemas/auth.py
from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Request body for admin login."""
    username: Optional[str] = None
    password: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {"username": "admin", "password": "SecurePass123!"}
        }
    }


class AdminUserRead(BaseModel):
    id: str
    username: str
    is_admin: bool

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    success: bool = True
    user: AdminUserRead


class AuthCheckResponse(BaseModel):
    authenticated: bool
    user: Optional[AdminUserRead] = None
