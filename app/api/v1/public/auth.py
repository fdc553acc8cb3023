# ============================================================================
# FILE: app/api/v1/public/auth.py
# Admin session endpoints - login, logout, session check
# ============================================================================
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from app.api.dependencies import (
    clear_session_cookie,
    create_session_token,
    get_db,
    optional_admin,
    set_session_cookie,
)
from app.models.user import AdminUser
from app.schemas.auth import AdminUserRead, AuthCheckResponse, LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
        request: LoginRequest,
        response: Response,
        db: Session = Depends(get_db)
):
    """
    Log in with username and password.

    On success the session token is set as an HttpOnly cookie; nothing
    secret is returned in the body.
    """
    if not request.username or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required"
        )

    user = db.query(AdminUser).filter(AdminUser.username == request.username).first()
    if not user or not user.is_admin or not user.verify_password(request.password):
        logger.warning(f"Failed admin login for {request.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    set_session_cookie(response, create_session_token(user))
    logger.info(f"Admin {user.username} logged in")

    return LoginResponse(user=AdminUserRead.model_validate(user))


@router.post("/logout")
async def logout(response: Response):
    """Clear the session cookie. Always succeeds."""
    clear_session_cookie(response)
    return {"success": True}


@router.get("/check", response_model=AuthCheckResponse)
async def check_session(user: Optional[AdminUser] = Depends(optional_admin)):
    """Whether the caller holds a valid admin session"""
    if user is None:
        return AuthCheckResponse(authenticated=False)
    return AuthCheckResponse(authenticated=True, user=AdminUserRead.model_validate(user))
