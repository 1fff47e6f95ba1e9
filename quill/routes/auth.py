# quill/routes/auth.py

"""
API endpoints for registration and login.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from quill.config import get_settings
from quill.context import AppContext
from quill.dependencies import get_context
from quill.schemas import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from quill.services.auth_service import login_user, register_user
from quill.utils.limiter import limiter

# Router for all auth endpoints
router = APIRouter(
    tags=["auth"],
    responses={400: {"description": "Bad Request"}},
)


def _register_limit() -> str:
    return get_settings().REGISTER_RATE_LIMIT


def _login_limit() -> str:
    return get_settings().LOGIN_RATE_LIMIT


# =====================
# REGISTER A NEW USER
# =====================

@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Username already exists"}},
)
@limiter.limit(_register_limit)
async def register(
        user: RegisterRequest,
        request: Request,
        ctx: AppContext = Depends(get_context),
):
    """Register a user. Usernames are unique."""
    db_user = await register_user(ctx, user.username, user.password)
    return {"message": "User registered successfully", "user": db_user}


# =====
# LOGIN
# =====

@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    responses={401: {"description": "Invalid credentials"}},
)
@limiter.limit(_login_limit)
async def login(
        request: Request,
        creds: Optional[LoginRequest] = None,
        ctx: AppContext = Depends(get_context),
):
    """Exchange username and password for a bearer token"""
    creds = creds or LoginRequest()
    token = await login_user(ctx, creds.username, creds.password)
    return {"token": token, "token_type": "bearer"}
