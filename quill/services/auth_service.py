# quill/services/auth_service.py

"""
Service layer for registration and login.

Knows about the user store, hashing and JWT, but not about HTTP.
"""

import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from quill.context import AppContext
from quill.models import User
from quill.utils.exceptions import AuthError, ValidationError
from quill.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


async def register_user(
    ctx: AppContext,
    username: str,
    password: str,
) -> User:
    """
    Register a new user.

    Raises ValidationError for empty fields and ConflictError (from the
    store's unique index) when the username is taken.
    """
    username = (username or "").strip()
    errors = {}
    if not username:
        errors["username"] = "Username is required"
    if not password:
        errors["password"] = "Password is required"
    if errors:
        raise ValidationError(errors)

    # bcrypt is CPU bound; keep it off the event loop
    hashed_password = await run_in_threadpool(hash_password, ctx.pwd_context, password)
    user = await ctx.users.insert(username, hashed_password)

    logger.info("User registered", extra={"user_id": user.id})
    return user


async def verify_credentials(
    ctx: AppContext,
    username: str,
    password: str,
) -> Optional[User]:
    """
    Return the user only if the password matches; None otherwise.

    Unknown users still go through a hash check.
    """
    user = await ctx.users.get_by_username((username or "").strip())
    stored_hash = user.hashed_password if user else None

    matches = await run_in_threadpool(
        verify_password, ctx.pwd_context, password or "", stored_hash,
    )
    if not matches:
        return None
    return user


async def login_user(
    ctx: AppContext,
    username: str,
    password: str,
) -> str:
    """
    Check credentials and issue a bearer token.
    """
    user = await verify_credentials(ctx, username, password)
    if user is None:
        # Same answer for unknown user and wrong password
        logger.warning("Failed login attempt")
        raise AuthError("Invalid credentials", code="invalid_credentials")

    logger.info("User logged in", extra={"user_id": user.id})
    return ctx.tokens.issue(user.id)
