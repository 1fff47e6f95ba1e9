# quill/dependencies.py

"""
Dependencies for use in endpoints
"""

from typing import Optional

from bson import ObjectId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from quill.context import AppContext
from quill.models import Post
from quill.utils.exceptions import AuthError, ForbiddenError, NotFoundError

security = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    """
    The context built at startup (see main.create_app).
    """
    return request.app.state.context


async def get_current_user_id(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        ctx: AppContext = Depends(get_context),
) -> str:
    """
    Id of the authenticated caller.

    Takes the Bearer token from the Authorization header and verifies it.
    No header -> "Unauthorized", bad token -> "Invalid token".
    A validly signed token whose subject is not a user id is a bad token.
    """
    if credentials is None:
        raise AuthError("Unauthorized")

    user_id = ctx.tokens.verify(credentials.credentials)
    if not ObjectId.is_valid(user_id):
        raise AuthError("Invalid token", code="invalid_token")
    return user_id


async def require_post_owner(
        post_id: str,
        user_id: str = Depends(get_current_user_id),
        ctx: AppContext = Depends(get_context),
) -> Post:
    """
    Let only the post's author through; hands the post to the endpoint.
    """
    post = await ctx.posts.get(post_id)
    if post is None:
        raise NotFoundError("Post not found")

    if post.author != user_id:
        raise ForbiddenError()

    return post
