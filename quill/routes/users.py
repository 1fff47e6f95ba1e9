# quill/routes/users.py

"""
API endpoints for public user pages.
"""

from fastapi import APIRouter, Depends, status

from quill.context import AppContext
from quill.dependencies import get_context
from quill.schemas import FeedEnvelope, UserEnvelope
from quill.services.user_service import get_user, get_user_feed

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.get("/{user_id}", response_model=UserEnvelope, status_code=status.HTTP_200_OK)
async def get_profile(
        user_id: str,
        ctx: AppContext = Depends(get_context),
):
    """
    Public profile: id, username, created_at
    """
    return {"user": await get_user(ctx, user_id)}


@router.get("/{user_id}/feed", response_model=FeedEnvelope)
async def get_feed(
        user_id: str,
        ctx: AppContext = Depends(get_context),
):
    """
    The user's posts, comments and liked posts
    """
    return {"feed": await get_user_feed(ctx, user_id)}
