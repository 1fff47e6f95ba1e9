# quill/services/user_service.py

"""
Service layer for public user pages: profile and activity feed.
"""

from quill.context import AppContext
from quill.models import User
from quill.schemas import Feed
from quill.utils.exceptions import NotFoundError


async def get_user(ctx: AppContext, user_id: str) -> User:
    user = await ctx.users.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_user_feed(ctx: AppContext, user_id: str) -> Feed:
    """
    Collect the user's activity:
    - posts they wrote,
    - comments they wrote (with the post they belong to),
    - posts they liked.

    Each section is newest first and capped at FEED_LIMIT.
    """
    user = await get_user(ctx, user_id)
    limit = ctx.settings.FEED_LIMIT

    posts = await ctx.posts.list_by_author(user.id, limit)
    liked_posts = await ctx.posts.list_liked_by(user.id, limit)

    comments = await ctx.posts.list_comments_by(user.id, limit)

    return Feed(
        user=user.model_dump(),
        posts=[p.model_dump() for p in posts],
        comments=[c.model_dump() for c in comments],
        liked_posts=[p.model_dump() for p in liked_posts],
    )
