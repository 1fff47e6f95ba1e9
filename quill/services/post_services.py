# quill/services/post_services.py

"""
Service layer for posts and likes.

Knows about the post store, not about HTTP statuses.
Ownership of a post is checked before these are called (see dependencies).
"""

import logging
from typing import Iterable, List, Optional

from quill.context import AppContext
from quill.models import Post
from quill.schemas import unique_tags
from quill.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found"


def _require_text(**fields: Optional[str]) -> None:
    errors = {
        name: f"{name.capitalize()} is required"
        for name, value in fields.items()
        if value is None or not value.strip()
    }
    if errors:
        raise ValidationError(errors)


async def create_post(
    ctx: AppContext,
    title: str,
    content: str,
    author_id: str,
    tags: Iterable[str] = (),
) -> Post:
    """
    Create a post for the given author. Nothing is stored on a validation error.
    """
    _require_text(title=title, content=content)

    post = await ctx.posts.insert(
        title.strip(), content.strip(), unique_tags(list(tags)), author_id,
    )
    logger.info("Post created", extra={"post_id": post.id, "user_id": author_id})
    return post


async def get_post(ctx: AppContext, post_id: str) -> Post:
    post = await ctx.posts.get(post_id)
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)
    return post


async def list_posts(
    ctx: AppContext,
    skip: int = 0,
    limit: int = 10,
    tag: Optional[str] = None,
) -> List[Post]:
    """
    Newest posts first, optionally only those carrying a tag.
    """
    return await ctx.posts.list_recent(skip=skip, limit=limit, tag=tag)


async def update_post(
    ctx: AppContext,
    post_id: str,
    changes: dict,
) -> Post:
    """
    Replace the given fields (title, content, tags) of a post.
    """
    if not changes:
        raise ValidationError({"body": "Nothing to update"})
    _require_text(**{k: v for k, v in changes.items() if k in ("title", "content")})

    post = await ctx.posts.update(post_id, changes)
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)

    logger.info("Post updated", extra={"post_id": post_id})
    return post


async def delete_post(ctx: AppContext, post_id: str) -> Post:
    post = await ctx.posts.delete(post_id)
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)

    logger.info("Post deleted", extra={"post_id": post_id})
    return post


# =====
# LIKES
# =====

async def like_post(ctx: AppContext, post_id: str, user_id: str) -> Post:
    """
    Add the user to the post's likes. Liking twice keeps a single like.
    """
    post = await ctx.posts.add_like(post_id, user_id)
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)
    return post


async def unlike_post(ctx: AppContext, post_id: str, user_id: str) -> Post:
    post = await ctx.posts.remove_like(post_id, user_id)
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)
    return post
