# quill/services/comment_service.py

"""
Service layer for comments.

Comments live inside their post. Updates and deletes go through one
conditional patch that matches post, comment and comment author at once,
so a stranger's edit looks exactly like a missing comment.
"""

import logging

from quill.context import AppContext
from quill.models import Comment, Post
from quill.repositories import RemoveComment, SetCommentBody
from quill.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

COMMENT_NOT_FOUND = "Post or comment not found"


def _require_body(body: str) -> str:
    body = (body or "").strip()
    if not body:
        raise ValidationError({"body": "Comment body is required"})
    return body


async def add_comment(
    ctx: AppContext,
    post_id: str,
    body: str,
    author_id: str,
) -> Comment:
    """
    Append a comment to a post on behalf of the user.
    """
    body = _require_body(body)

    comment = await ctx.posts.add_comment(post_id, body, author_id)
    if comment is None:
        raise NotFoundError("Post not found")

    logger.info(
        "Comment added",
        extra={"post_id": post_id, "comment_id": comment.id, "user_id": author_id},
    )
    return comment


async def update_comment(
    ctx: AppContext,
    post_id: str,
    comment_id: str,
    author_id: str,
    body: str,
) -> Post:
    """
    Change the body of the user's own comment and return the whole post.
    """
    body = _require_body(body)

    post = await ctx.posts.patch_comment(
        post_id, comment_id, author_id, SetCommentBody(body),
    )
    if post is None:
        raise NotFoundError(COMMENT_NOT_FOUND)

    logger.info("Comment updated", extra={"post_id": post_id, "comment_id": comment_id})
    return post


async def delete_comment(
    ctx: AppContext,
    post_id: str,
    comment_id: str,
    author_id: str,
) -> Post:
    """
    Remove the user's own comment and return the post without it.
    """
    post = await ctx.posts.patch_comment(
        post_id, comment_id, author_id, RemoveComment(),
    )
    if post is None:
        raise NotFoundError(COMMENT_NOT_FOUND)

    logger.info("Comment deleted", extra={"post_id": post_id, "comment_id": comment_id})
    return post
