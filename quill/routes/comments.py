# quill/routes/comments.py

"""
API endpoints for comments.

All endpoints require authorization.
Update/delete - only for the comment's author, and a foreign comment
answers 404 just like a missing one.
"""

from fastapi import APIRouter, Depends, status

from quill.context import AppContext
from quill.dependencies import get_context, get_current_user_id
from quill.schemas import CommentCreate, CommentEnvelope, CommentUpdate, PostMessage
from quill.services.comment_service import (
    add_comment,
    delete_comment,
    update_comment,
)


router = APIRouter(prefix="/posts", tags=["comments"])


@router.post(
    "/{post_id}/comments",
    response_model=CommentEnvelope,
    status_code=status.HTTP_201_CREATED
)
async def create_comment(
    post_id: str,
    comment: CommentCreate,
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_context),
):
    """
    Add a comment to a post.
    """
    db_comment = await add_comment(ctx, post_id=post_id, body=comment.body, author_id=user_id)
    return {"message": "Comment added successfully", "comment": db_comment}


@router.put("/{post_id}/comments/{comment_id}", response_model=PostMessage)
async def edit_comment(
    post_id: str,
    comment_id: str,
    comment: CommentUpdate,
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_context),
):
    """
    Update a comment. Returns the whole post.
    """
    post = await update_comment(
        ctx,
        post_id=post_id,
        comment_id=comment_id,
        author_id=user_id,
        body=comment.body,
    )
    return {"message": "Comment updated successfully", "post": post}


@router.delete("/{post_id}/comments/{comment_id}", response_model=PostMessage)
async def remove_comment(
    post_id: str,
    comment_id: str,
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_context),
):
    """
    Delete a comment. Returns the post without it.
    """
    post = await delete_comment(
        ctx,
        post_id=post_id,
        comment_id=comment_id,
        author_id=user_id,
    )
    return {"message": "Comment deleted successfully", "post": post}
