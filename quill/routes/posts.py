"""
API endpoints for posts and likes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from quill.context import AppContext
from quill.dependencies import get_context, get_current_user_id, require_post_owner
from quill.models import Post
from quill.schemas import (
    PostCreate,
    PostEnvelope,
    PostList,
    PostMessage,
    PostUpdate,
)
from quill.services import post_services

router = APIRouter(prefix="/posts", tags=["posts"])


# ===============
# CREATE A POST
# ===============

@router.post("", response_model=PostMessage, status_code=status.HTTP_201_CREATED)
async def create_post(
    post: PostCreate,
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_context),
):
    """
    Create a post owned by the current user.
    """
    db_post = await post_services.create_post(
        ctx,
        title=post.title,
        content=post.content,
        author_id=user_id,
        tags=post.tags,
    )
    return {"message": "Post created successfully", "post": db_post}


# ==============
# LIST POSTS
# ==============

@router.get("", response_model=PostList)
async def list_posts(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    tag: Optional[str] = None,
    ctx: AppContext = Depends(get_context),
):
    """
    Newest posts first. No authorization required.
    """
    posts = await post_services.list_posts(ctx, skip=skip, limit=limit, tag=tag)
    return {"posts": posts}


# ==============
# GET ONE POST
# ==============

@router.get("/{post_id}", response_model=PostEnvelope)
async def get_post(
    post_id: str,
    ctx: AppContext = Depends(get_context),
):
    """
    A post with its comments and likes. No authorization required.
    """
    return {"post": await post_services.get_post(ctx, post_id)}


# ===============
# UPDATE A POST
# ===============

@router.put("/{post_id}", response_model=PostMessage)
async def update_post(
    post_update: PostUpdate,
    post: Post = Depends(require_post_owner),
    ctx: AppContext = Depends(get_context),
):
    """
    Update a post. Only its author may do this.
    """
    db_post = await post_services.update_post(ctx, post.id, post_update.changes())
    return {"message": "Post updated successfully", "post": db_post}


# ===============
# DELETE A POST
# ===============

@router.delete("/{post_id}", response_model=PostMessage)
async def delete_post(
    post: Post = Depends(require_post_owner),
    ctx: AppContext = Depends(get_context),
):
    """
    Delete a post. Only its author may do this.
    """
    db_post = await post_services.delete_post(ctx, post.id)
    return {"message": "Post deleted successfully", "post": db_post}


# =====
# LIKES
# =====

@router.post("/{post_id}/like", response_model=PostMessage)
async def like_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_context),
):
    db_post = await post_services.like_post(ctx, post_id, user_id)
    return {"message": "Post liked successfully", "post": db_post}


@router.delete("/{post_id}/like", response_model=PostMessage)
async def unlike_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_context),
):
    db_post = await post_services.unlike_post(ctx, post_id, user_id)
    return {"message": "Post unliked successfully", "post": db_post}
