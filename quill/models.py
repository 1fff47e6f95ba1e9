# quill/models.py

"""
Domain records as the stores hand them out.

Ids are plain strings here; ObjectId stays inside the Mongo stores.
"""

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """
    User model
    """
    id: str
    username: str
    hashed_password: str
    created_at: datetime = Field(default_factory=utcnow)


class Comment(BaseModel):
    """
    Comment embedded in a post
    """
    id: str
    body: str
    author: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Post(BaseModel):
    """
    Post model, owns its comments
    """
    id: str
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    author: str
    comments: List[Comment] = Field(default_factory=list)
    likes: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class AuthoredComment(BaseModel):
    """
    A comment together with the post it sits on
    """
    post_id: str
    post_title: str
    comment: Comment
