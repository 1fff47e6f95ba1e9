# quill/schemas/__init__.py

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

# Required text: surrounding whitespace is dropped, blank is rejected
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


def unique_tags(tags: List[str]) -> List[str]:
    """Tags are a set; keep first occurrence order for stable output."""
    return list(dict.fromkeys(tags))


# ============
# USER SCHEMAS
# ============

class RegisterRequest(BaseModel):
    """
    Registration body
    """
    username: NonEmptyStr
    password: Annotated[str, StringConstraints(min_length=1)]


class LoginRequest(BaseModel):
    """
    Login body. Missing or malformed fields are treated as wrong
    credentials, not as a 400
    """
    username: str = ""
    password: str = ""

    @model_validator(mode="before")
    @classmethod
    def object_or_empty(cls, data: Any) -> Any:
        return data if isinstance(data, dict) else {}

    @field_validator("username", "password", mode="before")
    @classmethod
    def text_or_empty(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class UserResponse(BaseModel):
    """
    Public user info, never includes the password hash
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    created_at: datetime


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class UserEnvelope(BaseModel):
    user: UserResponse


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


# ===============
# COMMENT SCHEMAS
# ===============

class CommentCreate(BaseModel):
    """Create a comment"""
    body: NonEmptyStr


class CommentUpdate(CommentCreate):
    """Update a comment"""
    pass


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    body: str
    author: str
    created_at: datetime
    updated_at: datetime


class CommentEnvelope(BaseModel):
    message: str
    comment: CommentResponse


# ============
# POST SCHEMAS
# ============

class PostCreate(BaseModel):
    """Create a post"""
    title: NonEmptyStr
    content: NonEmptyStr
    tags: List[Tag] = Field(default_factory=list)


class PostUpdate(BaseModel):
    """Update a post; only the fields sent are changed"""
    title: Optional[NonEmptyStr] = None
    content: Optional[NonEmptyStr] = None
    tags: Optional[List[Tag]] = None

    @model_validator(mode="after")
    def check_not_empty(self) -> "PostUpdate":
        if self.title is None and self.content is None and self.tags is None:
            raise ValueError("Nothing to update")
        return self

    def changes(self) -> dict:
        data = self.model_dump(exclude_none=True)
        if "tags" in data:
            data["tags"] = unique_tags(data["tags"])
        return data


class PostResponse(BaseModel):
    """Post with its comments and likes"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    tags: List[str]
    author: str
    comments: List[CommentResponse]
    likes: List[str]
    created_at: datetime
    updated_at: datetime


class PostEnvelope(BaseModel):
    post: PostResponse


class PostMessage(BaseModel):
    message: str
    post: PostResponse


class PostList(BaseModel):
    posts: List[PostResponse]


# ============
# FEED SCHEMAS
# ============

class FeedComment(BaseModel):
    """A comment the user wrote, with the post it belongs to"""
    post_id: str
    post_title: str
    comment: CommentResponse


class Feed(BaseModel):
    user: UserResponse
    posts: List[PostResponse]
    comments: List[FeedComment]
    liked_posts: List[PostResponse]


class FeedEnvelope(BaseModel):
    feed: Feed
