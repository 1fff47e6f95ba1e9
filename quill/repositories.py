# quill/repositories.py

"""
Store contracts and their MongoDB implementations.

Services only talk to UserStore/PostStore; the Mongo classes below are
the production implementations and translate between documents
(ObjectId, embedded arrays) and the records in quill.models.

Every mutating method is one atomic operation on one document.
Unknown or malformed ids come back as None, never as an exception.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Protocol, Union

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from quill.models import AuthoredComment, Comment, Post, User
from quill.utils.database import ping
from quill.utils.exceptions import ConflictError


# ===================
# Comment patch types
# ===================

@dataclass(frozen=True)
class SetCommentBody:
    body: str


@dataclass(frozen=True)
class RemoveComment:
    pass


CommentPatch = Union[SetCommentBody, RemoveComment]


# =========
# Contracts
# =========

class UserStore(Protocol):
    async def insert(self, username: str, hashed_password: str) -> User: ...
    async def get(self, user_id: str) -> Optional[User]: ...
    async def get_by_username(self, username: str) -> Optional[User]: ...
    async def ping(self) -> bool: ...


class PostStore(Protocol):
    async def insert(
        self, title: str, content: str, tags: List[str], author_id: str,
    ) -> Post: ...
    async def get(self, post_id: str) -> Optional[Post]: ...
    async def list_recent(
        self, skip: int, limit: int, tag: Optional[str] = None,
    ) -> List[Post]: ...
    async def update(self, post_id: str, changes: dict) -> Optional[Post]: ...
    async def delete(self, post_id: str) -> Optional[Post]: ...
    async def add_comment(
        self, post_id: str, body: str, author_id: str,
    ) -> Optional[Comment]: ...
    async def patch_comment(
        self, post_id: str, comment_id: str, author_id: str, patch: CommentPatch,
    ) -> Optional[Post]:
        """
        Apply patch to the comment matching both comment_id and author_id.

        None when the post is unknown or no single comment matches.
        """
        ...
    async def add_like(self, post_id: str, user_id: str) -> Optional[Post]: ...
    async def remove_like(self, post_id: str, user_id: str) -> Optional[Post]: ...
    async def list_by_author(self, user_id: str, limit: int) -> List[Post]: ...
    async def list_comments_by(
        self, user_id: str, limit: int,
    ) -> List[AuthoredComment]:
        """
        Comments written by user_id across all posts, newest comment first.
        """
        ...
    async def list_liked_by(self, user_id: str, limit: int) -> List[Post]: ...


# =======
# MongoDB
# =======

def _object_id(value: str) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _user_from_doc(doc: dict) -> User:
    return User(
        id=str(doc["_id"]),
        username=doc["username"],
        hashed_password=doc["hashed_password"],
        created_at=doc["created_at"],
    )


def _comment_from_doc(doc: dict) -> Comment:
    return Comment(
        id=str(doc["_id"]),
        body=doc["body"],
        author=str(doc["author"]),
        created_at=doc["created_at"],
        updated_at=doc.get("updated_at", doc["created_at"]),
    )


def _post_from_doc(doc: dict) -> Post:
    return Post(
        id=str(doc["_id"]),
        title=doc["title"],
        content=doc["content"],
        tags=list(doc.get("tags", [])),
        author=str(doc["author"]),
        comments=[_comment_from_doc(c) for c in doc.get("comments", [])],
        likes=[str(u) for u in doc.get("likes", [])],
        created_at=doc["created_at"],
        updated_at=doc.get("updated_at", doc["created_at"]),
    )


async def _posts(cursor, limit: int) -> List[Post]:
    return [_post_from_doc(doc) for doc in await cursor.to_list(length=limit)]


class MongoUserStore:
    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    async def insert(self, username: str, hashed_password: str) -> User:
        doc = {
            "username": username,
            "hashed_password": hashed_password,
            "created_at": _now(),
        }
        try:
            result = await self._collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Username already exists")
        doc["_id"] = result.inserted_id
        return _user_from_doc(doc)

    async def get(self, user_id: str) -> Optional[User]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        doc = await self._collection.find_one({"_id": oid})
        return _user_from_doc(doc) if doc else None

    async def get_by_username(self, username: str) -> Optional[User]:
        doc = await self._collection.find_one({"username": username})
        return _user_from_doc(doc) if doc else None

    async def ping(self) -> bool:
        return await ping(self._collection.database)


class MongoPostStore:
    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    async def insert(
        self, title: str, content: str, tags: List[str], author_id: str,
    ) -> Post:
        now = _now()
        doc = {
            "title": title,
            "content": content,
            "tags": list(tags),
            "author": ObjectId(author_id),
            "comments": [],
            "likes": [],
            "created_at": now,
            "updated_at": now,
        }
        result = await self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _post_from_doc(doc)

    async def get(self, post_id: str) -> Optional[Post]:
        oid = _object_id(post_id)
        if oid is None:
            return None
        doc = await self._collection.find_one({"_id": oid})
        return _post_from_doc(doc) if doc else None

    async def list_recent(
        self, skip: int, limit: int, tag: Optional[str] = None,
    ) -> List[Post]:
        query = {"tags": tag} if tag else {}
        cursor = (
            self._collection.find(query)
            .sort("created_at", DESCENDING)
            .skip(skip)
            .limit(limit)
        )
        return await _posts(cursor, limit)

    async def _find_and_update(self, query: dict, update: dict) -> Optional[Post]:
        doc = await self._collection.find_one_and_update(
            query, update, return_document=ReturnDocument.AFTER,
        )
        return _post_from_doc(doc) if doc else None

    async def update(self, post_id: str, changes: dict) -> Optional[Post]:
        oid = _object_id(post_id)
        if oid is None:
            return None
        return await self._find_and_update(
            {"_id": oid},
            {"$set": {**changes, "updated_at": _now()}},
        )

    async def delete(self, post_id: str) -> Optional[Post]:
        oid = _object_id(post_id)
        if oid is None:
            return None
        doc = await self._collection.find_one_and_delete({"_id": oid})
        return _post_from_doc(doc) if doc else None

    async def add_comment(
        self, post_id: str, body: str, author_id: str,
    ) -> Optional[Comment]:
        oid = _object_id(post_id)
        if oid is None:
            return None
        now = _now()
        doc = {
            "_id": ObjectId(),
            "body": body,
            "author": ObjectId(author_id),
            "created_at": now,
            "updated_at": now,
        }
        result = await self._collection.update_one(
            {"_id": oid},
            {"$push": {"comments": doc}, "$set": {"updated_at": now}},
        )
        if result.matched_count == 0:
            return None
        return _comment_from_doc(doc)

    async def patch_comment(
        self, post_id: str, comment_id: str, author_id: str, patch: CommentPatch,
    ) -> Optional[Post]:
        oids = [_object_id(v) for v in (post_id, comment_id, author_id)]
        if None in oids:
            return None
        post_oid, comment_oid, author_oid = oids

        # $elemMatch: id and author must hold on the same element
        match = {"_id": comment_oid, "author": author_oid}
        query = {"_id": post_oid, "comments": {"$elemMatch": match}}
        now = _now()

        if isinstance(patch, SetCommentBody):
            update = {
                "$set": {
                    "comments.$.body": patch.body,
                    "comments.$.updated_at": now,
                    "updated_at": now,
                },
            }
        elif isinstance(patch, RemoveComment):
            update = {"$pull": {"comments": match}, "$set": {"updated_at": now}}
        else:
            raise TypeError(f"Unsupported comment patch: {patch!r}")

        return await self._find_and_update(query, update)

    async def add_like(self, post_id: str, user_id: str) -> Optional[Post]:
        oid = _object_id(post_id)
        if oid is None:
            return None
        return await self._find_and_update(
            {"_id": oid}, {"$addToSet": {"likes": ObjectId(user_id)}},
        )

    async def remove_like(self, post_id: str, user_id: str) -> Optional[Post]:
        oid = _object_id(post_id)
        if oid is None:
            return None
        return await self._find_and_update(
            {"_id": oid}, {"$pull": {"likes": ObjectId(user_id)}},
        )

    def _recent(self, query: dict, sort_key: str, limit: int):
        return self._collection.find(query).sort(sort_key, DESCENDING).limit(limit)

    async def list_by_author(self, user_id: str, limit: int) -> List[Post]:
        oid = _object_id(user_id)
        if oid is None:
            return []
        return await _posts(self._recent({"author": oid}, "created_at", limit), limit)

    async def list_comments_by(
        self, user_id: str, limit: int,
    ) -> List[AuthoredComment]:
        oid = _object_id(user_id)
        if oid is None:
            return []
        # First $match uses the comments.author index, the second drops
        # the other authors' comments left over after $unwind
        pipeline = [
            {"$match": {"comments.author": oid}},
            {"$unwind": "$comments"},
            {"$match": {"comments.author": oid}},
            {"$sort": {"comments.created_at": DESCENDING}},
            {"$limit": limit},
            {"$project": {"title": 1, "comment": "$comments"}},
        ]
        docs = await self._collection.aggregate(pipeline).to_list(length=limit)
        return [
            AuthoredComment(
                post_id=str(doc["_id"]),
                post_title=doc["title"],
                comment=_comment_from_doc(doc["comment"]),
            )
            for doc in docs
        ]

    async def list_liked_by(self, user_id: str, limit: int) -> List[Post]:
        oid = _object_id(user_id)
        if oid is None:
            return []
        return await _posts(self._recent({"likes": oid}, "created_at", limit), limit)
