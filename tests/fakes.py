"""In-memory UserStore/PostStore: same contracts as the Mongo stores.

Invariants:
    - Returned records are copies; callers never alias stored state
    - Malformed or unknown ids behave like the Mongo stores: None, not an error
    - patch_comment applies only when one comment matches id AND author
"""

from bson import ObjectId

from quill.models import AuthoredComment, Comment, Post, User, utcnow
from quill.repositories import RemoveComment, SetCommentBody
from quill.utils.exceptions import ConflictError


def _copy(record):
    return record.model_copy(deep=True) if record is not None else None


def _newest_first(records, key):
    # reversed() first so equal timestamps still come out newest first
    return sorted(reversed(list(records)), key=key, reverse=True)


class InMemoryUserStore:
    def __init__(self):
        self.users: dict[str, User] = {}
        self.healthy = True

    async def insert(self, username, hashed_password):
        if any(u.username == username for u in self.users.values()):
            raise ConflictError("Username already exists")
        user = User(id=str(ObjectId()), username=username, hashed_password=hashed_password)
        self.users[user.id] = user
        return _copy(user)

    async def get(self, user_id):
        return _copy(self.users.get(user_id))

    async def get_by_username(self, username):
        for user in self.users.values():
            if user.username == username:
                return _copy(user)
        return None

    async def ping(self):
        return self.healthy


class InMemoryPostStore:
    def __init__(self):
        self.posts: dict[str, Post] = {}

    async def insert(self, title, content, tags, author_id):
        post = Post(
            id=str(ObjectId()), title=title, content=content,
            tags=list(tags), author=author_id,
        )
        self.posts[post.id] = post
        return _copy(post)

    async def get(self, post_id):
        return _copy(self.posts.get(post_id))

    async def list_recent(self, skip, limit, tag=None):
        posts = [p for p in self.posts.values() if tag is None or tag in p.tags]
        posts = _newest_first(posts, key=lambda p: p.created_at)
        return [_copy(p) for p in posts[skip:skip + limit]]

    async def update(self, post_id, changes):
        post = self.posts.get(post_id)
        if post is None:
            return None
        for key, value in changes.items():
            setattr(post, key, value)
        post.updated_at = utcnow()
        return _copy(post)

    async def delete(self, post_id):
        return self.posts.pop(post_id, None)

    async def add_comment(self, post_id, body, author_id):
        post = self.posts.get(post_id)
        if post is None:
            return None
        comment = Comment(id=str(ObjectId()), body=body, author=author_id)
        post.comments.append(comment)
        post.updated_at = utcnow()
        return _copy(comment)

    async def patch_comment(self, post_id, comment_id, author_id, patch):
        post = self.posts.get(post_id)
        if post is None:
            return None
        matches = [
            i for i, c in enumerate(post.comments)
            if c.id == comment_id and c.author == author_id
        ]
        if len(matches) != 1:
            return None

        index = matches[0]
        if isinstance(patch, SetCommentBody):
            post.comments[index].body = patch.body
            post.comments[index].updated_at = utcnow()
        elif isinstance(patch, RemoveComment):
            del post.comments[index]
        else:
            raise TypeError(f"Unsupported comment patch: {patch!r}")
        post.updated_at = utcnow()
        return _copy(post)

    async def add_like(self, post_id, user_id):
        post = self.posts.get(post_id)
        if post is None:
            return None
        if user_id not in post.likes:
            post.likes.append(user_id)
        return _copy(post)

    async def remove_like(self, post_id, user_id):
        post = self.posts.get(post_id)
        if post is None:
            return None
        post.likes = [u for u in post.likes if u != user_id]
        return _copy(post)

    async def list_by_author(self, user_id, limit):
        posts = [p for p in self.posts.values() if p.author == user_id]
        return [_copy(p) for p in _newest_first(posts, lambda p: p.created_at)[:limit]]

    async def list_comments_by(self, user_id, limit):
        authored = [
            AuthoredComment(post_id=p.id, post_title=p.title, comment=_copy(c))
            for p in self.posts.values()
            for c in p.comments
            if c.author == user_id
        ]
        return _newest_first(authored, lambda a: a.comment.created_at)[:limit]

    async def list_liked_by(self, user_id, limit):
        posts = [p for p in self.posts.values() if user_id in p.likes]
        return [_copy(p) for p in _newest_first(posts, lambda p: p.created_at)[:limit]]
