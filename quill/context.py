# quill/context.py

"""
Everything a request needs from the process, built once at startup.

Stored on app.state.context and handed to handlers through
dependencies.get_context; there are no module-level connections or secrets.
"""

from dataclasses import dataclass, field
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from passlib.context import CryptContext

from quill.config import Settings
from quill.repositories import MongoPostStore, MongoUserStore, PostStore, UserStore
from quill.utils.database import (
    POSTS_COLLECTION,
    USERS_COLLECTION,
    connect_to_mongo,
    ensure_indexes,
)
from quill.utils.security import TokenService, build_password_context


@dataclass
class AppContext:
    settings: Settings
    users: UserStore
    posts: PostStore
    tokens: TokenService
    pwd_context: CryptContext
    client: Optional[AsyncIOMotorClient] = field(default=None, repr=False)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None


def build_context(settings: Settings, users: UserStore, posts: PostStore) -> AppContext:
    """Wire a context around already constructed stores."""
    return AppContext(
        settings=settings,
        users=users,
        posts=posts,
        tokens=TokenService(
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        ),
        pwd_context=build_password_context(settings.BCRYPT_ROUNDS),
    )


async def create_mongo_context(settings: Settings) -> AppContext:
    client = await connect_to_mongo(settings.MONGODB_URL, settings.MONGODB_TIMEOUT_MS)
    db = client[settings.MONGODB_DB_NAME]
    try:
        await ensure_indexes(db)
    except Exception:
        client.close()
        raise

    ctx = build_context(
        settings,
        users=MongoUserStore(db[USERS_COLLECTION]),
        posts=MongoPostStore(db[POSTS_COLLECTION]),
    )
    ctx.client = client
    return ctx
