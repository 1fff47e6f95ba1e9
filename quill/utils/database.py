"""
MongoDB connection lifecycle.

The client is created once at startup and handed to the stores through
the application context; nothing here is a module-level global.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
POSTS_COLLECTION = "posts"


async def connect_to_mongo(url: str, timeout_ms: int = 5000) -> AsyncIOMotorClient:
    """
    Open a client and make sure the server answers.

    Raises the driver error when the server is unreachable so startup
    aborts instead of serving without a store.
    """
    client = AsyncIOMotorClient(
        url, serverSelectionTimeoutMS=timeout_ms, tz_aware=True,
    )
    try:
        await client.admin.command("ping")
    except Exception:
        client.close()
        logger.error("MongoDB is unreachable")
        raise
    logger.info("Connected to MongoDB")
    return client


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    # Username uniqueness lives in the index, not in check-then-insert
    await db[USERS_COLLECTION].create_index(
        [("username", ASCENDING)], unique=True, name="username_unique",
    )
    await db[POSTS_COLLECTION].create_index(
        [("author", ASCENDING), ("created_at", DESCENDING)], name="author_created",
    )
    await db[POSTS_COLLECTION].create_index([("comments.author", ASCENDING)])
    await db[POSTS_COLLECTION].create_index([("likes", ASCENDING)])
    await db[POSTS_COLLECTION].create_index([("tags", ASCENDING)])


async def ping(db: AsyncIOMotorDatabase) -> bool:
    """
    Simple availability check for the health endpoint.
    """
    try:
        await db.command("ping")
        return True
    except Exception:
        logger.warning("MongoDB ping failed", exc_info=True)
        return False
