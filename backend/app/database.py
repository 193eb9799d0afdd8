"""
Atomsmiths Backend — Database Connection Cache
================================================

What:  Process-wide Motor client, database accessor, and FastAPI dependency.
How:   The client is created lazily on first use and memoized at module level;
       every request afterwards reuses it (and its connection pool).
Who:   Used by route handlers via FastAPI's dependency injection system and by
       the application lifespan (ping, indexes, shutdown).
When:  Client is created on the first database access, closed at shutdown.

Connection Pooling:
    maxPoolSize=10:   Upper bound on sockets per server
    minPoolSize=2:    Connections kept warm between requests
    serverSelectionTimeoutMS=5000:
                      Fail a query after 5s if no server is reachable
    tz_aware=True:    Datetimes come back as aware UTC values, so they compare
                      directly with datetime.now(timezone.utc)
"""

import logging
from typing import AsyncGenerator, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, OperationFailure
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from app.config import settings
from app.models.collections import INDEXES

logger = logging.getLogger(__name__)


# ── Cached Client ─────────────────────────────────────────────────────────
# At most one client per process until close_client() is called.
_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    """
    Return the process-wide Motor client, creating it on first call.

    Creating the client does not open any sockets; the driver connects on the
    first operation, so this is safe to call at import or request time.
    """
    global _client
    if _client is None:
        logger.info("Creating MongoDB client (db=%s)", settings.mongodb_db)
        _client = AsyncIOMotorClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.db_server_selection_timeout_ms,
            maxPoolSize=settings.db_max_pool_size,
            minPoolSize=settings.db_min_pool_size,
            tz_aware=True,
        )
    return _client


def get_database() -> AsyncIOMotorDatabase:
    """Return the configured application database from the cached client."""
    return get_client()[settings.mongodb_db]


# ── Request Dependency ────────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    FastAPI dependency that provides the database handle.

    Example usage in a route:
        @router.get("/members")
        async def list_members(db: AsyncIOMotorDatabase = Depends(get_db)):
            ...

    Tests replace it through app.dependency_overrides.
    """
    yield get_database()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping_database() -> bool:
    """Single round trip to the server; raises ConnectionFailure when unreachable."""
    await get_client().admin.command("ping")
    return True


@retry(
    retry=retry_if_exception_type(ConnectionFailure),
    stop=stop_after_attempt(settings.db_connect_attempts),
    wait=wait_exponential_jitter(
        initial=settings.db_connect_min_wait,
        max=settings.db_connect_max_wait,
        jitter=1,
    ),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def connect_with_retry() -> bool:
    """
    Ping the server at startup, retrying with backoff on connection failures.

    ServerSelectionTimeoutError and AutoReconnect are both ConnectionFailure
    subclasses, so either triggers another attempt.
    """
    return await ping_database()


async def ensure_indexes(db: Optional[AsyncIOMotorDatabase] = None) -> List[str]:
    """
    Create the collection indexes declared in app.models.collections.

    create_indexes is idempotent for identical definitions, so this runs on
    every startup. A collection whose indexes cannot be built (for example
    the unique email index over legacy duplicates) is logged and skipped so
    the remaining collections still get theirs.

    Returns: Names of the collections whose indexes failed.
    """
    db = db if db is not None else get_database()
    failed: List[str] = []
    for collection_name, indexes in INDEXES:
        try:
            names = await db[collection_name].create_indexes(indexes)
        except OperationFailure as e:
            failed.append(collection_name)
            logger.error("Could not build indexes on %s: %s", collection_name, str(e))
            continue
        logger.info("Indexes ensured on %s: %s", collection_name, ", ".join(names))
    return failed


def close_client() -> None:
    """
    What:  Closes the cached client and forgets it.
    When:  Called during application shutdown (lifespan handler) and by tests.
    """
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB client closed")
