"""
Atomsmiths Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    mock_db:       FakeDatabase, a stand-in for AsyncIOMotorDatabase whose
                   collections are MagicMocks with AsyncMock query methods
    make_cursor:   builds a chainable Motor cursor returning given documents
    member_doc / event_doc / blog_doc: raw documents as Motor returns them
    test_client:   HTTPX AsyncClient bound to the app, with get_db overridden
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["MONGODB_DB"] = "atomsmiths_test"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient


def build_cursor(docs: Iterable[Dict[str, Any]] = ()) -> MagicMock:
    """A Motor cursor mock: sort/skip/limit chain back to itself, to_list is awaitable."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=list(docs))
    return cursor


class FakeDatabase:
    """
    Minimal AsyncIOMotorDatabase replacement.

    db["members"] always returns the same collection mock, so tests can set
    return values before the call and inspect call arguments afterwards.
    """

    def __init__(self) -> None:
        self.collections: Dict[str, MagicMock] = {}

    def __getitem__(self, name: str) -> MagicMock:
        if name not in self.collections:
            collection = MagicMock(name=name)
            collection.find_one = AsyncMock(return_value=None)
            collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
            collection.find_one_and_update = AsyncMock(return_value=None)
            collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
            collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
            collection.count_documents = AsyncMock(return_value=0)
            collection.create_indexes = AsyncMock(return_value=[])
            collection.find = MagicMock(return_value=build_cursor())
            collection.aggregate = MagicMock(return_value=build_cursor())
            self.collections[name] = collection
        return self.collections[name]


@pytest.fixture
def mock_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def make_cursor():
    return build_cursor


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def member_doc(now) -> Dict[str, Any]:
    """A stored member as Motor returns it (ObjectId, aware datetimes)."""
    return {
        "_id": ObjectId(),
        "name": "Ada Lovelace",
        "email": "ada@atomsmiths.org",
        "department": "CSE",
        "year": 2,
        "interests": "Analytical engines",
        "joinedAt": now,
        "createdAt": now,
        "updatedAt": now,
    }


@pytest.fixture
def event_doc(now) -> Dict[str, Any]:
    return {
        "_id": ObjectId(),
        "title": "Robotics Workshop",
        "description": "Build a line follower",
        "eventDate": now + timedelta(days=7),
        "location": "Lab 3",
        "createdAt": now,
        "updatedAt": now,
    }


@pytest.fixture
def blog_doc(now, member_doc) -> Dict[str, Any]:
    return {
        "_id": ObjectId(),
        "title": "Hello Atomsmiths",
        "content": "First post!",
        "authorId": str(member_doc["_id"]),
        "authorName": member_doc["name"],
        "authorEmail": member_doc["email"],
        "authorDepartment": member_doc["department"],
        "createdAt": now,
        "updatedAt": now,
    }


@pytest_asyncio.fixture
async def test_client(mock_db):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    The get_db dependency is overridden with mock_db, so no MongoDB server is
    needed. Lifespan is not run by ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from app.database import get_db
    from app.main import app

    app.dependency_overrides[get_db] = lambda: mock_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
