"""Test configuration for the mongo-repository package."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from pydantic import BaseModel, Field

from mongo_repository import MongoConnectionManager, Repository, RepositoryOptions


# Sample models (names avoid pytest collecting them as test classes)
class SampleDocument(BaseModel):
    """Simple document model for repository tests."""

    id: str | None = None
    name: str
    value: int = 0
    tags: list[str] = Field(default_factory=list)


class SampleAuthorizedDocument(SampleDocument):
    """Authorization-annotated variant of :class:`SampleDocument`."""

    owner: str = "system"


class MockSession:
    """Mock MongoDB session.

    Motor's ClientSession uses sync start_transaction(); commit_transaction,
    abort_transaction and end_session are async.
    """

    def __init__(self):
        self._in_transaction = False
        self.committed = False
        self.aborted = False
        self.ended = False
        self.token = uuid4().hex

    def in_transaction(self):
        """Check if session is in a transaction."""
        return self._in_transaction

    def start_transaction(self):
        """Start a transaction (sync like Motor)."""
        self._in_transaction = True

    async def commit_transaction(self):
        """Commit the transaction."""
        self._in_transaction = False
        self.committed = True

    async def abort_transaction(self):
        """Abort the transaction."""
        self._in_transaction = False
        self.aborted = True

    async def end_session(self):
        """End the session."""
        self._in_transaction = False
        self.ended = True


@pytest.fixture
def mock_client():
    """Create an in-memory Motor-compatible client."""
    try:
        from mongomock_motor import AsyncMongoMockClient
    except ImportError:
        pytest.skip("mongomock-motor not installed")
    return AsyncMongoMockClient()


@pytest.fixture
def mongo_connection(mock_client):
    """Connection manager wired to the in-memory client."""
    connection = MongoConnectionManager(url="mongodb://mock:27017", database="test_db")
    connection._client = mock_client
    return connection


@pytest.fixture
def collection(mongo_connection):
    return mongo_connection.get_collection(f"samples_{uuid4().hex[:8]}")


@pytest.fixture
def repository_options():
    return RepositoryOptions(
        base_class=SampleDocument, casl_class=SampleAuthorizedDocument
    )


@pytest.fixture
def repository(collection, repository_options):
    """Repository over a fresh in-memory collection."""
    return Repository(collection, repository_options)


@pytest.fixture
def mock_session():
    return MockSession()


@pytest.fixture
def mock_collection():
    """Driver collection double recording the keyword arguments it receives."""
    coll = MagicMock()
    coll.insert_one = AsyncMock()
    coll.find_one = AsyncMock(return_value={"_id": "x", "name": "n", "value": 1})
    coll.count_documents = AsyncMock(return_value=1)
    coll.delete_many = AsyncMock()
    coll.update_one = AsyncMock()
    coll.update_many = AsyncMock()
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    coll.find = MagicMock(return_value=cursor)
    return coll
