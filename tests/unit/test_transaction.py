"""Tests for the caller-side MongoTransaction helper."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from mongo_repository import MongoTransaction, MongoTransactionError

from ..conftest import MockSession


def _connection_for(session):
    connection = MagicMock()
    connection.client.start_session = AsyncMock(return_value=session)
    return connection


def test_requires_exactly_one_source():
    with pytest.raises(MongoTransactionError, match="both"):
        MongoTransaction(session=MockSession(), connection=MagicMock())
    with pytest.raises(MongoTransactionError, match="required"):
        MongoTransaction()


def test_session_unavailable_outside_context():
    with pytest.raises(MongoTransactionError, match="not available"):
        _ = MongoTransaction(connection=MagicMock()).session


@pytest.mark.asyncio
async def test_commits_on_success_and_ends_owned_session():
    session = MockSession()

    async with MongoTransaction(connection=_connection_for(session)) as txn:
        assert txn.session is session
        assert session.in_transaction()

    assert session.committed
    assert not session.aborted
    assert session.ended


@pytest.mark.asyncio
async def test_start_transaction_failure_ends_owned_session():
    session = MockSession()
    session.start_transaction = MagicMock(side_effect=RuntimeError("standalone"))
    txn = MongoTransaction(connection=_connection_for(session))

    with pytest.raises(RuntimeError, match="standalone"):
        async with txn:
            pass

    assert session.ended
    with pytest.raises(MongoTransactionError, match="not available"):
        _ = txn.session


@pytest.mark.asyncio
async def test_start_transaction_failure_leaves_caller_session_open():
    session = MockSession()
    session.start_transaction = MagicMock(side_effect=RuntimeError("standalone"))

    with pytest.raises(RuntimeError, match="standalone"):
        async with MongoTransaction(session=session):
            pass

    assert not session.ended


@pytest.mark.asyncio
async def test_aborts_on_error_and_reraises():
    session = MockSession()

    with pytest.raises(RuntimeError, match="boom"):
        async with MongoTransaction(connection=_connection_for(session)):
            raise RuntimeError("boom")

    assert session.aborted
    assert not session.committed
    assert session.ended


@pytest.mark.asyncio
async def test_caller_managed_session_is_not_ended():
    session = MockSession()

    async with MongoTransaction(session=session) as txn:
        assert txn.session is session

    assert session.committed
    assert not session.ended


@pytest.mark.asyncio
async def test_commit_failure_aborts():
    session = MockSession()
    session.commit_transaction = AsyncMock(side_effect=RuntimeError("commit failed"))

    with pytest.raises(RuntimeError, match="commit failed"):
        async with MongoTransaction(session=session):
            pass

    assert session.aborted


@pytest.mark.asyncio
async def test_without_transaction_commit_is_noop():
    session = MockSession()

    async with MongoTransaction(session=session, start_transaction=False):
        assert not session.in_transaction()

    assert not session.committed
    assert not session.aborted
