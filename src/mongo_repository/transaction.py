"""
Caller-side transaction scope producing sessions for ``QueryOptions``.

The repository only borrows sessions. ``MongoTransaction`` is the optional
helper callers use to own one:

1. **Client-managed session**::

       session = await client.start_session()
       async with MongoTransaction(session=session) as txn:
           await repo.update(flt, upd, QueryOptions(session=txn.session))
       await session.end_session()

2. **Self-managed session** (with a connection manager)::

       async with MongoTransaction(connection=connection) as txn:
           await repo.delete(flt, QueryOptions(session=txn.session))

Multi-document transactions require a replica set. Pass
``start_transaction=False`` against a standalone server to get a plain
causally-consistent session instead.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING

from .exceptions import MongoTransactionError
from .session_utils import session_in_transaction

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClientSession

    from .connection import MongoConnectionManager

logger = logging.getLogger("mongo_repository.transaction")


class MongoTransaction:
    """Async context manager that commits on success and aborts on error."""

    def __init__(
        self,
        session: AsyncIOMotorClientSession | None = None,
        connection: MongoConnectionManager | None = None,
        *,
        start_transaction: bool = True,
    ) -> None:
        if session is not None and connection is not None:
            raise MongoTransactionError(
                "Cannot provide both 'session' and 'connection'. "
                "Use either a client-managed session or a connection."
            )
        if session is None and connection is None:
            raise MongoTransactionError("Either 'session' or 'connection' is required")
        self._session = session
        self._connection = connection
        self._owns_session = session is None
        self._start_transaction = start_transaction

    @property
    def session(self) -> AsyncIOMotorClientSession:
        """The active session; only available inside the context."""
        if self._session is None:
            raise MongoTransactionError(
                "Session not available. Use the transaction as a context manager first."
            )
        return self._session

    async def __aenter__(self) -> MongoTransaction:
        if self._owns_session:
            assert self._connection is not None
            self._session = await self._connection.client.start_session()
        if self._start_transaction and not session_in_transaction(self._session):
            try:
                self._session.start_transaction()
            except BaseException:
                if self._owns_session:
                    await self._end_session()
                    self._session = None
                raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._session is None:
            return
        try:
            if exc_type is None:
                try:
                    await self.commit()
                except Exception:
                    await self.rollback()
                    raise
            else:
                await self.rollback()
        finally:
            if self._owns_session and self._session is not None:
                await self._end_session()
                self._session = None

    async def commit(self) -> None:
        """Commit the transaction; no-op if none is active."""
        if self._session is None:
            return
        if session_in_transaction(self._session):
            await self._session.commit_transaction()
        else:
            logger.debug("MongoDB session not in transaction, commit is no-op")

    async def rollback(self) -> None:
        """Abort the transaction; no-op if none is active."""
        if self._session is None:
            return
        if session_in_transaction(self._session):
            await self._session.abort_transaction()
        else:
            logger.debug("MongoDB session not in transaction, rollback is no-op")

    async def _end_session(self) -> None:
        # Motor 3.x end_session() is a coroutine; test doubles may be sync.
        result = self._session.end_session()
        if hasattr(result, "__await__"):
            await result
