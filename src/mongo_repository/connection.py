"""MongoConnectionManager: Motor client lifecycle and collection lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import MongoConnectionError

if TYPE_CHECKING:
    from motor.motor_asyncio import (
        AsyncIOMotorClient,
        AsyncIOMotorCollection,
        AsyncIOMotorDatabase,
    )

logger = logging.getLogger("mongo_repository.connection")


class MongoConnectionManager:
    """Wrap a Motor client with lifecycle and health-check helpers."""

    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        *,
        database: str | None = None,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        **kwargs: Any,
    ) -> None:
        self._url = url
        self._database = database
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._connect_timeout_ms = connect_timeout_ms
        self._kwargs = kwargs
        self._client: AsyncIOMotorClient[Any] | None = None

    async def connect(self) -> AsyncIOMotorClient[Any]:
        """Create and cache the Motor client. Idempotent."""
        if self._client is not None:
            return self._client
        from motor.motor_asyncio import AsyncIOMotorClient

        try:
            self._client = AsyncIOMotorClient(
                self._url,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                connectTimeoutMS=self._connect_timeout_ms,
                **self._kwargs,
            )
        except Exception as e:
            raise MongoConnectionError(str(e)) from e
        logger.debug("Motor client created for %s", self._url)
        return self._client

    @property
    def client(self) -> AsyncIOMotorClient[Any]:
        """Return the Motor client; raises if not connected."""
        if self._client is None:
            raise MongoConnectionError("Not connected; call connect() first")
        return self._client

    @property
    def database_name(self) -> str | None:
        return self._database

    def get_database(self, name: str | None = None) -> AsyncIOMotorDatabase[Any]:
        """Return ``name`` or the default database configured on the manager."""
        database_name = name or self._database
        if not database_name:
            raise MongoConnectionError(
                "Database name must be set on the call or the connection"
            )
        return self.client.get_database(database_name)

    def get_collection(
        self, name: str, database: str | None = None
    ) -> AsyncIOMotorCollection[Any]:
        return self.get_database(database).get_collection(name)

    def close(self) -> None:
        """Close the client (synchronous; Motor client.close() is sync)."""
        if self._client is not None:
            self._client.close()
            self._client = None

    async def health_check(self) -> bool:
        """Ping the server; return True if reachable."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except Exception:  # noqa: BLE001
            logger.warning("MongoDB health check failed", exc_info=True)
            return False
