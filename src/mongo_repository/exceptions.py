"""Exceptions raised by the Mongo repository layer.

Driver faults (``pymongo.errors.*``) are never wrapped; they reach the caller
unchanged.
"""

from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Root exception for the mongo-repository package."""


class DocumentNotFoundError(RepositoryError):
    """Raised when a filter matches no document.

    Used by ``delete``, ``update`` and ``find_one_or_fail``. ``filter`` is only
    populated (and only named in the message) by ``find_one_or_fail``.
    """

    def __init__(
        self,
        document_type: str,
        filter: dict[str, Any] | None = None,  # noqa: A002
        *,
        description: str | None = None,
    ) -> None:
        self.document_type = document_type
        self.filter = filter
        if description is not None:
            msg = (
                f"Document of type {document_type} with filter criteria "
                f"{description} not found"
            )
        else:
            msg = f"Document of type {document_type} not found"
        super().__init__(msg)


class MongoPersistenceError(RepositoryError):
    """Base for MongoDB persistence errors."""


class MongoConnectionError(MongoPersistenceError):
    """Raised when connection to MongoDB fails."""


class DocumentMappingError(MongoPersistenceError):
    """Raised when a document cannot be mapped to or from its model."""


class MongoTransactionError(MongoPersistenceError):
    """Raised when the transaction helper is misused."""
