"""Generic MongoDB document repository.

A thin CRUD facade over a Motor collection with projection, pagination and
caller-owned session support, plus a uniform "not found" error convention.
"""

from __future__ import annotations

from .connection import MongoConnectionManager
from .exceptions import (
    DocumentMappingError,
    DocumentNotFoundError,
    MongoConnectionError,
    MongoPersistenceError,
    MongoTransactionError,
    RepositoryError,
)
from .options import QueryInterface, QueryOptions, RepositoryOptions
from .query_builder import expand_projection, pagination_kwargs
from .repository import Repository, create_repository
from .serialization import DocumentMapper, coerce_id
from .transaction import MongoTransaction

__all__ = [
    # Repository
    "Repository",
    "create_repository",
    # Options
    "QueryOptions",
    "RepositoryOptions",
    "QueryInterface",
    # Infrastructure
    "MongoConnectionManager",
    "MongoTransaction",
    # Utilities
    "DocumentMapper",
    "coerce_id",
    "expand_projection",
    "pagination_kwargs",
    # Exceptions
    "RepositoryError",
    "DocumentNotFoundError",
    "MongoPersistenceError",
    "MongoConnectionError",
    "DocumentMappingError",
    "MongoTransactionError",
]
