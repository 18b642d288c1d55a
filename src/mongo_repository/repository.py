"""Repository[T] — generic document repository over one Motor collection."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel

from .exceptions import DocumentNotFoundError
from .query_builder import describe_filter, expand_projection, pagination_kwargs
from .serialization import DocumentMapper, coerce_id
from .session_utils import session_kwargs

if TYPE_CHECKING:
    from bson import ObjectId
    from motor.motor_asyncio import AsyncIOMotorCollection
    from pymongo.results import DeleteResult, UpdateResult

    from .connection import MongoConnectionManager
    from .options import QueryInterface, QueryOptions, RepositoryOptions

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger("mongo_repository.repository")


class Repository(Generic[T]):
    """
    CRUD facade over a single collection.

    Reads return lean documents (plain ``dict`` as produced by the driver)
    except :meth:`get_by_id`, which hydrates into ``options.base_class``.
    Filters and update documents are passed to the driver verbatim, and any
    driver error propagates unchanged.

    A session carried by ``QueryOptions`` is attached to every driver call an
    operation makes. The repository never starts, commits or ends sessions.
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection[Any],
        options: RepositoryOptions[T],
    ) -> None:
        self._collection = collection
        self._options = options
        self._mapper: DocumentMapper[T] = DocumentMapper(
            options.base_class, id_field=options.id_field
        )

    @property
    def collection(self) -> AsyncIOMotorCollection[Any]:
        return self._collection

    @property
    def options(self) -> RepositoryOptions[T]:
        return self._options

    @property
    def document_type(self) -> str:
        """Name used for the document type in error messages."""
        return self._options.base_class.__name__

    def hydrate(
        self,
        document: dict[str, Any],
        *,
        for_authorization: bool = False,
        validate: bool = True,
    ) -> T:
        """Map a lean document onto the repository's model class.

        With ``for_authorization=True`` the ``casl_class`` is used when one is
        configured. ``validate=False`` skips model validation, for partial
        (projected) documents.
        """
        model_cls = None
        if for_authorization and self._options.casl_class is not None:
            model_cls = self._options.casl_class
        return self._mapper.from_doc(document, model_cls, validate=validate)

    async def create(
        self, document: Mapping[str, Any] | T, options: QueryOptions | None = None
    ) -> dict[str, Any] | None:
        """Insert ``document`` and return it re-read in lean form."""
        if isinstance(document, BaseModel):
            payload = self._mapper.to_doc(document)
        else:
            payload = dict(document)
        result = await self._collection.insert_one(payload, **session_kwargs(options))
        logger.debug(
            "Inserted %s document %s", self.document_type, result.inserted_id
        )
        return await self._collection.find_one(
            {"_id": result.inserted_id}, **session_kwargs(options)
        )

    async def exists(
        self, filter: dict[str, Any], options: QueryOptions | None = None  # noqa: A002
    ) -> bool:
        count = await self._collection.count_documents(
            filter, **session_kwargs(options)
        )
        return count > 0

    async def delete(
        self, filter: dict[str, Any], options: QueryOptions | None = None  # noqa: A002
    ) -> DeleteResult:
        """Delete every match. Raises ``DocumentNotFoundError`` if none exist."""
        if not await self.exists(filter, options):
            logger.debug("Delete on %s matched no documents", self.document_type)
            raise DocumentNotFoundError(self.document_type)
        result = await self._collection.delete_many(filter, **session_kwargs(options))
        logger.debug(
            "Deleted %s %s document(s)", result.deleted_count, self.document_type
        )
        return result

    async def find(
        self,
        filter: dict[str, Any] | None = None,  # noqa: A002
        options: QueryOptions | None = None,
        query_options: QueryInterface | None = None,
    ) -> list[dict[str, Any]]:
        """Return all matching lean documents, projected and paginated."""
        cursor = self._collection.find(
            filter or {},
            expand_projection(options),
            **pagination_kwargs(query_options),
            **session_kwargs(options),
        )
        return await cursor.to_list(length=None)

    async def find_one(
        self, filter: dict[str, Any], options: QueryOptions | None = None  # noqa: A002
    ) -> dict[str, Any] | None:
        """Return the first lean match or ``None``."""
        return await self._collection.find_one(
            filter, expand_projection(options), **session_kwargs(options)
        )

    async def find_one_or_fail(
        self, filter: dict[str, Any], options: QueryOptions | None = None  # noqa: A002
    ) -> dict[str, Any]:
        """Like :meth:`find_one` but unprojected, raising when nothing matches."""
        document = await self._collection.find_one(filter, **session_kwargs(options))
        if document is None:
            logger.debug("No %s document for filter %r", self.document_type, filter)
            raise DocumentNotFoundError(
                self.document_type, filter, description=describe_filter(filter)
            )
        return document

    async def get_by_id(
        self, id: ObjectId | str, options: QueryOptions | None = None  # noqa: A002
    ) -> T:
        """Return the hydrated document with ``_id == id``.

        A projected read is hydrated without validation, so the model only
        carries the projected fields.

        Raises a plain ``LookupError`` (not ``DocumentNotFoundError``) when the
        id is unknown.
        """
        projection = expand_projection(options)
        document = await self._collection.find_one(
            {"_id": coerce_id(id)},
            projection,
            **session_kwargs(options),
        )
        if document is None:
            raise LookupError(
                f"Document of type {self.document_type} with ID {id} not found"
            )
        return self.hydrate(document, validate=projection is None)

    async def update(
        self,
        filter: dict[str, Any],  # noqa: A002
        update_query: dict[str, Any],
        options: QueryOptions | None = None,
    ) -> UpdateResult:
        """Apply ``update_query`` to the first match.

        Raises ``DocumentNotFoundError`` if nothing matches ``filter``.
        """
        if not await self.exists(filter, options):
            logger.debug("Update on %s matched no documents", self.document_type)
            raise DocumentNotFoundError(self.document_type)
        return await self._collection.update_one(
            filter, update_query, **session_kwargs(options)
        )

    async def update_and_get(
        self,
        filter: dict[str, Any],  # noqa: A002
        update_query: dict[str, Any],
        options: QueryOptions | None = None,
    ) -> dict[str, Any]:
        """Update the first match and re-read it with the same filter.

        If ``update_query`` changes fields used by ``filter`` the re-read can
        raise ``DocumentNotFoundError`` even though the update was applied.
        """
        await self.update(filter, update_query, options)
        return await self.find_one_or_fail(filter, options)

    async def update_many(
        self,
        filter: dict[str, Any],  # noqa: A002
        update_query: dict[str, Any],
        options: QueryOptions | None = None,
    ) -> UpdateResult:
        """Apply ``update_query`` to every match; zero matches is not an error."""
        return await self._collection.update_many(
            filter, update_query, **session_kwargs(options)
        )


def create_repository(
    connection: MongoConnectionManager,
    collection: str,
    options: RepositoryOptions[T],
    *,
    database: str | None = None,
) -> Repository[T]:
    """Build a :class:`Repository` for ``collection`` on a connected manager."""
    return Repository(connection.get_collection(collection, database), options)
