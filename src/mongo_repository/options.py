"""
Option structs passed to :class:`~mongo_repository.repository.Repository`.

``RepositoryOptions`` is bound once at construction. ``QueryOptions`` and
``QueryInterface`` are per-call and shape a single read: projection, session
and pagination respectively. None of them carry behaviour.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClientSession

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class QueryOptions:
    """
    Per-call projection and session settings.

    Attributes:
        project_columns: Fields to include in the result.
        skip_columns: Fields to exclude from the result. Applied after
            ``project_columns``; a field named in both is excluded.
        session: Driver session borrowed from the caller. The repository
            attaches it to its queries but never starts, commits, aborts or
            ends it.
    """

    project_columns: Sequence[str] = field(default_factory=tuple)
    skip_columns: Sequence[str] = field(default_factory=tuple)
    session: AsyncIOMotorClientSession | Any | None = None

    def __post_init__(self) -> None:
        for name in ("project_columns", "skip_columns"):
            if isinstance(getattr(self, name), str):
                raise TypeError(
                    f"{name} must be a sequence of field names, not a str"
                )

    def with_session(self, session: Any) -> QueryOptions:
        """Return a copy bound to ``session``."""
        return QueryOptions(
            project_columns=tuple(self.project_columns),
            skip_columns=tuple(self.skip_columns),
            session=session,
        )


@dataclass(frozen=True)
class RepositoryOptions(Generic[T]):
    """
    Static description of the documents a repository serves.

    Attributes:
        base_class: Model class documents are hydrated into.
        casl_class: Optional model class carrying authorization annotations,
            used by :meth:`Repository.hydrate` when ``for_authorization=True``.
        id_field: Model field mapped onto the document ``_id``.
    """

    base_class: type[T]
    casl_class: type[T] | None = None
    id_field: str = "id"


@dataclass(frozen=True)
class QueryInterface:
    """Pagination hints for :meth:`Repository.find`."""

    limit: int | None = None
    offset: int | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be non-negative, got {self.limit}")
        if self.offset is not None and self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
