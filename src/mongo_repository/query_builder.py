"""Builders for the projection and pagination arguments of driver reads."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bson import json_util

if TYPE_CHECKING:
    from .options import QueryInterface, QueryOptions


def expand_projection(options: QueryOptions | None) -> dict[str, int] | None:
    """Build a projection document from ``options``.

    Included fields map to ``1`` and excluded fields to ``0``. Excludes are
    merged last, so a field named in both lists is excluded. Disjoint
    include/exclude lists are passed through as-is; MongoDB rejects mixed
    projections (other than on ``_id``) at query time.

    Returns ``None`` rather than ``{}`` when there is nothing to project:
    PyMongo reads an empty projection as "return ``_id`` only".
    """
    if options is None:
        return None
    projection: dict[str, int] = {}
    projection.update(dict.fromkeys(options.project_columns, 1))
    projection.update(dict.fromkeys(options.skip_columns, 0))
    return projection or None


def pagination_kwargs(query: QueryInterface | None) -> dict[str, int]:
    """Map pagination hints onto ``find()`` keyword arguments."""
    if query is None:
        return {}
    kwargs: dict[str, int] = {}
    if query.offset is not None:
        kwargs["skip"] = query.offset
    if query.limit is not None:
        kwargs["limit"] = query.limit
    return kwargs


def describe_filter(filter: dict[str, Any]) -> str:  # noqa: A002
    """Serialise a filter for error messages (extended JSON)."""
    return json_util.dumps(filter)
