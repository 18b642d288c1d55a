"""Model <-> BSON document mapping for hydrated reads and typed inserts."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Generic, TypeVar

from bson import ObjectId
from bson.decimal128 import Decimal128
from pydantic import BaseModel, ValidationError

from .exceptions import DocumentMappingError

T = TypeVar("T", bound=BaseModel)


def coerce_id(value: Any) -> Any:
    """Cast a 24-hex string to ``ObjectId``; return anything else unchanged."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def _to_bson(value: Any) -> Any:
    if isinstance(value, Decimal):
        return Decimal128(value)
    if isinstance(value, dict):
        return {k: _to_bson(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_bson(v) for v in value]
    return value


def _from_bson(value: Any) -> Any:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, dict):
        return {k: _from_bson(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_bson(v) for v in value]
    return value


class DocumentMapper(Generic[T]):
    """
    Maps Pydantic models to MongoDB documents and back.

    Uses ``model_dump(mode="python")`` so PyMongo encodes datetime/UUID/bytes
    natively; only ``Decimal`` needs converting to ``Decimal128``. The model's
    ``id_field`` is stored as ``_id``.
    """

    def __init__(self, model_cls: type[T], *, id_field: str = "id") -> None:
        self.model_cls = model_cls
        self._id_field = id_field

    def to_doc(self, model: T) -> dict[str, Any]:
        """Convert a model to an insertable document.

        A ``None`` id is dropped so the server assigns an ``ObjectId``.
        """
        data = model.model_dump(mode="python")
        if self._id_field in data:
            doc_id = data.pop(self._id_field)
            if doc_id is not None:
                data["_id"] = coerce_id(doc_id)
        return _to_bson(data)

    def from_doc(
        self,
        doc: dict[str, Any],
        model_cls: type[T] | None = None,
        *,
        validate: bool = True,
    ) -> T:
        """Convert a lean document to a model instance.

        ``_id`` is renamed to ``id_field``; an ``ObjectId`` becomes its hex string.
        With ``validate=False`` the model is built with ``model_construct``, so
        projected documents missing required fields still map.
        """
        data = dict(doc)
        if "_id" in data:
            doc_id = data.pop("_id")
            data[self._id_field] = str(doc_id) if isinstance(doc_id, ObjectId) else doc_id
        data = _from_bson(data)
        cls = model_cls or self.model_cls
        if not validate:
            return cls.model_construct(**data)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DocumentMappingError(
                f"Cannot map document to {cls.__name__}: {e}"
            ) from e
