"""Request bodies and response decoding for the search engine.

Everything sent to the engine is built as plain Python structures and left
to the client to serialize, so caller text never becomes part of the JSON
syntax of a request.
"""

from typing import Any, Dict, List, Sequence

import structlog
from pydantic import TypeAdapter, ValidationError

from .base import CatalogStoreEncodingError, CatalogStoreShapeError
from .models import Product, SearchEnvelope

logger = structlog.get_logger("catalog_store.queries")

SEARCH_FIELDS = ("name", "tag", "description")

_FIELD_ADAPTERS = {
    field_name: TypeAdapter(field.annotation)
    for field_name, field in Product.model_fields.items()
}

_FIELD_TYPES = {
    str: "text",
    int: "integer",
}


def build_collection_mapping() -> Dict[str, Any]:
    """Derive the engine mapping from the ``Product`` fields."""
    properties = {}
    for field_name, field in Product.model_fields.items():
        properties[field_name] = {"type": _FIELD_TYPES[field.annotation]}
    return {"properties": properties}


def build_collection_body(shards: int = 1) -> Dict[str, Any]:
    """Settings and mapping document for creating a catalog collection."""
    return {
        "settings": {
            "number_of_shards": shards,
        },
        "mappings": build_collection_mapping(),
    }


def build_search_body(
    query_text: str,
    fields: Sequence[str] = SEARCH_FIELDS
) -> Dict[str, Any]:
    """Multi-field phrase-prefix query.

    ``query_text`` is passed through untouched, including the empty string.
    """
    return {
        "query": {
            "multi_match": {
                "query": query_text,
                "type": "phrase_prefix",
                "fields": list(fields),
            }
        }
    }


def decode_product(source: Any) -> Product:
    """Decode one ``_source`` payload.

    A missing source yields an all-zero product. Fields are decoded one at
    a time: a missing, ``null`` or undecodable value leaves only that field
    at its zero value, and unknown keys are dropped.
    """
    if source is None:
        return Product()
    if not isinstance(source, dict):
        raise CatalogStoreEncodingError(
            f"hit _source must be an object, got {type(source).__name__}"
        )

    values = {}
    for field_name, adapter in _FIELD_ADAPTERS.items():
        value = source.get(field_name)
        if value is None:
            continue
        try:
            values[field_name] = adapter.validate_python(value)
        except ValidationError as e:
            logger.warning(
                "Undecodable product field left at zero value",
                field=field_name,
                error_count=e.error_count()
            )
    return Product(**values)


def decode_search_response(payload: Any) -> List[Product]:
    """Decode a search response into products, keeping the engine's order.

    Raises
    - ``CatalogStoreShapeError`` when ``hits.hits`` is missing or malformed
    - ``CatalogStoreEncodingError`` when a hit source is not an object
    """
    try:
        envelope = SearchEnvelope.model_validate(payload)
    except ValidationError as e:
        raise CatalogStoreShapeError(
            f"unexpected search response shape: {e.error_count()} problem(s), "
            f"first at {_error_location(e)}"
        ) from e

    return [decode_product(hit.source) for hit in envelope.hits.hits]


def _error_location(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return location or "<root>"
