"""
JSON codec for request bodies, query strings and response payloads.

Bodies and queries are encoded with the standard library ``json`` module
(extended for pydantic models, dataclasses and a few common scalar types).
Responses are validated into the caller's declared type with pydantic.
"""

import dataclasses
import json
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, Optional, Type, TypeVar
from urllib.parse import urlencode
from uuid import UUID

from pydantic import (
    BaseModel,
    PydanticSchemaGenerationError,
    TypeAdapter,
    ValidationError,
)

from jsonrequest.exceptions import (
    DecodingError,
    QuerySerializationError,
    SerializationError,
)

T = TypeVar("T")

# Largest magnitude below which every integral float is an exact integer
_EXACT_FLOAT_INT = 2 ** 53


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any) -> str:
    """Encode ``value`` as compact JSON text.

    Raises:
        TypeError: If the value holds an unsupported type.
        ValueError: If the value is cyclic or holds NaN/Infinity.
    """
    return json.dumps(
        value,
        default=_json_default,
        ensure_ascii=False,
        allow_nan=False,
        separators=(",", ":"),
    )


def encode_body(body: Any) -> Optional[bytes]:
    """Serialize a request body to UTF-8 JSON bytes.

    Returns ``None`` when there is no body.

    Raises:
        SerializationError: If the body is not JSON-encodable.
    """
    if body is None:
        return None
    try:
        return to_json(body).encode("utf-8")
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"failed to serialize data: {e}") from e


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < _EXACT_FLOAT_INT:
        return str(int(value))
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def encode_query(query: Any) -> str:
    """
    Build a URL-encoded query string from a structured value.

    The value is round-tripped through JSON and must come back as an
    object. Null members are dropped, the rest are stringified and
    emitted in key order::

        encode_query({"a": 1, "b": None, "c": "x"}) == "a=1&c=x"

    Raises:
        QuerySerializationError: If the value cannot be encoded as JSON
            or does not encode to a JSON object.
    """
    if query is None:
        return ""
    try:
        decoded = json.loads(to_json(query))
    except (TypeError, ValueError, RecursionError) as e:
        raise QuerySerializationError(f"failed to serialize query: {e}") from e

    if not isinstance(decoded, dict):
        raise QuerySerializationError(
            f"failed to unmarshal query: expected a JSON object, "
            f"got {type(decoded).__name__}"
        )

    pairs = [
        (key, _stringify(decoded[key]))
        for key in sorted(decoded)
        if decoded[key] is not None
    ]
    return urlencode(pairs)


@lru_cache(maxsize=256)
def _adapter_for(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def _type_adapter(response_type: Any) -> TypeAdapter:
    try:
        try:
            return _adapter_for(response_type)
        except TypeError:
            # Unhashable type expressions are built fresh each time
            return TypeAdapter(response_type)
    except PydanticSchemaGenerationError as e:
        raise DecodingError(f"cannot decode into {response_type!r}: {e}") from e


def decode_body(content: bytes, response_type: Type[T] = Any) -> T:
    """Decode a JSON response body into ``response_type``.

    ``Any`` returns the plain decoded JSON value. Typed decoding is strict:
    a JSON string is not coerced into a number or boolean field.

    Raises:
        DecodingError: If the body is empty, malformed, or does not match
            the expected type.
    """
    if not content or not content.strip():
        raise DecodingError("failed to decode response: empty body")

    if response_type is Any:
        try:
            return json.loads(content)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodingError(f"failed to decode response: {e}") from e

    try:
        return _type_adapter(response_type).validate_json(content, strict=True)
    except ValidationError as e:
        raise DecodingError(f"failed to decode response: {e}") from e
