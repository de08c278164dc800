"""Cache payload codecs.

Every cached value is wrapped in an envelope naming the entity schema, its
version and whether it holds one entity or a list, then packed with
MessagePack. Entity data is the pydantic JSON-mode dump, so UUIDs and
Decimals travel as strings and round-trip exactly. Decoding re-validates
through the entity model; anything unexpected raises ``SerializationError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, Literal, Protocol, TypeVar

import msgpack
from pydantic import BaseModel

from ...domain.exceptions import SerializationError

SCHEMA_VERSION = 1

T = TypeVar("T")
E = TypeVar("E", bound=BaseModel)


class CacheCodec(Protocol[T]):
    """Converts a value to and from its cached byte form."""

    def encode(self, value: T) -> bytes: ...

    def decode(self, payload: bytes) -> T: ...


def _pack(schema: str, kind: Literal["one", "many"], data: Any) -> bytes:
    envelope = {"schema": schema, "version": SCHEMA_VERSION, "kind": kind, "data": data}
    try:
        return bytes(msgpack.packb(envelope, use_bin_type=True))
    except Exception as e:
        raise SerializationError(f"Failed to serialize {schema} payload: {e}") from e


def _unpack(payload: bytes, schema: str, kind: Literal["one", "many"]) -> Any:
    if not payload:
        raise SerializationError("Empty cache payload")
    try:
        envelope = msgpack.unpackb(payload, raw=False)
    except Exception as e:
        raise SerializationError(f"Invalid MessagePack payload: {e}") from e

    if not isinstance(envelope, dict):
        raise SerializationError("Cache payload is not an envelope")
    if envelope.get("schema") != schema:
        raise SerializationError(
            f"Schema mismatch: expected {schema}, got {envelope.get('schema')!r}"
        )
    if envelope.get("version") != SCHEMA_VERSION:
        raise SerializationError(
            f"Unsupported {schema} payload version {envelope.get('version')!r}"
        )
    if envelope.get("kind") != kind:
        raise SerializationError(f"Expected a '{kind}' payload, got {envelope.get('kind')!r}")
    return envelope.get("data")


class EntityCodec(Generic[E]):
    """Codec for a single entity."""

    def __init__(self, model: type[E]):
        self._model = model
        self._schema = model.__name__

    def encode(self, value: E) -> bytes:
        return _pack(self._schema, "one", value.model_dump(mode="json"))

    def decode(self, payload: bytes) -> E:
        data = _unpack(payload, self._schema, "one")
        try:
            return self._model.model_validate(data)
        except Exception as e:
            raise SerializationError(f"Failed to deserialize {self._schema}: {e}") from e


class EntityListCodec(Generic[E]):
    """Codec for an ordered list of entities."""

    def __init__(self, model: type[E]):
        self._model = model
        self._schema = model.__name__

    def encode(self, value: Sequence[E]) -> bytes:
        return _pack(self._schema, "many", [item.model_dump(mode="json") for item in value])

    def decode(self, payload: bytes) -> list[E]:
        data = _unpack(payload, self._schema, "many")
        if not isinstance(data, list):
            raise SerializationError(f"Expected a list of {self._schema}")
        try:
            return [self._model.model_validate(item) for item in data]
        except Exception as e:
            raise SerializationError(f"Failed to deserialize {self._schema} list: {e}") from e
