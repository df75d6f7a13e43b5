# pyright: standard

from typing import Any

import msgspec


def to_json(obj: object) -> bytes:
    """Encode an object to JSON bytes using msgspec."""
    return msgspec.json.encode(obj)


def from_json[T](type_spec: type[T], data: bytes | str) -> T:
    """Decode JSON data (bytes or str) into the specified type."""
    return msgspec.json.decode(data, type=type_spec)


def to_builtins(obj: object) -> Any:
    """Convert structs (and containers of structs) to plain Python values."""
    return msgspec.to_builtins(obj)


def convert[T](obj: object, type_spec: type[T]) -> T:
    """Convert an object to the specified type using msgspec."""
    return msgspec.convert(obj, type_spec)
