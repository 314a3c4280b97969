from __future__ import annotations

from typing import Any, Union

import orjson

__all__ = ["dumps", "loads", "JSONDecodeError"]

JSONDecodeError = orjson.JSONDecodeError


def dumps(obj: Any) -> str:
    """Serialize *obj* to a ``str`` using orjson (bytes → str)."""
    return orjson.dumps(obj).decode()


def loads(data: Union[str, bytes, bytearray]) -> Any:
    """Deserialize *data* with orjson."""
    return orjson.loads(data)
