"""
Key JSON serialization and hashing helpers.

Provides the single JSON policy used for canonical subscription keys and a
SHA-256 helper for fixed-width digests of those keys. This module is zero-IO
and uses only the Python standard library.

Notes:
    - Key JSON:
        - sort_keys=False by default (emission order is significant)
        - separators=(",", ":")
        - ensure_ascii=False
        - allow_nan=False
    - Hashing is performed over the UTF-8 encoded key string.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from .errors import SerializationError

__all__ = [
    "json_dumps_key",
    "hash_key",
]


def json_dumps_key(obj: Any, *, sort_keys: bool = False, ensure_ascii: bool = False) -> str:
    """
    Serialize an object to a compact, deterministic JSON string.

    Args:
        obj (Any): JSON-serializable object.
        sort_keys (bool): Sort mapping keys recursively instead of keeping emission order.
        ensure_ascii (bool): Escape non-ASCII characters.

    Returns:
        str: Compact JSON string.

    Raises:
        SerializationError: If obj holds values json cannot encode (including NaN/inf).

    Examples:
        >>> json_dumps_key({"b": 1, "a": [1, 2]})
        '{"b":1,"a":[1,2]}'
        >>> json_dumps_key({"b": 1, "a": [1, 2]}, sort_keys=True)
        '{"a":[1,2],"b":1}'
    """
    try:
        return json.dumps(
            obj,
            sort_keys=sort_keys,
            separators=(",", ":"),
            ensure_ascii=ensure_ascii,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"value is not JSON-encodable: {exc}") from exc


def hash_key(key: str) -> str:
    """
    Compute the SHA-256 hex digest of a key string.

    Args:
        key (str): Canonical key.

    Returns:
        str: 64-character lowercase hex digest.

    Examples:
        >>> hash_key("a") == hash_key("a")
        True
        >>> len(hash_key(""))
        64
    """
    h = hashlib.sha256()
    h.update(key.encode("utf-8"))
    return h.hexdigest()
