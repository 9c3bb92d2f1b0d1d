"""
Core package aggregator for qsub contracts (descriptor, structure, normalization, hashing, settings).

## Contracts (single source of truth)
- Request: `QueryRequest` descriptor and canonical key derivation.
- Structure: structural (tree) form of opaque query expressions.
- Normalize: query-local renumbering of anonymous-function variable ids.
- Hashing: key JSON policy and SHA-256 digests.
- Config: `KeySettings` with env > TOML > defaults precedence.

## Notes
- Zero-IO policy: stdlib + pydantic only; settings loading reads TOML only when asked.
- Object key order in keys is preserved as emitted unless `sort_keys` is enabled.
- The external subscription manager owns caching, sharing and teardown; it only
  consumes keys produced here.

## Examples
```python
from qsub.core import make_descriptor, canonical_key
req = make_descriptor(query, True, [])  # doctest: +SKIP
canonical_key(req)  # '{"query":[...],"changes":true}'  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import KeySettings
from .errors import ConfigError, SerializationError
from .hashing import hash_key, json_dumps_key
from .normalize import collect_var_ids, normalize_var_ids
from .request import QueryRequest, canonical_key, key_digest, make_descriptor
from .structure import is_buildable, to_structure
from .typing import Buildable

__all__ = [
    "Buildable",
    "ConfigError",
    "KeySettings",
    "QueryRequest",
    "SerializationError",
    "canonical_key",
    "collect_var_ids",
    "hash_key",
    "is_buildable",
    "json_dumps_key",
    "key_digest",
    "make_descriptor",
    "normalize_var_ids",
    "to_structure",
]
