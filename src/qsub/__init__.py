"""
qsub: Deterministic identities for live query subscriptions.

Public API is re-exported from qsub.core.
"""

from __future__ import annotations

from .core import (
    KeySettings,
    QueryRequest,
    SerializationError,
    canonical_key,
    key_digest,
    make_descriptor,
)

__all__ = [
    "KeySettings",
    "QueryRequest",
    "SerializationError",
    "canonical_key",
    "key_digest",
    "make_descriptor",
]

__version__ = "0.1.0"
