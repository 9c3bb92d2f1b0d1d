"""
Core exception types raised by structural serialization and settings loading.

Provides typed exceptions for core-domain failures:
- SerializationError when a query's structural form cannot be produced.
- ConfigError when a settings value from env/TOML cannot be parsed.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - qsub.core.structure raises SerializationError; canonical key helpers in
      qsub.core.request let it propagate unchanged. No fallback key is ever
      substituted.
    - qsub.core.config raises ConfigError.

Examples:
    Catch a serialization failure.

    >>> from qsub.core.errors import SerializationError
    >>> from qsub.core.structure import to_structure
    >>> try:
    ...     to_structure({"table": "turtles"})
    ... except SerializationError as e:
    ...     msg = str(e)
    >>> "build()" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "SerializationError",
    "ConfigError",
]


class SerializationError(ValueError):
    """Query value cannot be converted to its structural (tree) form."""


class ConfigError(ValueError):
    """Settings value from environment or TOML could not be parsed."""
