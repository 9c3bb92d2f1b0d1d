"""
QueryRequest: immutable descriptor of a remote query subscription.

A QueryRequest says what remote data a component needs: the query to run,
whether to also follow its realtime changefeed, and a placeholder value to
surface until the first result arrives. Subscription managers deduplicate live
subscriptions by the descriptor's canonical key.

Responsibilities
- Hold query, subscribe_to_changes and initial_value without transforming them.
- Derive the canonical key from (query, subscribe_to_changes) only.
- Neutralize construction-order variable ids via qsub.core.normalize.

Notes
- initial_value never takes part in identity.
- Keys are only comparable when produced under the same KeySettings.
- Key derivation is pure: nothing is cached or mutated on the descriptor.

Examples:
    >>> from qsub.core.request import make_descriptor
    >>> class Table:
    ...     def build(self):
    ...         return [15, ["turtles"]]
    >>> make_descriptor(Table(), True, []).to_canonical_key()
    '{"query":[15,["turtles"]],"changes":true}'
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from .config import KeySettings
from .constants import KEY_CHANGES_FIELD, KEY_QUERY_FIELD
from .errors import SerializationError
from .hashing import hash_key, json_dumps_key
from .normalize import normalize_var_ids
from .structure import to_structure

__all__ = [
    "QueryRequest",
    "make_descriptor",
    "canonical_key",
    "key_digest",
]

logger = logging.getLogger(__name__)

# Keys are pure by default: QSUB_* env and TOML apply only when callers pass KeySettings.load().
_DEFAULT_SETTINGS = KeySettings()


class QueryRequest(BaseModel):
    """
    Immutable request for a remote query and, optionally, its changefeed.

    Attributes:
        query (Any): Query-builder expression exposing ``build()``. Stored as given.
        subscribe_to_changes (bool): Also subscribe to realtime changes (alias ``changes``).
        initial_value (Any): Placeholder returned before the first result (alias ``initial``).

    Raises:
        pydantic.ValidationError: If subscribe_to_changes is not a bool, a field is
            unknown, or a field is reassigned after construction.

    Notes:
        ``==`` and ``hash()`` follow the canonical key under default KeySettings, so
        initial_value is ignored. Use equivalent() to compare under other settings.
        A query that cannot be serialized is compared by object identity instead,
        keeping descriptors hashable before their key can be derived.

    Examples:
        >>> QueryRequest.model_validate({"query": None, "changes": False, "initial": []}).initial_value
        []
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    query: Any
    subscribe_to_changes: StrictBool = Field(alias="changes")
    initial_value: Any = Field(default=None, alias="initial")

    def to_canonical_key(self, settings: KeySettings | None = None) -> str:
        """
        Derive the deterministic lookup key for this request.

        Args:
            settings (KeySettings | None): Key derivation settings; defaults apply when None.

        Returns:
            str: JSON object ``{"query": <tree>, "changes": <flag>}`` in compact form.

        Raises:
            SerializationError: If the query cannot be converted to its structural form.
        """
        s = settings or _DEFAULT_SETTINGS
        try:
            tree = to_structure(self.query)
        except SerializationError as exc:
            logger.debug(f"Canonical key failed for {type(self.query).__name__}: {exc}")
            raise
        if s.normalize_var_ids:
            tree = normalize_var_ids(
                tree,
                func_term=s.func_term,
                var_term=s.var_term,
                make_array_term=s.make_array_term,
                start=s.var_id_start,
            )
        key = json_dumps_key(
            {KEY_QUERY_FIELD: tree, KEY_CHANGES_FIELD: self.subscribe_to_changes},
            sort_keys=s.sort_keys,
            ensure_ascii=s.ensure_ascii,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Canonical key {hash_key(key)[:12]} ({len(key)} chars) derived")
        return key

    def digest(self, settings: KeySettings | None = None) -> str:
        """SHA-256 hex digest of the canonical key."""
        return hash_key(self.to_canonical_key(settings))

    def equivalent(self, other: QueryRequest, settings: KeySettings | None = None) -> bool:
        """
        Whether both requests need the same remote data.

        Notes:
            Compares canonical keys, so initial_value is ignored.
        """
        return self.to_canonical_key(settings) == other.to_canonical_key(settings)

    def _identity(self) -> tuple[Any, ...]:
        try:
            return ("key", self.to_canonical_key())
        except SerializationError:
            return ("object", id(self.query), self.subscribe_to_changes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryRequest):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


def make_descriptor(query: Any, subscribe_to_changes: bool, initial_value: Any = None) -> QueryRequest:
    """
    Build a QueryRequest from positional values.

    Args:
        query (Any): Query-builder expression.
        subscribe_to_changes (bool): Also subscribe to realtime changes.
        initial_value (Any): Placeholder value before the first result.

    Returns:
        QueryRequest
    """
    return QueryRequest(
        query=query,
        subscribe_to_changes=subscribe_to_changes,
        initial_value=initial_value,
    )


def canonical_key(descriptor: QueryRequest, settings: KeySettings | None = None) -> str:
    """
    Canonical key of a descriptor; see QueryRequest.to_canonical_key.

    Raises:
        SerializationError: If descriptor.query cannot be serialized.
    """
    return descriptor.to_canonical_key(settings)


def key_digest(descriptor: QueryRequest, settings: KeySettings | None = None) -> str:
    """SHA-256 hex digest of a descriptor's canonical key."""
    return descriptor.digest(settings)
