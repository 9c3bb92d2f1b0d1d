"""
qsub core defaults.

Defines the ReQL wire term codes that the variable renumbering pass matches on,
the field names of the canonical key payload, and the first id handed out when
variables are renumbered. This module is zero-IO and uses only the Python
standard library.

Notes:
    - Term codes follow the ReQL protocol (``Term.TermType`` in the drivers' ql2
      definitions). Builders with a different wire vocabulary override them via
      qsub.core.config.KeySettings.
    - Changing KEY_QUERY_FIELD / KEY_CHANGES_FIELD changes every key produced.
"""

from __future__ import annotations

__all__ = [
    "MAKE_ARRAY_TERM",
    "VAR_TERM",
    "FUNC_TERM",
    "VAR_ID_START",
    "KEY_QUERY_FIELD",
    "KEY_CHANGES_FIELD",
]

# [MAKE_ARRAY, [item, ...]]
MAKE_ARRAY_TERM: int = 2

# [VAR, [var_id]]
VAR_TERM: int = 10

# [FUNC, [[MAKE_ARRAY, [var_id, ...]], body]]
FUNC_TERM: int = 69

# Fresh drivers allocate 1 first, so a query built first in a process keys the same normalized or not.
VAR_ID_START: int = 1

KEY_QUERY_FIELD: str = "query"
KEY_CHANGES_FIELD: str = "changes"
