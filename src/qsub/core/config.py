"""
Configuration for canonical key derivation.

Defines KeySettings, a frozen dataclass carrying the knobs that shape canonical
keys. Defaults are sourced from qsub.core.constants (the single source of truth).

Precedence
- environment (QSUB_*) > TOML (qsub.toml or [tool.qsub.keys] in pyproject.toml) > defaults

Notes
- Every consumer sharing keys must use the same settings; keys produced under
  different settings are not comparable.
- sort_keys stays off until the remote engine is confirmed to ignore object key
  order.
- Unparseable values raise ConfigError; unknown keys are ignored.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .constants import FUNC_TERM, MAKE_ARRAY_TERM, VAR_ID_START, VAR_TERM
from .errors import ConfigError

__all__ = ["KeySettings"]

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}

_BOOL_FIELDS = ("normalize_var_ids", "sort_keys", "ensure_ascii")
_INT_FIELDS = ("var_id_start", "func_term", "var_term", "make_array_term")


def _bool(name: str, v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, int) and v in (0, 1):
        return bool(v)
    if isinstance(v, str):
        lo = v.strip().lower()
        if lo in _TRUE:
            return True
        if lo in _FALSE:
            return False
    raise ConfigError(f"{name} must be a boolean (got {v!r})")


def _int(name: str, v: Any) -> int:
    if isinstance(v, bool):
        raise ConfigError(f"{name} must be an integer (got {v!r})")
    try:
        return int(v)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer (got {v!r})") from exc


@dataclass(frozen=True)
class KeySettings:
    """
    Runtime settings for canonical key derivation.

    Attributes:
        normalize_var_ids (bool): Renumber function variable ids query-locally before encoding.
        sort_keys (bool): Sort object keys in the key JSON (off: emission order is kept).
        ensure_ascii (bool): Escape non-ASCII characters in the key JSON.
        var_id_start (int): First id assigned by the renumbering pass.
        func_term (int): Term code of function nodes in the structural form.
        var_term (int): Term code of variable references.
        make_array_term (int): Term code of the parameter array inside function nodes.

    Examples:
        >>> from qsub.core.config import KeySettings
        >>> KeySettings(sort_keys=True)  # doctest: +ELLIPSIS
        KeySettings(...)
    """

    normalize_var_ids: bool = True
    sort_keys: bool = False
    ensure_ascii: bool = False
    var_id_start: int = VAR_ID_START
    func_term: int = FUNC_TERM
    var_term: int = VAR_TERM
    make_array_term: int = MAKE_ARRAY_TERM

    @classmethod
    def _apply_mapping(cls, base: KeySettings, cfg: dict[str, Any] | None) -> KeySettings:
        """Apply a loose config mapping onto KeySettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        changes: dict[str, Any] = {}
        for name in _BOOL_FIELDS:
            if name in cfg:
                changes[name] = _bool(name, cfg[name])
        for name in _INT_FIELDS:
            if name in cfg:
                changes[name] = _int(name, cfg[name])
        return replace(base, **changes)

    @classmethod
    def from_env(cls, base: KeySettings | None = None, prefix: str = "QSUB_") -> KeySettings:
        """
        Build KeySettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - QSUB_NORMALIZE_VAR_IDS, QSUB_SORT_KEYS, QSUB_ENSURE_ASCII (1/0/true/false/yes/no/on/off)
            - QSUB_VAR_ID_START
            - QSUB_FUNC_TERM, QSUB_VAR_TERM, QSUB_MAKE_ARRAY_TERM

        Raises:
            ConfigError: If a set variable cannot be parsed.
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for name in _BOOL_FIELDS + _INT_FIELDS:
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> KeySettings:
        """
        Build KeySettings from a TOML file.

        Search order when `path` is None:
            1) ./qsub.toml (with either a [keys] table or direct keys)
            2) ./pyproject.toml under [tool.qsub.keys]

        Returns defaults if no file is present.

        Raises:
            ConfigError: If the file is not valid TOML or holds unparseable values.
        """
        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "qsub.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"invalid TOML in {p}: {exc}") from exc
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("qsub", {}).get("keys") if isinstance(tool, dict) else None
            elif isinstance(data.get("keys"), dict):
                cfg = data["keys"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(cls(), cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> KeySettings:
        """
        Load KeySettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (qsub.toml, pyproject.toml).

        Returns:
            KeySettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
