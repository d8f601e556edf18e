"""Cache key normalization.

A key is ``(operation, (name, value), ...)`` with parameter pairs sorted by
name.  Unset values (``None``, ``""`` and empty collections) are dropped, so
``tags=[]`` and a missing ``tags`` land on the same entry.  Collections
become sorted, de-duplicated tuples: every list parameter the backend takes
is a set (tags), and order must not fragment the cache.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from typing import Any

QueryKey = tuple[Any, ...]


def _is_unset(value: Any) -> bool:
    if value is None or value == "":
        return True
    return isinstance(value, (list, tuple, set, frozenset, dict)) and not value


def normalize_value(value: Any) -> Any:
    """Hashable, order-independent form of a parameter value."""
    if isinstance(value, Mapping):
        return tuple(sorted((str(k), normalize_value(v)) for k, v in value.items() if not _is_unset(v)))
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(sorted({normalize_value(v) for v in value}, key=repr))
    return value


def make_key(
    operation: str,
    params: Mapping[str, Any] | None = None,
    *,
    preserve_empty: Collection[str] = (),
) -> QueryKey:
    """Build the cache key for *operation* called with *params*.

    Names in *preserve_empty* keep an empty-string value instead of being
    dropped (``namespace=""`` selects the root namespace).
    """
    pairs: list[tuple[str, Any]] = []
    for name, value in (params or {}).items():
        if value == "" and name in preserve_empty:
            pairs.append((name, ""))
        elif not _is_unset(value):
            pairs.append((name, normalize_value(value)))
    return (operation, *sorted(pairs))


def key_matches(key: QueryKey, target: str | Iterable[Any]) -> bool:
    """True if *key* equals *target* or starts with it.

    *target* may be an operation name, a key prefix, or a full key.
    """
    if isinstance(target, str):
        return key[0] == target
    prefix = tuple(target)
    return key[: len(prefix)] == prefix
