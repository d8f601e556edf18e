"""Executable counts per workspace.

Each workspace gets its own cached ``list_executables`` query, keyed exactly
like the catalog's unfiltered query for that workspace, so opening a
workspace in the catalog reuses the data fetched for its count.  A failing
workspace reports a zero count with its error and never affects the others.

The count freshness window is applied here, by invalidating old entries
before loading, rather than stored on the shared cache entry: the catalog
keeps its own freshness rules for the same key.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from flowcatalog.managers.executables import ensure_executables, list_executables, request_key
from flowcatalog.models.requests import ListExecutablesRequest
from flowcatalog.settings import get_settings

if TYPE_CHECKING:
    from flowcatalog.backend.base import Backend
    from flowcatalog.store.cache import QueryCache, QueryError, QueryState
    from flowcatalog.store.keys import QueryKey

_UNSET = object()


@dataclass(frozen=True)
class WorkspaceCount:
    workspace: str
    count: int
    is_loading: bool
    error: QueryError | None = None


class WorkspaceCountAggregator:
    """Aggregates one executable-count query per tracked workspace."""

    def __init__(
        self,
        cache: QueryCache,
        backend: Backend,
        workspaces: Iterable[str] = (),
        *,
        stale_after: float | None | object = _UNSET,
    ) -> None:
        self._cache = cache
        self._backend = backend
        self._workspaces: list[str] = []
        self._stale_after: float | None = (
            get_settings().count_stale_seconds if stale_after is _UNSET else stale_after  # type: ignore[assignment]
        )
        self.track(workspaces)

    # -- Tracking --------------------------------------------------------------

    def track(self, workspaces: Iterable[str]) -> None:
        """Replace the tracked workspace list (order kept, duplicates dropped)."""
        self._workspaces = list(dict.fromkeys(name for name in workspaces if name))

    @property
    def workspaces(self) -> list[str]:
        return list(self._workspaces)

    @staticmethod
    def request_for(name: str) -> ListExecutablesRequest:
        return ListExecutablesRequest(workspace=name)

    def key_for(self, name: str) -> QueryKey:
        return request_key(self.request_for(name))

    # -- Loading ---------------------------------------------------------------

    def _expire_old_counts(self) -> None:
        if self._stale_after is None:
            return
        for name in self._workspaces:
            key = self.key_for(name)
            age = self._cache.age(key)
            if age is not None and age >= self._stale_after:
                logger.debug("Executable count for workspace {} is {:.0f}s old, reloading", name, age)
                self._cache.invalidate(key)

    def ensure(self) -> None:
        """Start every missing or stale count query without waiting."""
        self._expire_old_counts()
        for name in self._workspaces:
            ensure_executables(self._cache, self._backend, self.request_for(name))

    async def load(self) -> dict[str, WorkspaceCount]:
        """Load all counts concurrently and return them."""
        self._expire_old_counts()
        states = await asyncio.gather(
            *(list_executables(self._cache, self._backend, self.request_for(name)) for name in self._workspaces)
        )
        for name, state in zip(self._workspaces, states, strict=True):
            if state.error is not None:
                logger.warning("Executable count for workspace {} unavailable: {}", name, state.error.message)
        return self.counts

    def refresh(self, name: str | None = None) -> int:
        """Invalidate the count of *name*, or of every tracked workspace."""
        names = [name] if name is not None else self._workspaces
        return sum(self._cache.invalidate(self.key_for(workspace)) for workspace in names)

    # -- Outputs ---------------------------------------------------------------

    def _state(self, name: str) -> QueryState:
        return self._cache.read(self.key_for(name))

    def _count(self, name: str) -> WorkspaceCount:
        state = self._state(name)
        count = len(state.data) if state.is_success and state.data is not None else 0
        return WorkspaceCount(
            workspace=name,
            count=count,
            is_loading=state.status is None or state.is_loading,
            error=state.error,
        )

    @property
    def counts(self) -> dict[str, WorkspaceCount]:
        return {name: self._count(name) for name in self._workspaces}

    def count_for(self, name: str) -> int:
        return self._count(name).count

    def is_loading_for(self, name: str) -> bool:
        """False for workspaces that are not tracked."""
        if name not in self._workspaces:
            return False
        return self._count(name).is_loading

    def error_for(self, name: str) -> QueryError | None:
        return self._state(name).error

    @property
    def is_loading(self) -> bool:
        return any(count.is_loading for count in self.counts.values())

    @property
    def has_errors(self) -> bool:
        return any(count.error is not None for count in self.counts.values())

    @property
    def total_count(self) -> int:
        return sum(count.count for count in self.counts.values())
