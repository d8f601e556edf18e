"""Filterable executable catalog.

Filters are split in two: ``workspace`` / ``namespace`` / ``tags`` / ``verb``
select the backend query (and therefore the cache key), while ``search`` /
``visibility`` / ``type`` are applied locally to the cached records by
``filter_executables``.  The search text is debounced so typing does not
rerun the pipeline on every keystroke.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from loguru import logger

from flowcatalog.debounce import Debouncer
from flowcatalog.display.text import clean_markdown, collation_key
from flowcatalog.managers.executables import (
    ensure_executables,
    ensure_workspaces,
    list_executables,
    list_workspaces,
    request_key,
    workspaces_key,
)
from flowcatalog.models.filters import ROOT_NAMESPACE, FilterState
from flowcatalog.models.workspace import WorkspaceOption
from flowcatalog.settings import get_settings

if TYPE_CHECKING:
    from flowcatalog.backend.base import Backend
    from flowcatalog.models.executable import Executable
    from flowcatalog.models.requests import ListExecutablesRequest
    from flowcatalog.models.workspace import Workspace
    from flowcatalog.store.cache import QueryCache, QueryError, QueryState
    from flowcatalog.store.keys import QueryKey

CatalogListener = Callable[["ExecutableCatalog"], None]


# ---------------------------------------------------------------------------
# Pure pipeline
# ---------------------------------------------------------------------------


def matches_search(executable: Executable, term: str) -> bool:
    """Case-insensitive match of *term* against the ref and plain-text description."""
    term = term.strip().lower()
    if not term:
        return True
    if term in executable.ref.lower():
        return True
    return term in clean_markdown(executable.markdown_description).lower()


def filter_executables(
    executables: Iterable[Executable],
    state: FilterState,
    *,
    search: str | None = None,
) -> list[Executable]:
    """Apply the client-side filters of *state* and sort by ref.

    *search* overrides ``state.search``; the catalog passes the debounced
    value.  The result is a subset of *executables* and applying the same
    state to it again returns it unchanged.
    """
    term = state.search if search is None else search
    result = [executable for executable in executables if matches_search(executable, term)]
    if state.visibility:
        result = [executable for executable in result if executable.effective_visibility == state.visibility]
    if state.type:
        result = [executable for executable in result if executable.type == state.type]
    if state.namespace == ROOT_NAMESPACE:
        result = [executable for executable in result if not executable.namespace]
    return sorted(result, key=lambda executable: collation_key(executable.ref))


def namespace_options(executables: Iterable[Executable], workspace: str = "") -> list[str]:
    """Namespaces present in *workspace*, with ``ROOT_NAMESPACE`` first when
    any record there has none."""
    namespaces: set[str] = set()
    has_root = False
    for executable in executables:
        if workspace and executable.workspace != workspace:
            continue
        if executable.namespace:
            namespaces.add(executable.namespace)
        else:
            has_root = True
    options = sorted(namespaces, key=collation_key)
    if has_root:
        options.insert(0, ROOT_NAMESPACE)
    return options


def tag_options(executables: Iterable[Executable]) -> list[str]:
    return sorted({tag for executable in executables for tag in executable.tags}, key=collation_key)


def verb_options(executables: Iterable[Executable]) -> list[str]:
    verbs: set[str] = set()
    for executable in executables:
        if executable.verb:
            verbs.add(executable.verb)
        verbs.update(alias for alias in executable.verb_aliases if alias)
    return sorted(verbs, key=collation_key)


def workspace_options(workspaces: Iterable[Workspace]) -> list[WorkspaceOption]:
    return [WorkspaceOption(value=workspace.name, label=workspace.label) for workspace in workspaces]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class ExecutableCatalog:
    """Filter controller over the cached executable collection.

    Holds the current ``FilterState``, keeps the matching backend query
    loaded and exposes the filtered records plus the option lists for every
    filter.  Observers registered with ``subscribe`` are called with the
    catalog whenever its output may have changed.
    """

    def __init__(
        self,
        cache: QueryCache,
        backend: Backend,
        *,
        selected_workspace: str | None = None,
        debounce_seconds: float | None = None,
    ) -> None:
        if debounce_seconds is None:
            debounce_seconds = get_settings().search_debounce_seconds
        self._cache = cache
        self._backend = backend
        self._state = FilterState(workspace=selected_workspace or "")
        self._applied_search = ""
        self._debouncer = Debouncer(debounce_seconds, self._apply_search)
        self._listeners: list[CatalogListener] = []
        self._unsubscribe_cache: Callable[[], None] | None = cache.subscribe(self._on_cache_event)

    # -- Filter state ----------------------------------------------------------

    @property
    def filter_state(self) -> FilterState:
        return self._state

    @property
    def applied_search(self) -> str:
        """The search text currently applied to the result list."""
        return self._applied_search

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    def update_filters(self, **changes: Any) -> FilterState:
        """Merge *changes* into the filter state.

        A ``search`` change is applied after the debounce delay; every other
        change takes effect immediately.  A change to the server-side filters
        starts loading the new query.
        """
        previous_key = self.query_key
        self._state = self._state.with_updates(**changes)

        if "search" in changes:
            if self._state.search != self._applied_search:
                self._debouncer.schedule()
            else:
                self._debouncer.cancel()

        if self.query_key != previous_key:
            logger.debug("Catalog query changed: {}", self.query_key)
            self._ensure_loaded()
        self._emit()
        return self._state

    def clear_filters(self) -> FilterState:
        """Reset every filter, the applied search included."""
        self._debouncer.cancel()
        self._applied_search = ""
        return self.update_filters(**FilterState().model_dump())

    def flush_search(self) -> bool:
        """Apply a pending search now.  Returns whether one was pending."""
        return self._debouncer.flush()

    # -- Queries ---------------------------------------------------------------

    @property
    def request(self) -> ListExecutablesRequest:
        return self._state.to_request()

    @property
    def query_key(self) -> QueryKey:
        return request_key(self.request)

    @property
    def workspaces_key(self) -> QueryKey:
        return workspaces_key()

    async def load(self) -> None:
        """Wait for the current executables query and the workspace list."""
        await asyncio.gather(
            list_executables(self._cache, self._backend, self.request),
            list_workspaces(self._cache, self._backend),
        )

    def refresh(self) -> None:
        """Invalidate the current query and reload it in the background."""
        logger.info("Refreshing executables for {}", self.query_key)
        self._cache.invalidate(self.query_key)
        self._ensure_loaded()

    async def reload(self) -> None:
        """Invalidate the current query and wait for the fresh result."""
        self._cache.invalidate(self.query_key)
        await self.load()

    # -- Outputs ---------------------------------------------------------------

    @property
    def state(self) -> QueryState:
        return self._cache.read(self.query_key)

    @property
    def raw_executables(self) -> list[Executable]:
        """Records of the current backend query, before local filtering."""
        return self.state.data or []

    @property
    def executables(self) -> list[Executable]:
        return filter_executables(self.raw_executables, self._state, search=self._applied_search)

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def error(self) -> QueryError | None:
        return self.state.error

    @property
    def workspaces(self) -> list[Workspace]:
        return self._cache.read(self.workspaces_key).data or []

    @property
    def workspace_options(self) -> list[WorkspaceOption]:
        return workspace_options(self.workspaces)

    @property
    def namespace_options(self) -> list[str]:
        return namespace_options(self.raw_executables, self._state.workspace)

    @property
    def tag_options(self) -> list[str]:
        return tag_options(self.raw_executables)

    @property
    def verb_options(self) -> list[str]:
        return verb_options(self.raw_executables)

    @property
    def active_filter_count(self) -> int:
        return self._state.active_count

    # -- Observers -------------------------------------------------------------

    def subscribe(self, listener: CatalogListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Detach from the cache and drop any pending search."""
        self._debouncer.cancel()
        if self._unsubscribe_cache is not None:
            self._unsubscribe_cache()
            self._unsubscribe_cache = None
        self._listeners.clear()

    # -- Internals -------------------------------------------------------------

    def _ensure_loaded(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # Outside a loop the next load() picks the query up.
            return
        ensure_executables(self._cache, self._backend, self.request)
        ensure_workspaces(self._cache, self._backend)

    def _apply_search(self) -> None:
        self._applied_search = self._state.search
        logger.debug("Catalog search applied: {!r}", self._applied_search)
        self._emit()

    def _on_cache_event(self, key: QueryKey, state: QueryState) -> None:
        if key == self.query_key or key == self.workspaces_key:
            self._emit()

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Catalog listener failed")
