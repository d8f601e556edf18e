"""Typed, cache-backed backend reads.

Every read builds a request struct, derives its cache key from the request
parameters and hands the cache a loader that calls the backend and validates
the response.  Validation happens inside the loader, so a malformed response
is cached as an ``invalid_response`` error like any other failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import TypeAdapter

from flowcatalog.backend.base import EntityNotFoundError
from flowcatalog.models.executable import Executable
from flowcatalog.models.requests import (
    BackendRequest,
    GetExecutableRequest,
    GetWorkspaceRequest,
    ListExecutablesRequest,
    ListWorkspacesRequest,
)
from flowcatalog.models.workspace import Workspace
from flowcatalog.store.cache import NotFound
from flowcatalog.store.keys import QueryKey, make_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from flowcatalog.backend.base import Backend
    from flowcatalog.store.cache import Loader, QueryCache, QueryState

_EXECUTABLES = TypeAdapter(list[Executable])
_WORKSPACES = TypeAdapter(list[Workspace])


# ---------------------------------------------------------------------------
# Keys and parsing
# ---------------------------------------------------------------------------


def request_key(request: BackendRequest) -> QueryKey:
    """Cache key of *request*: its operation plus normalized parameters."""
    return make_key(request.operation, request.to_params(), preserve_empty=request.preserve_empty)


def parse_executables(raw: Any) -> list[Executable]:
    """Validate a ``list_executables`` response, dropping duplicate refs."""
    executables = _EXECUTABLES.validate_python(raw if raw is not None else [])
    seen: set[str] = set()
    unique: list[Executable] = []
    for executable in executables:
        if executable.ref in seen:
            logger.warning("Duplicate executable ref {} in response, keeping the first", executable.ref)
            continue
        seen.add(executable.ref)
        unique.append(executable)
    return unique


def parse_workspaces(raw: Any) -> list[Workspace]:
    return _WORKSPACES.validate_python(raw if raw is not None else [])


def _loader(backend: Backend, request: BackendRequest, parse: Callable[[Any], Any]) -> Loader:
    async def load() -> Any:
        logger.debug("Backend call {} {}", request.operation, request.to_params())
        raw = await backend.call(request.operation, request.to_params())
        return parse(raw)

    return load


def _lookup_loader(backend: Backend, request: BackendRequest, entity: str, name: str, model: type) -> Loader:
    """Loader resolving a missing entity to ``NotFound`` instead of an error."""

    async def load() -> Any:
        try:
            raw = await backend.call(request.operation, request.to_params())
        except EntityNotFoundError:
            return NotFound(entity=entity, key=name)
        if raw is None:
            return NotFound(entity=entity, key=name)
        return model.model_validate(raw)

    return load


# ---------------------------------------------------------------------------
# Executables
# ---------------------------------------------------------------------------


def executables_loader(backend: Backend, request: ListExecutablesRequest) -> Loader:
    return _loader(backend, request, parse_executables)


def ensure_executables(
    cache: QueryCache,
    backend: Backend,
    request: ListExecutablesRequest,
    *,
    stale_after: float | None = None,
) -> QueryState:
    """Start loading the executables for *request* without waiting."""
    return cache.ensure(request_key(request), executables_loader(backend, request), stale_after=stale_after)


async def list_executables(
    cache: QueryCache,
    backend: Backend,
    request: ListExecutablesRequest | None = None,
    *,
    stale_after: float | None = None,
) -> QueryState:
    """Executables matching the server-side filters of *request*."""
    request = request or ListExecutablesRequest()
    return await cache.fetch(request_key(request), executables_loader(backend, request), stale_after=stale_after)


async def get_executable(cache: QueryCache, backend: Backend, ref: str) -> QueryState:
    """Single executable by ref.  ``data`` is an ``Executable`` or ``NotFound``.

    An empty *ref* is not looked up; the idle state is returned.
    """
    request = GetExecutableRequest(executable_ref=ref)
    key = request_key(request)
    if not ref:
        return cache.read(key)
    return await cache.fetch(key, _lookup_loader(backend, request, "executable", ref, Executable))


def invalidate_executable(cache: QueryCache, ref: str) -> int:
    return cache.invalidate(request_key(GetExecutableRequest(executable_ref=ref)))


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


def workspaces_key() -> QueryKey:
    return request_key(ListWorkspacesRequest())


def ensure_workspaces(cache: QueryCache, backend: Backend) -> QueryState:
    request = ListWorkspacesRequest()
    return cache.ensure(request_key(request), _loader(backend, request, parse_workspaces))


async def list_workspaces(cache: QueryCache, backend: Backend) -> QueryState:
    """All registered workspaces."""
    request = ListWorkspacesRequest()
    return await cache.fetch(request_key(request), _loader(backend, request, parse_workspaces))


async def get_workspace(cache: QueryCache, backend: Backend, name: str) -> QueryState:
    """Single workspace by name.  ``data`` is a ``Workspace`` or ``NotFound``."""
    request = GetWorkspaceRequest(workspace_name=name)
    key = request_key(request)
    if not name:
        return cache.read(key)
    return await cache.fetch(key, _lookup_loader(backend, request, "workspace", name, Workspace))
