"""Entity query cache.

Single point of truth for backend reads.  Every read goes through
``QueryCache.fetch`` / ``QueryCache.ensure`` with a normalized key (see
``flowcatalog.store.keys``) and a loader coroutine factory.

Guarantees:

- At most one loader runs per key.  Concurrent callers with the same key
  attach to the pending task instead of calling the backend again.
- Loader exceptions never cross the cache boundary.  They are converted to a
  ``QueryError`` and the failed state is cached until the key is
  invalidated; there is no automatic retry.
- ``invalidate`` never blocks.  It marks entries stale; an entry that is in
  flight discards the response it is waiting for and issues a new request as
  soon as that one settles, so a superseded response can never overwrite a
  newer one.

Consumers get frozen ``QueryState`` snapshots and may ``subscribe`` to state
transitions.  The cache is a plain object: instantiate one per process (or
per test).
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from pydantic import ValidationError

from flowcatalog.backend.base import BackendFault
from flowcatalog.models.enums import ErrorKind, QueryStatus
from flowcatalog.store.keys import QueryKey, key_matches

Loader = Callable[[], Awaitable[Any]]
Listener = Callable[[QueryKey, "QueryState"], None]


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NotFound:
    """Successful lookup of an entity that does not exist."""

    entity: str
    key: str


@dataclass(frozen=True)
class QueryError:
    """Typed failure of a query, as cached and shown to consumers."""

    kind: ErrorKind
    message: str
    operation: str | None = None
    cause: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_exception(cls, exc: Exception, operation: str | None = None) -> QueryError:
        if isinstance(exc, ValidationError):
            return cls(ErrorKind.INVALID_RESPONSE, f"invalid response: {exc.error_count()} validation error(s)", operation, exc)  # noqa: E501
        if isinstance(exc, BackendFault):
            return cls(ErrorKind.TRANSPORT, exc.message, exc.operation, exc)
        return cls(ErrorKind.TRANSPORT, str(exc) or type(exc).__name__, operation, exc)


@dataclass(frozen=True)
class QueryState:
    """Read-only snapshot of a cache entry.

    ``status`` is ``None`` for a key that was never requested.
    """

    key: QueryKey
    status: QueryStatus | None = None
    data: Any = None
    error: QueryError | None = None
    is_fetching: bool = False
    is_stale: bool = False
    last_fetched_at: float | None = None

    @property
    def is_loading(self) -> bool:
        """True while waiting for a first (or post-error) result."""
        return self.status is QueryStatus.PENDING

    @property
    def is_success(self) -> bool:
        return self.status is QueryStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is QueryStatus.ERROR


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------


@dataclass
class QueryEntry:
    """Mutable cache slot.  Only ``QueryCache`` touches it."""

    key: QueryKey
    status: QueryStatus | None = None
    value: Any = None
    error: QueryError | None = None
    last_fetched_at: float | None = None
    stale: bool = False
    settled_status: QueryStatus | None = None
    settled_error: QueryError | None = None
    stale_after: float | None = None
    requests: int = 0
    loader: Loader | None = None
    task: asyncio.Task[None] | None = None


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class QueryCache:
    """In-memory, process-lifetime query cache keyed by ``QueryKey``."""

    def __init__(
        self,
        *,
        stale_after: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[QueryKey, QueryEntry] = {}
        self._listeners: list[tuple[QueryKey | None, Listener]] = []
        self._stale_after = stale_after
        self._clock = clock

    # -- Read ------------------------------------------------------------------

    def read(self, key: QueryKey) -> QueryState:
        """Synchronous snapshot.  Never triggers a load."""
        entry = self._entries.get(key)
        if entry is None:
            return QueryState(key=key)
        return self._snapshot(entry)

    def ensure(self, key: QueryKey, loader: Loader, *, stale_after: float | None = None) -> QueryState:
        """Start loading *key* if it is missing or stale; return immediately.

        Must be called from a running event loop.  An entry in the error state
        is not retried until it is invalidated.  *stale_after* overrides the
        cache-wide freshness window for this entry.
        """
        entry = self._entries.get(key)
        if entry is None:
            entry = QueryEntry(key=key)
            self._entries[key] = entry
        entry.loader = loader
        if stale_after is not None:
            entry.stale_after = stale_after

        if entry.task is not None:
            logger.debug("Query {}: attached to in-flight request", key)
        elif self._needs_load(entry):
            self._start(entry)
        return self._snapshot(entry)

    async def fetch(self, key: QueryKey, loader: Loader, *, stale_after: float | None = None) -> QueryState:
        """Load *key* (or join the in-flight load) and return the settled state.

        Backend faults are reported in ``QueryState.error``, never raised.
        A load that is cancelled raises ``CancelledError`` in every waiter and
        leaves the entry stale, so the next read starts a fresh request.
        """
        self.ensure(key, loader, stale_after=stale_after)
        entry = self._entries[key]
        while entry.task is not None:
            # A cancelled waiter must not cancel the request other waiters share.
            await asyncio.shield(entry.task)
        return self._snapshot(entry)

    # -- Invalidation ----------------------------------------------------------

    def invalidate(self, target: QueryKey | str | Iterable[Any]) -> int:
        """Mark every entry matching *target* stale.  Returns how many matched.

        *target* is a full key, a key prefix or an operation name.  Entries
        watched by a key-scoped subscriber are reloaded right away when a
        loop is running; the rest reload on their next read.
        """
        matched = [entry for key, entry in self._entries.items() if key_matches(key, target)]
        for entry in matched:
            entry.stale = True
            if entry.task is None and entry.loader is not None and self._is_watched(entry.key):
                with contextlib.suppress(RuntimeError):  # no running loop: reload on next read
                    self._start(entry)
            self._notify(entry)
        logger.debug("Invalidated {} cache entr(ies) matching {}", len(matched), target)
        return len(matched)

    def remove(self, key: QueryKey) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    # -- Subscription ----------------------------------------------------------

    def subscribe(self, listener: Listener, key: QueryKey | None = None) -> Callable[[], None]:
        """Call *listener(key, state)* on every transition of *key* (or of any key).

        Returns a function that removes the subscription.
        """
        token = (key, listener)
        self._listeners.append(token)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(token)

        return unsubscribe

    # -- Introspection ---------------------------------------------------------

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def age(self, key: QueryKey) -> float | None:
        """Seconds since *key* last loaded successfully, or ``None``."""
        entry = self._entries.get(key)
        if entry is None or entry.last_fetched_at is None:
            return None
        return self._clock() - entry.last_fetched_at

    def request_count(self, key: QueryKey) -> int:
        """Number of loader calls issued for *key* so far."""
        entry = self._entries.get(key)
        return entry.requests if entry else 0

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # -- Internals -------------------------------------------------------------

    def _needs_load(self, entry: QueryEntry) -> bool:
        if entry.status is None or entry.stale:
            return True
        stale_after = entry.stale_after if entry.stale_after is not None else self._stale_after
        if entry.status is QueryStatus.SUCCESS and stale_after is not None and entry.last_fetched_at is not None:
            return self._clock() - entry.last_fetched_at >= stale_after
        return False

    def _start(self, entry: QueryEntry) -> None:
        loop = asyncio.get_running_loop()
        entry.settled_status, entry.settled_error = entry.status, entry.error
        if entry.status is not QueryStatus.SUCCESS:
            entry.status = QueryStatus.PENDING
            entry.error = None
        entry.task = loop.create_task(self._run(entry), name=f"query:{entry.key[0]}")
        self._notify(entry)

    async def _run(self, entry: QueryEntry) -> None:
        try:
            while True:
                entry.requests += 1
                request_no = entry.requests
                entry.stale = False
                loader = entry.loader
                assert loader is not None  # noqa: S101

                value: Any = None
                error: QueryError | None = None
                try:
                    value = await loader()
                except (BackendFault, ValidationError) as exc:
                    error = QueryError.from_exception(exc, operation=str(entry.key[0]))
                except Exception as exc:
                    logger.opt(exception=exc).error("Query {} raised unexpectedly", entry.key)
                    error = QueryError.from_exception(exc, operation=str(entry.key[0]))

                if entry.stale:
                    logger.debug("Query {}: discarding superseded response (request #{})", entry.key, request_no)
                    continue

                if error is None:
                    entry.status = QueryStatus.SUCCESS
                    entry.value = value
                    entry.error = None
                    entry.last_fetched_at = self._clock()
                else:
                    logger.warning("Query {} failed ({}): {}", entry.key, error.kind, error.message)
                    entry.status = QueryStatus.ERROR
                    entry.error = error
                break
        except asyncio.CancelledError:
            # Nothing settled: restore the last settled status and reload on next read.
            if entry.status is QueryStatus.PENDING:
                entry.status, entry.error = entry.settled_status, entry.settled_error
            entry.stale = True
            entry.task = None
            self._notify(entry)
            raise
        finally:
            entry.task = None
        self._notify(entry)

    def _is_watched(self, key: QueryKey) -> bool:
        return any(watched == key for watched, _ in self._listeners)

    def _snapshot(self, entry: QueryEntry) -> QueryState:
        return QueryState(
            key=entry.key,
            status=entry.status,
            data=entry.value,
            error=entry.error,
            is_fetching=entry.task is not None,
            is_stale=entry.stale or (entry.status is not None and self._needs_load(entry)),
            last_fetched_at=entry.last_fetched_at,
        )

    def _notify(self, entry: QueryEntry) -> None:
        state = self._snapshot(entry)
        for watched, listener in list(self._listeners):
            if watched is not None and watched != entry.key:
                continue
            try:
                listener(entry.key, state)
            except Exception:
                logger.exception("Query listener failed for {}", entry.key)
