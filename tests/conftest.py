"""Shared test fixtures: sample catalog data, a recording backend double and
a fresh query cache per test."""

from __future__ import annotations

import asyncio
import copy
import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from flowcatalog.backend.snapshot import SnapshotBackend
from flowcatalog.settings import get_settings
from flowcatalog.store.cache import QueryCache

# ---------------------------------------------------------------------------
# Sample data (backend wire format)
# ---------------------------------------------------------------------------

SAMPLE_WORKSPACES: list[dict[str, Any]] = [
    {"name": "core", "displayName": "Core Services", "path": "/home/dev/core", "tags": ["backend"]},
    {"name": "docs", "path": "/home/dev/docs"},
]

SAMPLE_EXECUTABLES: list[dict[str, Any]] = [
    {
        "ref": "db.migrate",
        "id": "migrate",
        "name": "migrate",
        "namespace": "db",
        "workspace": "core",
        "verb": "run",
        "tags": ["db"],
        "visibility": "public",
        "description": "Apply pending **migrations**",
        "exec": {"cmd": "migrate up", "params": [{"envKey": "DB_URL", "secretRef": "db-url"}]},
    },
    {
        "ref": "db.seed",
        "id": "seed",
        "name": "seed",
        "namespace": "db",
        "workspace": "core",
        "verb": "create",
        "verbAliases": ["new"],
        "tags": ["db", "dev"],
        "description": "Insert fixture rows",
        "fullDescription": "# Seed\n\nInsert fixture rows for local development.",
        "serial": {"execs": [{"ref": "db.migrate"}, {"cmd": "seed --all"}]},
    },
    {
        "ref": "build",
        "id": "build",
        "name": "",
        "workspace": "core",
        "verb": "build",
        "tags": ["ci"],
        "visibility": "internal",
        "description": "Compile everything",
        "exec": {"cmd": "make", "args": [{"envKey": "TARGET", "pos": 1}]},
    },
    {
        "ref": "docs.serve",
        "id": "serve",
        "name": "serve",
        "namespace": "docs",
        "workspace": "docs",
        "verb": "launch",
        "tags": ["dev"],
        "visibility": "public",
        "description": "Open the docs site",
        "launch": {"uri": "http://localhost:4321"},
    },
]


# ---------------------------------------------------------------------------
# Backend double
# ---------------------------------------------------------------------------


class FakeBackend:
    """Records every call and answers from mutable in-memory collections.

    ``failures`` maps a ``workspace`` parameter value to the exception raised
    for calls carrying it.  While ``gate`` is set to an unset event, calls
    wait on it after computing their response, so a test can change the data
    while a request is in flight.
    """

    def __init__(
        self,
        executables: list[dict[str, Any]] | None = None,
        workspaces: list[dict[str, Any]] | None = None,
    ) -> None:
        self.executables = copy.deepcopy(SAMPLE_EXECUTABLES if executables is None else executables)
        self.workspaces = copy.deepcopy(SAMPLE_WORKSPACES if workspaces is None else workspaces)
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failures: dict[str | None, Exception] = {}
        self.gate: asyncio.Event | None = None

    async def call(self, name: str, params: dict[str, Any]) -> Any:
        self.calls.append((name, dict(params)))
        failure = self.failures.get(params.get("workspace"))
        result = None
        if failure is None:
            result = await SnapshotBackend(self.executables, self.workspaces).call(name, params)
        if self.gate is not None:
            await self.gate.wait()
        if failure is not None:
            raise failure
        return result

    def count(self, name: str, **params: Any) -> int:
        """Number of calls to *name*, optionally with exactly *params*."""
        return sum(1 for op, sent in self.calls if op == name and (not params or sent == params))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Re-read settings for every test so env overrides never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"workspaces": SAMPLE_WORKSPACES, "executables": SAMPLE_EXECUTABLES}))
    return path


@pytest.fixture
def make_backend() -> type[FakeBackend]:
    """The backend double class, for tests that need custom data."""
    return FakeBackend
