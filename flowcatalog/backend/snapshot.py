"""In-memory backend over a JSON snapshot.

Serves a captured ``{"workspaces": [...], "executables": [...]}`` document
with the same server-side filtering the real backend applies.  Used by the
CLI for offline browsing and by tests as a stand-in for the live process.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from loguru import logger

from flowcatalog.backend.base import BackendFault, EntityNotFoundError


class SnapshotBackend:
    """Backend implementation answering from an in-memory snapshot."""

    def __init__(self, executables: list[dict[str, Any]], workspaces: list[dict[str, Any]] | None = None) -> None:
        self._executables = executables
        self._workspaces = workspaces or []

    @classmethod
    def from_file(cls, path: str | Path) -> SnapshotBackend:
        """Load a snapshot file.  Raises ``ValueError`` if it is not a snapshot."""
        raw = Path(path).read_text(encoding="utf-8")
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON in snapshot {path}: {exc}"
            raise ValueError(msg) from None
        if not isinstance(document, dict):
            msg = f"Snapshot {path} must be a JSON object"
            raise ValueError(msg)  # noqa: TRY004
        logger.debug(
            "Snapshot loaded from {} ({} executables, {} workspaces)",
            path,
            len(document.get("executables") or []),
            len(document.get("workspaces") or []),
        )
        return cls(document.get("executables") or [], document.get("workspaces") or [])

    # -- Backend protocol ------------------------------------------------------

    async def call(self, name: str, params: dict[str, Any]) -> Any:
        handler = getattr(self, f"_op_{name}", None)
        if handler is None:
            raise BackendFault(name, "unknown operation")
        try:
            result = handler(**params)
        except TypeError as exc:
            raise BackendFault(name, f"invalid parameters: {exc}") from None
        # Callers own what they get back.
        return copy.deepcopy(result)

    # -- Operations ------------------------------------------------------------

    def _op_list_executables(
        self,
        workspace: str | None = None,
        namespace: str | None = None,
        tags: list[str] | None = None,
        verb: str | None = None,
        filter: str | None = None,  # noqa: A002
    ) -> list[dict[str, Any]]:
        return [
            record
            for record in self._executables
            if _matches(record, workspace=workspace, namespace=namespace, tags=tags, verb=verb, text=filter)
        ]

    def _op_get_executable(self, executableRef: str) -> dict[str, Any]:  # noqa: N803
        for record in self._executables:
            if record.get("ref") == executableRef:
                return record
        raise EntityNotFoundError("get_executable", f"executable '{executableRef}' not found")

    def _op_list_workspaces(self) -> list[dict[str, Any]]:
        return list(self._workspaces)

    def _op_get_workspace(self, workspaceName: str) -> dict[str, Any]:  # noqa: N803
        for record in self._workspaces:
            if record.get("name") == workspaceName:
                return record
        raise EntityNotFoundError("get_workspace", f"workspace '{workspaceName}' not found")


def _matches(
    record: dict[str, Any],
    *,
    workspace: str | None,
    namespace: str | None,
    tags: list[str] | None,
    verb: str | None,
    text: str | None,
) -> bool:
    if workspace and record.get("workspace") != workspace:
        return False
    # "" selects executables without a namespace.
    if namespace is not None and (record.get("namespace") or "") != namespace:
        return False
    if tags and not set(tags) & set(record.get("tags") or []):
        return False
    if verb and verb != record.get("verb") and verb not in (record.get("verbAliases") or []):
        return False
    if text:
        needle = text.lower()
        haystack = " ".join(str(record.get(key) or "") for key in ("ref", "name", "description")).lower()
        if needle not in haystack:
            return False
    return True
