"""Backend call interface.

The backend is an external process that owns the executable and workspace
collections.  This package only ever talks to it through one async entry
point, ``call(name, params)``, which returns JSON-shaped data or raises a
``BackendFault``.  Transport (IPC, subprocess, HTTP) and its timeouts are
the implementation's business; a timeout is just another fault.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class BackendFault(Exception):
    """Raised when a backend call fails (transport error, timeout, backend error)."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class EntityNotFoundError(BackendFault, LookupError):
    """Raised when the requested executable / workspace does not exist."""


@runtime_checkable
class Backend(Protocol):
    """Async protocol for the command-executing backend.

    Operations used by the catalog::

        list_executables(workspace?, namespace?, tags?, verb?, filter?) -> [Executable]
        get_executable(executableRef) -> Executable
        list_workspaces() -> [Workspace]
        get_workspace(workspaceName) -> Workspace
    """

    async def call(self, name: str, params: dict[str, Any]) -> Any:
        """Invoke operation *name*.  Raises ``BackendFault`` on failure."""
        ...
