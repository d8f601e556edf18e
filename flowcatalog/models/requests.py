"""Typed request structs for backend calls.

Each backend operation gets its own frozen model.  ``to_params`` produces the
camelCase parameter dict sent over the wire, with unset values dropped so
that equivalent requests look identical to the backend and to the cache.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BackendRequest(BaseModel):
    """Base for per-operation request structs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    operation: ClassVar[str]
    preserve_empty: ClassVar[frozenset[str]] = frozenset()
    """Wire names whose empty-string value is meaningful and must be sent."""

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        for name, value in self.model_dump(by_alias=True).items():
            if value is None:
                continue
            if value == "" and name in self.preserve_empty:
                params[name] = value
                continue
            if value in ("", [], {}):
                continue
            params[name] = value
        return params


class ListExecutablesRequest(BackendRequest):
    """``list_executables``: server-side filters over the executable collection.

    ``namespace=""`` asks for executables without a namespace, which is not
    the same as leaving ``namespace`` unset.
    """

    operation: ClassVar[str] = "list_executables"
    preserve_empty: ClassVar[frozenset[str]] = frozenset({"namespace"})

    workspace: str | None = None
    namespace: str | None = None
    tags: list[str] | None = None
    verb: str | None = None
    filter: str | None = None


class GetExecutableRequest(BackendRequest):
    operation: ClassVar[str] = "get_executable"

    executable_ref: str


class ListWorkspacesRequest(BackendRequest):
    operation: ClassVar[str] = "list_workspaces"


class GetWorkspaceRequest(BackendRequest):
    operation: ClassVar[str] = "get_workspace"

    workspace_name: str
