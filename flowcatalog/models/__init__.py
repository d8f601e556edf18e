"""Data models for the flow catalog."""

from flowcatalog.models.enums import (
    ErrorKind,
    ExecutableType,
    ParamKind,
    QueryStatus,
    VerbType,
    Visibility,
)
from flowcatalog.models.executable import (
    ExecMode,
    Executable,
    ExecutableArgument,
    ExecutableParameter,
    ExecutionMode,
    LaunchMode,
    ParallelMode,
    RefConfig,
    RenderMode,
    RequestMode,
    ResponseFile,
    SerialMode,
    UnknownMode,
)
from flowcatalog.models.filters import ROOT_NAMESPACE, FilterState
from flowcatalog.models.requests import (
    BackendRequest,
    GetExecutableRequest,
    GetWorkspaceRequest,
    ListExecutablesRequest,
    ListWorkspacesRequest,
)
from flowcatalog.models.workspace import ExecutableFilter, Workspace, WorkspaceOption

__all__ = [
    "ROOT_NAMESPACE",
    # Requests
    "BackendRequest",
    # Enums
    "ErrorKind",
    # Executable
    "ExecMode",
    "Executable",
    "ExecutableArgument",
    # Workspace
    "ExecutableFilter",
    "ExecutableParameter",
    "ExecutableType",
    "ExecutionMode",
    # Filters
    "FilterState",
    "GetExecutableRequest",
    "GetWorkspaceRequest",
    "LaunchMode",
    "ListExecutablesRequest",
    "ListWorkspacesRequest",
    "ParallelMode",
    "ParamKind",
    "QueryStatus",
    "RefConfig",
    "RenderMode",
    "RequestMode",
    "ResponseFile",
    "SerialMode",
    "UnknownMode",
    "VerbType",
    "Visibility",
    "Workspace",
    "WorkspaceOption",
]
