"""Shared enumerations used across the catalog."""

from __future__ import annotations

from enum import StrEnum

# -- Executable --------------------------------------------------------------


class Visibility(StrEnum):
    """Who may see / run an executable.  Absent on the wire means PRIVATE."""

    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"
    HIDDEN = "hidden"


class ExecutableType(StrEnum):
    """Execution mode variant of an executable."""

    EXEC = "exec"
    SERIAL = "serial"
    PARALLEL = "parallel"
    LAUNCH = "launch"
    REQUEST = "request"
    RENDER = "render"
    UNKNOWN = "unknown"


class VerbType(StrEnum):
    """UI classification of a verb, used for icon selection."""

    DEACTIVATION = "deactivation"
    CONFIGURATION = "configuration"
    DESTRUCTION = "destruction"
    RETRIEVAL = "retrieval"
    UPDATE = "update"
    VALIDATION = "validation"
    LAUNCH = "launch"
    CREATION = "creation"
    RESTART = "restart"
    BUILD = "build"
    RUN = "run"


class ParamKind(StrEnum):
    """Where an environment parameter takes its value from."""

    STATIC = "static"
    SECRET = "secret"
    PROMPT = "prompt"
    FILE = "file"
    UNKNOWN = "unknown"


# -- Query cache -------------------------------------------------------------


class QueryStatus(StrEnum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class ErrorKind(StrEnum):
    """Typed classification of a failed query."""

    TRANSPORT = "transport"
    INVALID_RESPONSE = "invalid_response"
