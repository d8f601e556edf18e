"""Labels and palette names derived from executable fields.

Colors are theme palette names (``"blue.5"``), resolved by the renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flowcatalog.models.enums import ExecutableType, ParamKind, Visibility

if TYPE_CHECKING:
    from flowcatalog.models.executable import Executable, ExecutableArgument, ExecutableParameter

_TYPE_LABELS: dict[ExecutableType, str] = {
    ExecutableType.EXEC: "Command",
    ExecutableType.SERIAL: "Serial Workflow",
    ExecutableType.PARALLEL: "Parallel Workflow",
    ExecutableType.LAUNCH: "Launch",
    ExecutableType.REQUEST: "HTTP Request",
    ExecutableType.RENDER: "Template",
    ExecutableType.UNKNOWN: "Unknown",
}

_TYPE_COLORS: dict[ExecutableType, str] = {
    ExecutableType.EXEC: "blue.5",
    ExecutableType.SERIAL: "green.5",
    ExecutableType.PARALLEL: "orange.5",
    ExecutableType.LAUNCH: "purple.5",
    ExecutableType.REQUEST: "teal.5",
    ExecutableType.RENDER: "pink.5",
    ExecutableType.UNKNOWN: "gray.5",
}

_TYPE_DESCRIPTIONS: dict[ExecutableType, str] = {
    ExecutableType.EXEC: "Command execution",
    ExecutableType.SERIAL: "Sequential execution",
    ExecutableType.PARALLEL: "Parallel execution",
    ExecutableType.LAUNCH: "Launch application/URI",
    ExecutableType.REQUEST: "HTTP request",
    ExecutableType.RENDER: "Render template",
    ExecutableType.UNKNOWN: "Unknown type",
}

_VISIBILITY_COLORS: dict[Visibility, str] = {
    Visibility.PUBLIC: "green.3",
    Visibility.PRIVATE: "blue.3",
    Visibility.INTERNAL: "orange.3",
    Visibility.HIDDEN: "red.3",
}

_PARAM_KIND_COLORS: dict[ParamKind, str] = {
    ParamKind.SECRET: "red.5",
    ParamKind.PROMPT: "blue.5",
    ParamKind.FILE: "purple.5",
    ParamKind.STATIC: "gray.5",
    ParamKind.UNKNOWN: "gray.5",
}


# -- Execution mode ------------------------------------------------------------


def type_label(executable: Executable) -> str:
    return _TYPE_LABELS[executable.type]


def type_color(executable: Executable) -> str:
    return _TYPE_COLORS[executable.type]


def type_description(executable: Executable) -> str:
    return _TYPE_DESCRIPTIONS[executable.type]


# -- Visibility ----------------------------------------------------------------


def visibility_label(executable: Executable) -> str:
    """Visibility name; an unset visibility reads as ``private``."""
    return str(executable.effective_visibility)


def visibility_color(executable: Executable) -> str:
    return _VISIBILITY_COLORS[executable.effective_visibility]


# -- Parameters / arguments ----------------------------------------------------


def param_kind(param: ExecutableParameter) -> ParamKind:
    if param.text:
        return ParamKind.STATIC
    if param.secret_ref:
        return ParamKind.SECRET
    if param.prompt:
        return ParamKind.PROMPT
    if param.env_file:
        return ParamKind.FILE
    return ParamKind.UNKNOWN


def param_source(param: ExecutableParameter) -> str:
    return param.text or param.secret_ref or param.prompt or param.env_file or "-"


def param_kind_color(kind: ParamKind) -> str:
    return _PARAM_KIND_COLORS[kind]


def argument_input(arg: ExecutableArgument) -> str:
    """How the argument is given on the command line."""
    return f"position={arg.pos}" if arg.pos else f"flag={arg.flag}"
