"""Executable data models.

The backend ships an executable as a flat record in which exactly one of the
``exec`` / ``serial`` / ``parallel`` / ``launch`` / ``request`` / ``render``
fields is populated.  Here that shape is folded into a single ``mode`` field,
a tagged union discriminated by ``kind``, so a record can never carry two
modes at once.  Records without any populated mode are kept as
``UnknownMode``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from flowcatalog.models.enums import ExecutableType, Visibility

MODE_FIELDS: tuple[str, ...] = ("exec", "serial", "parallel", "launch", "request", "render")
"""Wire field names of the execution modes, in precedence order."""


class WireModel(BaseModel):
    """Base for models read from backend JSON (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# -- Parameters / arguments --------------------------------------------------


class ExecutableParameter(WireModel):
    """Environment parameter: one value source and one destination."""

    text: str | None = None
    secret_ref: str | None = None
    prompt: str | None = None
    env_file: str | None = None
    env_key: str | None = None
    output_file: str | None = None


class ExecutableArgument(WireModel):
    """Command-line argument mapped to an env var or a file."""

    env_key: str | None = None
    output_file: str | None = None
    pos: int | None = None
    flag: str | None = None
    type: str | None = None
    default: str | None = None
    required: bool = False


class RefConfig(WireModel):
    """One step of a serial / parallel workflow."""

    ref: str | None = None
    cmd: str | None = None
    args: list[str] = Field(default_factory=list)
    retries: int = 0
    review_required: bool = False


class ResponseFile(WireModel):
    filename: str
    save_as: str | None = None


# -- Execution modes ---------------------------------------------------------


class _ModeBase(WireModel):
    params: list[ExecutableParameter] = Field(default_factory=list)
    args: list[ExecutableArgument] = Field(default_factory=list)


class ExecMode(_ModeBase):
    kind: Literal["exec"] = "exec"
    cmd: str | None = None
    file: str | None = None
    dir: str | None = None
    log_mode: str | None = None


class SerialMode(_ModeBase):
    kind: Literal["serial"] = "serial"
    execs: list[RefConfig] = Field(default_factory=list)
    fail_fast: bool | None = None
    dir: str | None = None


class ParallelMode(_ModeBase):
    kind: Literal["parallel"] = "parallel"
    execs: list[RefConfig] = Field(default_factory=list)
    fail_fast: bool | None = None
    max_threads: int | None = None
    dir: str | None = None


class LaunchMode(_ModeBase):
    kind: Literal["launch"] = "launch"
    uri: str | None = None
    app: str | None = None


class RequestMode(_ModeBase):
    kind: Literal["request"] = "request"
    method: str | None = None
    url: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    body: str | None = None
    timeout: str | None = None
    log_response: bool = False
    valid_status_codes: list[int] = Field(default_factory=list)
    transform_response: str | None = None
    response_file: ResponseFile | None = None


class RenderMode(_ModeBase):
    kind: Literal["render"] = "render"
    template_file: str | None = None
    template_data_file: str | None = None
    dir: str | None = None


class UnknownMode(_ModeBase):
    kind: Literal["unknown"] = "unknown"


ExecutionMode = Annotated[
    ExecMode | SerialMode | ParallelMode | LaunchMode | RequestMode | RenderMode | UnknownMode,
    Field(discriminator="kind"),
]


# -- Executable --------------------------------------------------------------


class Executable(WireModel):
    """A runnable catalog entry.  ``ref`` is the primary key."""

    ref: str
    id: str = ""
    name: str | None = None
    namespace: str | None = None
    workspace: str = ""
    verb: str = ""
    verb_aliases: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    visibility: Visibility | None = None
    description: str | None = None
    full_description: str | None = None
    flowfile: str | None = None
    timeout: str | None = None
    mode: ExecutionMode = Field(default_factory=UnknownMode)

    @model_validator(mode="before")
    @classmethod
    def _fold_mode(cls, data: Any) -> Any:
        """Collapse the per-mode wire fields into ``mode``."""
        if not isinstance(data, dict) or "mode" in data:
            return data
        data = dict(data)
        mode: dict[str, Any] = {"kind": "unknown"}
        for field_name in MODE_FIELDS:
            payload = data.pop(field_name, None)
            if payload is None or mode["kind"] != "unknown":
                continue
            if not isinstance(payload, dict):
                msg = f"'{field_name}' must be an object, got {type(payload).__name__}"
                raise ValueError(msg)
            mode = {**payload, "kind": field_name}
        data["mode"] = mode
        return data

    @property
    def type(self) -> ExecutableType:
        return ExecutableType(self.mode.kind)

    @property
    def effective_visibility(self) -> Visibility:
        """Visibility with the ``private`` default applied."""
        return self.visibility or Visibility.PRIVATE

    @property
    def markdown_description(self) -> str:
        """The richest description available (may contain markdown)."""
        return self.full_description or self.description or ""
