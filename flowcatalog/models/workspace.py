"""Workspace data model.

A workspace is a named project root registered with the backend; it owns the
executables discovered under its path.
"""

from __future__ import annotations

from pydantic import Field

from flowcatalog.models.executable import WireModel


class ExecutableFilter(WireModel):
    """Path globs deciding which flow files a workspace includes (display only)."""

    included: list[str] = Field(default_factory=list)
    excluded: list[str] = Field(default_factory=list)


class Workspace(WireModel):
    """Workspace record as returned by the backend."""

    name: str
    display_name: str | None = None
    path: str = ""
    tags: list[str] = Field(default_factory=list)
    description: str | None = None
    full_description: str | None = None
    env_files: list[str] = Field(default_factory=list)
    verb_aliases: dict[str, list[str]] = Field(default_factory=dict)
    executables: ExecutableFilter | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name


class WorkspaceOption(WireModel):
    """Select option for the workspace filter control."""

    value: str
    label: str
