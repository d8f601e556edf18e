"""Filter state for the executable catalog."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from flowcatalog.models.enums import ExecutableType, Visibility
from flowcatalog.models.requests import ListExecutablesRequest

ROOT_NAMESPACE = "Root namespace"
"""Namespace option standing for "executables without a namespace"."""

_TYPE_ALIASES = {"command": ExecutableType.EXEC}


class FilterState(BaseModel):
    """Immutable snapshot of every catalog filter.  Empty means "not filtered".

    ``workspace``, ``namespace``, ``tags`` and ``verb`` are sent to the
    backend; ``search``, ``visibility`` and ``type`` are evaluated locally.
    """

    model_config = ConfigDict(frozen=True)

    search: str = ""
    tags: tuple[str, ...] = ()
    workspace: str = ""
    namespace: str = ""
    verb: str = ""
    visibility: Visibility | Literal[""] = ""
    type: ExecutableType | Literal[""] = ""

    @field_validator("type", mode="before")
    @classmethod
    def _resolve_type_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _TYPE_ALIASES.get(value.lower(), value)
        return value

    @field_validator("search", "workspace", "namespace", "verb", "visibility", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags(cls, value: Any) -> Any:
        return () if value is None else value

    def with_updates(self, **changes: Any) -> FilterState:
        """Return a new state with *changes* applied.

        Switching to a different workspace clears ``namespace``: namespace
        options are scoped to the selected workspace.
        """
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            msg = f"Unknown filter field(s): {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        merged = {**self.model_dump(), **changes}
        if "workspace" in changes and (changes["workspace"] or "") != self.workspace:
            merged["namespace"] = ""
        return type(self).model_validate(merged)

    @property
    def active_count(self) -> int:
        """Number of filters in use; tags count once however many are selected."""
        values = (self.search, self.tags, self.workspace, self.namespace, self.verb, self.visibility, self.type)
        return sum(1 for value in values if value)

    def to_request(self) -> ListExecutablesRequest:
        """Server-side part of the filter as a ``list_executables`` request."""
        if self.namespace == ROOT_NAMESPACE:
            namespace: str | None = ""
        else:
            namespace = self.namespace or None
        return ListExecutablesRequest(
            workspace=self.workspace or None,
            namespace=namespace,
            tags=sorted(self.tags) or None,
            verb=self.verb or None,
        )
