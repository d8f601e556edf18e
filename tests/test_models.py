"""Tests for the wire models and filter state."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from flowcatalog.models import (
    ROOT_NAMESPACE,
    Executable,
    ExecutableType,
    FilterState,
    SerialMode,
    Visibility,
    Workspace,
)

# ---------------------------------------------------------------------------
# Executable
# ---------------------------------------------------------------------------


def test_mode_is_folded_from_wire_field() -> None:
    executable = Executable.model_validate(
        {
            "ref": "db.seed",
            "verbAliases": ["new"],
            "serial": {"execs": [{"ref": "db.migrate", "reviewRequired": True}], "failFast": True},
        }
    )
    assert executable.type is ExecutableType.SERIAL
    assert isinstance(executable.mode, SerialMode)
    assert executable.mode.execs[0].review_required is True
    assert executable.mode.fail_fast is True
    assert executable.verb_aliases == ["new"]


def test_first_mode_wins_when_several_are_present() -> None:
    executable = Executable.model_validate({"ref": "x", "exec": {"cmd": "ls"}, "launch": {"uri": "https://example.com"}})
    assert executable.type is ExecutableType.EXEC
    assert executable.mode.cmd == "ls"


def test_record_without_mode_is_unknown() -> None:
    executable = Executable.model_validate({"ref": "x"})
    assert executable.type is ExecutableType.UNKNOWN
    assert executable.mode.params == []


def test_mode_payload_must_be_an_object() -> None:
    with pytest.raises(ValidationError):
        Executable.model_validate({"ref": "x", "exec": "ls -la"})


def test_missing_ref_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Executable.model_validate({"name": "orphan"})


def test_parameters_and_arguments_use_camel_case() -> None:
    executable = Executable.model_validate(
        {
            "ref": "x",
            "exec": {
                "params": [{"envKey": "TOKEN", "secretRef": "api-token"}],
                "args": [{"envKey": "TARGET", "flag": "target", "required": True}],
            },
        }
    )
    assert executable.mode.params[0].secret_ref == "api-token"
    assert executable.mode.args[0].flag == "target"
    assert executable.mode.args[0].required is True


def test_absent_visibility_reads_as_private() -> None:
    assert Executable(ref="x").effective_visibility is Visibility.PRIVATE
    assert Executable(ref="x", visibility="hidden").effective_visibility is Visibility.HIDDEN


def test_markdown_description_prefers_full_description() -> None:
    assert Executable(ref="x", description="short", full_description="long").markdown_description == "long"
    assert Executable(ref="x", description="short").markdown_description == "short"
    assert Executable(ref="x").markdown_description == ""


def test_workspace_label_falls_back_to_name() -> None:
    assert Workspace.model_validate({"name": "core", "displayName": "Core"}).label == "Core"
    assert Workspace(name="docs").label == "docs"


# ---------------------------------------------------------------------------
# FilterState
# ---------------------------------------------------------------------------


def test_workspace_change_clears_namespace() -> None:
    state = FilterState(workspace="core", namespace="db")
    assert state.with_updates(workspace="docs").namespace == ""
    assert state.with_updates(workspace="core").namespace == "db"
    assert state.with_updates(verb="run").namespace == "db"


def test_unknown_filter_field_is_rejected() -> None:
    with pytest.raises(ValueError, match="owner"):
        FilterState().with_updates(owner="me")


def test_command_type_alias() -> None:
    assert FilterState(type="command").type is ExecutableType.EXEC
    assert FilterState(type="serial").type is ExecutableType.SERIAL


def test_none_values_mean_unset() -> None:
    state = FilterState().with_updates(workspace=None, tags=None, visibility=None)
    assert state == FilterState()


def test_active_count_counts_tags_once() -> None:
    assert FilterState().active_count == 0
    state = FilterState(search="seed", tags=("db", "dev"), workspace="core", visibility="public")
    assert state.active_count == 4


def test_to_request_maps_root_namespace_to_empty() -> None:
    request = FilterState(workspace="core", namespace=ROOT_NAMESPACE).to_request()
    assert request.namespace == ""
    assert request.to_params() == {"workspace": "core", "namespace": ""}


def test_to_request_drops_client_side_filters() -> None:
    request = FilterState(search="seed", visibility="public", type="exec", tags=("b", "a")).to_request()
    assert request.to_params() == {"tags": ["a", "b"]}
