"""Tests for the namespace tree builder."""

from __future__ import annotations

from flowcatalog.managers.executables import parse_executables
from flowcatalog.managers.tree import build_namespace_tree, find_leaf, iter_leaves, leaf_label
from flowcatalog.models import Executable, VerbType


def _executable(ref: str, **fields) -> Executable:
    return Executable.model_validate({"ref": ref, **fields})


def test_groups_then_root_leaves() -> None:
    executables = [
        _executable("build", id="build", verb="build"),
        _executable("db.seed", id="seed", name="seed", namespace="db", verb="create"),
        _executable("db.migrate", id="migrate", name="migrate", namespace="db", verb="run"),
    ]
    nodes = build_namespace_tree(executables)

    assert [node.label for node in nodes] == ["db", "build"]
    group, root = nodes
    assert group.is_namespace
    assert not group.selectable
    assert group.verb_type is None
    assert [leaf.value for leaf in group.children] == ["db.migrate", "db.seed"]
    assert [leaf.label for leaf in group.children] == ["run migrate", "create seed"]
    assert [leaf.verb_type for leaf in group.children] == [VerbType.RUN, VerbType.CREATION]

    assert root.value == "build"
    assert root.label == "build"
    assert root.selectable
    assert root.verb_type is VerbType.BUILD


def test_groups_are_alphabetical() -> None:
    executables = [
        _executable("z.one", namespace="zeta"),
        _executable("a.one", namespace="alpha"),
        _executable("m.one", namespace="Mid"),
    ]
    assert [node.label for node in build_namespace_tree(executables)] == ["alpha", "Mid", "zeta"]


def test_members_sorted_by_id_with_missing_id_first() -> None:
    executables = [
        _executable("ns.b", id="b", namespace="ns"),
        _executable("ns.none", namespace="ns"),
        _executable("ns.a", id="a", namespace="ns"),
    ]
    (group,) = build_namespace_tree(executables)
    assert [leaf.value for leaf in group.children] == ["ns.none", "ns.a", "ns.b"]


def test_every_ref_in_exactly_one_leaf(backend) -> None:
    executables = parse_executables(backend.executables)
    leaves = list(iter_leaves(build_namespace_tree(executables)))
    assert sorted(leaf.value for leaf in leaves) == sorted(executable.ref for executable in executables)


def test_verb_aliases_classify_leaf() -> None:
    (leaf,) = build_namespace_tree([_executable("x", verb="zap", verbAliases=["remove"])])
    assert leaf.verb_type is VerbType.DESTRUCTION


def test_find_leaf(backend) -> None:
    nodes = build_namespace_tree(parse_executables(backend.executables))
    leaf = find_leaf(nodes, "docs.serve")
    assert leaf is not None
    assert leaf.label == "launch serve"
    assert find_leaf(nodes, "missing") is None


def test_leaf_label_without_name() -> None:
    assert leaf_label(_executable("x", verb="run")) == "run"
    assert leaf_label(_executable("x", verb="run", name="tests")) == "run tests"


def test_empty_input() -> None:
    assert build_namespace_tree([]) == []


def test_root_leaves_sorted_by_id() -> None:
    executables = [
        _executable("zz", id="zz", verb="run"),
        _executable("ns.x", id="x", namespace="ns"),
        _executable("aa", id="aa", verb="run"),
        _executable("mm", verb="run"),
    ]
    nodes = build_namespace_tree(executables)
    assert [node.value for node in nodes] == ["ns", "mm", "aa", "zz"]
