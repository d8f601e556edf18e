"""Namespace tree for navigating executables.

Namespaced executables are grouped under one node per namespace; executables
without a namespace follow the groups as top-level leaves.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from flowcatalog.display.text import collation_key
from flowcatalog.display.verbs import classify_verb
from flowcatalog.models.enums import VerbType
from flowcatalog.models.executable import Executable


@dataclass(frozen=True)
class TreeNode:
    label: str
    value: str
    is_namespace: bool = False
    verb_type: VerbType | None = None
    children: tuple[TreeNode, ...] = ()

    @property
    def selectable(self) -> bool:
        """Only leaves open an executable; namespace nodes just expand."""
        return not self.is_namespace


def leaf_label(executable: Executable) -> str:
    if executable.name:
        return f"{executable.verb} {executable.name}"
    return executable.verb


def _id_key(executable: Executable) -> tuple[str, str]:
    return collation_key(executable.id or "")


def _leaf(executable: Executable) -> TreeNode:
    return TreeNode(
        label=leaf_label(executable),
        value=executable.ref,
        verb_type=classify_verb(executable.verb, executable.verb_aliases),
    )


def build_namespace_tree(executables: Iterable[Executable]) -> list[TreeNode]:
    """Group *executables* by namespace.

    Groups are ordered by namespace and come first, followed by the
    executables without a namespace.  Group members and root leaves are
    ordered by ``id``.  Every input record ends up in exactly one leaf.
    """
    groups: dict[str, list[Executable]] = defaultdict(list)
    roots: list[Executable] = []
    for executable in executables:
        if executable.namespace:
            groups[executable.namespace].append(executable)
        else:
            roots.append(executable)

    nodes: list[TreeNode] = []
    for namespace in sorted(groups, key=collation_key):
        members = sorted(groups[namespace], key=_id_key)
        nodes.append(
            TreeNode(
                label=namespace,
                value=namespace,
                is_namespace=True,
                children=tuple(_leaf(member) for member in members),
            )
        )
    nodes.extend(_leaf(executable) for executable in sorted(roots, key=_id_key))
    return nodes


def iter_leaves(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Depth-first walk over the executable leaves of *nodes*."""
    for node in nodes:
        if node.is_namespace:
            yield from iter_leaves(node.children)
        else:
            yield node


def find_leaf(nodes: Iterable[TreeNode], ref: str) -> TreeNode | None:
    return next((leaf for leaf in iter_leaves(nodes) if leaf.value == ref), None)
