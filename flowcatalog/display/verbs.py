"""Verb classification for executable icons."""

from __future__ import annotations

from collections.abc import Iterable

from flowcatalog.models.enums import VerbType

VERB_GROUPS: dict[VerbType, frozenset[str]] = {
    VerbType.DEACTIVATION: frozenset({"deactivate", "disable", "stop", "kill", "halt", "pause", "terminate"}),
    VerbType.CONFIGURATION: frozenset({"configure", "config", "set", "setup", "manage", "install", "init"}),
    VerbType.DESTRUCTION: frozenset({"delete", "remove", "destroy", "erase", "clean", "purge", "unset", "uninstall", "teardown"}),  # noqa: E501
    VerbType.RETRIEVAL: frozenset({"get", "fetch", "retrieve", "pull", "download", "list", "request"}),
    VerbType.UPDATE: frozenset({"update", "upgrade", "patch", "edit", "modify", "sync", "push"}),
    VerbType.VALIDATION: frozenset({"test", "validate", "check", "verify", "lint", "scan", "analyze", "inspect", "audit"}),  # noqa: E501
    VerbType.LAUNCH: frozenset({"launch", "open", "show", "view", "render", "browse", "watch"}),
    VerbType.CREATION: frozenset({"create", "new", "add", "generate", "scaffold", "transform"}),
    VerbType.RESTART: frozenset({"restart", "reload", "reboot", "refresh", "reset"}),
    VerbType.BUILD: frozenset({"build", "compile", "package", "bundle", "release", "publish", "deploy"}),
}

_VERB_INDEX: dict[str, VerbType] = {verb: group for group, verbs in VERB_GROUPS.items() for verb in verbs}


def classify_verb(verb: str | None, aliases: Iterable[str] = ()) -> VerbType:
    """Classify *verb*, falling back to its aliases, then to ``RUN``."""
    for candidate in (verb, *aliases):
        if not candidate:
            continue
        group = _VERB_INDEX.get(candidate.strip().lower())
        if group is not None:
            return group
    return VerbType.RUN
