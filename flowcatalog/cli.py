from __future__ import annotations

import asyncio

import click

from flowcatalog.backend.snapshot import SnapshotBackend
from flowcatalog.display.colors import LIGHTNESS, SATURATION, hsl_to_rgb, hue_from_string
from flowcatalog.display.labels import (
    argument_input,
    param_kind,
    param_source,
    type_description,
    type_label,
    visibility_label,
)
from flowcatalog.display.paths import shorten_path
from flowcatalog.display.text import clean_markdown, shorten_description
from flowcatalog.log import setup_logging
from flowcatalog.managers.catalog import ExecutableCatalog
from flowcatalog.managers.counts import WorkspaceCountAggregator
from flowcatalog.managers.executables import get_executable, list_executables, list_workspaces
from flowcatalog.managers.tree import build_namespace_tree
from flowcatalog.models.enums import ExecutableType, Visibility
from flowcatalog.models.executable import Executable
from flowcatalog.models.requests import ListExecutablesRequest
from flowcatalog.settings import get_settings
from flowcatalog.store.cache import NotFound, QueryCache, QueryState

_PATH_WIDTH = 400


def _tag(text: str) -> str:
    return click.style(text, fg=hsl_to_rgb(hue_from_string(text), SATURATION, LIGHTNESS))


def _backend(ctx: click.Context) -> SnapshotBackend:
    path: str | None = ctx.obj["snapshot"]
    if not path:
        raise click.UsageError("No snapshot given. Pass --snapshot or set FLOWCAT_SNAPSHOT_PATH.")
    try:
        return SnapshotBackend.from_file(path)
    except (OSError, ValueError) as exc:
        raise click.ClickException(str(exc)) from None


def _cache() -> QueryCache:
    return QueryCache(stale_after=get_settings().query_stale_seconds)


def _check(state: QueryState) -> None:
    if state.error is not None:
        raise click.ClickException(f"{state.error.operation or 'query'} failed: {state.error.message}")


@click.group()
@click.option(
    "--snapshot",
    default=None,
    type=click.Path(dir_okay=False),
    help="JSON snapshot to browse (default: from FLOWCAT_SNAPSHOT_PATH).",
)
@click.option("--log-level", default=None, help="Log level (default: from FLOWCAT_LOG_LEVEL or INFO).")
@click.pass_context
def main(ctx: click.Context, snapshot: str | None, log_level: str | None) -> None:
    """Flow catalog - browse executables and workspaces."""
    settings = get_settings()
    setup_logging(log_level)
    ctx.obj = {"snapshot": snapshot or settings.snapshot_path}


# ---------------------------------------------------------------------------
# Executables
# ---------------------------------------------------------------------------


@main.command()
@click.option("--workspace", default=None, help="Only executables of this workspace.")
@click.pass_context
def tree(ctx: click.Context, workspace: str | None) -> None:
    """Show executables grouped by namespace."""
    backend = _backend(ctx)
    state = asyncio.run(list_executables(_cache(), backend, ListExecutablesRequest(workspace=workspace)))
    _check(state)

    nodes = build_namespace_tree(state.data)
    if not nodes:
        click.echo("No executables found.")
        return
    for node in nodes:
        if node.is_namespace:
            click.echo(click.style(node.label, bold=True))
            for leaf in node.children:
                click.echo(f"  {leaf.label:<32} {leaf.value}  [{leaf.verb_type}]")
        else:
            click.echo(f"{node.label:<34} {node.value}  [{node.verb_type}]")


@main.command(name="list")
@click.option("--workspace", default="", help="Workspace name.")
@click.option("--namespace", default="", help='Namespace ("Root namespace" for none).')
@click.option("--tag", "tags", multiple=True, help="Tag to match (repeatable).")
@click.option("--verb", default="", help="Verb or verb alias.")
@click.option("--search", default="", help="Text to find in ref or description.")
@click.option("--visibility", default="", type=click.Choice(["", *(v.value for v in Visibility)]))
@click.option(
    "--type",
    "type_",
    default="",
    type=click.Choice(["", "command", *(t.value for t in ExecutableType)]),
    help="Execution mode.",
)
@click.pass_context
def list_(
    ctx: click.Context,
    workspace: str,
    namespace: str,
    tags: tuple[str, ...],
    verb: str,
    search: str,
    visibility: str,
    type_: str,
) -> None:
    """List executables matching the given filters."""
    backend = _backend(ctx)
    preview_chars = get_settings().description_preview_chars

    async def run() -> list[Executable]:
        catalog = ExecutableCatalog(_cache(), backend, debounce_seconds=0)
        try:
            # Selecting a workspace resets the namespace, so it goes first.
            catalog.update_filters(workspace=workspace)
            catalog.update_filters(
                namespace=namespace,
                tags=tags,
                verb=verb,
                search=search,
                visibility=visibility,
                type=type_,
            )
            await catalog.load()
            _check(catalog.state)
            return catalog.executables
        finally:
            catalog.close()

    executables = asyncio.run(run())
    if not executables:
        click.echo("No executables found.")
        return
    for executable in executables:
        tag_text = " ".join(_tag(tag) for tag in executable.tags)
        click.echo(f"{executable.ref:<32} {type_label(executable):<18} {visibility_label(executable):<9} {tag_text}")
        preview = shorten_description(executable.markdown_description, preview_chars)
        if preview:
            click.echo(f"    {preview}")


@main.command()
@click.argument("ref")
@click.pass_context
def show(ctx: click.Context, ref: str) -> None:
    """Show the details of one executable."""
    backend = _backend(ctx)
    state = asyncio.run(get_executable(_cache(), backend, ref))
    _check(state)
    if isinstance(state.data, NotFound):
        raise click.ClickException(f"Executable not found: {ref}")

    executable: Executable = state.data
    click.echo(click.style(executable.ref, bold=True))
    click.echo(f"Type:       {type_label(executable)} ({type_description(executable)})")
    click.echo(f"Visibility: {visibility_label(executable)}")
    click.echo(f"Workspace:  {executable.workspace or '-'}")
    click.echo(f"Namespace:  {executable.namespace or '-'}")
    if executable.flowfile:
        click.echo(f"Flowfile:   {shorten_path(executable.flowfile, _PATH_WIDTH)}")
    if executable.tags:
        click.echo("Tags:       " + " ".join(_tag(tag) for tag in executable.tags))
    if executable.aliases:
        click.echo("Aliases:    " + ", ".join(executable.aliases))

    description = clean_markdown(executable.markdown_description)
    if description:
        click.echo("")
        click.echo(description)

    if executable.mode.params:
        click.echo("")
        click.echo("Parameters:")
        for param in executable.mode.params:
            target = param.env_key or param.output_file or "-"
            click.echo(f"  {target:<24} {param_kind(param):<8} {param_source(param)}")
    if executable.mode.args:
        click.echo("")
        click.echo("Arguments:")
        for arg in executable.mode.args:
            target = arg.env_key or arg.output_file or "-"
            required = " (required)" if arg.required else ""
            click.echo(f"  {target:<24} {argument_input(arg)}{required}")


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


@main.command()
@click.pass_context
def workspaces(ctx: click.Context) -> None:
    """List workspaces with their executable counts."""
    backend = _backend(ctx)

    async def run() -> tuple[QueryState, WorkspaceCountAggregator]:
        cache = _cache()
        state = await list_workspaces(cache, backend)
        aggregator = WorkspaceCountAggregator(cache, backend, [ws.name for ws in state.data or []])
        await aggregator.load()
        return state, aggregator

    state, aggregator = asyncio.run(run())
    _check(state)
    if not state.data:
        click.echo("No workspaces found.")
        return
    for workspace in state.data:
        count = aggregator.counts[workspace.name]
        count_text = "error" if count.error is not None else str(count.count)
        path = shorten_path(workspace.path, _PATH_WIDTH)
        click.echo(f"{workspace.label:<24} {count_text:>6}  {path}")
    click.echo(f"Total: {aggregator.total_count}")
