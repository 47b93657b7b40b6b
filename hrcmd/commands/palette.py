"""
Command palette operations for the CLI.

Each command runs the same engine the TUI uses: searches go through the
query coordinator, selections and actions through the action dispatcher,
and recents/pins live in the per-organization store on disk.
"""

from __future__ import annotations

import asyncio
import logging

import typer
from rich.table import Table

from hrcmd.config import (
    get_debounce_seconds,
    get_provider_timeout,
    get_state_dir,
)
from hrcmd.error_handling import safe_operation
from hrcmd.services.action_executors import build_action_registry
from hrcmd.services.api_client import HrApiClient
from hrcmd.services.search_providers import HrSearchProviders
from hrcmd.services.types import ResultKind, ScoredResult, SearchResult
from hrcmd.ui.command_palette import (
    ActionDispatcher,
    ContextResolver,
    DispatchOutcome,
    DispatchResult,
    JsonFileStorage,
    PalettePresenter,
    PersonalizationStore,
    QueryCoordinator,
)
from hrcmd.utils.logging import get_logger
from hrcmd.utils.output import console, print_json

app = typer.Typer(help="Search, pin and run palette entries")

logger = logging.getLogger(__name__)


def _make_client() -> HrApiClient:
    return HrApiClient()


def _load_store(org: str) -> PersonalizationStore:
    store = PersonalizationStore(org, JsonFileStorage(get_state_dir()))
    store.load()
    return store


def _parse_params(values: list[str] | None) -> dict[str, str]:
    """Parse repeated ``--param key=value`` options."""
    params: dict[str, str] = {}
    for value in values or []:
        key, sep, val = value.partition("=")
        if not sep or not key.strip():
            console.print(f"[red]Error: --param expects key=value, got {value!r}[/red]")
            raise typer.Exit(1)
        params[key.strip()] = val.strip()
    return params


def _results_table(title: str, rows: list[SearchResult], scores: list[int] | None = None) -> Table:
    table = Table(title=title)
    if scores is not None:
        table.add_column("Score", justify="right", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Title", style="bold")
    table.add_column("Subtitle", style="dim")
    table.add_column("Target", style="green")

    for index, item in enumerate(rows):
        target = item.href or f"action:{item.action}"
        title_text = f"[dim]{item.title}[/dim]" if item.disabled else item.title
        cells = [item.kind.value, title_text, item.subtitle or "", target]
        if scores is not None:
            cells.insert(0, str(scores[index]))
        table.add_row(*cells)
    return table


async def _search(
    org: str, query: str, location: str, kinds: list[ResultKind] | None
) -> list[ScoredResult]:
    store = _load_store(org)
    resolver = ContextResolver(org)
    async with _make_client() as client:
        coordinator = QueryCoordinator(
            org,
            HrSearchProviders(client).all(),
            on_results=lambda q, results: None,
            on_loading=lambda loading: None,
            recents=lambda: store.recents,
            context_items=lambda: resolver.resolve(location),
            provider_timeout=get_provider_timeout(),
        )
        return await coordinator.dispatch(query, kinds) or []


@app.command()
@safe_operation("search")
def search(
    query: str = typer.Argument(..., help="Text to search for"),
    org: str = typer.Option(..., "--org", "-o", help="Organization id"),
    location: str = typer.Option(
        "", "--location", "-l", help="Current location, e.g. /org/acme/hiring/jobs/42"
    ),
    kind: list[ResultKind] | None = typer.Option(
        None, "--kind", "-k", help="Only show results of this kind (repeatable)"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output results as JSON"),
):
    """Search pages, actions, people, jobs and candidates."""
    if len(query.strip()) < 2:
        console.print("[yellow]Type at least 2 characters to search[/yellow]")
        raise typer.Exit(1)

    results = asyncio.run(_search(org, query, location, kind))

    if json_output:
        print_json([{**s.result.to_dict(), "score": s.score} for s in results])
        return

    if not results:
        console.print(f"[yellow]No results for '{query}'[/yellow]")
        return

    console.print(
        _results_table(
            f"Results for '{query}'",
            [s.result for s in results],
            [s.score for s in results],
        )
    )


@app.command()
@safe_operation("list recents")
def recents(
    org: str = typer.Option(..., "--org", "-o", help="Organization id"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show recently selected entries, most recent first."""
    items = _load_store(org).recents
    if json_output:
        print_json([item.to_dict() for item in items])
        return
    if not items:
        console.print("[yellow]No recent selections[/yellow]")
        return
    console.print(_results_table("Recent", items))


@app.command()
@safe_operation("list pins")
def pins(
    org: str = typer.Option(..., "--org", "-o", help="Organization id"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show pinned entries."""
    items = _load_store(org).pinned
    if json_output:
        print_json([item.to_dict() for item in items])
        return
    if not items:
        console.print("[yellow]Nothing pinned yet[/yellow]")
        return
    console.print(_results_table("Pinned", items))


@app.command()
@safe_operation("toggle pin")
def pin(
    href: str = typer.Argument(..., help="Route to pin or unpin"),
    title: str = typer.Option(..., "--title", "-t", help="Display title"),
    org: str = typer.Option(..., "--org", "-o", help="Organization id"),
    kind: ResultKind = typer.Option(ResultKind.PAGE, "--kind", "-k", help="Entry kind"),
    subtitle: str | None = typer.Option(None, "--subtitle", "-s", help="Secondary text"),
):
    """Pin an entry, or unpin it if that href is already pinned."""
    store = _load_store(org)
    item = SearchResult(id=href, title=title, href=href, kind=kind, subtitle=subtitle)
    if store.toggle_pin(item):
        console.print(f"[green]📌 Pinned[/green] {title} [dim]{href}[/dim]")
    else:
        console.print(f"[yellow]Unpinned[/yellow] {title} [dim]{href}[/dim]")


@app.command()
@safe_operation("clear personalization")
def clear(
    org: str = typer.Option(..., "--org", "-o", help="Organization id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Forget all recents and pins for an organization."""
    if not yes and not typer.confirm(f"Clear recents and pins for {org}?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)
    _load_store(org).clear()
    console.print(f"[green]✅ Cleared recents and pins for {org}[/green]")


async def _run_action(
    org: str, action_id: str, params: dict[str, str], force: bool, show_progress: bool
) -> DispatchResult:
    store = _load_store(org)
    async with _make_client() as client:
        registry = build_action_registry(client)
        spec = registry.get(action_id)
        if spec is None:
            console.print(f"[red]Unknown action: {action_id}[/red]")
            console.print(f"Available actions: {', '.join(registry.ids())}")
            raise typer.Exit(1)

        # There is no router in the terminal; the follow-up href is reported instead
        dispatcher = ActionDispatcher(
            org,
            navigate=lambda href: logger.debug("Follow-up route %s", href),
            store=store,
            actions=registry,
        )
        item = SearchResult(
            id=action_id,
            title=spec.name,
            href="",
            kind=ResultKind.ACTION,
            action=action_id,
            params=params,
        )
        if not show_progress:
            return await dispatcher.dispatch(item, force=force)
        with console.status(f"[bold green]{spec.name}..."):
            return await dispatcher.dispatch(item, force=force)


@app.command()
@safe_operation("run action")
def run(
    action_id: str = typer.Argument(..., help="Action id, e.g. seed-demo"),
    org: str = typer.Option(..., "--org", "-o", help="Organization id"),
    param: list[str] | None = typer.Option(
        None, "--param", "-p", help="Action parameter as key=value (repeatable)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Redo work that already exists"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output the result as JSON"),
):
    """Run a side-effecting palette action."""
    params = _parse_params(param)
    result = asyncio.run(_run_action(org, action_id, params, force, not json_output))

    if json_output:
        print_json(
            {
                "outcome": result.outcome.value,
                "message": result.message,
                "href": result.href,
                "payload": result.payload,
            }
        )
    elif result.outcome is DispatchOutcome.EXECUTED:
        console.print(f"[green]✅ {result.message}[/green]")
        if result.href:
            console.print(f"[cyan]→ {result.href}[/cyan]")
    else:
        console.print(f"[red]❌ {result.message or 'Action failed'}[/red]")

    if result.outcome is not DispatchOutcome.EXECUTED:
        raise typer.Exit(1)


@app.command()
def tui(
    org: str = typer.Option(..., "--org", "-o", help="Organization id"),
    location: str = typer.Option("", "--location", "-l", help="Starting location"),
):
    """Open the interactive command palette (Ctrl+K)."""
    from hrcmd.ui.command_palette.palette_screen import PaletteApp

    # Console handlers would draw over the TUI; keep only the log file.
    logging.getLogger("hrcmd").handlers.clear()
    get_logger("hrcmd")

    client = _make_client()
    store = PersonalizationStore(org, JsonFileStorage(get_state_dir()))

    def presenter_factory(navigate) -> PalettePresenter:
        return PalettePresenter(
            org,
            navigate=navigate,
            providers=HrSearchProviders(client).all(),
            store=store,
            actions=build_action_registry(client),
            location=location,
            debounce_seconds=get_debounce_seconds(),
            provider_timeout=get_provider_timeout(),
        )

    logger.info("Starting palette TUI for org %s", org)
    PaletteApp(presenter_factory, on_shutdown=client.aclose).run()
