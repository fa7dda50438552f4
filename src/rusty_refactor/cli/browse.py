import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from rusty_refactor.config import get_settings
from rusty_refactor.core.navigator import DirectoryNavigator
from rusty_refactor.core.planning import ModulePathError, validate_module_name
from rusty_refactor.core.session import TargetSelectionSession
from rusty_refactor.dependencies import build_navigator
from rusty_refactor.models import DirectoryEntry, DirectoryListing, EntryKind

console = Console()

_PROMPT = "Number to open, s<number> to select, h to select here, .. to go up, c to confirm, q to cancel"


def _get_navigator(workspace: str | None, convention: bool) -> DirectoryNavigator:
    settings = get_settings()
    updates: dict[str, object] = {}
    if workspace:
        updates["workspace_root"] = workspace
    if not convention:
        updates["convention_mode"] = False
    return build_navigator(settings.model_copy(update=updates))


def _render_listing(listing: DirectoryListing) -> list[DirectoryEntry]:
    console.print(f"[bold]{escape(' / '.join(listing.breadcrumb) or '.')}[/bold]")
    if listing.error:
        console.print(f"[yellow]{escape(listing.error)}[/yellow]")
    entries = [*listing.directories, *listing.module_files, *listing.suggestions]
    table = Table(show_lines=False)
    for header in ("#", "name", "kind", "note"):
        table.add_column(header)
    for index, entry in enumerate(entries, start=1):
        table.add_row(str(index), entry.name, entry.kind.value, entry.detail or entry.annotation or "")
    console.print(table)
    return entries


def _entry_at(entries: list[DirectoryEntry], raw: str) -> DirectoryEntry | None:
    if not raw.isdigit() or not 1 <= int(raw) <= len(entries):
        console.print(f"[yellow]No entry {escape(raw)}[/yellow]")
        return None
    return entries[int(raw) - 1]


async def _run_selection(navigator: DirectoryNavigator, module: str) -> str | None:
    session = TargetSelectionSession(navigator, module)
    listing = await session.navigate(session.current_path)
    try:
        while session.is_active:
            entries = _render_listing(listing) if listing is not None else []
            if session.selected_path is not None:
                console.print(f"Selected: [green]{escape(session.selected_path or '.')}[/green]")
            try:
                choice = Prompt.ask(_PROMPT, console=console).strip()
            except EOFError:
                session.cancel()
                break

            if choice == "q":
                session.cancel()
            elif choice == "c":
                if session.confirm() is None:
                    console.print("[yellow]Select a destination first.[/yellow]")
            elif choice == "..":
                listing = await session.ascend() or listing
            elif choice == "h":
                session.select(session.current_path)
            elif choice.startswith("s"):
                entry = _entry_at(entries, choice[1:].strip())
                if entry is not None:
                    try:
                        session.select(entry.path)
                    except ValueError as exc:
                        console.print(f"[yellow]{escape(str(exc))}[/yellow]")
            else:
                entry = _entry_at(entries, choice)
                if entry is None:
                    continue
                if entry.kind is EntryKind.MODULE_FILE:
                    session.select(entry.path)
                else:
                    listing = await session.navigate(entry.path) or listing
    finally:
        session.dispose()
    return await session.wait()


def browse(
    path: Annotated[str, typer.Argument(help="Workspace-relative directory to list.")] = "src",
    workspace: Annotated[str | None, typer.Option(help="Workspace root (defaults to configuration).")] = None,
    module: Annotated[str | None, typer.Option(help="Module name; enables the convertible-file scan.")] = None,
    convention: Annotated[bool, typer.Option(help="Suggest and annotate conventional folders.")] = True,
) -> None:
    """List destination candidates in one directory."""
    navigator = _get_navigator(workspace, convention)
    listing = asyncio.run(navigator.list_directory(path, module))
    _render_listing(listing)


def select(
    module: Annotated[str, typer.Argument(help="Name of the module to create (snake_case).")],
    workspace: Annotated[str | None, typer.Option(help="Workspace root (defaults to configuration).")] = None,
    convention: Annotated[bool, typer.Option(help="Suggest and annotate conventional folders.")] = True,
) -> None:
    """Interactively pick the folder the new module file goes into."""
    try:
        validate_module_name(module)
    except ModulePathError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None

    navigator = _get_navigator(workspace, convention)
    final_path = asyncio.run(_run_selection(navigator, module))
    if final_path is None:
        console.print("[yellow]No selection[/yellow]")
        return
    console.print(f"[green]Module path:[/green] {escape(final_path)}")
