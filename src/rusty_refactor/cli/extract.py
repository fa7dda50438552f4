import asyncio
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from rusty_refactor.config import get_settings
from rusty_refactor.conversion import detect_conversion_checker
from rusty_refactor.core.extraction import run_plan
from rusty_refactor.core.languages import resolve_language
from rusty_refactor.core.region import resolve_region_from_file
from rusty_refactor.core.symbols import list_declarations
from rusty_refactor.models import ExtractionRequest, RegionNotFound, ResolutionMethod

console = Console()

_METHOD_LABELS = {
    ResolutionMethod.SYMBOL: "Symbol matching",
    ResolutionMethod.LINE_RANGE: "Line-based",
}


def _build_request(
    file: str,
    module: str,
    function: str | None,
    start: int | None,
    end: int | None,
) -> ExtractionRequest:
    try:
        return ExtractionRequest(
            source_file_path=file,
            module_name=module,
            function_name=function,
            start_line=start,
            end_line=end,
        )
    except ValidationError as exc:
        messages = "; ".join(error["msg"] for error in exc.errors())
        console.print(f"[red]Invalid request:[/red] {messages}")
        raise typer.Exit(1) from None


def symbols(
    file: Annotated[str, typer.Argument(help="Source file to outline.")],
    language: Annotated[str | None, typer.Option(help="Language name (rust, go, python).")] = None,
) -> None:
    """List top-level declarations of a source file."""
    path = Path(file)
    try:
        resolved_language = resolve_language(language, path)
        source_text = path.read_text(encoding="utf-8")
    except (ValueError, FileNotFoundError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None

    rows = list_declarations(source_text, resolved_language)
    table = Table(show_lines=False)
    for header in ("name", "kind", "start_line", "end_line"):
        table.add_column(header)
    for match in rows:
        table.add_row(match.name, match.kind, str(match.start_line), str(match.end_line))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def resolve(
    file: Annotated[str, typer.Argument(help="Source file containing the code to extract.")],
    function: Annotated[str | None, typer.Option(help="Top-level symbol to extract (preferred).")] = None,
    start: Annotated[int | None, typer.Option(help="First line, 1-based.")] = None,
    end: Annotated[int | None, typer.Option(help="Last line, 1-based, inclusive.")] = None,
    module: Annotated[str, typer.Option(help="Name of the module to create.")] = "extracted",
    language: Annotated[str | None, typer.Option(help="Language name (rust, go, python).")] = None,
) -> None:
    """Resolve the exact code region to extract."""
    request = _build_request(file, module, function, start, end)
    try:
        result = resolve_region_from_file(request, language)
    except (ValueError, FileNotFoundError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None

    if isinstance(result, RegionNotFound):
        console.print(f"[red]No code extracted:[/red] {escape(result.reason)}")
        raise typer.Exit(1)

    console.print(f"[green]Method:[/green] {_METHOD_LABELS[result.method]}")
    console.print(f"[green]Lines:[/green] {result.start_line}-{result.end_line}")
    lexer = resolve_language(language, Path(file))
    console.print(Syntax(result.text, lexer, line_numbers=True, start_line=result.start_line))


def plan(
    file: Annotated[str, typer.Argument(help="Source file containing the code to extract.")],
    module: Annotated[str, typer.Option(help="Name of the module to create (snake_case).")],
    path: Annotated[str | None, typer.Option(help="Target module path, e.g. src/models/user/user.rs.")] = None,
    function: Annotated[str | None, typer.Option(help="Top-level symbol to extract (preferred).")] = None,
    start: Annotated[int | None, typer.Option(help="First line, 1-based.")] = None,
    end: Annotated[int | None, typer.Option(help="Last line, 1-based, inclusive.")] = None,
) -> None:
    """Show what extracting to a module would create, without writing anything."""
    settings = get_settings()
    request = _build_request(file, module, function, start, end)
    try:
        extraction = asyncio.run(
            run_plan(
                request,
                path,
                workspace_root=settings.workspace_root,
                checker=detect_conversion_checker(settings),
                source_root=settings.source_root,
            )
        )
    except (ValueError, FileNotFoundError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None

    if isinstance(extraction, RegionNotFound):
        console.print(f"[red]No code extracted:[/red] {escape(extraction.reason)}")
        raise typer.Exit(1)

    console.print(f"[green]Module:[/green] {extraction.module_path}")
    console.print(f"[green]Method:[/green] {_METHOD_LABELS[extraction.method]}")
    console.print(f"[green]Lines:[/green] {extraction.start_line}-{extraction.end_line}")
    if extraction.needs_conversion and extraction.conversion is not None:
        console.print(
            f"[yellow]Convert[/yellow] {extraction.conversion.existing_file_path} "
            f"to {extraction.conversion.target_mod_file_path}"
        )
    if extraction.mod_file_lines:
        target = extraction.mod_file_path or "crate root"
        console.print(f"[green]Declare in[/green] {target}:")
        for line in extraction.mod_file_lines:
            console.print(f"  {escape(line)}")
    console.print(f"[green]Import with:[/green] {escape(extraction.usage)}")
