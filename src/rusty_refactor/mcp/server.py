"""FastMCP server exposing rusty-refactor tools."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastmcp import FastMCP
from pydantic import ValidationError

from rusty_refactor.core.extraction import run_plan
from rusty_refactor.core.languages import resolve_language
from rusty_refactor.core.navigator import DirectoryNavigator
from rusty_refactor.core.region import resolve_region_from_file
from rusty_refactor.core.session import SessionRegistry, TargetSelectionSession
from rusty_refactor.core.symbols import list_declarations
from rusty_refactor.models import DirectoryListing, ExtractionRequest, RegionNotFound


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(error["msg"] for error in exc.errors())


def _finished_error(session: TargetSelectionSession) -> str:
    return f"Error: session '{session.session_id}' is already {session.state.value}."


def _session_view(session: TargetSelectionSession, listing: DirectoryListing | None = None) -> dict[str, Any]:
    listing = listing or session.listing
    return {
        "session_id": session.session_id,
        "state": session.state.value,
        "module_name": session.module_name,
        "current_path": session.current_path,
        "selected_path": session.selected_path,
        "requires_conversion": session.requires_conversion,
        "listing": listing.model_dump(mode="json") if listing is not None else None,
    }


def create_mcp_server(navigator: DirectoryNavigator, registry: SessionRegistry | None = None) -> FastMCP:
    """Create a FastMCP server wired to the given navigator."""

    mcp = FastMCP(
        "rusty-refactor",
        instructions="Resolve code regions to extract and choose the folder for the new Rust module.",
    )
    sessions = registry or SessionRegistry(navigator)

    @mcp.tool()
    async def list_symbols(path: str, language: str | None = None) -> list[dict[str, Any]] | str:
        """List top-level declarations of a source file with 1-based line ranges."""
        file_path = Path(path)
        try:
            resolved_language = resolve_language(language, file_path)
            source_text = file_path.read_text(encoding="utf-8")
        except (ValueError, FileNotFoundError) as exc:
            return f"Error: {exc}"
        return [match.model_dump(mode="json") for match in list_declarations(source_text, resolved_language)]

    @mcp.tool()
    async def resolve_region(
        path: str,
        function_name: str | None = None,
        start_line: int | None = None,
        end_line: int | None = None,
        language: str | None = None,
    ) -> dict[str, Any] | str:
        """Resolve the code to extract: a top-level symbol first, then an explicit line range."""
        try:
            request = ExtractionRequest(
                source_file_path=path,
                module_name="extracted",
                function_name=function_name,
                start_line=start_line,
                end_line=end_line,
            )
            result = resolve_region_from_file(request, language)
        except ValidationError as exc:
            return f"Error: {_validation_message(exc)}"
        except (ValueError, FileNotFoundError) as exc:
            return f"Error: {exc}"
        return {"found": not isinstance(result, RegionNotFound), **result.model_dump(mode="json")}

    @mcp.tool()
    async def list_directory(path: str = "", module_name: str | None = None) -> dict[str, Any]:
        """List destination candidates in a workspace directory (defaults to the source root)."""
        listing = await navigator.list_directory(path or navigator.source_root, module_name)
        return listing.model_dump(mode="json")

    @mcp.tool()
    async def open_selection(session_id: str, module_name: str, selected_text: str = "") -> dict[str, Any]:
        """Open (or rejoin) a destination selection session and list its current folder."""
        session = sessions.open(session_id, module_name, selected_text)
        listing = session.listing
        if listing is None or listing.current_path != session.current_path:
            listing = await session.navigate(session.current_path)
        return _session_view(session, listing)

    @mcp.tool()
    async def navigate(session_id: str, path: str) -> dict[str, Any] | str:
        """Move a session to another folder; clears its selection."""
        session = sessions.get(session_id)
        if session is None:
            return f"Error: no open session '{session_id}'."
        if not session.is_active:
            return _finished_error(session)
        listing = await session.navigate(path)
        return _session_view(session, listing)

    @mcp.tool()
    async def select(session_id: str, path: str) -> dict[str, Any] | str:
        """Select the current folder, a listed folder or a convertible module file."""
        session = sessions.get(session_id)
        if session is None:
            return f"Error: no open session '{session_id}'."
        if not session.is_active:
            return _finished_error(session)
        try:
            session.select(path)
        except ValueError as exc:
            return f"Error: {exc}"
        return _session_view(session)

    @mcp.tool()
    async def confirm(session_id: str) -> dict[str, Any] | str:
        """Finish a session with its selection. A finished session reports its final state and path."""
        session = sessions.get(session_id)
        if session is None:
            return f"Error: no open session '{session_id}'."
        if session.confirm() is None and session.is_active:
            return "Error: nothing selected yet."
        return {**_session_view(session), "module_path": session.result}

    @mcp.tool()
    async def cancel(session_id: str) -> dict[str, Any] | str:
        """Cancel a session. A finished session is left as it is and reports its final state."""
        session = sessions.get(session_id)
        if session is None:
            return f"Error: no open session '{session_id}'."
        session.cancel()
        return {**_session_view(session), "module_path": session.result}

    @mcp.tool()
    async def plan_extraction(
        path: str,
        module_name: str,
        module_path: str | None = None,
        function_name: str | None = None,
        start_line: int | None = None,
        end_line: int | None = None,
    ) -> dict[str, Any] | str:
        """Work out the module file, mod.rs lines and conversion an extraction needs. Writes nothing."""
        try:
            request = ExtractionRequest(
                source_file_path=path,
                module_name=module_name,
                function_name=function_name,
                start_line=start_line,
                end_line=end_line,
            )
            result = await run_plan(
                request,
                module_path,
                workspace_root=navigator.workspace_root,
                checker=navigator.checker,
                source_root=navigator.source_root,
            )
        except ValidationError as exc:
            return f"Error: {_validation_message(exc)}"
        except (ValueError, FileNotFoundError) as exc:
            return f"Error: {exc}"
        if isinstance(result, RegionNotFound):
            return f"Error: {result.reason}"
        return result.model_dump(mode="json")

    return mcp
