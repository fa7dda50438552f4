import logging
from pathlib import Path

from rusty_refactor.core.languages import resolve_language
from rusty_refactor.core.symbols import find_declaration, symbol_text
from rusty_refactor.models import (
    ExtractionRequest,
    RegionNotFound,
    RegionResolution,
    ResolutionMethod,
    ResolvedRegion,
    SymbolMatch,
)

logger = logging.getLogger(__name__)


def _line_distance(match: SymbolMatch, line: int) -> int:
    if match.start_line <= line <= match.end_line:
        return 0
    if line < match.start_line:
        return match.start_line - line
    return line - match.end_line


def pick_match(matches: list[SymbolMatch], near_line: int | None = None) -> SymbolMatch:
    """Choose one match: nearest to ``near_line`` when given, earliest on ties or without a hint."""
    if not matches:
        raise ValueError("No matches to choose from.")
    if near_line is None:
        return matches[0]
    return min(enumerate(matches), key=lambda item: (_line_distance(item[1], near_line), item[0]))[1]


def region_from_lines(source_text: str, start_line: int, end_line: int) -> ResolvedRegion | None:
    """Build a region from 1-based inclusive lines, clamping ``end_line`` to the document.

    Returns ``None`` when the range starts past the end of the document.
    """
    lines = source_text.split("\n") if source_text else []
    if source_text.endswith("\n"):
        lines.pop()
    if start_line < 1 or start_line > end_line or start_line > len(lines):
        return None
    end = min(end_line, len(lines))
    return ResolvedRegion(
        start_line=start_line,
        end_line=end,
        text="\n".join(lines[start_line - 1 : end]),
        method=ResolutionMethod.LINE_RANGE,
    )


def resolve_region(request: ExtractionRequest, source_text: str, language: str = "rust") -> RegionResolution:
    """Resolve the code to extract: symbol first, explicit line range second."""
    if request.function_name:
        matches = find_declaration(source_text, request.function_name, language)
        if matches:
            match = pick_match(matches, request.start_line)
            logger.info(
                "Resolved '%s' by symbol at lines %d-%d (%d candidate(s))",
                request.function_name,
                match.start_line,
                match.end_line,
                len(matches),
            )
            return ResolvedRegion(
                start_line=match.start_line,
                end_line=match.end_line,
                text=symbol_text(source_text, match),
                method=ResolutionMethod.SYMBOL,
            )
        logger.info("Symbol '%s' not found, falling back to line numbers", request.function_name)

    blank_range: ResolvedRegion | None = None
    if request.start_line is not None and request.end_line is not None:
        region = region_from_lines(source_text, request.start_line, request.end_line)
        if region is not None and region.text.strip():
            logger.info("Resolved lines %d-%d by line range", region.start_line, region.end_line)
            return region
        blank_range = region

    if blank_range is not None:
        lines_reason = f"Lines {blank_range.start_line}-{blank_range.end_line} contain no code."
    else:
        lines_reason = f"Lines {request.start_line}-{request.end_line} are outside the document."

    if request.function_name and request.has_line_range:
        reason = f"Symbol '{request.function_name}' is not a top-level declaration. {lines_reason}"
    elif request.function_name:
        reason = f"Symbol '{request.function_name}' is not a top-level declaration and no line range was given."
    else:
        reason = lines_reason
    logger.warning("No region resolved: %s", reason)
    return RegionNotFound(
        reason=reason,
        function_name=request.function_name,
        start_line=request.start_line,
        end_line=request.end_line,
    )


def resolve_region_from_file(request: ExtractionRequest, language: str | None = None) -> RegionResolution:
    file_path = Path(request.source_file_path)
    resolved_language = resolve_language(language, file_path)
    try:
        source_text = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {request.source_file_path}") from None
    return resolve_region(request, source_text, resolved_language)
