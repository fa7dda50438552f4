"""Workspace-relative path algebra on plain strings.

Paths are split on either separator, segments are trimmed, empty segments are
dropped and the rest is joined with ``/``. Nothing here touches the filesystem.
"""

import re

_SEPARATORS = re.compile(r"[\\/]")


def split_path(path: str) -> list[str]:
    return [segment.strip() for segment in _SEPARATORS.split(path) if segment.strip()]


def normalize_path(path: str) -> str:
    return "/".join(split_path(path))


def join_path(*parts: str) -> str:
    return normalize_path("/".join(parts))


def parent_path(path: str, source_root: str = "src") -> str:
    """Ascend one segment; the source root (and anything at or above it) ascends to ``""``."""
    segments = split_path(path)
    if not segments or segments == split_path(source_root):
        return ""
    return "/".join(segments[:-1])


def breadcrumb(path: str) -> list[str]:
    return split_path(path)


def is_same_path(left: str, right: str) -> bool:
    return split_path(left) == split_path(right)
