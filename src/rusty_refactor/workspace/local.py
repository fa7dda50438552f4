from __future__ import annotations

import asyncio
import os
from pathlib import Path

from rusty_refactor.core.paths import split_path


class LocalFileLister:
    """List directory children below a workspace root on the local disk.

    Implements the ``FileLister`` protocol.
    """

    def __init__(self, workspace_root: str | Path) -> None:
        self._root = Path(workspace_root).resolve()

    def resolve(self, path: str) -> Path:
        directory = self._root.joinpath(*split_path(path)).resolve()
        if directory != self._root and self._root not in directory.parents:
            raise PermissionError(f"Path escapes the workspace: {path}")
        return directory

    async def list_children(self, path: str) -> list[tuple[str, bool]]:
        directory = self.resolve(path)
        return await asyncio.to_thread(_scan, directory)


def _scan(directory: Path) -> list[tuple[str, bool]]:
    with os.scandir(directory) as entries:
        return [(entry.name, entry.is_dir()) for entry in entries]
