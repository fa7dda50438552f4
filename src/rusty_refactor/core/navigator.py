from __future__ import annotations

import asyncio
import locale
import logging

from rusty_refactor.config import AGGREGATOR_FILES, EXCLUDED_DIRECTORIES, MODULE_EXTENSION, MODULE_NAME_CONVENTION
from rusty_refactor.core.paths import breadcrumb, is_same_path, join_path, normalize_path, parent_path
from rusty_refactor.core.ports.conversion import (
    ConversionChecker,
    ConversionCheckFailedError,
    ConversionCheckUnavailableError,
)
from rusty_refactor.core.ports.filesystem import FileLister
from rusty_refactor.models import DirectoryEntry, DirectoryListing, EntryKind

logger = logging.getLogger(__name__)

CONVENTION_ANNOTATION = "convention"
CONVERTIBLE_ANNOTATION = "Can be converted to folder"


def _sort_key(entry: DirectoryEntry) -> tuple[str, str]:
    return locale.strxfrm(entry.name.casefold()), entry.name


def is_module_candidate(name: str) -> bool:
    return (
        name.endswith(f".{MODULE_EXTENSION}")
        and not name.startswith(".")
        and name not in AGGREGATOR_FILES
        and len(name) > len(MODULE_EXTENSION) + 1
    )


class DirectoryNavigator:
    """List one workspace directory as destination candidates for an extracted module."""

    def __init__(
        self,
        lister: FileLister,
        checker: ConversionChecker | None = None,
        *,
        workspace_root: str,
        source_root: str = "src",
        convention_mode: bool = True,
    ) -> None:
        self._lister = lister
        self._checker = checker
        self._workspace_root = workspace_root
        self._source_root = normalize_path(source_root)
        self._convention_mode = convention_mode

    @property
    def source_root(self) -> str:
        return self._source_root

    @property
    def workspace_root(self) -> str:
        return self._workspace_root

    @property
    def checker(self) -> ConversionChecker | None:
        return self._checker

    async def list_directory(self, current_path: str, module_name: str | None = None) -> DirectoryListing:
        path = normalize_path(current_path)
        error: str | None = None
        try:
            children = await self._lister.list_children(path)
        except FileNotFoundError:
            logger.info("Directory '%s' does not exist yet", path)
            children = []
        except OSError as exc:
            logger.warning("Could not read directory '%s': %s", path, exc)
            error = f"Could not read '{path or '.'}': {exc.strerror or exc}"
            children = []

        directories = self._directories(path, children)
        module_files: list[DirectoryEntry] = []
        if module_name and self._checker is not None and self._checker.available():
            module_files = await self._module_files(self._checker, path, children)

        return DirectoryListing(
            current_path=path,
            parent_path=parent_path(path, self._source_root),
            breadcrumb=breadcrumb(path),
            directories=directories,
            module_files=module_files,
            suggestions=self._suggestions(path, directories),
            error=error,
        )

    def _directories(self, path: str, children: list[tuple[str, bool]]) -> list[DirectoryEntry]:
        directories = []
        for name, is_directory in children:
            if not is_directory or name.startswith(".") or name in EXCLUDED_DIRECTORIES:
                continue
            is_conventional = self._convention_mode and name in MODULE_NAME_CONVENTION
            directories.append(
                DirectoryEntry(
                    name=name,
                    kind=EntryKind.DIRECTORY,
                    path=join_path(path, name),
                    annotation=CONVENTION_ANNOTATION if is_conventional else None,
                )
            )
        return sorted(directories, key=_sort_key)

    async def _module_files(
        self, checker: ConversionChecker, path: str, children: list[tuple[str, bool]]
    ) -> list[DirectoryEntry]:
        candidates = [name for name, is_directory in children if not is_directory and is_module_candidate(name)]
        # Checks are independent reads; all of them finish before the listing is emitted.
        entries = await asyncio.gather(*(self._check_candidate(checker, path, name) for name in candidates))
        return [entry for entry in entries if entry is not None]

    async def _check_candidate(self, checker: ConversionChecker, path: str, file_name: str) -> DirectoryEntry | None:
        stem = file_name[: -len(MODULE_EXTENSION) - 1]
        try:
            info = await checker.check_conversion(self._workspace_root, join_path(path, file_name), stem)
        except (ConversionCheckFailedError, ConversionCheckUnavailableError) as exc:
            logger.warning("Skipping conversion check for %s: %s", file_name, exc)
            return None
        except Exception:
            logger.exception("Unexpected error checking module conversion for %s", file_name)
            return None

        if not info.needs_conversion:
            return None
        return DirectoryEntry(
            name=stem,
            kind=EntryKind.MODULE_FILE,
            path=join_path(path, stem),
            annotation=CONVERTIBLE_ANNOTATION,
            detail=f"Convert {file_name} to {stem}/mod.{MODULE_EXTENSION}",
        )

    def _suggestions(self, path: str, directories: list[DirectoryEntry]) -> list[DirectoryEntry]:
        if not self._convention_mode or directories or not is_same_path(path, self._source_root):
            return []
        return [
            DirectoryEntry(name=name, kind=EntryKind.SUGGESTION, path=join_path(path, name))
            for name in MODULE_NAME_CONVENTION
        ]
