"""Interactive, cancellable negotiation of a destination folder.

A ``TargetSelectionSession`` starts in ``browsing`` and ends exactly once, either
``confirmed`` with a module file path or ``cancelled`` with ``None``. Callers
await :meth:`TargetSelectionSession.wait` for that outcome.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from enum import Enum

from rusty_refactor.config import MODULE_EXTENSION
from rusty_refactor.core.navigator import DirectoryNavigator
from rusty_refactor.core.paths import join_path, normalize_path, parent_path
from rusty_refactor.models import DirectoryEntry, DirectoryListing, EntryKind, NavigationState

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    BROWSING = "browsing"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class TargetSelectionSession:
    def __init__(
        self,
        navigator: DirectoryNavigator,
        module_name: str,
        *,
        session_id: str | None = None,
        selected_text: str = "",
        module_extension: str = MODULE_EXTENSION,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.module_name = module_name
        self.selected_text = selected_text
        self._navigator = navigator
        self._module_extension = module_extension
        self._state = SessionState.BROWSING
        self._navigation = NavigationState(current_path=navigator.source_root)
        self._listing: DirectoryListing | None = None
        self._listing_task: asyncio.Task[DirectoryListing] | None = None
        self._generation = 0
        self._done = asyncio.Event()
        self._result: str | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.BROWSING

    @property
    def navigation(self) -> NavigationState:
        return self._navigation

    @property
    def current_path(self) -> str:
        return self._navigation.current_path

    @property
    def selected_path(self) -> str | None:
        return self._navigation.selected_path

    @property
    def listing(self) -> DirectoryListing | None:
        return self._listing

    @property
    def result(self) -> str | None:
        return self._result

    @property
    def selected_entry(self) -> DirectoryEntry | None:
        if self._listing is None or self.selected_path is None:
            return None
        for entry in (*self._listing.directories, *self._listing.module_files):
            if entry.path == self.selected_path:
                return entry
        return None

    @property
    def requires_conversion(self) -> bool:
        entry = self.selected_entry
        return entry is not None and entry.kind is EntryKind.MODULE_FILE

    def update(self, module_name: str, selected_text: str = "") -> None:
        """Point a live session at a newer request."""
        if not self.is_active:
            return
        self.module_name = module_name
        self.selected_text = selected_text

    async def navigate(self, path: str) -> DirectoryListing | None:
        """List ``path`` and make it current; clears any selection.

        Returns ``None`` when the session is closed or a newer navigation superseded this one.
        """
        if not self.is_active:
            return None
        target = normalize_path(path)
        self._generation += 1
        generation = self._generation
        self._navigation = NavigationState(current_path=target)
        self._cancel_listing()

        task = asyncio.create_task(self._navigator.list_directory(target, self.module_name))
        self._listing_task = task
        await asyncio.wait({task})
        if task.cancelled() or generation != self._generation or not self.is_active:
            logger.debug("Discarding stale listing of '%s'", target)
            return None
        self._listing = task.result()
        return self._listing

    async def ascend(self) -> DirectoryListing | None:
        return await self.navigate(parent_path(self.current_path, self._navigator.source_root))

    def selectable_paths(self) -> set[str]:
        paths = {self.current_path}
        if self._listing is not None and self._listing.current_path == self.current_path:
            paths.update(entry.path for entry in self._listing.directories)
            paths.update(entry.path for entry in self._listing.module_files)
        return paths

    def select(self, entry_path: str) -> None:
        if not self.is_active:
            return
        target = normalize_path(entry_path)
        if target not in self.selectable_paths():
            raise ValueError(f"'{entry_path}' is not a selectable destination in '{self.current_path}'")
        self._navigation = self._navigation.model_copy(update={"selected_path": target})

    def confirm(self) -> str | None:
        """Finish with ``<selected>/<module>.<ext>``; a no-op without a selection or once finished."""
        if not self.is_active or self.selected_path is None:
            return None
        final_path = join_path(self.selected_path, f"{self.module_name}.{self._module_extension}")
        self._state = SessionState.CONFIRMED
        self._finish(final_path)
        logger.info("Session %s confirmed %s", self.session_id, final_path)
        return final_path

    def cancel(self) -> None:
        if not self.is_active:
            return
        self._state = SessionState.CANCELLED
        self._finish(None)
        logger.info("Session %s cancelled", self.session_id)

    def dispose(self) -> None:
        self._cancel_listing()
        self.cancel()

    async def wait(self) -> str | None:
        await self._done.wait()
        return self._result

    def _cancel_listing(self) -> None:
        if self._listing_task is not None and not self._listing_task.done():
            self._listing_task.cancel()

    def _finish(self, result: str | None) -> None:
        self._result = result
        self._cancel_listing()
        self._done.set()


class SessionRegistry:
    """At most one live selection session per session id.

    Opening a session for an id whose session is still browsing updates and
    returns that session, so every caller shares its single pending result.
    A finished session stays available for lookup until its id is reopened
    or closed.
    """

    def __init__(self, navigator: DirectoryNavigator) -> None:
        self._navigator = navigator
        self._sessions: dict[str, TargetSelectionSession] = {}

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, session_id: str, module_name: str, selected_text: str = "") -> TargetSelectionSession:
        session = self._sessions.get(session_id)
        if session is not None and session.is_active:
            logger.info("Reusing live selection session %s", session_id)
            session.update(module_name, selected_text)
            return session

        session = TargetSelectionSession(
            self._navigator,
            module_name,
            session_id=session_id,
            selected_text=selected_text,
        )
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> TargetSelectionSession | None:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.dispose()

    def dispose_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)
