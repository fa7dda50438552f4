from typing import Protocol


class FileLister(Protocol):
    async def list_children(self, path: str) -> list[tuple[str, bool]]:
        """Return ``(name, is_directory)`` pairs; raise ``FileNotFoundError`` or ``OSError``."""
        ...
