import asyncio
from pathlib import Path, PurePosixPath

from rusty_refactor.config import MODULE_EXTENSION
from rusty_refactor.core.paths import normalize_path
from rusty_refactor.models import ConversionInfo


def check_module_conversion(workspace_root: str, target_path: str, module_name: str) -> ConversionInfo:
    """A module needs conversion when ``<name>.rs`` exists beside no ``<name>/`` folder."""
    parent = PurePosixPath(normalize_path(target_path)).parent
    full_parent = Path(workspace_root).joinpath(*parent.parts)
    module_file = full_parent / f"{module_name}.{MODULE_EXTENSION}"
    module_folder = full_parent / module_name
    module_file_exists = module_file.is_file()

    return ConversionInfo(
        needs_conversion=module_file_exists and not module_folder.exists(),
        existing_file_path=str(module_file) if module_file_exists else None,
        target_folder_path=str(module_folder),
        target_mod_file_path=str(module_folder / f"mod.{MODULE_EXTENSION}"),
        module_name=module_name,
    )


class FilesystemConversionChecker:
    """In-process conversion check; always available.

    Implements the ``ConversionChecker`` protocol.
    """

    def available(self) -> bool:
        return True

    async def check_conversion(self, workspace_root: str, candidate_file_path: str, module_name: str) -> ConversionInfo:
        return await asyncio.to_thread(check_module_conversion, workspace_root, candidate_file_path, module_name)
