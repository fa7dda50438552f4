"""Validation of module names and paths, and the combined extraction plan.

Nothing here writes to disk; the plan lists what a caller has to create.
"""

import re
from pathlib import PurePosixPath

from rusty_refactor.config import MODULE_EXTENSION
from rusty_refactor.core.paths import is_same_path, join_path, normalize_path, split_path
from rusty_refactor.models import ConversionInfo, ExtractionPlan, ExtractionRequest, ResolvedRegion

_MODULE_NAME = re.compile(r"^[a-z][a-z0-9_]*$")
_FOLDER_SUFFIXES = ("_controller", "_service", "_model", "_repository")
_MOD_FILE = f"mod.{MODULE_EXTENSION}"


class ModulePathError(ValueError):
    """Raised for module names or paths that break the project's module layout."""


def validate_module_name(name: str) -> str:
    if not _MODULE_NAME.match(name):
        raise ModulePathError(
            f"Module name '{name}' must be lowercase with underscores (snake_case), e.g. 'user_service'."
        )
    return name


def default_module_path(module_name: str, default_dir: str = "src") -> str:
    return join_path(default_dir, f"{module_name}.{MODULE_EXTENSION}")


def normalize_module_path(module_path: str, workspace_root: str | None = None) -> str:
    """Make ``module_path`` workspace-relative, forward-slashed and ending in ``.rs``."""
    segments = split_path(module_path)
    root = split_path(workspace_root) if workspace_root else []
    if root:
        # Keep whatever follows the last copy of the workspace root.
        for start in range(len(segments) - len(root), -1, -1):
            if segments[start : start + len(root)] == root:
                segments = segments[start + len(root) :]
                break
    path = "/".join(segments)
    if not path.endswith(f".{MODULE_EXTENSION}"):
        path = f"{path}.{MODULE_EXTENSION}"
    return path


def check_module_path_convention(module_path: str, module_name: str, source_root: str = "src") -> None:
    """Enforce one module per folder: nested files must live in a folder named after the module."""
    path = normalize_path(module_path)
    file_name = PurePosixPath(path).name
    if not file_name.endswith(f".{MODULE_EXTENSION}"):
        raise ModulePathError(f"Invalid module path '{module_path}': path must end with .{MODULE_EXTENSION}.")
    if file_name == _MOD_FILE:
        return

    segments = split_path(path)
    if len(segments) < 3 or is_same_path(segments[-2], source_root):
        return

    stem = file_name[: -len(MODULE_EXTENSION) - 1]
    folder = segments[-2]
    allowed = {module_name, stem, *(stem.removesuffix(suffix) for suffix in _FOLDER_SUFFIXES)}
    if folder not in allowed:
        suggested = join_path(*segments[:-1], module_name, file_name)
        raise ModulePathError(
            f"Invalid module path '{module_path}': '{file_name}' must live in its own folder "
            f"inside '{folder}/'. Use '{suggested}' instead."
        )


def mod_file_updates(module_path: str, existing_mod_text: str | None) -> list[str]:
    """Lines the folder's ``mod.rs`` still needs to declare and re-export the new module."""
    path = PurePosixPath(normalize_path(module_path))
    if path.name == _MOD_FILE:
        return []
    stem = path.stem
    declaration = f"pub mod {stem};"
    re_export = f"pub use {stem}::*;"

    if existing_mod_text is None:
        return [f"//! {path.parent.name} module", "//!", "//! Generated by rusty-refactor", "", declaration, re_export]
    return [line for line in (declaration, re_export) if line not in existing_mod_text]


def plan_extraction(
    request: ExtractionRequest,
    region: ResolvedRegion,
    module_path: str,
    *,
    conversion: ConversionInfo | None = None,
    existing_mod_text: str | None = None,
    source_root: str = "src",
) -> ExtractionPlan:
    module_name = validate_module_name(request.module_name)
    path = normalize_path(module_path)
    parent = str(PurePosixPath(path).parent)

    if is_same_path(parent, source_root):
        # Top-level modules are declared by the crate root, which already exists.
        mod_file_path = None
        mod_file_lines = [f"pub mod {PurePosixPath(path).stem};"]
    else:
        mod_file_path = join_path(parent, _MOD_FILE)
        mod_file_lines = mod_file_updates(path, existing_mod_text)

    return ExtractionPlan(
        module_name=module_name,
        module_path=path,
        method=region.method,
        start_line=region.start_line,
        end_line=region.end_line,
        text=region.text,
        needs_conversion=conversion.needs_conversion if conversion else False,
        conversion=conversion,
        mod_file_path=mod_file_path,
        mod_file_lines=mod_file_lines,
        usage=f"use crate::{module_name}::*;",
    )
