import logging
from pathlib import Path, PurePosixPath

from rusty_refactor.config import MODULE_EXTENSION
from rusty_refactor.core.paths import is_same_path
from rusty_refactor.core.planning import (
    check_module_path_convention,
    default_module_path,
    normalize_module_path,
    plan_extraction,
    validate_module_name,
)
from rusty_refactor.core.ports.conversion import (
    ConversionChecker,
    ConversionCheckFailedError,
    ConversionCheckUnavailableError,
)
from rusty_refactor.core.region import resolve_region_from_file
from rusty_refactor.models import ConversionInfo, ExtractionPlan, ExtractionRequest, RegionNotFound

logger = logging.getLogger(__name__)


async def run_plan(
    request: ExtractionRequest,
    module_path: str | None = None,
    *,
    workspace_root: str,
    checker: ConversionChecker | None = None,
    source_root: str = "src",
    language: str | None = None,
) -> ExtractionPlan | RegionNotFound:
    """Resolve the region and work out every file change extracting it would need.

    Raises ``ModulePathError`` for a bad module name or path and ``FileNotFoundError``
    when the source file is missing. Nothing is written.
    """
    validate_module_name(request.module_name)
    target = normalize_module_path(
        module_path or default_module_path(request.module_name, source_root), workspace_root
    )
    check_module_path_convention(target, request.module_name, source_root)

    region = resolve_region_from_file(request, language)
    if isinstance(region, RegionNotFound):
        return region

    parent = PurePosixPath(target).parent
    conversion: ConversionInfo | None = None
    if checker is not None and checker.available() and parent.name and not is_same_path(str(parent), source_root):
        try:
            conversion = await checker.check_conversion(
                workspace_root, f"{parent}.{MODULE_EXTENSION}", parent.name
            )
        except (ConversionCheckFailedError, ConversionCheckUnavailableError) as exc:
            logger.warning("Conversion check skipped for '%s': %s", parent, exc)

    mod_file = Path(workspace_root).joinpath(*parent.parts, f"mod.{MODULE_EXTENSION}")
    existing_mod_text = mod_file.read_text(encoding="utf-8") if mod_file.is_file() else None

    return plan_extraction(
        request,
        region,
        target,
        conversion=conversion,
        existing_mod_text=existing_mod_text,
        source_root=source_root,
    )
