from rusty_refactor.config import Settings, get_settings
from rusty_refactor.conversion import detect_conversion_checker
from rusty_refactor.core.navigator import DirectoryNavigator
from rusty_refactor.workspace.local import LocalFileLister


def build_navigator(settings: Settings | None = None) -> DirectoryNavigator:
    """Wire a ``DirectoryNavigator`` to the local disk and the configured conversion checker."""
    settings = settings or get_settings()
    return DirectoryNavigator(
        LocalFileLister(settings.workspace_root),
        detect_conversion_checker(settings),
        workspace_root=settings.workspace_root,
        source_root=settings.source_root,
        convention_mode=settings.convention_mode,
    )
