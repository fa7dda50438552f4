import logging

from rusty_refactor.config import Settings
from rusty_refactor.conversion.builtin import FilesystemConversionChecker, check_module_conversion
from rusty_refactor.conversion.native import DisabledConversionChecker, NativeConversionChecker
from rusty_refactor.core.ports.conversion import ConversionChecker

logger = logging.getLogger(__name__)


def detect_conversion_checker(settings: Settings) -> ConversionChecker:
    """Pick the conversion checker for this process from configuration."""
    if settings.conversion_checker == "off":
        return DisabledConversionChecker()
    if settings.conversion_checker == "builtin":
        return FilesystemConversionChecker()
    checker = NativeConversionChecker(settings.worker_command, settings.worker_timeout)
    logger.debug("Native analyzer available: %s", checker.available())
    return checker


__all__ = [
    "DisabledConversionChecker",
    "FilesystemConversionChecker",
    "NativeConversionChecker",
    "check_module_conversion",
    "detect_conversion_checker",
]
