from typing import Protocol

from rusty_refactor.models import ConversionInfo


class ConversionCheckUnavailableError(RuntimeError):
    """Raised when a check is requested from an analyzer that is not present."""


class ConversionCheckFailedError(RuntimeError):
    """Raised when the analyzer is present but could not answer for one candidate."""


class ConversionChecker(Protocol):
    def available(self) -> bool: ...

    async def check_conversion(
        self, workspace_root: str, candidate_file_path: str, module_name: str
    ) -> ConversionInfo: ...
