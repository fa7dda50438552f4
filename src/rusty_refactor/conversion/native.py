from __future__ import annotations

import asyncio
import logging
import shutil

from pydantic import ValidationError

from rusty_refactor.core.ports.conversion import ConversionCheckFailedError, ConversionCheckUnavailableError
from rusty_refactor.models import ConversionInfo

logger = logging.getLogger(__name__)


class NativeConversionChecker:
    """Ask the native analyzer worker whether a module file must become a folder.

    The worker is an external executable that prints a ``ConversionInfo`` JSON
    object for ``check-module-conversion <workspace_root> <target_path> <module_name>``.
    Its presence is checked once, at construction.

    Implements the ``ConversionChecker`` protocol.
    """

    def __init__(self, command: str = "rusty-refactor-worker", timeout: float = 10.0) -> None:
        self._command = command
        self._timeout = timeout
        self._executable = shutil.which(command)
        if self._executable is None:
            logger.info("Native analyzer '%s' not found; module conversion checks are disabled", command)

    def available(self) -> bool:
        return self._executable is not None

    async def check_conversion(self, workspace_root: str, candidate_file_path: str, module_name: str) -> ConversionInfo:
        if self._executable is None:
            raise ConversionCheckUnavailableError(f"Native analyzer '{self._command}' is not installed")

        process = await asyncio.create_subprocess_exec(
            self._executable,
            "check-module-conversion",
            workspace_root,
            candidate_file_path,
            module_name,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except TimeoutError:
            process.kill()
            await process.wait()
            raise ConversionCheckFailedError(
                f"Native analyzer timed out after {self._timeout}s for {candidate_file_path}"
            ) from None
        except asyncio.CancelledError:
            process.kill()
            await asyncio.shield(process.wait())
            raise

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise ConversionCheckFailedError(
                f"Native analyzer exited with {process.returncode} for {candidate_file_path}: {message}"
            )
        try:
            return ConversionInfo.model_validate_json(stdout)
        except ValidationError as exc:
            raise ConversionCheckFailedError(f"Malformed analyzer output for {candidate_file_path}") from exc


class DisabledConversionChecker:
    """Stand-in used when conversion checks are switched off."""

    def available(self) -> bool:
        return False

    async def check_conversion(self, workspace_root: str, candidate_file_path: str, module_name: str) -> ConversionInfo:
        raise ConversionCheckUnavailableError("Module conversion checks are disabled")
