import os
from typing import Literal

from pydantic import BaseModel

# Display order, not priority.
MODULE_NAME_CONVENTION: tuple[str, ...] = (
    "controllers",
    "models",
    "views",
    "services",
    "middleware",
    "helpers",
    "lib",
    "utils",
    "config",
    "routes",
    "handlers",
    "repositories",
    "domain",
)

MODULE_EXTENSION = "rs"
AGGREGATOR_FILES: frozenset[str] = frozenset({"mod.rs", "lib.rs", "main.rs"})
EXCLUDED_DIRECTORIES: frozenset[str] = frozenset({"target", "node_modules"})

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

ConversionCheckerMode = Literal["native", "builtin", "off"]


class Settings(BaseModel):
    workspace_root: str
    source_root: str = "src"
    convention_mode: bool = True
    conversion_checker: ConversionCheckerMode = "native"
    worker_command: str = "rusty-refactor-worker"
    worker_timeout: float = 10.0


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")


def get_settings() -> Settings:
    convention_raw = os.getenv("RUSTY_REFACTOR_CONVENTION_MODE")
    return Settings(
        workspace_root=os.getenv("RUSTY_REFACTOR_WORKSPACE", os.getcwd()),
        source_root=os.getenv("RUSTY_REFACTOR_SOURCE_ROOT", "src"),
        convention_mode=_parse_bool("RUSTY_REFACTOR_CONVENTION_MODE", convention_raw) if convention_raw else True,
        conversion_checker=os.getenv("RUSTY_REFACTOR_CONVERSION_CHECKER", "native"),  # type: ignore[arg-type]
        worker_command=os.getenv("RUSTY_REFACTOR_WORKER", "rusty-refactor-worker"),
        worker_timeout=float(os.getenv("RUSTY_REFACTOR_WORKER_TIMEOUT", "10")),
    )
