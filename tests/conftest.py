"""Shared fixtures and helpers for tests."""

import asyncio
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from rusty_refactor.core.ports.conversion import ConversionCheckFailedError
from rusty_refactor.models import ConversionInfo

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Test doubles for the navigator's ports
# ---------------------------------------------------------------------------


class FakeFileLister:
    """In-memory ``FileLister``: maps a workspace-relative path to its children."""

    def __init__(self, tree: dict[str, list[tuple[str, bool]]] | None = None) -> None:
        self.tree = tree or {}
        self.errors: dict[str, OSError] = {}
        self.delays: dict[str, float] = {}
        self.calls: list[str] = []

    async def list_children(self, path: str) -> list[tuple[str, bool]]:
        self.calls.append(path)
        if path in self.delays:
            await asyncio.sleep(self.delays[path])
        if path in self.errors:
            raise self.errors[path]
        if path not in self.tree:
            raise FileNotFoundError(path)
        return list(self.tree[path])


class FakeConversionChecker:
    """``ConversionChecker`` that answers from a set of convertible module names."""

    def __init__(self, convertible: set[str] | None = None, *, available: bool = True) -> None:
        self.convertible = convertible or set()
        self.failing: set[str] = set()
        self.is_available = available
        self.calls: list[tuple[str, str, str]] = []

    def available(self) -> bool:
        return self.is_available

    async def check_conversion(self, workspace_root: str, candidate_file_path: str, module_name: str) -> ConversionInfo:
        self.calls.append((workspace_root, candidate_file_path, module_name))
        if module_name in self.failing:
            raise ConversionCheckFailedError(f"cannot analyze {candidate_file_path}")
        return ConversionInfo(
            needs_conversion=module_name in self.convertible,
            existing_file_path=candidate_file_path,
            target_folder_path=f"{workspace_root}/{module_name}",
            target_mod_file_path=f"{workspace_root}/{module_name}/mod.rs",
            module_name=module_name,
        )


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------

SAMPLE_RUST = """use std::fmt;

/// A user of the system.
#[derive(Debug, Clone)]
pub struct User {
    pub name: String,
}

impl User {
    pub fn new(name: &str) -> Self {
        Self { name: name.to_string() }
    }
}

impl fmt::Display for User {
    fn fmt(&self, f: &mut fmt::Formatter) -> fmt::Result {
        write!(f, "{}", self.name)
    }
}

// Not a doc comment.

pub fn process_payment(amount: u64) -> Result<u64, String> {
    let label = "{ not a brace }";
    if amount == 0 {
        return Err(format!("{}", label));
    }
    Ok(amount)
}
"""


@pytest.fixture
def rust_parser() -> Parser:
    """Return a tree-sitter parser for Rust."""
    return get_parser("rust")


@pytest.fixture
def sample_rust() -> str:
    return SAMPLE_RUST


@pytest.fixture
def rust_workspace(tmp_path: Path) -> Path:
    """A small crate: ``src/main.rs``, ``src/models/`` and a convertible ``src/payment.rs``."""
    src = tmp_path / "src"
    (src / "models").mkdir(parents=True)
    (src / "main.rs").write_text("mod models;\nmod payment;\n\nfn main() {}\n")
    (src / "models" / "mod.rs").write_text("pub mod user;\npub use user::*;\n")
    (src / "models" / "user.rs").write_text(SAMPLE_RUST)
    (src / "payment.rs").write_text("pub fn pay() {}\n")
    (tmp_path / "target").mkdir()
    (src / ".hidden").mkdir()
    return tmp_path


@pytest.fixture
def fake_lister() -> FakeFileLister:
    return FakeFileLister()


@pytest.fixture
def fake_checker() -> FakeConversionChecker:
    return FakeConversionChecker()
