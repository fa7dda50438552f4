"""Tests for the rusty-refactor CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from rusty_refactor.cli.app import app

runner = CliRunner()


def _env(workspace: Path, checker: str = "builtin") -> dict[str, str]:
    return {"RUSTY_REFACTOR_WORKSPACE": str(workspace), "RUSTY_REFACTOR_CONVERSION_CHECKER": checker}


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["symbols"],
        ["resolve"],
        ["plan"],
        ["browse"],
        ["select"],
        ["serve"],
        ["serve", "mcp"],
    ],
    ids=["root", "symbols", "resolve", "plan", "browse", "select", "serve", "serve-mcp"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


class TestSymbols:
    def test_lists_declarations(self, rust_workspace: Path) -> None:
        result = runner.invoke(app, ["symbols", str(rust_workspace / "src" / "models" / "user.rs")])
        assert result.exit_code == 0
        assert "process_payment" in result.output
        assert "(4 rows)" in result.output

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        notes = tmp_path / "notes.txt"
        notes.write_text("hello")
        result = runner.invoke(app, ["symbols", str(notes)])
        assert result.exit_code == 1
        assert "Unsupported file extension" in result.output


class TestResolve:
    def test_by_symbol(self, rust_workspace: Path) -> None:
        source = rust_workspace / "src" / "models" / "user.rs"
        result = runner.invoke(app, ["resolve", str(source), "--function", "process_payment"])
        assert result.exit_code == 0
        assert "Symbol matching" in result.output
        assert "Lines: 23-29" in result.output

    def test_by_lines(self, rust_workspace: Path) -> None:
        source = rust_workspace / "src" / "main.rs"
        result = runner.invoke(app, ["resolve", str(source), "--start", "4", "--end", "10"])
        assert result.exit_code == 0
        assert "Line-based" in result.output
        assert "Lines: 4-4" in result.output

    def test_not_found(self, rust_workspace: Path) -> None:
        source = rust_workspace / "src" / "main.rs"
        result = runner.invoke(app, ["resolve", str(source), "--function", "missing"])
        assert result.exit_code == 1
        assert "No code extracted" in result.output

    def test_invalid_request(self, rust_workspace: Path) -> None:
        result = runner.invoke(app, ["resolve", str(rust_workspace / "src" / "main.rs")])
        assert result.exit_code == 1
        assert "Invalid request" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["resolve", str(tmp_path / "gone.rs"), "--function", "main"])
        assert result.exit_code == 1
        assert "File not found" in result.output


class TestPlan:
    def test_plans_nested_module(self, rust_workspace: Path) -> None:
        source = rust_workspace / "src" / "models" / "user.rs"
        result = runner.invoke(
            app,
            [
                "plan",
                str(source),
                "--module",
                "payment_service",
                "--path",
                "src/payment/payment_service.rs",
                "--function",
                "process_payment",
            ],
            env=_env(rust_workspace),
        )
        assert result.exit_code == 0, result.output
        assert "Module: src/payment/payment_service.rs" in result.output
        assert "pub mod payment_service;" in result.output
        assert "Import with: use crate::payment_service::*;" in result.output

    def test_rejects_bad_module_name(self, rust_workspace: Path) -> None:
        source = rust_workspace / "src" / "main.rs"
        result = runner.invoke(
            app, ["plan", str(source), "--module", "BadName", "--function", "main"], env=_env(rust_workspace)
        )
        assert result.exit_code == 1
        assert "snake_case" in result.output


class TestBrowse:
    def test_lists_source_root(self, rust_workspace: Path) -> None:
        result = runner.invoke(app, ["browse", "--module", "billing"], env=_env(rust_workspace))
        assert result.exit_code == 0
        assert "models" in result.output
        assert "payment" in result.output
        assert ".hidden" not in result.output

    def test_suggestions_for_empty_crate(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["browse", "--workspace", str(tmp_path)], env=_env(tmp_path, "off"))
        assert result.exit_code == 0
        assert "controllers" in result.output
        assert "suggestion" in result.output


class TestSelect:
    def test_navigate_select_and_confirm(self, rust_workspace: Path) -> None:
        result = runner.invoke(app, ["select", "billing"], input="1\nh\nc\n", env=_env(rust_workspace))
        assert result.exit_code == 0, result.output
        assert "Module path: src/models/billing.rs" in result.output

    def test_select_convertible_module_file(self, rust_workspace: Path) -> None:
        result = runner.invoke(app, ["select", "billing"], input="2\nc\n", env=_env(rust_workspace))
        assert result.exit_code == 0, result.output
        assert "Module path: src/payment/billing.rs" in result.output

    def test_cancel(self, rust_workspace: Path) -> None:
        result = runner.invoke(app, ["select", "billing"], input="q\n", env=_env(rust_workspace))
        assert result.exit_code == 0
        assert "No selection" in result.output

    def test_end_of_input_cancels(self, rust_workspace: Path) -> None:
        result = runner.invoke(app, ["select", "billing"], input="", env=_env(rust_workspace))
        assert result.exit_code == 0
        assert "No selection" in result.output

    def test_confirm_requires_selection(self, rust_workspace: Path) -> None:
        result = runner.invoke(app, ["select", "billing"], input="c\nq\n", env=_env(rust_workspace))
        assert "Select a destination first." in result.output
        assert "No selection" in result.output

    def test_rejects_bad_module_name(self, rust_workspace: Path) -> None:
        result = runner.invoke(app, ["select", "Billing"], env=_env(rust_workspace))
        assert result.exit_code == 1


def test_serve_mcp_runs_server() -> None:
    server = MagicMock()
    with (
        patch("rusty_refactor.dependencies.build_navigator") as build_navigator,
        patch("rusty_refactor.mcp.server.create_mcp_server", return_value=server) as create_server,
    ):
        result = runner.invoke(app, ["serve", "mcp", "--transport", "sse"])

    assert result.exit_code == 0
    create_server.assert_called_once_with(build_navigator.return_value)
    server.run.assert_called_once_with(transport="sse")
