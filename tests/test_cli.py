"""Unit tests for the command-line interface (tsclean.cli).

Tests cover:
- --feature / --fields folding
- Argument parsing for both subcommands
- Lenient-field warnings
- Node.js preflight check
- run() exit codes
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from tsclean import __version__
from tsclean.cli import (
    FEATURE_FLAG,
    FIELDS_FLAG,
    build_parser,
    check_node,
    fold_feature_flags,
    run,
    warn_lenient_fields,
)
from tsclean.config import GeneratorConfig
from tsclean.errors import FeatureFlagError
from tsclean.parser.fields import build_feature

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# fold_feature_flags
# ---------------------------------------------------------------------------


class TestFoldFeatureFlags:
    def test_empty(self):
        assert fold_feature_flags([]) == ()

    def test_feature_with_fields(self):
        flags = [(FEATURE_FLAG, "a"), (FIELDS_FLAG, "title:string")]
        assert fold_feature_flags(flags) == (("a", "title:string"),)

    def test_feature_without_fields(self):
        assert fold_feature_flags([(FEATURE_FLAG, "a")]) == (("a", None),)

    def test_mixed(self):
        flags = [
            (FEATURE_FLAG, "a"),
            (FEATURE_FLAG, "b"),
            (FIELDS_FLAG, "x:number"),
            (FEATURE_FLAG, "c"),
        ]
        assert fold_feature_flags(flags) == (("a", None), ("b", "x:number"), ("c", None))

    def test_fields_before_feature(self):
        with pytest.raises(FeatureFlagError, match="must follow"):
            fold_feature_flags([(FIELDS_FLAG, "x:string"), (FEATURE_FLAG, "a")])

    def test_fields_twice(self):
        flags = [(FEATURE_FLAG, "a"), (FIELDS_FLAG, "x:string"), (FIELDS_FLAG, "y:string")]
        with pytest.raises(FeatureFlagError):
            fold_feature_flags(flags)


# ---------------------------------------------------------------------------
# build_parser
# ---------------------------------------------------------------------------


class TestBuildParser:
    def test_create_defaults(self):
        args = build_parser().parse_args(["create", "shop"])
        assert args.command == "create"
        assert args.project_name == "shop"
        assert args.path == "."
        assert args.feature_flags == []

    def test_create_keeps_flag_order(self):
        args = build_parser().parse_args(
            ["create", "shop", "out", "--feature", "a", "--fields", "t:string", "--feature", "b"]
        )
        assert args.path == "out"
        assert args.feature_flags == [
            (FEATURE_FLAG, "a"),
            (FIELDS_FLAG, "t:string"),
            (FEATURE_FLAG, "b"),
        ]

    def test_feature_subcommand(self):
        args = build_parser().parse_args(["feature", "payment", "--fields", "amount:number"])
        assert args.command == "feature"
        assert args.feature_name == "payment"
        assert args.fields == "amount:number"
        assert args.root == "."

    def test_missing_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Warnings and preflight
# ---------------------------------------------------------------------------


class TestWarnLenientFields:
    def test_known_fields_are_silent(self):
        feature = build_feature("a", "title:string:minlength=3", "")
        with patch("tsclean.cli.print_warning") as mock_warn:
            assert warn_lenient_fields([feature]) == []
        mock_warn.assert_not_called()

    def test_unknown_type_and_rule(self):
        feature = build_feature("a", "meta:json,title:string:pattern=x", "")
        with patch("tsclean.cli.print_warning") as mock_warn:
            messages = warn_lenient_fields([feature])
        assert len(messages) == 2
        assert "unknown type 'json'" in messages[0]
        assert "expected one of string, number, boolean" in messages[0]
        assert "unknown rule 'pattern=x'" in messages[1]
        assert mock_warn.call_count == 2


class TestCheckNode:
    @pytest.mark.asyncio
    async def test_supported_version(self):
        with patch("tsclean.cli.run_command", new=AsyncMock(return_value=(0, "v20.11.1", ""))):
            assert await check_node(GeneratorConfig()) is True

    @pytest.mark.asyncio
    async def test_old_version(self):
        with patch("tsclean.cli.run_command", new=AsyncMock(return_value=(0, "v16.20.0", ""))), \
                patch("tsclean.cli.print_warning") as mock_warn:
            assert await check_node(GeneratorConfig()) is False
        assert "v16.20.0" in mock_warn.call_args[0][0]

    @pytest.mark.asyncio
    async def test_missing_node(self):
        with patch("tsclean.cli.run_command", new=AsyncMock(return_value=(127, "", ""))), \
                patch("tsclean.cli.print_warning") as mock_warn:
            assert await check_node(GeneratorConfig()) is False
        assert "not found" in mock_warn.call_args[0][0]

    @pytest.mark.asyncio
    async def test_unparseable_version(self):
        with patch("tsclean.cli.run_command", new=AsyncMock(return_value=(0, "weird", ""))):
            assert await check_node(GeneratorConfig()) is False


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


class TestRun:
    def test_create(self, config: GeneratorConfig, tmp_path: Path):
        code = run(
            ["create", "shop", str(tmp_path), "--feature", "a", "--fields", "title:string"],
            config=config,
        )
        assert code == 0
        assert (tmp_path / "shop" / "Features" / "a" / "container.ts").is_file()

    def test_create_runs_node_check_when_enabled(self, tmp_path: Path):
        mock_check = AsyncMock(return_value=False)
        with patch("tsclean.cli.check_node", new=mock_check):
            code = run(["create", "shop", str(tmp_path)], config=GeneratorConfig())
        assert code == 0
        mock_check.assert_awaited_once()

    def test_create_existing_directory(self, config: GeneratorConfig, tmp_path: Path):
        (tmp_path / "shop").mkdir()
        with patch("tsclean.cli.print_error") as mock_error:
            assert run(["create", "shop", str(tmp_path)], config=config) == 1
        assert "already exists" in mock_error.call_args[0][0]

    def test_fields_before_feature(self, config: GeneratorConfig, tmp_path: Path):
        code = run(
            ["create", "shop", str(tmp_path), "--fields", "title:string", "--feature", "a"],
            config=config,
        )
        assert code == 1
        assert not (tmp_path / "shop").exists()

    def test_malformed_fields(self, config: GeneratorConfig, tmp_path: Path):
        code = run(
            ["create", "shop", str(tmp_path), "--feature", "a", "--fields", "name"],
            config=config,
        )
        assert code == 1
        assert not (tmp_path / "shop").exists()

    def test_add_feature(self, config: GeneratorConfig, tmp_path: Path):
        assert run(["create", "shop", str(tmp_path), "--feature", "a"], config=config) == 0
        root = tmp_path / "shop"
        code = run(["feature", "b", "--fields", "amount:number", "--root", str(root)], config=config)
        assert code == 0
        assert (root / "Features" / "b" / "container.ts").is_file()

    def test_add_feature_outside_project(self, config: GeneratorConfig, tmp_path: Path):
        assert run(["feature", "b", "--root", str(tmp_path)], config=config) == 1

    def test_add_feature_warns_on_readme_fallback(self, config: GeneratorConfig, tmp_path: Path):
        run(["create", "shop", str(tmp_path), "--feature", "a"], config=config)
        root = tmp_path / "shop"
        (root / ".tsclean.json").unlink()
        with patch("tsclean.cli.print_warning") as mock_warn:
            assert run(["feature", "b", "--root", str(root)], config=config) == 0
        assert "readme" in mock_warn.call_args[0][0]

    def test_add_feature_with_undecodable_readme(self, config: GeneratorConfig, tmp_path: Path):
        run(["create", "shop", str(tmp_path), "--feature", "a"], config=config)
        root = tmp_path / "shop"
        (root / ".tsclean.json").write_bytes(b"\xff\xfe")
        (root / "README.md").write_bytes(b"# shop\n\xff Create a a\n")
        assert run(["feature", "b", "--root", str(root)], config=config) == 0
        assert "- Create a b:" in (root / "README.md").read_text(encoding="utf-8")

    def test_reserved_feature_name(self, config: GeneratorConfig, tmp_path: Path):
        assert run(["create", "shop", str(tmp_path), "--feature", "dto"], config=config) == 1
        assert not (tmp_path / "shop").exists()

    def test_id_field_is_rejected(self, config: GeneratorConfig, tmp_path: Path):
        code = run(
            ["create", "shop", str(tmp_path), "--feature", "a", "--fields", "id:string"],
            config=config,
        )
        assert code == 1
        assert not (tmp_path / "shop").exists()

    def test_write_failure(self, config: GeneratorConfig, tmp_path: Path):
        with patch("tsclean.scaffolder.generator.write_text", side_effect=PermissionError("denied")), \
                patch("tsclean.cli.print_error") as mock_error:
            assert run(["create", "shop", str(tmp_path)], config=config) == 1
        assert "Failed to write project" in mock_error.call_args[0][0]

    def test_invalid_environment(self, tmp_path: Path):
        with patch.dict(os.environ, {"TSCLEAN_PORT": "abc"}, clear=True):
            assert run(["create", "shop", str(tmp_path)]) == 1
        assert not (tmp_path / "shop").exists()
