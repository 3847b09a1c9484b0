"""Tests for TOML config file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from dhallparse.cli import build_parser, main, resolve_options
from dhallparse.config import ConfigError, ParserConfig, load_config, parser_config
from dhallparse.parser import DEFAULT_MAX_DEPTH


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[parser]\nmax_depth = 7\n")
        assert load_config(cfg, tmp_path) == {"parser": {"max_depth": 7}}

    def test_explicit_path_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.toml", tmp_path)

    def test_auto_discover(self, tmp_path: Path) -> None:
        (tmp_path / "dhallparse.toml").write_text("[parser]\nmax_depth = 9\n")
        assert load_config(None, tmp_path)["parser"]["max_depth"] == 9

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "dhallparse.toml").write_text("[parser\n")
        with pytest.raises(ConfigError):
            load_config(None, tmp_path)


class TestParserConfig:
    def test_defaults(self) -> None:
        assert parser_config({}, "a.dhall") == ParserConfig(DEFAULT_MAX_DEPTH, "a.dhall")

    def test_max_depth(self) -> None:
        assert parser_config({"parser": {"max_depth": 5}}, "a.dhall").max_depth == 5

    @pytest.mark.parametrize("value", [0, -1, "deep", True, 2.5])
    def test_invalid_max_depth(self, value) -> None:
        with pytest.raises(ConfigError, match="max_depth"):
            parser_config({"parser": {"max_depth": value}}, "a.dhall")

    def test_parser_not_a_table(self) -> None:
        with pytest.raises(ConfigError):
            parser_config({"parser": 3}, "a.dhall")


class TestConfigMerge:
    def test_config_max_depth_used(self, tmp_path: Path) -> None:
        (tmp_path / "dhallparse.toml").write_text("[parser]\nmax_depth = 4\n")
        doc = tmp_path / "conf.dhall"
        doc.write_text("x")
        opts = resolve_options(build_parser().parse_args([str(doc)]))
        assert opts.max_depth == 4
        assert opts.filename == str(doc)

    def test_cli_overrides_config(self, tmp_path: Path) -> None:
        (tmp_path / "dhallparse.toml").write_text("[parser]\nmax_depth = 4\n")
        doc = tmp_path / "conf.dhall"
        doc.write_text("x")
        opts = resolve_options(build_parser().parse_args([str(doc), "--max-depth", "12"]))
        assert opts.max_depth == 12

    def test_config_limit_applies(self, tmp_path: Path) -> None:
        (tmp_path / "dhallparse.toml").write_text("[parser]\nmax_depth = 2\n")
        doc = tmp_path / "conf.dhall"
        doc.write_text("((x))")
        assert main([str(doc), "--check"]) == 1

    def test_bad_config_exit_2(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "dhallparse.toml").write_text("[parser]\nmax_depth = 0\n")
        doc = tmp_path / "conf.dhall"
        doc.write_text("x")
        assert main([str(doc)]) == 2
        assert "max_depth" in capsys.readouterr().err

    def test_explicit_config_flag(self, tmp_path: Path) -> None:
        cfg = tmp_path / "other.toml"
        cfg.write_text("[parser]\nmax_depth = 2\n")
        doc = tmp_path / "conf.dhall"
        doc.write_text("((x))")
        assert main([str(doc), "--check"]) == 0
        assert main([str(doc), "--check", "--config", str(cfg)]) == 1
