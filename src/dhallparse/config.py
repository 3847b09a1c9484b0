"""Parser settings loaded from ``dhallparse.toml``."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dhallparse.parser import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "dhallparse.toml"


class ConfigError(Exception):
    """The config file exists but cannot be used."""


@dataclass(frozen=True, slots=True)
class ParserConfig:
    max_depth: int = DEFAULT_MAX_DEPTH
    filename: str = "input.dhall"


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict when there is none.

    An explicit `config_path` must exist; otherwise ``dhallparse.toml`` in
    `input_dir` is used if present.
    """
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"config file not found: {config_path}")
        path = config_path
    else:
        path = input_dir / CONFIG_FILENAME
        if not path.is_file():
            return {}

    logger.debug("loading config from %s", path)
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def parser_config(config: dict[str, Any], filename: str) -> ParserConfig:
    """Build a ParserConfig from the ``[parser]`` table of a loaded config."""
    table = config.get("parser")
    if table is None:
        return ParserConfig(filename=filename)
    if not isinstance(table, dict):
        raise ConfigError("[parser] must be a table")

    max_depth = table.get("max_depth", DEFAULT_MAX_DEPTH)
    # bool is an int subclass; reject `max_depth = true`
    if not isinstance(max_depth, int) or isinstance(max_depth, bool) or max_depth < 1:
        raise ConfigError(f"parser.max_depth must be a positive integer, got {max_depth!r}")
    return ParserConfig(max_depth=max_depth, filename=filename)
