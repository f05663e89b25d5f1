"""Configuration loader for plpgsql-dbt."""

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from plpgsql_dbt.args import Args

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".plpgsql_dbt"
CONFIG_FILE_NAME = "config.toml"

DEFAULT_SQL_DIR = "plpgsql"
DEFAULT_MACRO_DIR = "macros"
DEFAULT_TREE_DIR = "tree"


@dataclass
class TranslatorConfig:
    """Resolved locations used by a translation run."""

    inputs: list[Path]
    macro_dir: Path
    tree_dir: Path | None


def _read_config_file(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        return {}
    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("Failed to load config %s: %s", config_path, e)
        return {}


def load_file_config(working_dir: Path) -> dict[str, Any]:
    """Load configuration with priority: local > global.

    Args:
        working_dir: Directory holding the local configuration folder.

    Returns:
        Merged configuration values, local keys overriding global ones.

    """
    global_config = _read_config_file(Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME)
    local_config = _read_config_file(working_dir / CONFIG_DIR_NAME / CONFIG_FILE_NAME)
    return {**global_config, **local_config}


def _resolve(working_dir: Path, value: str | Path) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = working_dir / path
    return path


def load_config(args: Args) -> TranslatorConfig:
    """Resolve run configuration with priority: CLI > local > global > defaults.

    Args:
        args: Parsed command line arguments

    Returns:
        Resolved translator configuration

    """
    working_dir = args.working_dir
    file_config = load_file_config(working_dir)

    if args.inputs:
        raw_inputs: list[str | Path] = list(args.inputs)
    else:
        raw_inputs = [file_config.get("sql_dir", DEFAULT_SQL_DIR)]

    macro_dir = args.macro_dir or file_config.get("macro_dir", DEFAULT_MACRO_DIR)

    tree_dir: Path | None = None
    write_tree = not args.no_tree and file_config.get("write_tree", True)
    if write_tree:
        tree_dir = _resolve(
            working_dir,
            args.tree_dir or file_config.get("tree_dir", DEFAULT_TREE_DIR),
        )

    config = TranslatorConfig(
        inputs=[_resolve(working_dir, raw) for raw in raw_inputs],
        macro_dir=_resolve(working_dir, macro_dir),
        tree_dir=tree_dir,
    )
    logger.debug("Resolved configuration: %s", config)
    return config
