# src/modconcat/config/config_loader.py


import argparse
import sys
import traceback
from pathlib import Path
from typing import Any, cast

from modconcat.logs import get_app_logger
from modconcat.meta import PROGRAM_CONFIG
from modconcat.utils import (
    cast_hint,
    load_jsonc,
    load_toml,
    plural,
    remove_path_in_error_message,
)
from modconcat.utils_logs import LEVEL_ORDER

from .config_types import BundleConfig
from .config_validate import ValidationSummary, validate_config


PYPROJECT = "pyproject.toml"

CANDIDATE_NAMES = [
    f".{PROGRAM_CONFIG}.py",
    f".{PROGRAM_CONFIG}.jsonc",
    f".{PROGRAM_CONFIG}.json",
]


def can_run_configless(args: argparse.Namespace) -> bool:
    """Both the entry module and the output were given on the command line."""
    return bool(getattr(args, "entry", None) and getattr(args, "out", None))


def _pyproject_has_table(path: Path) -> bool:
    try:
        data = load_toml(path)
    except ValueError:
        return False
    tool = data.get("tool")
    return isinstance(tool, dict) and PROGRAM_CONFIG in tool


def find_config(
    args: argparse.Namespace,
    cwd: Path,
    *,
    missing_level: str = "error",
) -> Path | None:
    """Locate a configuration file.

    missing_level: log-level for failing to find a configuration file.

    Search order:
      1. Explicit path from CLI (--config)
      2. From `cwd` up to the filesystem root, at each level:
         .{PROGRAM_CONFIG}.py, .{PROGRAM_CONFIG}.jsonc, .{PROGRAM_CONFIG}.json,
         then a pyproject.toml carrying a [tool.{PROGRAM_CONFIG}] table

    Returns the first matching path, or None if no config was found.
    """
    # NOTE: We only have early no-config Log-Level
    logger = get_app_logger()

    level = logger.resolve_level_name(missing_level)
    if level is None:
        logger.error("Invalid log level name in find_config(): %s", missing_level)
        missing_level = "error"

    # --- 1. Explicit config path ---
    if getattr(args, "config", None):
        config = Path(args.config).expanduser().resolve()
        logger.trace(f"[find_config] Checking explicit path: {config}")
        if not config.exists():
            # Explicit path → hard failure
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    # --- 2. Default candidate files (search current dir and parents) ---
    current = cwd
    found: list[Path] = []
    while True:
        found = [current / name for name in CANDIDATE_NAMES if (current / name).exists()]
        if found:
            break
        pyproject = current / PYPROJECT
        if pyproject.is_file() and _pyproject_has_table(pyproject):
            logger.trace(f"[find_config] Using [tool.{PROGRAM_CONFIG}] in {pyproject}")
            return pyproject
        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    if not found:
        # expected absence, not an error
        logger.log_dynamic(missing_level, f"No config file found in {cwd} or parents")
        return None

    # --- 3. Handle multiple matches at same level (prefer .py > .jsonc > .json) ---
    if len(found) > 1:
        names = ", ".join(p.name for p in found)
        logger.warning(
            "Multiple config files detected (%s); using %s.",
            names,
            found[0].name,
        )
    return found[0]


def load_config(config_path: Path) -> dict[str, Any] | None:
    """Load configuration data from a file.

    Supports:
      - Python configs: .py files exporting `config`
      - pyproject.toml: the [tool.modconcat] table
      - JSON/JSONC configs: .json, .jsonc files

    Returns:
        The raw dict defined in the config, or None for intentionally
        empty configs (e.g. empty files or `config = None`).

    Raises:
        ValueError if a .py config does not define `config`.
        TypeError if the config is not a dict.
    """
    # NOTE: We only have early no-config Log-Level
    logger = get_app_logger()
    logger.trace(f"[load_config] Loading from {config_path} ({config_path.suffix})")

    # --- Python config ---
    if config_path.suffix == ".py":
        config_globals: dict[str, Any] = {}

        # Allow local imports in Python configs (e.g. from ./helpers import foo)
        parent_dir = str(config_path.parent)
        added_to_sys_path = parent_dir not in sys.path
        if added_to_sys_path:
            sys.path.insert(0, parent_dir)

        try:
            source = config_path.read_text(encoding="utf-8")
            exec(compile(source, str(config_path), "exec"), config_globals)  # noqa: S102
            logger.trace(
                f"[EXEC] globals after exec: {list(config_globals.keys())}",
            )
        except Exception as e:
            tb = traceback.format_exc()
            xmsg = (
                f"Error while executing Python config: {config_path.name}\n"
                f"{type(e).__name__}: {e}\n{tb}"
            )
            # Raise a generic runtime error for main() to catch and print cleanly
            raise RuntimeError(xmsg) from e
        finally:
            # Only remove if we actually inserted it
            if added_to_sys_path and sys.path[0] == parent_dir:
                sys.path.pop(0)

        if "config" not in config_globals:
            xmsg = f"{config_path.name} did not define `config`"
            raise ValueError(xmsg)
        result = config_globals["config"]

    # --- pyproject.toml ---
    elif config_path.suffix == ".toml":
        data = load_toml(config_path)
        tool = data.get("tool")
        result = tool.get(PROGRAM_CONFIG) if isinstance(tool, dict) else None

    # --- JSONC / JSON fallback ---
    else:
        try:
            result = load_jsonc(config_path)
        except ValueError as e:
            clean_msg = remove_path_in_error_message(str(e), config_path)
            xmsg = (
                f"Error while loading configuration file '{config_path.name}':"
                f" {clean_msg}"
            )
            raise ValueError(xmsg) from e

    if not isinstance(result, (dict, type(None))):
        xmsg = (
            f"config in {config_path.name} must be an object (dict) or None"
            f", not {type(result).__name__}"
        )
        raise TypeError(xmsg)
    return cast("dict[str, Any] | None", result)


def _validation_summary(
    summary: ValidationSummary,
    config_path: Path,
) -> None:
    """Pretty-print a validation summary using the standard log() interface."""
    logger = get_app_logger()
    mode = "strict mode" if summary.strict else "lenient mode"

    # --- Build concise counts line ---
    counts: list[str] = []
    if summary.errors:
        counts.append(f"{len(summary.errors)} error{plural(summary.errors)}")
    if summary.strict_warnings:
        counts.append(
            f"{len(summary.strict_warnings)} strict warning"
            f"{plural(summary.strict_warnings)}",
        )
    if summary.warnings:
        counts.append(
            f"{len(summary.warnings)} normal warning{plural(summary.warnings)}",
        )
    counts_msg = f"\nFound {', '.join(counts)}." if counts else ""

    # --- Header ---
    if not summary.valid:
        logger.error(
            "Failed to validate configuration file %s (%s).%s",
            config_path.name,
            mode,
            counts_msg,
        )
    elif counts:
        logger.warning(
            "Validated configuration file %s (%s) with warnings.%s",
            config_path.name,
            mode,
            counts_msg,
        )
    else:
        logger.debug("Validated %s (%s) successfully.", config_path.name, mode)

    # --- Detailed sections ---
    if summary.errors:
        msg_summary = "\n  • ".join(summary.errors)
        logger.error("\nErrors:\n  • %s", msg_summary)
    if summary.strict_warnings:
        msg_summary = "\n  • ".join(summary.strict_warnings)
        logger.error("\nStrict warnings (treated as errors):\n  • %s", msg_summary)
    if summary.warnings:
        msg_summary = "\n  • ".join(summary.warnings)
        logger.warning("\nWarnings (non-fatal):\n  • %s", msg_summary)


def load_and_validate_config(
    args: argparse.Namespace,
) -> tuple[Path, BundleConfig, ValidationSummary] | None:
    """Find, load and validate the user's configuration.

    Also determines the effective log level (from CLI/env/config/default)
    early, so logging can initialize as soon as possible.

    Returns:
        (config_path, config, validation_summary) if a config file was
        found and valid, or None if no config was found (or it was empty).
    """
    logger = get_app_logger()
    cwd = Path.cwd().resolve()

    # --- Find config file ---
    missing_level = "debug" if can_run_configless(args) else "warning"
    config_path = find_config(args, cwd, missing_level=missing_level)
    if config_path is None:
        return None

    # --- Load the raw config ---
    raw_config = load_config(config_path)
    if not raw_config:
        logger.debug("Config %s is empty; ignoring it.", config_path.name)
        return None

    # --- Early peek for log_level ---
    raw_log_level = raw_config.get("log_level")
    if isinstance(raw_log_level, str) and raw_log_level.lower() in LEVEL_ORDER:
        logger.setLevel(
            logger.determine_log_level(args=args, root_log_level=raw_log_level)
        )

    # --- Validate schema ---
    validation_result = validate_config(raw_config)
    _validation_summary(validation_result, config_path)
    if not validation_result.valid:
        xmsg = f"Configuration file {config_path.name} contains validation errors."
        exception = ValueError(xmsg)
        exception.silent = True  # type: ignore[attr-defined]
        exception.data = validation_result  # type: ignore[attr-defined]
        raise exception

    config: BundleConfig = cast_hint(BundleConfig, raw_config)
    return config_path, config, validation_result
