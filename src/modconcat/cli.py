# src/modconcat/cli.py

import argparse
import platform
import sys
from dataclasses import dataclass
from difflib import get_close_matches
from pathlib import Path

from .actions import watch_for_changes
from .build import run_build
from .config import (
    BundleConfig,
    BundleConfigResolved,
    load_and_validate_config,
    resolve_config,
)
from .constants import DEFAULT_WATCH_INTERVAL
from .diagnostics import BundleStats
from .errors import BundleError
from .logs import get_app_logger
from .meta import PROGRAM_DISPLAY, PROGRAM_SCRIPT, get_metadata
from .utils_logs import LEVEL_ORDER, safe_log


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # Argparse message for bad flags is typically
        # "unrecognized arguments: --exlude-file ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        # Print usage + the original error
        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(
        prog=PROGRAM_SCRIPT,
        description=(
            "Concatenate a CommonJS project into a single self-contained file."
        ),
    )

    # --- Positional arguments ---
    parser.add_argument(
        "entry",
        nargs="?",
        metavar="ENTRY",
        help="Entry module of the project (or 'entry' in the config file).",
    )
    parser.add_argument(
        "out",
        nargs="?",
        metavar="OUT",
        help="Where to write the bundle (or 'out' in the config file).",
    )

    parser.add_argument("-c", "--config", help="Path to a config file.")

    # --- Resolution options ---
    parser.add_argument(
        "--exclude-file",
        nargs="+",
        action="extend",
        metavar="PATH",
        help="Never inline these files (relative to cwd). Extends config excludes.",
    )
    parser.add_argument(
        "--exclude-node-modules",
        nargs="*",
        metavar="NAME",
        default=None,
        help=(
            "Leave vendor packages as runtime require() calls. "
            "Without names, every package is excluded."
        ),
    )
    parser.add_argument(
        "--extension",
        nargs="+",
        action="extend",
        metavar="EXT",
        help="Extensions to probe, in order (replaces the configured list).",
    )
    parser.add_argument(
        "--browser",
        action="store_const",
        const=True,
        default=None,
        help=(
            "Honor the package.json 'browser' field and leave core module"
            " names and __dirname/__filename untouched."
        ),
    )
    parser.add_argument(
        "--allow-unresolved",
        action="store_const",
        const=True,
        default=None,
        help="Record unresolvable modules instead of failing.",
    )

    # --- Execution mode ---
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Read and rewrite every module without writing the bundle.",
    )
    parser.add_argument(
        "--watch",
        nargs="?",
        type=float,
        metavar="SECONDS",
        default=None,
        const=0.0,
        help=(
            "Rebuild automatically on changes. "
            "Optionally specify interval in seconds"
            f" (default config or: {DEFAULT_WATCH_INTERVAL}). "
        ),
    )

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    # --- Version and verbosity ---
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )
    return parser


def _initialize_logger(args: argparse.Namespace) -> None:
    """Initialize logger with CLI args, env vars, and defaults."""
    logger = get_app_logger()
    log_level = logger.determine_log_level(args=args)
    logger.setLevel(log_level)

    use_color = getattr(args, "use_color", None)
    logger.enable_color = (
        use_color if use_color is not None else logger.determine_color_enabled()
    )
    # handlers pick up the color setting when rebuilt
    logger.handlers.clear()
    logger.trace("[BOOT] log-level initialized: %s", logger.level_name)

    logger.debug(
        "Runtime: Python %s (%s)\n    %s",
        platform.python_version(),
        platform.python_implementation(),
        sys.version.replace("\n", " "),
    )


def _handle_early_exits(args: argparse.Namespace) -> int | None:
    """Returns exit code if we should exit early, None otherwise."""
    logger = get_app_logger()

    # --- Version flag ---
    if getattr(args, "version", None):
        meta = get_metadata()
        logger.info("%s %s (%s)", PROGRAM_DISPLAY, meta.version, meta.commit)
        return 0

    # --- Python version check ---
    if sys.version_info < (3, 10):  # noqa: UP036
        logger.error("%s requires Python 3.10 or newer.", PROGRAM_DISPLAY)
        return 1

    return None


@dataclass
class _LoadedConfig:
    config_path: Path | None
    config: BundleConfig | None
    resolved: BundleConfigResolved
    config_dir: Path
    cwd: Path


def _load_and_resolve_config(args: argparse.Namespace) -> _LoadedConfig:
    """Load config and resolve final settings."""
    logger = get_app_logger()

    config_path: Path | None = None
    config: BundleConfig | None = None
    config_result = load_and_validate_config(args)
    if config_result is not None:
        config_path, config, _validation_summary = config_result

    logger.trace("[CONFIG] log-level re-resolved from config: %s", logger.level_name)

    cwd = Path.cwd().resolve()
    config_dir = config_path.parent if config_path else cwd

    resolved = resolve_config(config, args, config_dir, cwd, config_path=config_path)
    return _LoadedConfig(
        config_path=config_path,
        config=config,
        resolved=resolved,
        config_dir=config_dir,
        cwd=cwd,
    )


def _execute_build(resolved: BundleConfigResolved, args: argparse.Namespace) -> None:
    """Execute build either in watch mode or one-time mode."""
    logger = get_app_logger()

    if getattr(args, "watch", None) is None:
        run_build(resolved)
        return

    def rebuild() -> BundleStats | None:
        # a broken module must not end the watch session
        try:
            return run_build(resolved)
        except BundleError as e:
            logger.error_if_not_debug(str(e))
            return None

    watch_for_changes(
        rebuild,
        resolved["entry"],
        resolved["out"],
        interval=resolved["watch_interval"],
    )


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    logger = get_app_logger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- Early runtime init (use CLI + env + defaults) ---
        _initialize_logger(args)

        # --- Handle early exits (version, etc.) ---
        early_exit_code = _handle_early_exits(args)
        if early_exit_code is not None:
            return early_exit_code

        # --- Load and resolve configuration ---
        loaded = _load_and_resolve_config(args)

        # --- Dry-run notice ---
        if loaded.resolved["dry_run"]:
            logger.info("🧪 Dry-run mode: no files will be written.")

        # --- Config summary ---
        if loaded.config_path:
            logger.debug("🔧 Using config: %s", loaded.config_path.name)
        else:
            logger.debug("🔧 Running in CLI-only mode (no config file).")
        logger.debug("📁 Config root: %s", loaded.config_dir)
        logger.debug("📂 Invoked from: %s", loaded.cwd)

        # --- Execute build ---
        _execute_build(loaded.resolved, args)

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        silent = getattr(e, "silent", False)
        if not silent:
            try:
                logger.error_if_not_debug(str(e))
            except Exception:  # noqa: BLE001
                safe_log(f"[FATAL] Logging failed while reporting: {e}")
        code = getattr(e, "code", 1)
        return code if isinstance(code, int) else 1

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.critical_if_not_debug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")

        code = getattr(e, "code", 1)
        return code if isinstance(code, int) else 1

    else:
        return 0
