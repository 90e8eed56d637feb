# src/modconcat/actions.py
import time
from collections.abc import Callable
from pathlib import Path

from .constants import DEFAULT_WATCH_INTERVAL
from .diagnostics import BundleStats
from .logs import get_app_logger
from .utils import normalize_path


def _snapshot_mtimes(files: list[Path]) -> dict[Path, float]:
    return {f: f.stat().st_mtime for f in files if f.exists()}


def _watched_files(
    entry: Path,
    out_path: Path,
    stats: BundleStats | None,
    previous: list[Path],
) -> list[Path]:
    """Files of the last successful build, plus the entry; never the output."""
    files = list(stats.files) if stats is not None else list(previous)
    if entry not in files:
        files.insert(0, entry)
    return [f for f in files if f != out_path]


def watch_for_changes(
    rebuild_func: Callable[[], BundleStats | None],
    entry: Path,
    out_path: Path,
    interval: float = DEFAULT_WATCH_INTERVAL,
) -> None:
    """Poll file modification times and rebuild when changes are detected.

    Features:
    - Watches exactly the modules included by the last successful build
      (a failed rebuild keeps the previous list).
    - Never watches the bundle itself.
    - Polling interval defaults to 1 second (tune 0.5–2.0 for balance).
    Stops on KeyboardInterrupt.
    """
    logger = get_app_logger()
    logger.info(
        "👀 Watching for changes (interval=%.2fs)... Press Ctrl+C to stop.", interval
    )
    entry = normalize_path(entry)
    out_path = normalize_path(out_path)

    watched = _watched_files(entry, out_path, rebuild_func(), [])  # initial build
    mtimes = _snapshot_mtimes(watched)

    try:
        while True:
            time.sleep(interval)
            logger.trace(f"[watch] Checking {len(watched)} files for changes")

            changed: list[Path] = []
            for f in watched:
                old_m = mtimes.get(f)
                if not f.exists():
                    if old_m is not None:
                        changed.append(f)
                        mtimes.pop(f, None)
                    continue
                new_m = f.stat().st_mtime
                if old_m is None or new_m > old_m:
                    changed.append(f)
                    mtimes[f] = new_m

            if changed:
                logger.info(
                    "\n🔁 Detected %d modified file(s). Rebuilding...", len(changed)
                )
                watched = _watched_files(entry, out_path, rebuild_func(), watched)
                # refresh timestamps after rebuild
                mtimes = _snapshot_mtimes(watched)
    except KeyboardInterrupt:
        logger.info("\n🛑 Watch stopped.")
