# src/modconcat/build.py
"""Write bundles to disk.

The stream is drained into a temporary file next to the output, which is
renamed over the output only once the bundle is complete. A failed build
never leaves a partial bundle behind (the previous one, if any, stays).
"""

import os
from pathlib import Path

from .config import BundleConfigResolved
from .diagnostics import BundleStats
from .logs import get_app_logger
from .policy import ResolutionPolicy
from .stream import ModuleConcatStream
from .utils import normalize_path, shorten_path_for_display


def _temp_sibling(out_path: Path) -> Path:
    return out_path.with_name(f".{out_path.name}.{os.getpid()}.tmp")


def _prepare(
    entry: Path | str,
    out: Path | str,
    policy: ResolutionPolicy | None,
) -> tuple[ModuleConcatStream, Path, Path]:
    out_path = normalize_path(out)
    base = policy if policy is not None else ResolutionPolicy()
    stream = ModuleConcatStream(entry, base.with_output(out_path))
    out_path.parent.mkdir(parents=True, exist_ok=True)
    return stream, out_path, _temp_sibling(out_path)


def write_bundle(
    entry: Path | str,
    out: Path | str,
    policy: ResolutionPolicy | None = None,
) -> BundleStats:
    """Bundle `entry` and everything it requires into `out`.

    `policy` is copied with its output path set to `out`, so `__dirname`
    and `__filename` are rewritten relative to the bundle.

    Raises:
        BundleError: if any module cannot be read, resolved or compiled.
            `out` is left untouched.
    """
    logger = get_app_logger()
    stream, out_path, tmp_path = _prepare(entry, out, policy)
    logger.trace(f"[write_bundle] {stream.entry} → {out_path} (via {tmp_path.name})")

    try:
        with tmp_path.open("w", encoding="utf-8", newline="") as fp:
            stream.write_to(fp)
        os.replace(tmp_path, out_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return stream.get_stats()


async def write_bundle_async(
    entry: Path | str,
    out: Path | str,
    policy: ResolutionPolicy | None = None,
) -> BundleStats:
    """Asyncio counterpart of write_bundle(); yields to the loop between files."""
    logger = get_app_logger()
    stream, out_path, tmp_path = _prepare(entry, out, policy)
    logger.trace(f"[write_bundle_async] {stream.entry} → {out_path}")

    try:
        with tmp_path.open("w", encoding="utf-8", newline="") as fp:
            async for chunk in stream:
                fp.write(chunk)
        os.replace(tmp_path, out_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return stream.get_stats()


def _report(stats: BundleStats, resolved: BundleConfigResolved) -> None:
    logger = get_app_logger()
    meta = resolved.get("__meta__")
    cwd = meta["cli_root"] if meta else Path.cwd()
    config_dir = meta["config_root"] if meta else None

    def show(path: Path) -> str:
        return shorten_path_for_display(path, cwd=cwd, config_dir=config_dir)

    for path in stats.files:
        logger.debug("  + %s", show(path))

    if stats.unresolved_modules:
        lines = "\n  • ".join(
            f"{u.module!r} required from {show(u.parent)}"
            for u in stats.unresolved_modules
        )
        logger.warning(
            "Unresolved modules (left as runtime require() calls):\n  • %s", lines
        )
    if stats.addons_excluded:
        lines = "\n  • ".join(show(p) for p in stats.addons_excluded)
        logger.warning(
            "Native add-ons excluded from the bundle (ship them alongside it):"
            "\n  • %s",
            lines,
        )


def run_build(resolved: BundleConfigResolved) -> BundleStats:
    """Execute one bundling run using a fully resolved config.

    In dry-run mode the whole project is still read and rewritten (so
    errors surface) but nothing is written.
    """
    logger = get_app_logger()
    entry = resolved["entry"]
    out = resolved["out"]
    policy = resolved["policy"]

    if resolved.get("dry_run"):
        logger.info("🧪 (dry-run) Bundling %s without writing %s", entry, out)
        stream = ModuleConcatStream(entry, policy.with_output(out))
        for _chunk in stream:
            pass
        stats = stream.get_stats()
        _report(stats, resolved)
        logger.info("%d files would be written to %s.", len(stats.files), out)
        return stats

    logger.debug("📦 Bundling %s → %s", entry, out)
    stats = write_bundle(entry, out, policy)
    _report(stats, resolved)
    logger.info("%d files written to %s.", len(stats.files), out)
    return stats
