# src/modconcat/utils/utils_paths.py

import os
from pathlib import Path, PurePath


def normalize_path(path: Path | str, base: Path | str | None = None) -> Path:
    """Return an absolute, normalized path without resolving symlinks.

    Relative paths are anchored at `base` (default: the cwd).
    """
    raw = os.fspath(path)
    if base is not None and not os.path.isabs(raw):
        raw = os.path.join(os.fspath(base), raw)
    return Path(os.path.abspath(raw))


def relative_posix(path: Path | str, start: Path | str) -> str:
    """Relative path from `start` to `path`, always with forward slashes."""
    rel = os.path.relpath(os.fspath(path), os.fspath(start))
    return PurePath(rel).as_posix()


def shorten_path_for_display(
    path: Path | str,
    *,
    cwd: Path | None = None,
    config_dir: Path | None = None,
) -> str:
    """Shorten an absolute path for display purposes.

    Tries to make the path relative to cwd first, then config_dir, and picks
    the shortest result. Falls back to the absolute path.
    """
    path_obj = normalize_path(path)
    candidates: list[str] = []
    for base in (cwd, config_dir):
        if base is None:
            continue
        try:
            candidates.append(str(path_obj.relative_to(normalize_path(base))))
        except ValueError:
            pass
    if candidates:
        return min(candidates, key=len)
    return str(path_obj)
