# src/modconcat/resolver.py
"""Map `require()` specifiers to files, following Node.js semantics.

Resolution order for a specifier seen in a file living in `basedir`:

1. Core module names (`fs`, `node:path`, ...) resolve to themselves.
2. Path specifiers (`./x`, `../x`, `/x`, `.`, `..`) are tried as a file
   (exact name, then each accepted extension) and then as a directory.
3. Anything else is a vendor package, looked up in every `node_modules`
   directory from `basedir` up to the filesystem root.

A directory resolves through its `package.json` `main` field (after the
policy's manifest remap), then through `index` + each extension.
"""

import os
from pathlib import Path

from .constants import CORE_MODULE_PREFIX, CORE_MODULES, PACKAGE_MANIFEST, VENDOR_DIR
from .errors import ResolutionError
from .logs import get_app_logger
from .policy import ResolutionPolicy
from .utils import load_json_manifest


def is_core_module(specifier: str) -> bool:
    """True if the runtime provides `specifier` itself."""
    if specifier.startswith(CORE_MODULE_PREFIX):
        return True
    return specifier in CORE_MODULES


def _load_as_file(candidate: str, policy: ResolutionPolicy) -> str | None:
    if os.path.isfile(candidate):
        return candidate
    for ext in policy.extensions:
        if os.path.isfile(candidate + ext):
            return candidate + ext
    return None


def _load_index(directory: str, policy: ResolutionPolicy) -> str | None:
    if not os.path.isdir(directory):
        return None
    return _load_as_file(os.path.join(directory, "index"), policy)


def _load_as_directory(directory: str, policy: ResolutionPolicy) -> str | None:
    manifest_path = Path(directory) / PACKAGE_MANIFEST
    if manifest_path.is_file():
        manifest = load_json_manifest(manifest_path)
        if manifest is not None:
            manifest = policy.filter_manifest(manifest, Path(directory))
            main = manifest.get("main")
            if isinstance(main, str) and main not in ("", ".", "./"):
                target = os.path.normpath(os.path.join(directory, main))
                found = _load_as_file(target, policy) or _load_index(target, policy)
                if found is not None:
                    return found
    return _load_index(directory, policy)


def _vendor_dirs(basedir: str) -> list[str]:
    """Every node_modules directory from basedir up to the root."""
    dirs: list[str] = []
    current = basedir
    while True:
        if os.path.basename(current) != VENDOR_DIR:
            dirs.append(os.path.join(current, VENDOR_DIR))
        parent = os.path.dirname(current)
        if parent == current:
            return dirs
        current = parent


def resolve(specifier: str, basedir: Path | str, policy: ResolutionPolicy) -> str:
    """Resolve `specifier` as `require()` would from a file in `basedir`.

    Returns an absolute file path, or the specifier itself for core modules.

    Raises:
        ResolutionError: if nothing on disk matches.
    """
    logger = get_app_logger()
    base = os.path.abspath(os.fspath(basedir))

    if is_core_module(specifier):
        return specifier

    found: str | None = None
    if specifier in (".", "..") or specifier.startswith(("./", "../", "/")):
        target = os.path.normpath(os.path.join(base, specifier))
        if specifier.endswith("/") or specifier in (".", ".."):
            found = _load_as_directory(target, policy)
        else:
            found = _load_as_file(target, policy) or _load_as_directory(target, policy)
    else:
        for vendor_dir in _vendor_dirs(base):
            target = os.path.join(vendor_dir, specifier)
            found = _load_as_file(target, policy) or _load_as_directory(target, policy)
            if found is not None:
                break

    if found is None:
        logger.trace(f"[resolve] {specifier!r} from {base}: not found")
        raise ResolutionError(specifier, base)

    resolved = os.path.abspath(found)
    logger.trace(f"[resolve] {specifier!r} from {base} → {resolved}")
    return resolved
