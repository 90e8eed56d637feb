# src/modconcat/policy.py
"""Resolution policy: what gets inlined into a bundle and how.

Pure configuration consumed by the source rewriter and the module
resolver. The only state that changes after construction is the set of
excluded files, which grows when `browser` mode meets a package manifest
mapping files to `false`.
"""

import dataclasses
import os
import re
from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .constants import DEFAULT_EXTENSIONS, NATIVE_EXTENSION
from .logs import get_app_logger
from .utils import normalize_path


# (source, policy, path) -> transformed source
Compiler = Callable[[str, "ResolutionPolicy", Path], str]

_PATH_SPECIFIER_RE = re.compile(r"^\.?\.?/")


def compile_json(source: str, policy: "ResolutionPolicy", path: Path) -> str:  # noqa: ARG001
    """Turn a JSON document into a module assigning it to module.exports."""
    return "module.exports = " + source


DEFAULT_COMPILERS: dict[str, Compiler] = {".json": compile_json}


def is_path_specifier(specifier: str) -> bool:
    """True for specifiers starting with '/', './' or '../'."""
    return _PATH_SPECIFIER_RE.match(specifier) is not None


@dataclass
class ResolutionPolicy:
    """Bundling options.

    Attributes:
        extensions: Extensions probed in order; `.node` is always appended
            so native add-ons are detected.
        compilers: Per-extension source transforms. A `.json` compiler is
            supplied unless the key is present (map it to None to disable).
        exclude_files: Files that are never inlined.
        exclude_node_modules: False (inline vendor packages), True (exclude
            all of them) or a collection of package names to exclude.
        browser: Use the manifest `browser` field and stop treating core
            module names and path tokens specially.
        allow_unresolved_modules: Record unresolvable specifiers instead of
            failing.
        output_path: Where the bundle will be written; enables rewriting
            of `__dirname` / `__filename`.
    """

    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    compilers: Mapping[str, Compiler | None] = field(default_factory=dict)
    exclude_files: set[Path] = field(default_factory=set)
    exclude_node_modules: bool | Collection[str] = False
    browser: bool = False
    allow_unresolved_modules: bool = False
    output_path: Path | None = None

    def __post_init__(self) -> None:
        if isinstance(self.extensions, str):
            self.extensions = (self.extensions,)
        extensions = tuple(self.extensions)
        if NATIVE_EXTENSION not in extensions:
            extensions += (NATIVE_EXTENSION,)
        self.extensions = extensions

        compilers: dict[str, Compiler | None] = dict(DEFAULT_COMPILERS)
        compilers.update(self.compilers)
        self.compilers = compilers

        self.exclude_files = {normalize_path(p) for p in self.exclude_files}

        vendor = self.exclude_node_modules
        if isinstance(vendor, str):
            self.exclude_node_modules = frozenset({vendor})
        elif not isinstance(vendor, bool):
            self.exclude_node_modules = frozenset(vendor)

        if self.output_path is not None:
            self.output_path = normalize_path(self.output_path)

    # --- derived policies ---------------------------------------------------

    def with_output(self, output_path: Path | str | None) -> "ResolutionPolicy":
        """Copy of this policy targeting `output_path`."""
        return dataclasses.replace(
            self,
            exclude_files=set(self.exclude_files),
            output_path=None if output_path is None else Path(output_path),
        )

    # --- predicates ----------------------------------------------------------

    @property
    def rewrites_path_tokens(self) -> bool:
        return self.output_path is not None and not self.browser

    def excludes_vendor(self, specifier: str) -> bool:
        """True if `specifier` names a vendor package excluded by name."""
        vendor = self.exclude_node_modules
        if not vendor or is_path_specifier(specifier):
            return False
        if vendor is True:
            return True
        return specifier in vendor  # type: ignore[operator]

    def is_excluded_file(self, path: Path | str) -> bool:
        return normalize_path(path) in self.exclude_files

    def probably_excluded(self, specifier: str, basedir: Path) -> bool:
        """Cheap guess at the resolved path, checked against exclude_files.

        Lets explicitly excluded files skip the full resolver.
        """
        if not self.exclude_files:
            return False
        if specifier.startswith("/"):
            estimate = os.path.normpath(specifier)
        else:
            estimate = os.path.normpath(os.path.join(basedir, specifier))
        if Path(estimate) in self.exclude_files:
            return True
        return any(Path(estimate + ext) in self.exclude_files for ext in self.extensions)

    @staticmethod
    def is_native(path: Path | str) -> bool:
        return Path(path).suffix.lower() == NATIVE_EXTENSION

    def compiler_for(self, path: Path) -> Compiler | None:
        return self.compilers.get(path.suffix)

    # --- manifest remap -----------------------------------------------------

    def filter_manifest(
        self, manifest: dict[str, Any], package_dir: Path
    ) -> dict[str, Any]:
        """Apply the `browser` field to a parsed package.json.

        A string `browser` field replaces `main`. An object maps `main` to
        its replacement and excludes entries mapped to `false`; other
        entries are not supported and left alone.
        """
        if not self.browser:
            return manifest

        logger = get_app_logger()
        browser = manifest.get("browser")
        if isinstance(browser, str):
            logger.trace(f"[browser] {package_dir}: main → {browser!r}")
            return {**manifest, "main": browser}
        if not isinstance(browser, dict):
            return manifest

        remapped = dict(manifest)
        for key, target in browser.items():
            if target is False:
                excluded = normalize_path(os.path.join(package_dir, key))
                logger.trace(f"[browser] excluding {excluded}")
                self.exclude_files.add(excluded)
            elif key == remapped.get("main") and isinstance(target, str):
                logger.trace(f"[browser] {package_dir}: main → {target!r}")
                remapped["main"] = target
        return remapped
