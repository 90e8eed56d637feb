# src/modconcat/errors.py
"""Exceptions raised while bundling.

Everything derives from BundleError (a RuntimeError), so the CLI treats
them as controlled failures.
"""

from pathlib import Path


class BundleError(RuntimeError):
    """Base class for fatal bundling errors."""


class ResolutionError(BundleError):
    """A module specifier could not be mapped to a file."""

    code = "MODULE_NOT_FOUND"

    def __init__(self, specifier: str, basedir: Path | str) -> None:
        self.specifier = specifier
        self.basedir = Path(basedir)
        super().__init__(f"Cannot find module '{specifier}' from '{basedir}'")


class BundleIOError(BundleError):
    """A project file could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Unable to read {path}: {reason}")


class TransformError(BundleError):
    """A per-extension compiler failed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Compiler failed for {path}: {reason}")


class IncompleteStateError(BundleError):
    """Statistics were requested before every file was processed."""


class StreamClosedError(BundleError):
    """A pull was attempted after end-of-output."""
