# src/modconcat/meta.py
"""Program identity and build metadata."""

import os
import re
import subprocess
from dataclasses import dataclass
from importlib import metadata as importlib_metadata
from pathlib import Path


PROGRAM_PACKAGE = "modconcat"
PROGRAM_SCRIPT = "modconcat"
PROGRAM_DISPLAY = "Modconcat"
PROGRAM_ENV = "MODCONCAT"
PROGRAM_CONFIG = "modconcat"

_PROJ_ROOT = Path(__file__).resolve().parent.parent.parent


@dataclass(frozen=True)
class Metadata:
    """Version and commit of the running tool."""

    version: str
    commit: str

    def __str__(self) -> str:
        return f"{self.version} ({self.commit})"


def _extract_version(pyproject_path: Path) -> str:
    if not pyproject_path.exists():
        return "unknown"
    text = pyproject_path.read_text(encoding="utf-8")
    match = re.search(r'(?m)^\s*version\s*=\s*["\']([^"\']+)["\']', text)
    return match.group(1) if match else "unknown"


def _extract_commit(root_path: Path) -> str:
    # Only embed commit hash if in CI or release tag context
    if not (os.getenv("CI") or os.getenv("GIT_TAG") or os.getenv("GITHUB_REF")):
        return "unknown (local build)"
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=root_path,
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return "unknown"
    return result.stdout.strip()


def get_metadata() -> Metadata:
    """Return version and commit info.

    Prefers the installed distribution's metadata and falls back to the
    source tree's pyproject.toml.
    """
    try:
        version = importlib_metadata.version(PROGRAM_PACKAGE)
    except importlib_metadata.PackageNotFoundError:
        version = _extract_version(_PROJ_ROOT / "pyproject.toml")
    return Metadata(version=version, commit=_extract_commit(_PROJ_ROOT))
