# src/modconcat/utils/utils_files.py
"""Loaders for the configuration file formats (JSONC, TOML, JSON)."""

import json
import re
from pathlib import Path
from typing import Any, cast

from modconcat.logs import get_app_logger


def _strip_jsonc_comments(text: str) -> str:
    """Strip //, # and /* */ comments while leaving string contents intact."""
    out: list[str] = []
    quote: str | None = None
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if quote is not None:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue

        if ch in ('"', "'"):
            quote = ch
            out.append(ch)
            i += 1
            continue

        line_comment = ch == "#" or text.startswith("//", i)
        if line_comment:
            end = text.find("\n", i)
            if end < 0:
                break
            i = end  # keep the newline itself
            continue

        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end < 0 else end + 2
            continue

        out.append(ch)
        i += 1

    return "".join(out)


def load_jsonc(path: Path) -> dict[str, Any] | list[Any] | None:
    """Load JSONC (JSON with comments and trailing commas).

    Returns None for files that are empty once comments are removed.
    """
    logger = get_app_logger()
    logger.trace(f"[load_jsonc] Loading from {path}")

    if not path.exists():
        xmsg = f"JSONC file not found: {path}"
        raise FileNotFoundError(xmsg)
    if not path.is_file():
        xmsg = f"Expected a file: {path}"
        raise ValueError(xmsg)

    text = _strip_jsonc_comments(path.read_text(encoding="utf-8"))
    text = re.sub(r",(?=\s*[}\]])", "", text).strip()
    if not text:
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = (
            f"Invalid JSONC syntax in {path}:"
            f" {e.msg} (line {e.lineno}, column {e.colno})"
        )
        raise ValueError(xmsg) from e

    if not isinstance(data, (dict, list)):
        xmsg = f"Invalid JSONC root type: {type(data).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004

    return cast("dict[str, Any] | list[Any]", data)


def load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file.

    Uses `tomllib` on Python 3.11+ and the `tomli` backport on 3.10.
    """
    if not path.exists():
        xmsg = f"TOML file not found: {path}"
        raise FileNotFoundError(xmsg)

    try:
        import tomllib  # noqa: PLC0415
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef] # noqa: PLC0415

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        xmsg = f"Invalid TOML in {path}: {e}"
        raise ValueError(xmsg) from e


def load_json_manifest(path: Path) -> dict[str, Any] | None:
    """Read a package manifest, returning None when it is not a JSON object."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return cast("dict[str, Any]", data) if isinstance(data, dict) else None


def remove_path_in_error_message(inner_msg: str, path: Path) -> str:
    """Drop mentions of `path` from a wrapped error message.

    Example:
        "Invalid JSONC syntax in /abs/.modconcat.jsonc: Expecting value"
        → "Invalid JSONC syntax: Expecting value"
    """
    clean_msg = inner_msg
    for token in (str(path), path.name):
        for form in (f"in '{token}'", f'in "{token}"', f"in {token}", token):
            clean_msg = clean_msg.replace(form, "")
    clean_msg = re.sub(r"\s{2,}", " ", clean_msg)
    clean_msg = re.sub(r"\s*:\s*", ": ", clean_msg)
    return clean_msg.strip(": ").strip()
